"""Starting an application in its own process and waiting until it runs."""

from __future__ import annotations

import json
import logging
import queue
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Callable, TextIO

from fxlite.apptesting.execcmd import Command, command, start_with_output
from fxlite.events import format_duration

__all__ = [
    "StartOptions",
    "AppStartError",
    "RunningApp",
    "is_running",
    "timeout",
    "default_is_running",
    "start",
]

_log = logging.getLogger(__name__)

_RUNNING = "running"
_DONE = "done"


def default_is_running(line: str) -> bool:
    """Report whether a line of log output says the application is running.

    Both the console logger's output and the structured JSON output
    (a ``"msg"`` of ``"started"``) are recognised.
    """
    if "[Fx] RUNNING" in line:
        return True
    try:
        record = json.loads(line)
    except ValueError:
        return False
    return isinstance(record, dict) and record.get("msg") == "started"


@dataclass
class StartOptions:
    """How :func:`start` decides that the application is up."""

    is_running: Callable[[str], bool] = default_is_running
    timeout: float = 5.0


StartOption = Callable[[StartOptions], None]


def is_running(f: Callable[[str], bool]) -> StartOption:
    """Use ``f`` to decide whether a line of output means the app is running."""

    def apply(opts: StartOptions) -> None:
        opts.is_running = f

    return apply


def timeout(seconds: float) -> StartOption:
    """Stop waiting for the application to start after ``seconds``."""

    def apply(opts: StartOptions) -> None:
        opts.timeout = seconds

    return apply


class AppStartError(Exception):
    """Raised when the application exits or times out before it runs."""

    def __init__(self, message: str, lines: list[str]) -> None:
        super().__init__(message)
        self.lines = lines


class RunningApp:
    """An application process that reported it is running.

    Use it as a context manager, or call :meth:`stop`, to interrupt the
    process and wait for it to end.
    """

    def __init__(
        self, cmd: Command, reader: TextIO, reader_thread: threading.Thread, lines: list[str]
    ) -> None:
        self.command = cmd
        self.lines = lines
        self._reader = reader
        self._thread = reader_thread
        self.returncode: int | None = None

    def stop(self) -> int:
        """Interrupt the process, wait for it to exit and return its status."""
        if self.returncode is not None:
            return self.returncode
        if sys.platform == "win32":
            self.command.process.terminate()
        else:
            self.command.signal(signal.SIGINT)
        self._thread.join()
        self.returncode = self.command.wait()
        self._reader.close()
        return self.returncode

    def __enter__(self) -> RunningApp:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def _pump(
    reader: TextIO,
    check: Callable[[str], bool],
    lines: list[str],
    events: queue.Queue,
) -> None:
    found = False
    try:
        for raw in reader:
            line = raw.rstrip("\r\n")
            lines.append(line)
            _log.debug("%s", line)
            if not found and check(line):
                found = True
                events.put(_RUNNING)
    except (OSError, ValueError) as exc:
        _log.error("scan error: %s", exc)
    finally:
        events.put(_DONE)


def start(main: Callable[[], object], *args: StartOption) -> RunningApp:
    """Run ``main`` in its own process and block until it reports running.

    Raises :class:`AppStartError` if the process exits first or does not
    start within the timeout; the process is stopped in either case.
    """
    opts = StartOptions()
    for option in args:
        option(opts)

    cmd = command(main)
    reader = start_with_output(cmd)
    lines: list[str] = []
    events: queue.Queue = queue.Queue()
    thread = threading.Thread(
        target=_pump, args=(reader, opts.is_running, lines, events), daemon=True
    )
    thread.start()
    app = RunningApp(cmd, reader, thread, lines)

    try:
        outcome = events.get(timeout=opts.timeout)
    except queue.Empty:
        app.stop()
        raise AppStartError(
            f"application did not start in {format_duration(opts.timeout)}", lines
        ) from None

    if outcome == _RUNNING:
        return app
    app.stop()
    raise AppStartError("application exited unexpectedly", lines)