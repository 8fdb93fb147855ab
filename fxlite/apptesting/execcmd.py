"""Running a Python function as a separate process.

The function is passed to a fresh interpreter by reference, so it must be
importable by name, such as a module-level function.
"""

from __future__ import annotations

import base64
import inspect
import os
import pickle
import subprocess
import sys
from typing import Callable, TextIO

__all__ = ["Command", "command", "start_with_output"]

_ENTRY_MODULE = "fxlite.apptesting.execcmd"
_PACKAGE_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)


def _import_root(main: Callable[[], object]) -> str | None:
    """Return the directory from which ``main``'s module can be imported."""
    try:
        path = inspect.getfile(main)
    except TypeError:
        return None
    directory = os.path.dirname(os.path.abspath(path))
    while os.path.exists(os.path.join(directory, "__init__.py")):
        directory = os.path.dirname(directory)
    return directory


def _environment(main: Callable[[], object]) -> dict[str, str]:
    env = dict(os.environ)
    paths: list[str] = []
    for path in (_import_root(main), _PACKAGE_ROOT, os.getcwd()):
        if path and path not in paths:
            paths.append(path)
    existing = env.get("PYTHONPATH")
    if existing:
        paths.append(existing)
    env["PYTHONPATH"] = os.pathsep.join(paths)
    env["PYTHONUNBUFFERED"] = "1"
    return env


class Command:
    """A process that runs ``main`` and exits when it returns.

    The exit status is the integer ``main`` returns, or 0 when it returns
    anything else. A command can be started once.
    """

    def __init__(self, main: Callable[[], object]) -> None:
        if not callable(main):
            raise TypeError(f"main must be callable, got {main!r}")
        try:
            payload = pickle.dumps(main)
        except (pickle.PicklingError, AttributeError, TypeError) as exc:
            raise ValueError(
                "main must be importable by name, such as a module-level function"
            ) from exc
        self.main = main
        self.args = [
            sys.executable,
            "-m",
            _ENTRY_MODULE,
            base64.b64encode(payload).decode("ascii"),
        ]
        self.process: subprocess.Popen | None = None
        self.returncode: int | None = None

    def _spawn(self, stdout, stderr, text: bool = False) -> subprocess.Popen:
        if self.process is not None:
            raise RuntimeError("command already started")
        self.process = subprocess.Popen(
            self.args,
            stdout=stdout,
            stderr=stderr,
            stdin=subprocess.DEVNULL,
            env=_environment(self.main),
            text=text,
        )
        return self.process

    def _running(self) -> subprocess.Popen:
        if self.process is None:
            raise RuntimeError("command not started")
        return self.process

    def start(self, stdout=None, stderr=None) -> None:
        """Start the process without waiting for it.

        ``stdout`` and ``stderr`` take what :class:`subprocess.Popen` takes.
        """
        self._spawn(stdout, stderr)

    def output(self) -> str:
        """Run the process to completion and return its standard output.

        Raises :class:`subprocess.CalledProcessError` on a non-zero exit.
        """
        process = self._spawn(subprocess.PIPE, subprocess.PIPE, text=True)
        out, err = process.communicate()
        self.returncode = process.returncode
        if self.returncode:
            raise subprocess.CalledProcessError(self.returncode, self.args, out, err)
        return out

    def run(self, stderr: TextIO | None = None) -> None:
        """Run the process to completion, discarding standard output.

        Standard error is copied to ``stderr`` when given. Raises
        :class:`subprocess.CalledProcessError` on a non-zero exit.
        """
        process = self._spawn(subprocess.DEVNULL, subprocess.PIPE, text=True)
        _, err = process.communicate()
        self.returncode = process.returncode
        if stderr is not None and err:
            stderr.write(err)
        if self.returncode:
            raise subprocess.CalledProcessError(self.returncode, self.args, None, err)

    def signal(self, sig: int) -> None:
        """Send ``sig`` to the running process."""
        self._running().send_signal(sig)

    def wait(self) -> int:
        """Wait for the process to exit and return its exit status."""
        self.returncode = self._running().wait()
        return self.returncode


def command(main: Callable[[], object]) -> Command:
    """Build a :class:`Command` that runs ``main`` in its own process."""
    return Command(main)


def start_with_output(cmd: Command) -> TextIO:
    """Start ``cmd`` and return a reader of its combined stdout and stderr.

    The caller should :meth:`Command.wait` for the process and close the
    reader when done.
    """
    read_fd, write_fd = os.pipe()
    try:
        cmd.start(stdout=write_fd, stderr=write_fd)
    except BaseException:
        os.close(read_fd)
        raise
    finally:
        os.close(write_fd)
    return os.fdopen(read_fd, "r", encoding="utf-8")


def _child_main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        raise SystemExit("usage: execcmd PAYLOAD")
    main = pickle.loads(base64.b64decode(args[0]))
    status = main()
    sys.stdout.flush()
    sys.stderr.flush()
    raise SystemExit(status if isinstance(status, int) else 0)


if __name__ == "__main__":
    _child_main()