"""Events emitted while an application is built, started and stopped.

Loggers receive these events through :meth:`fxlite.logger.Logger.log_event`.
Each event is a small dataclass; a logger tells them apart with
``isinstance`` checks or a ``match`` statement:

    class MyLogger(Logger):
        def log_event(self, event):
            match event:
                case OnStartExecuting():
                    ...

The events carry enough information for observability and debugging.
All fields are keyword-only and have empty defaults.
"""

from __future__ import annotations

import signal as _signal
from dataclasses import dataclass, field
from datetime import timedelta

_event = dataclass(kw_only=True)


def _names() -> list[str]:
    return field(default_factory=list)


class Event:
    """Base class of every event emitted by the framework."""

    __slots__ = ()


@_event
class _Failure(Event):
    """An event that may carry the error that went with it."""

    err: BaseException | None = None


@_event
class _Hook(Event):
    """An event about a lifecycle hook and whoever scheduled it."""

    function_name: str = ""
    caller_name: str = ""


@_event
class _Traced(Event):
    """An event that records where an option was given."""

    stack_trace: list[str] = _names()
    module_trace: list[str] = _names()
    module_name: str = ""


@_event
class OnStartExecuting(_Hook):
    """Emitted before an OnStart hook is executed."""


@_event
class OnStartExecuted(_Hook, _Failure):
    """Emitted after an OnStart hook has been executed."""

    method: str = ""
    runtime: timedelta = field(default_factory=timedelta)


@_event
class OnStopExecuting(_Hook):
    """Emitted before an OnStop hook is executed."""


@_event
class OnStopExecuted(_Hook, _Failure):
    """Emitted after an OnStop hook has been executed."""

    runtime: timedelta = field(default_factory=timedelta)


@_event
class Supplied(_Traced, _Failure):
    """Emitted after a value is added with supply."""

    type_name: str = ""


@_event
class Provided(_Traced, _Failure):
    """Emitted when a constructor is provided."""

    constructor_name: str = ""
    output_type_names: list[str] = _names()
    private: bool = False


@_event
class Replaced(_Traced, _Failure):
    """Emitted when a value replaces a type."""

    output_type_names: list[str] = _names()


@_event
class Decorated(_Traced, _Failure):
    """Emitted when a decorator is given to the container."""

    decorator_name: str = ""
    output_type_names: list[str] = _names()


@_event
class Run(_Failure):
    """Emitted after a constructor, decorator, or supply/replace stub runs.

    ``kind`` is one of "provide", "decorate", "supply" or "replace".
    """

    name: str = ""
    kind: str = ""
    module_name: str = ""


@_event
class Invoking(Event):
    """Emitted before an invoked function is called."""

    function_name: str = ""
    module_name: str = ""


@_event
class Invoked(Invoking, _Failure):
    """Emitted after an invoked function ran, whether it succeeded or not.

    ``trace`` records where the invoke was registered, not where the error
    was raised.
    """

    trace: str = ""


@_event
class Started(_Failure):
    """Emitted when the application started, successfully or not."""


@_event
class Stopping(Event):
    """Emitted when the application receives a signal to shut down."""

    signal: _signal.Signals | int | str | None = None


@_event
class Stopped(_Failure):
    """Emitted when the application has finished shutting down."""


@_event
class RollingBack(Event):
    """Emitted when start-up failed and the application is rolled back."""

    start_err: BaseException | None = None


@_event
class RolledBack(_Failure):
    """Emitted after a rollback, whether it succeeded or not."""


@_event
class LoggerInitialized(_Failure):
    """Emitted when a custom logger is built, or fails to be built."""

    constructor_name: str = ""


def _nanoseconds(duration: timedelta | int | float) -> int:
    if isinstance(duration, timedelta):
        whole = duration.days * 86_400 + duration.seconds
        return whole * 1_000_000_000 + duration.microseconds * 1_000
    return round(float(duration) * 1_000_000_000)


def _fraction(value: int, digits: int) -> str:
    text = f"{value:0{digits}d}".rstrip("0")
    return f".{text}" if text else ""


_SUB_SECOND_UNITS = ((1_000, 1, "ns", 0), (1_000_000, 1_000, "µs", 3), (1_000_000_000, 1_000_000, "ms", 6))


def format_duration(duration: timedelta | int | float) -> str:
    """Render a duration compactly, e.g. ``0s``, ``3ms``, ``1h2m3.5s``.

    Numbers are taken as seconds.
    """
    ns = _nanoseconds(duration)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    for limit, unit, suffix, digits in _SUB_SECOND_UNITS:
        if ns < limit:
            whole, rest = divmod(ns, unit)
            return f"{sign}{whole}{_fraction(rest, digits) if digits else ''}{suffix}"

    seconds, rest = divmod(ns, 1_000_000_000)
    text = f"{seconds % 60}{_fraction(rest, 9)}s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


_SIGNAL_NAMES = {
    name: text
    for name, text in (
        ("SIGINT", "interrupt"),
        ("SIGTERM", "terminated"),
        ("SIGHUP", "hangup"),
        ("SIGQUIT", "quit"),
        ("SIGKILL", "killed"),
        ("SIGABRT", "aborted"),
        ("SIGUSR1", "user defined signal 1"),
        ("SIGUSR2", "user defined signal 2"),
        ("SIGPIPE", "broken pipe"),
        ("SIGALRM", "alarm clock"),
        ("SIGBREAK", "break"),
    )
    if hasattr(_signal, name)
}


def signal_name(sig: _signal.Signals | int | str) -> str:
    """Return the lower-case descriptive name of a signal, e.g. ``interrupt``."""
    if isinstance(sig, str):
        return sig
    if sig is None or isinstance(sig, bool):
        raise TypeError(f"not a signal: {sig!r}")
    try:
        member = _signal.Signals(sig)
    except ValueError:
        return f"signal {int(sig)}"
    return _SIGNAL_NAMES.get(member.name, member.name.lower())