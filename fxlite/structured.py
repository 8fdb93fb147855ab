"""A logger that sends events to a standard-library logger with structured fields."""

from __future__ import annotations

import logging

from fxlite.events import (
    Decorated,
    Event,
    Invoked,
    Invoking,
    LoggerInitialized,
    OnStartExecuted,
    OnStartExecuting,
    OnStopExecuted,
    OnStopExecuting,
    Provided,
    Replaced,
    RolledBack,
    RollingBack,
    Run,
    Started,
    Stopped,
    Stopping,
    Supplied,
    format_duration,
    signal_name,
)
from fxlite.logger import Logger

__all__ = ["StructuredLogger", "FIELDS_ATTR"]

#: Name of the log record attribute that holds the event's fields.
FIELDS_ATTR = "fields"

_SKIP = object()


def _fields(*pairs: tuple[str, object]) -> dict[str, object]:
    return {key: value for key, value in pairs if value is not _SKIP}


def _module(name: str) -> tuple[str, object]:
    return ("module", name if name else _SKIP)


def _maybe_true(key: str, flag: bool) -> tuple[str, object]:
    return (key, True if flag else _SKIP)


def _error(err: BaseException | None) -> tuple[str, object]:
    return ("error", str(err) if err is not None else _SKIP)


class StructuredLogger(Logger):
    """Logs events to a :class:`logging.Logger`.

    Each record carries a ``fields`` attribute with the event's details.
    Ordinary events are logged at INFO and failures at ERROR unless
    changed with :meth:`use_log_level` and :meth:`use_error_level`.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        self._log_level = logging.INFO
        self._error_level: int | None = None

    def use_error_level(self, level: int) -> None:
        """Set the level of error records."""
        self._error_level = level

    def use_log_level(self, level: int) -> None:
        """Set the level of non-error records."""
        self._log_level = level

    def _log(self, msg: str, *pairs: tuple[str, object]) -> None:
        self.logger.log(self._log_level, msg, extra={FIELDS_ATTR: _fields(*pairs)})

    def _log_error(self, msg: str, *pairs: tuple[str, object]) -> None:
        level = self._error_level if self._error_level is not None else logging.ERROR
        self.logger.log(level, msg, extra={FIELDS_ATTR: _fields(*pairs)})

    def _hook_executed(self, kind: str, e: OnStartExecuted | OnStopExecuted) -> None:
        names = (("callee", e.function_name), ("caller", e.caller_name))
        if e.err is not None:
            self._log_error(f"{kind} hook failed", *names, _error(e.err))
        else:
            self._log(
                f"{kind} hook executed", *names, ("runtime", format_duration(e.runtime))
            )

    def log_event(self, event: Event) -> None:
        match event:
            case OnStartExecuting():
                self._log(
                    "OnStart hook executing",
                    ("callee", event.function_name),
                    ("caller", event.caller_name),
                )
            case OnStartExecuted():
                self._hook_executed("OnStart", event)
            case OnStopExecuting():
                self._log(
                    "OnStop hook executing",
                    ("callee", event.function_name),
                    ("caller", event.caller_name),
                )
            case OnStopExecuted():
                self._hook_executed("OnStop", event)
            case Supplied():
                pairs = (
                    ("type", event.type_name),
                    ("stacktrace", list(event.stack_trace)),
                    ("moduletrace", list(event.module_trace)),
                    _module(event.module_name),
                )
                if event.err is not None:
                    self._log_error(
                        "error encountered while applying options", *pairs, _error(event.err)
                    )
                else:
                    self._log("supplied", *pairs)
            case Provided():
                for rtype in event.output_type_names:
                    self._log(
                        "provided",
                        ("constructor", event.constructor_name),
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _module(event.module_name),
                        ("type", rtype),
                        _maybe_true("private", event.private),
                    )
                if event.err is not None:
                    self._log_error(
                        "error encountered while applying options",
                        _module(event.module_name),
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _error(event.err),
                    )
            case Replaced():
                for rtype in event.output_type_names:
                    self._log(
                        "replaced",
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _module(event.module_name),
                        ("type", rtype),
                    )
                if event.err is not None:
                    self._log_error(
                        "error encountered while replacing",
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _module(event.module_name),
                        _error(event.err),
                    )
            case Decorated():
                for rtype in event.output_type_names:
                    self._log(
                        "decorated",
                        ("decorator", event.decorator_name),
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _module(event.module_name),
                        ("type", rtype),
                    )
                if event.err is not None:
                    self._log_error(
                        "error encountered while applying options",
                        ("stacktrace", list(event.stack_trace)),
                        ("moduletrace", list(event.module_trace)),
                        _module(event.module_name),
                        _error(event.err),
                    )
            case Run():
                pairs = (
                    ("name", event.name),
                    ("kind", event.kind),
                    _module(event.module_name),
                )
                if event.err is not None:
                    self._log_error("error returned", *pairs, _error(event.err))
                else:
                    self._log("run", *pairs)
            case Invoking():
                self._log(
                    "invoking",
                    ("function", event.function_name),
                    _module(event.module_name),
                )
            case Invoked():
                if event.err is not None:
                    self._log_error(
                        "invoke failed",
                        _error(event.err),
                        ("stack", event.trace),
                        ("function", event.function_name),
                        _module(event.module_name),
                    )
            case Stopping():
                self._log("received signal", ("signal", signal_name(event.signal).upper()))
            case Stopped():
                if event.err is not None:
                    self._log_error("stop failed", _error(event.err))
            case RollingBack():
                self._log_error("start failed, rolling back", _error(event.start_err))
            case RolledBack():
                if event.err is not None:
                    self._log_error("rollback failed", _error(event.err))
            case Started():
                if event.err is not None:
                    self._log_error("start failed", _error(event.err))
                else:
                    self._log("started")
            case LoggerInitialized():
                if event.err is not None:
                    self._log_error(
                        "custom logger initialization failed", _error(event.err)
                    )
                else:
                    self._log(
                        "initialized custom fxevent.Logger",
                        ("function", event.constructor_name),
                    )