"""A logger that writes human-readable event messages to a text stream."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from typing import TextIO

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

__all__ = ["ConsoleLogger"]

_APPLY_FAILED = "Error after options were applied"

# Events that only report a failure, keyed by type.
_FAILURE_PREFIXES = {
    Started: "ERROR\t\tFailed to start",
    Stopped: "ERROR\t\tFailed to stop cleanly",
    RolledBack: "ERROR\t\tCouldn't roll back cleanly",
    LoggerInitialized: "ERROR\t\tFailed to initialize custom logger",
}


def _detail(err: BaseException | None) -> str:
    """Detailed rendering of an error.

    An error may customise it by accepting the ``"+v"`` format spec.
    """
    try:
        return format(err, "+v")
    except (TypeError, ValueError):
        return str(err)


def _failed(prefix: str, err: BaseException | None) -> str:
    return f"{prefix}: {_detail(err)}"


def _from_module(name: str) -> str:
    return f" from module {json.dumps(name, ensure_ascii=False)}" if name else ""


def _hook_kind(event: Event) -> str:
    return "OnStart" if isinstance(event, (OnStartExecuting, OnStartExecuted)) else "OnStop"


def _failure_prefix(event: Event) -> str:
    return next(
        prefix for cls, prefix in _FAILURE_PREFIXES.items() if isinstance(event, cls)
    )


def _outputs(event: Provided | Replaced | Decorated) -> Iterator[str]:
    """Lines for an option that produces types, then its error if any."""
    match event:
        case Provided():
            head = "PROVIDE (PRIVATE)" if event.private else "PROVIDE"
            source = f" <= {event.constructor_name}"
            failure = _APPLY_FAILED
        case Decorated():
            head, source, failure = "DECORATE", f" <= {event.decorator_name}", _APPLY_FAILED
        case _:
            head, source, failure = "REPLACE", "", "ERROR\tFailed to replace"
    suffix = _from_module(event.module_name)
    for rtype in event.output_type_names:
        yield f"{head}\t{rtype}{source}{suffix}"
    if event.err is not None:
        yield _failed(failure, event.err)


def _lines(event: Event) -> Iterator[str]:
    """The messages that describe an event, without the common prefix."""
    match event:
        case OnStartExecuting() | OnStopExecuting():
            yield (
                f"HOOK {_hook_kind(event)}\t\t{event.function_name} executing "
                f"(caller: {event.caller_name})"
            )
        case OnStartExecuted() | OnStopExecuted():
            head = f"HOOK {_hook_kind(event)}\t\t{event.function_name} called by {event.caller_name}"
            runtime = format_duration(event.runtime)
            if event.err is not None:
                yield _failed(f"{head} failed in {runtime}", event.err)
            else:
                yield f"{head} ran successfully in {runtime}"
        case Supplied():
            if event.err is not None:
                yield _failed(f"ERROR\tFailed to supply {event.type_name}", event.err)
            else:
                yield f"SUPPLY\t{event.type_name}{_from_module(event.module_name)}"
        case Provided() | Replaced() | Decorated():
            yield from _outputs(event)
        case Run():
            yield f"RUN\t{event.kind}: {event.name}{_from_module(event.module_name)}"
            if event.err is not None:
                yield _failed("Error returned", event.err)
        case Invoked():
            if event.err is not None:
                yield (
                    f"ERROR\t\tfx.Invoke({event.function_name}) called from:\n"
                    f"{event.trace}Failed: {_detail(event.err)}"
                )
        case Invoking():
            yield f"INVOKE\t\t{event.function_name}{_from_module(event.module_name)}"
        case Stopping():
            yield signal_name(event.signal).upper()
        case RollingBack():
            yield _failed("ERROR\t\tStart failed, rolling back", event.start_err)
        case Started() | Stopped() | RolledBack() | LoggerInitialized() if event.err is not None:
            yield _failed(_failure_prefix(event), event.err)
        case Started():
            yield "RUNNING"
        case LoggerInitialized():
            yield f"LOGGER\tInitialized custom logger from {event.constructor_name}"


class ConsoleLogger(Logger):
    """Writes readable event messages; meant for development.

    Without a writer, messages go to standard error.
    """

    def __init__(self, writer: TextIO | None = None) -> None:
        self.writer = writer

    def log_event(self, event: Event) -> None:
        out = self.writer if self.writer is not None else sys.stderr
        for line in _lines(event):
            out.write(f"[Fx] {line}\n")