import logging
import signal
import uuid
from datetime import timedelta

import pytest

from fxlite.events import (
    Decorated,
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
)
from fxlite.structured import FIELDS_ATTR, StructuredLogger

SOME_ERROR = RuntimeError("some error")
MS3 = timedelta(milliseconds=3)

CASES = [
    (
        "OnStartExecuting",
        OnStartExecuting(function_name="hook.onStart", caller_name="bytes.NewBuffer"),
        "OnStart hook executing",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStart"},
    ),
    (
        "OnStopExecuting",
        OnStopExecuting(function_name="hook.onStop1", caller_name="bytes.NewBuffer"),
        "OnStop hook executing",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStop1"},
    ),
    (
        "OnStopExecuted/Error",
        OnStopExecuted(
            function_name="hook.onStart1",
            caller_name="bytes.NewBuffer",
            err=RuntimeError("some error"),
        ),
        "OnStop hook failed",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStart1", "error": "some error"},
    ),
    (
        "OnStopExecuted",
        OnStopExecuted(
            function_name="hook.onStart1", caller_name="bytes.NewBuffer", runtime=MS3
        ),
        "OnStop hook executed",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStart1", "runtime": "3ms"},
    ),
    (
        "OnStartExecuted/Error",
        OnStartExecuted(
            function_name="hook.onStart1",
            caller_name="bytes.NewBuffer",
            err=RuntimeError("some error"),
        ),
        "OnStart hook failed",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStart1", "error": "some error"},
    ),
    (
        "OnStartExecuted",
        OnStartExecuted(
            function_name="hook.onStart1", caller_name="bytes.NewBuffer", runtime=MS3
        ),
        "OnStart hook executed",
        {"caller": "bytes.NewBuffer", "callee": "hook.onStart1", "runtime": "3ms"},
    ),
    (
        "Supplied",
        Supplied(
            type_name="*bytes.Buffer",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
        ),
        "supplied",
        {
            "type": "*bytes.Buffer",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
        },
    ),
    (
        "Supplied/Error",
        Supplied(
            type_name="*bytes.Buffer",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            err=SOME_ERROR,
        ),
        "error encountered while applying options",
        {
            "type": "*bytes.Buffer",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "error": "some error",
        },
    ),
    (
        "Provide",
        Provided(
            constructor_name="bytes.NewBuffer()",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            module_name="myModule",
            output_type_names=["*bytes.Buffer"],
            private=False,
        ),
        "provided",
        {
            "constructor": "bytes.NewBuffer()",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "type": "*bytes.Buffer",
            "module": "myModule",
        },
    ),
    (
        "PrivateProvide",
        Provided(
            constructor_name="bytes.NewBuffer()",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            module_name="myModule",
            output_type_names=["*bytes.Buffer"],
            private=True,
        ),
        "provided",
        {
            "constructor": "bytes.NewBuffer()",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "type": "*bytes.Buffer",
            "module": "myModule",
            "private": True,
        },
    ),
    (
        "Provide/Error",
        Provided(
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            err=SOME_ERROR,
        ),
        "error encountered while applying options",
        {
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "error": "some error",
        },
    ),
    (
        "Replace",
        Replaced(
            module_name="myModule",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            output_type_names=["*bytes.Buffer"],
        ),
        "replaced",
        {
            "type": "*bytes.Buffer",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "module": "myModule",
        },
    ),
    (
        "Replace/Error",
        Replaced(
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            err=SOME_ERROR,
        ),
        "error encountered while replacing",
        {
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "error": "some error",
        },
    ),
    (
        "Decorate",
        Decorated(
            decorator_name="bytes.NewBuffer()",
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            module_name="myModule",
            output_type_names=["*bytes.Buffer"],
        ),
        "decorated",
        {
            "decorator": "bytes.NewBuffer()",
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "type": "*bytes.Buffer",
            "module": "myModule",
        },
    ),
    (
        "Decorate/Error",
        Decorated(
            stack_trace=["main.main", "runtime.main"],
            module_trace=["main.main"],
            err=SOME_ERROR,
        ),
        "error encountered while applying options",
        {
            "stacktrace": ["main.main", "runtime.main"],
            "moduletrace": ["main.main"],
            "error": "some error",
        },
    ),
    (
        "Run",
        Run(name="bytes.NewBuffer()", kind="constructor"),
        "run",
        {"name": "bytes.NewBuffer()", "kind": "constructor"},
    ),
    (
        "Run with module",
        Run(name="bytes.NewBuffer()", kind="constructor", module_name="myModule"),
        "run",
        {"name": "bytes.NewBuffer()", "kind": "constructor", "module": "myModule"},
    ),
    (
        "Run/Error",
        Run(name="bytes.NewBuffer()", kind="constructor", err=SOME_ERROR),
        "error returned",
        {"name": "bytes.NewBuffer()", "kind": "constructor", "error": "some error"},
    ),
    (
        "Invoking/Success",
        Invoking(module_name="myModule", function_name="bytes.NewBuffer()"),
        "invoking",
        {"function": "bytes.NewBuffer()", "module": "myModule"},
    ),
    (
        "Invoked/Error",
        Invoked(function_name="bytes.NewBuffer()", err=SOME_ERROR),
        "invoke failed",
        {"error": "some error", "stack": "", "function": "bytes.NewBuffer()"},
    ),
    (
        "Start/Error",
        Started(err=SOME_ERROR),
        "start failed",
        {"error": "some error"},
    ),
    (
        "Stopping",
        Stopping(signal=signal.SIGINT),
        "received signal",
        {"signal": "INTERRUPT"},
    ),
    (
        "Stopped/Error",
        Stopped(err=SOME_ERROR),
        "stop failed",
        {"error": "some error"},
    ),
    (
        "RollingBack/Error",
        RollingBack(start_err=SOME_ERROR),
        "start failed, rolling back",
        {"error": "some error"},
    ),
    (
        "RolledBack/Error",
        RolledBack(err=SOME_ERROR),
        "rollback failed",
        {"error": "some error"},
    ),
    ("Started", Started(), "started", {}),
    (
        "LoggerInitialized/Error",
        LoggerInitialized(err=SOME_ERROR),
        "custom logger initialization failed",
        {"error": "some error"},
    ),
    (
        "LoggerInitialized",
        LoggerInitialized(constructor_name="bytes.NewBuffer()"),
        "initialized custom fxevent.Logger",
        {"function": "bytes.NewBuffer()"},
    ),
]

PARAMS = [pytest.param(*case, id=case[0]) for case in CASES]


class _ObservedLogger(logging.Logger):
    """A logger that keeps every record it handles."""

    def __init__(self, level):
        super().__init__(f"fxlite-test-{uuid.uuid4().hex}", level)
        self.propagate = False
        self.records = []

    def handle(self, record):
        self.records.append(record)


@pytest.mark.parametrize("name, event, message, fields", PARAMS)
def test_info_observer_everything_at_debug(name, event, message, fields):
    observed = _ObservedLogger(logging.INFO)
    structured = StructuredLogger(observed)
    structured.use_log_level(logging.DEBUG)
    structured.use_error_level(logging.DEBUG)
    structured.log_event(event)
    assert observed.records == []


def test_default_levels():
    observed = _ObservedLogger(logging.DEBUG)
    structured = StructuredLogger(observed)
    structured.log_event(Started())
    structured.log_event(Started(err=SOME_ERROR))
    assert [r.levelno for r in observed.records] == [logging.INFO, logging.ERROR]
    assert [r.getMessage() for r in observed.records] == ["started", "start failed"]


@pytest.mark.parametrize(
    "level", [logging.DEBUG, logging.WARNING, logging.ERROR, logging.CRITICAL]
)
def test_setting_log_levels(level):
    observed = _ObservedLogger(level)
    structured = StructuredLogger(observed)
    structured.use_log_level(level)
    structured.log_event(
        OnStartExecuting(function_name="hook.onStart", caller_name="bytes.NewBuffer")
    )
    assert len(observed.records) == 1
    assert observed.records[0].levelno == level


@pytest.mark.parametrize(
    "level", [logging.DEBUG, logging.WARNING, logging.ERROR, logging.CRITICAL]
)
def test_setting_error_log_levels(level):
    observed = _ObservedLogger(level)
    structured = StructuredLogger(observed)
    structured.use_error_level(level)
    structured.log_event(
        OnStopExecuted(
            function_name="hook.onStart1",
            caller_name="bytes.NewBuffer",
            err=RuntimeError("some error"),
        )
    )
    assert len(observed.records) == 1
    assert observed.records[0].levelno == level


def test_provided_logs_each_output_type():
    observed = _ObservedLogger(logging.DEBUG)
    StructuredLogger(observed).log_event(
        Provided(constructor_name="ctor", output_type_names=["A", "B"])
    )
    assert [getattr(r, FIELDS_ATTR)["type"] for r in observed.records] == ["A", "B"]
    assert [r.getMessage() for r in observed.records] == ["provided", "provided"]