# fxlite

fxlite describes what happens while an application is built, started and
stopped as a set of event classes, and writes those events out either as
readable text or as structured log records. It also has helpers for tests
that run an application in a child process and talk to it.

## Events

`fxlite.events` defines one keyword-only dataclass per event, all derived
from `Event`. Every field has an empty default.

- hook events: `OnStartExecuting`, `OnStartExecuted`, `OnStopExecuting`,
  `OnStopExecuted`
- container events: `Supplied`, `Provided`, `Replaced`, `Decorated`, `Run`,
  `Invoking`, `Invoked`
- application events: `Started`, `Stopping`, `Stopped`, `RollingBack`,
  `RolledBack`, `LoggerInitialized`

Events that can fail carry the error in `err` (`RollingBack` uses
`start_err`).

Two helpers render values the way the loggers do:

- `format_duration(duration)` turns a `timedelta` or a number of seconds into
  compact text such as `0s`, `3ms` or `1h2m3.5s`.
- `signal_name(sig)` turns a signal into a lower-case name such as
  `interrupt` or `terminated`; strings are returned unchanged.

## Loggers

Every logger subclasses `fxlite.logger.Logger` and implements
`log_event(event)`.

- `fxlite.logger.NopLogger` ignores every event; `NOP_LOGGER` is a ready
  instance.
- `fxlite.console.ConsoleLogger(writer)` writes readable lines, each starting
  with `[Fx] `, to a text stream. Without a writer it writes to standard
  error. An error can choose how it is shown by accepting the `"+v"` format
  spec in its `__format__`.
- `fxlite.structured.StructuredLogger(logger)` sends a message to a standard
  `logging.Logger`, with the event's details as a dictionary in the record's
  `fields` attribute (the name is also in `FIELDS_ATTR`). Ordinary events are
  logged at INFO and failures at ERROR; `use_log_level(level)` and
  `use_error_level(level)` change these levels.

```python
import sys
from fxlite.console import ConsoleLogger
from fxlite.events import Started

ConsoleLogger(sys.stdout).log_event(Started())
# [Fx] RUNNING
```

## Testing running applications

The helpers for tests live in `fxlite.apptesting`:

- `iohelp.read_all(reader)` reads a text or byte stream to its end and
  returns text (bytes are decoded as UTF-8). A failed read raises
  `ReadError`.
- `httpcheck.post_success(url, body)` POSTs a `text/plain` body and returns
  the response text. Any status other than 200 raises `UnexpectedStatus`,
  which holds `status` and `body`.
- `execcmd.command(main)` builds a `Command` that runs `main` in a fresh
  interpreter. `main` must be importable by name, such as a module-level
  function; the process exits with the integer it returns, or 0. A
  `Command` has `start`, `output`, `run`, `signal` and `wait`; `output` and
  `run` raise `subprocess.CalledProcessError` on a non-zero exit.
  `execcmd.start_with_output(cmd)` starts the command and returns one stream
  holding both its stdout and stderr.
- `apprun.start(main, *options)` runs `main` in a child process and blocks
  until a line of its output says the application is running, then returns
  a `RunningApp`. Used as a context manager, or through `stop()`, the
  `RunningApp` interrupts the child and waits for it to end; its `lines`
  hold the output read so far. If the child exits first, or does not report
  running within the timeout, `start` stops it and raises `AppStartError`.

Options for `start`:

- `apprun.is_running(f)` sets the check for a running line. The default,
  `default_is_running`, accepts a line containing `[Fx] RUNNING` or a JSON
  object whose `"msg"` is `"started"`.
- `apprun.timeout(seconds)` sets how long to wait; the default is 5 seconds.

```python
from fxlite.apptesting.apprun import start

with start(my_main) as app:
    ...  # the application is running here
```

## What fxlite does not do

fxlite has no dependency injection container and no application lifecycle of
its own: nothing in it provides constructors, runs hooks or emits the events.
The events are plain data for an application to create and hand to a logger.
It also has no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```