"""The interface through which framework events are logged."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fxlite.events import Event

__all__ = ["Logger", "NopLogger", "NOP_LOGGER"]


class Logger(ABC):
    """Receives every event the framework emits."""

    @abstractmethod
    def log_event(self, event: Event) -> None:
        """Handle one emitted event."""


class NopLogger(Logger):
    """A logger that ignores all events."""

    def log_event(self, event: Event) -> None:
        return None

    def __str__(self) -> str:
        return "NopLogger"


NOP_LOGGER = NopLogger()