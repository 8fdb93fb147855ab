"""Application lifecycle events, loggers that write them out, and test helpers."""

__version__ = "0.1.0"