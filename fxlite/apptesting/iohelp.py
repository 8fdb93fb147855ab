"""Reading a whole stream into a string."""

from __future__ import annotations

from typing import IO

__all__ = ["ReadError", "read_all"]


class ReadError(Exception):
    """Raised when a stream cannot be read to its end."""


def read_all(reader: IO) -> str:
    """Read ``reader`` until end of stream and return its content as text.

    Byte streams are decoded as UTF-8. Any failure raises :class:`ReadError`.
    """
    try:
        data = reader.read()
    except OSError as exc:
        raise ReadError(f"read all output: {exc}") from exc
    if isinstance(data, (bytes, bytearray)):
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ReadError(f"read all output: {exc}") from exc
    return data