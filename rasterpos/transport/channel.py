from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from ..errors import TransportError

# Anything with write(data) -> int, read(size[, timeout]) -> bytes and close().
ConnectionLike = Any


def read_connection(connection: ConnectionLike, size: int, timeout: Optional[float] = None) -> bytes:
    """Read from a connection. ``TimeoutError`` propagates; other I/O errors become ``TransportError``."""
    try:
        if timeout is None:
            return connection.read(size)
        return connection.read(size, timeout=timeout)
    except TimeoutError:
        raise
    except OSError as exc:
        raise TransportError(f"Read failed: {exc}") from exc


class ChannelState(Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class Channel:
    """Bidirectional byte sink/source delivering commands to a printer."""

    def write(self, data: bytes) -> int:
        raise NotImplementedError

    def read(self, size: int, timeout: Optional[float] = None) -> bytes:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "Channel":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class RawChannel(Channel):
    """Pass-through channel: every call goes straight to the connection."""

    def __init__(self, connection: ConnectionLike) -> None:
        self._conn = connection

    def write(self, data: bytes) -> int:
        try:
            written = self._conn.write(data)
        except OSError as exc:
            raise TransportError(f"Write failed: {exc}") from exc
        return len(data) if written is None else written

    def read(self, size: int, timeout: Optional[float] = None) -> bytes:
        return read_connection(self._conn, size, timeout)

    def close(self) -> None:
        try:
            self._conn.close()
        except OSError as exc:
            raise TransportError(f"Close failed: {exc}") from exc
