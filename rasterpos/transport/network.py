from __future__ import annotations

import socket
from typing import Optional, Tuple

LPD_PORT = 515
RAW_PORT = 9100
DEFAULT_CONNECT_TIMEOUT = 10.0


class NetworkConnection:
    """Blocking TCP connection to a printer or print server."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False

    @classmethod
    def connect(
        cls, host: str, port: int = RAW_PORT, timeout: float = DEFAULT_CONNECT_TIMEOUT
    ) -> "NetworkConnection":
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.settimeout(None)
        return cls(sock)

    @property
    def remote_address(self) -> Optional[Tuple[str, int]]:
        try:
            peer = self._sock.getpeername()
        except OSError:
            return None
        return peer[0], peer[1]

    @property
    def remote_port(self) -> Optional[int]:
        address = self.remote_address
        return address[1] if address else None

    def write(self, data: bytes) -> int:
        self._sock.sendall(data)
        return len(data)

    def read(self, size: int, timeout: Optional[float] = None) -> bytes:
        """Read up to ``size`` bytes, raising ``TimeoutError`` after ``timeout`` seconds."""
        if timeout is None:
            return self._sock.recv(size)
        previous = self._sock.gettimeout()
        self._sock.settimeout(timeout)
        try:
            return self._sock.recv(size)
        except socket.timeout as exc:
            raise TimeoutError(f"No data within {timeout:g}s") from exc
        finally:
            self._sock.settimeout(previous)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()
