from __future__ import annotations

from typing import Optional

SERIAL_BAUD_RATE = 115200


class SerialConnection:
    """Serial port connection backed by pyserial."""

    def __init__(self, port: str, baud_rate: int = SERIAL_BAUD_RATE, timeout: float = 1.0) -> None:
        self._port = port
        self._baud_rate = baud_rate
        self._timeout = timeout
        self._serial = None

    def open(self) -> "SerialConnection":
        try:
            import serial
        except Exception as exc:  # pragma: no cover
            raise RuntimeError("pyserial is required. Install with: pip install pyserial") from exc
        try:
            self._serial = serial.Serial(
                self._port, self._baud_rate, timeout=self._timeout, write_timeout=5
            )
        except serial.SerialException as exc:
            raise OSError(f"Serial connection failed: {exc}") from exc
        return self

    def _require_open(self):
        if self._serial is None:
            raise OSError(f"Serial port {self._port} is not open")
        return self._serial

    def write(self, data: bytes) -> int:
        ser = self._require_open()
        written = ser.write(data)
        ser.flush()
        return len(data) if written is None else written

    def read(self, size: int, timeout: Optional[float] = None) -> bytes:
        ser = self._require_open()
        if timeout is None:
            return ser.read(size)
        previous = ser.timeout
        ser.timeout = timeout
        try:
            return ser.read(size)
        finally:
            ser.timeout = previous

    def close(self) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None
