from __future__ import annotations

import logging
import os
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from ..errors import ChannelClosedError, ProtocolError, TransportError
from .channel import Channel, ChannelState, ConnectionLike, read_connection

logger = logging.getLogger(__name__)

DEFAULT_QUEUE = "lp"
DEFAULT_ACK_TIMEOUT = 5.0
DEFAULT_USER = "rasterpos"

ACK = 0x00
RECEIVE_JOB = 0x02
RECEIVE_CONTROL_FILE = 0x02
RECEIVE_DATA_FILE = 0x03


@dataclass
class PrintJob:
    """Identity and payload of one LPD job."""

    queue_name: str
    host_name: str
    user_name: str
    job_id: int
    payload: bytearray = field(default_factory=bytearray)

    @classmethod
    def create(
        cls,
        queue_name: str,
        payload: bytes = b"",
        host_name: Optional[str] = None,
        user_name: Optional[str] = None,
        job_id: Optional[int] = None,
    ) -> "PrintJob":
        if host_name is None:
            host_name = socket.gethostname() or "localhost"
        if user_name is None:
            user_name = os.environ.get("USER") or DEFAULT_USER
        if job_id is None:
            job_id = time.time_ns() % 1_000_000
        return cls(queue_name, host_name, user_name, job_id, bytearray(payload))

    @property
    def short_host(self) -> str:
        host = self.host_name
        dot = host.find(".")
        if dot > 0:
            host = host[:dot]
        return host

    @property
    def job_name(self) -> str:
        return f"escpos-{self.job_id}"

    @property
    def control_file_name(self) -> str:
        return f"cfA{self.job_id % 1000:03d}{self.short_host}"

    @property
    def data_file_name(self) -> str:
        return f"dfA{self.job_id % 1000:03d}{self.short_host}"

    def control_file(self) -> bytes:
        # H host, P user, J job name, N source file name, U file to unlink
        lines = [
            f"H{self.host_name}",
            f"P{self.user_name}",
            f"J{self.job_name}",
            f"N{self.data_file_name}",
            f"U{self.data_file_name}",
        ]
        return "".join(line + "\n" for line in lines).encode("ascii", errors="replace")


def receive_job_cmd(queue: str) -> bytes:
    return bytes([RECEIVE_JOB]) + queue.encode("ascii") + b"\n"


def subcommand(code: int, name: str, content: bytes) -> bytes:
    """Frame a control or data file transfer: code, "<len> <name>\\n", content, NUL."""
    header = f"{len(content)} {name}\n".encode("ascii", errors="replace")
    return bytes([code]) + header + content + b"\x00"


class LpdChannel(Channel):
    """Queued-print channel delivering one buffered job over LPD on close.

    Writes are only buffered. Closing runs the three acknowledged stages
    (receive job, control file, data file) and then closes the connection.
    """

    def __init__(
        self,
        connection: ConnectionLike,
        queue: Optional[str] = None,
        ack_timeout: float = DEFAULT_ACK_TIMEOUT,
        host_name: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> None:
        self._conn = connection
        self.queue = queue or DEFAULT_QUEUE
        self.ack_timeout = ack_timeout
        self._host_name = host_name
        self._user_name = user_name
        self._buffer = bytearray()
        self._state = ChannelState.OPEN
        self._lock = threading.Lock()
        self.last_job: Optional[PrintJob] = None

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def write(self, data: bytes) -> int:
        with self._lock:
            if self._state is not ChannelState.OPEN:
                raise ChannelClosedError()
            self._buffer += data
            return len(data)

    def read(self, size: int, timeout: Optional[float] = None) -> bytes:
        return read_connection(self._conn, size, timeout)

    def close(self) -> None:
        with self._lock:
            if self._state is not ChannelState.OPEN:
                return
            self._state = ChannelState.CLOSING
            logger.debug("LPD close: %d bytes buffered", len(self._buffer))
            try:
                if self._buffer:
                    self._flush_job()
            finally:
                # the payload is dropped whether or not delivery succeeded
                self._buffer.clear()
                self._state = ChannelState.CLOSED
                self._close_connection()

    def _close_connection(self) -> None:
        try:
            self._conn.close()
        except OSError as exc:
            raise TransportError(f"Close failed: {exc}") from exc

    def _flush_job(self) -> None:
        job = PrintJob.create(
            self.queue,
            bytes(self._buffer),
            host_name=self._host_name,
            user_name=self._user_name,
        )
        self.last_job = job
        logger.debug("LPD stage 1: receive job on queue %r", job.queue_name)
        self._run_stage(1, receive_job_cmd(job.queue_name))
        logger.debug("LPD stage 2: control file %s", job.control_file_name)
        self._run_stage(2, subcommand(RECEIVE_CONTROL_FILE, job.control_file_name, job.control_file()))
        logger.debug("LPD stage 3: data file %s (%d bytes)", job.data_file_name, len(job.payload))
        self._run_stage(3, subcommand(RECEIVE_DATA_FILE, job.data_file_name, bytes(job.payload)))
        logger.debug("LPD job %s delivered", job.job_name)

    def _run_stage(self, stage: int, request: bytes) -> None:
        try:
            self._conn.write(request)
        except OSError as exc:
            raise ProtocolError(stage, f"write error: {exc}") from exc
        self._read_ack(stage)

    def _read_ack(self, stage: int) -> None:
        try:
            ack = self._conn.read(1, timeout=self.ack_timeout)
        except TimeoutError as exc:
            raise ProtocolError(stage, f"no acknowledgment within {self.ack_timeout:g}s") from exc
        except OSError as exc:
            raise ProtocolError(stage, f"error reading acknowledgment: {exc}") from exc
        if not ack:
            raise ProtocolError(stage, "connection closed before acknowledgment")
        logger.debug("LPD stage %d: received ack byte 0x%02x", stage, ack[0])
        if ack[0] != ACK:
            raise ProtocolError(stage, f"request not acknowledged (0x{ack[0]:02x})")
