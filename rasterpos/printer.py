from __future__ import annotations

import logging
from typing import Iterable, Optional

from .print_job import PrintJobBuilder, PrintSettings
from .profiles import DEFAULT_PROFILE, PrinterProfile, PrinterProfileRegistry
from .protocol import (
    BitMatrix,
    align_cmd,
    build_raster_chunks,
    cut_cmd,
    feed_lines_cmd,
    initialize_cmd,
    status_query_cmd,
)
from .transport import Channel

logger = logging.getLogger(__name__)

STATUS_OFFLINE_MASK = 0x08
STATUS_TIMEOUT = 2.0


class Printer:
    """ESC/POS printer driven through a channel."""

    def __init__(self, channel: Channel, profile: Optional[PrinterProfile] = None) -> None:
        self.channel = channel
        self.profile = profile or PrinterProfileRegistry.load().require(DEFAULT_PROFILE)

    def write(self, data: bytes) -> int:
        return self.channel.write(data)

    def write_all(self, chunks: Iterable[bytes]) -> int:
        total = 0
        for chunk in chunks:
            total += self.channel.write(chunk)
        return total

    def init(self) -> None:
        self.write(initialize_cmd())

    def set_align(self, align: str) -> None:
        self.write(align_cmd(align))

    def feed(self, lines: int = 1) -> None:
        self.write(feed_lines_cmd(lines))

    def cut(self) -> None:
        self.write(cut_cmd())

    def print_matrix(self, matrix: BitMatrix) -> int:
        """Send only the raster commands for a matrix."""
        return self.write_all(build_raster_chunks(matrix))

    def print_image(self, path: str, settings: Optional[PrintSettings] = None) -> int:
        """Load, rasterize and send an image file as a complete job."""
        builder = PrintJobBuilder(self.profile, settings)
        chunks = builder.build_from_file(path)
        logger.info("Printing %s in %d command chunks", path, len(chunks))
        return self.write_all(chunks)

    def read_status(self, timeout: float = STATUS_TIMEOUT) -> bool:
        """Query the real-time status and return True when the printer is online.

        A printer that does not answer within ``timeout`` seconds is reported offline.
        """
        self.write(status_query_cmd())
        try:
            status = self.channel.read(1, timeout=timeout)
        except TimeoutError:
            logger.warning("No status reply within %gs", timeout)
            return False
        if not status:
            return False
        return (status[0] & STATUS_OFFLINE_MASK) == 0

    def close(self) -> None:
        self.channel.close()

    def __enter__(self) -> "Printer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
