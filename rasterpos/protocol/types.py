from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..errors import EncodingError

GS8L_MAX_ROWS = 831
# widths and row byte counts are sent as 16-bit little-endian fields
MAX_WIDTH = 0xFFFF


class RasterMode(Enum):
    SINGLE_BLOCK = "single_block"
    CHUNKED = "chunked"


def row_stride_for(width: int) -> int:
    """Return the number of packed bytes needed for a row of ``width`` dots."""
    return (width + 7) // 8


@dataclass(frozen=True)
class BitMatrix:
    """Row-major packed monochrome dots, MSB-first within each row byte."""

    width: int
    height: int
    row_stride: int
    bits: bytes

    def validate(self) -> None:
        """Validate dimensions for protocol encoding."""
        if self.width < 0 or self.height < 0:
            raise EncodingError(f"Negative matrix dimensions: {self.width}x{self.height}")
        if self.width > MAX_WIDTH:
            raise EncodingError(f"Width {self.width} exceeds the 16-bit header field")
        if self.row_stride != row_stride_for(self.width):
            raise EncodingError(
                f"Row stride {self.row_stride} does not match width {self.width}"
            )
        expected = self.row_stride * self.height
        if len(self.bits) != expected:
            raise EncodingError(f"Bits length {len(self.bits)} does not match expected {expected}")

    def row_slice(self, start_row: int, row_count: int) -> bytes:
        return self.bits[start_row * self.row_stride : (start_row + row_count) * self.row_stride]


@dataclass(frozen=True)
class Chunk:
    """A contiguous row range of a bit matrix."""

    start_row: int
    row_count: int
    row_stride: int

    @property
    def byte_range(self) -> Tuple[int, int]:
        start = self.start_row * self.row_stride
        return start, start + self.row_count * self.row_stride
