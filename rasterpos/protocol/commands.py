from __future__ import annotations

GS = 0x1D
ESC = 0x1B
DLE = 0x10

PRINT_GRAPHICS_CMD = bytes([GS, 0x28, 0x4C, 0x02, 0x00, 0x30, 0x32])

_ALIGNMENTS = {"left": 0, "center": 1, "right": 2}


def le16(value: int) -> bytes:
    return value.to_bytes(2, "little", signed=False)


def le32(value: int) -> bytes:
    return value.to_bytes(4, "little", signed=False)


def raster_bit_image_cmd(width_bytes: int, height: int) -> bytes:
    """Build the GS v 0 header for a single raster block."""
    return bytes([GS, 0x76, 0x30, 0x00]) + le16(width_bytes) + le16(height)


def store_graphics_cmd(width: int, row_count: int, payload_length: int) -> bytes:
    """Build the GS 8 L header storing a raster block in the print buffer."""
    block_size = 10 + payload_length
    return (
        bytes([GS, 0x38, 0x4C])
        + le32(block_size)
        # function 112, 1x zoom on both axes, single-color model
        + bytes([0x30, 0x70, 0x30, 0x01, 0x01, 0x31])
        + le16(width)
        + le16(row_count)
    )


def print_graphics_cmd() -> bytes:
    """Build the GS ( L command printing the stored graphics."""
    return PRINT_GRAPHICS_CMD


def initialize_cmd() -> bytes:
    return bytes([ESC, 0x40])


def align_cmd(align: str) -> bytes:
    """Build the justification command (left/center/right)."""
    try:
        value = _ALIGNMENTS[align]
    except KeyError:
        raise ValueError(f"Invalid alignment: {align}") from None
    return bytes([ESC, 0x61, value])


def feed_lines_cmd(lines: int) -> bytes:
    """Build the print-and-feed-n-lines command."""
    lines = max(0, min(255, lines))
    return bytes([ESC, 0x64, lines])


def cut_cmd() -> bytes:
    return bytes([GS, 0x56, 0x41, 0x30])


def status_query_cmd() -> bytes:
    """Build the real-time printer status request (DLE EOT 1)."""
    return bytes([DLE, 0x04, 0x01])
