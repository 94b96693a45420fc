from __future__ import annotations

import logging
from typing import List, Tuple

from .commands import print_graphics_cmd, raster_bit_image_cmd, store_graphics_cmd
from .types import GS8L_MAX_ROWS, BitMatrix, Chunk, RasterMode

logger = logging.getLogger(__name__)

EncodedChunk = Tuple[bytes, bytes]


def select_mode(height: int) -> RasterMode:
    """Pick the raster wire format for a matrix of the given height."""
    if height < GS8L_MAX_ROWS:
        return RasterMode.SINGLE_BLOCK
    return RasterMode.CHUNKED


def plan_chunks(height: int, row_stride: int, max_rows: int = GS8L_MAX_ROWS) -> List[Chunk]:
    """Split ``[0, height)`` into consecutive chunks of at most ``max_rows`` rows."""
    chunks: List[Chunk] = []
    row = 0
    while row < height:
        count = min(max_rows, height - row)
        chunks.append(Chunk(start_row=row, row_count=count, row_stride=row_stride))
        row += count
    return chunks


def encode_single_block(matrix: BitMatrix) -> List[EncodedChunk]:
    header = raster_bit_image_cmd(matrix.row_stride, matrix.height)
    return [(header, bytes(matrix.bits))]


def encode_chunked(matrix: BitMatrix) -> List[EncodedChunk]:
    out: List[EncodedChunk] = []
    for chunk in plan_chunks(matrix.height, matrix.row_stride):
        payload = bytes(matrix.row_slice(chunk.start_row, chunk.row_count))
        out.append((store_graphics_cmd(matrix.width, chunk.row_count, len(payload)), payload))
        out.append((print_graphics_cmd(), b""))
    return out


def encode_matrix(matrix: BitMatrix) -> List[EncodedChunk]:
    """Encode a bit matrix into ordered ``(header, payload)`` command pairs.

    Matrices shorter than the GS 8 L row limit are sent as one GS v 0 block.
    Taller matrices are split into row chunks, each stored with GS 8 L and
    printed with GS ( L before the next chunk is sent.
    """
    matrix.validate()
    mode = select_mode(matrix.height)
    logger.debug(
        "Encoding %dx%d matrix (%d bytes/row) as %s",
        matrix.width,
        matrix.height,
        matrix.row_stride,
        mode.value,
    )
    if mode is RasterMode.SINGLE_BLOCK:
        return encode_single_block(matrix)
    return encode_chunked(matrix)


def encode_matrix_bytes(matrix: BitMatrix) -> bytes:
    """Encode a bit matrix into one contiguous command stream."""
    return b"".join(header + payload for header, payload in encode_matrix(matrix))
