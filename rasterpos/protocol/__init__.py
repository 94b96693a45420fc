from .commands import (
    align_cmd,
    cut_cmd,
    feed_lines_cmd,
    initialize_cmd,
    print_graphics_cmd,
    raster_bit_image_cmd,
    status_query_cmd,
    store_graphics_cmd,
)
from .encoding import encode_matrix, encode_matrix_bytes, plan_chunks, select_mode
from .job import build_job, build_raster_chunks
from .types import GS8L_MAX_ROWS, BitMatrix, Chunk, RasterMode, row_stride_for

__all__ = [
    "align_cmd",
    "BitMatrix",
    "build_job",
    "build_raster_chunks",
    "Chunk",
    "cut_cmd",
    "encode_matrix",
    "encode_matrix_bytes",
    "feed_lines_cmd",
    "GS8L_MAX_ROWS",
    "initialize_cmd",
    "plan_chunks",
    "print_graphics_cmd",
    "raster_bit_image_cmd",
    "RasterMode",
    "row_stride_for",
    "select_mode",
    "status_query_cmd",
    "store_graphics_cmd",
]
