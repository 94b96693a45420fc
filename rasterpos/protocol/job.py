from __future__ import annotations

from typing import List, Optional

from .commands import align_cmd, cut_cmd, feed_lines_cmd, initialize_cmd
from .encoding import encode_matrix
from .types import BitMatrix


def build_raster_chunks(matrix: BitMatrix) -> List[bytes]:
    """Build the raster command chunks for a matrix, one write per chunk."""
    return [header + payload for header, payload in encode_matrix(matrix)]


def build_job(
    matrix: BitMatrix,
    align: Optional[str],
    feed_lines: int,
    cut: bool,
    initialize: bool = True,
) -> List[bytes]:
    """Build a full image job: setup commands, raster chunks and trailer."""
    chunks = build_raster_chunks(matrix)
    job: List[bytes] = []
    if initialize:
        job.append(initialize_cmd())
    if align:
        job.append(align_cmd(align))
    job.extend(chunks)
    if feed_lines > 0:
        job.append(feed_lines_cmd(feed_lines))
    if cut:
        job.append(cut_cmd())
    return job
