from __future__ import annotations

from typing import List

from PIL import Image, ImageChops

from ..protocol.types import BitMatrix, row_stride_for

LUM_R, LUM_G, LUM_B = 55, 182, 18
_LUM_TOTAL = LUM_R + LUM_G + LUM_B
LUMINANCE_MATRIX = (LUM_R / _LUM_TOTAL, LUM_G / _LUM_TOTAL, LUM_B / _LUM_TOTAL, 0)


def luminance_band(img: Image.Image) -> Image.Image:
    """Return an 8-bit luminance band of ``img``.

    Color channels are premultiplied by alpha, so transparent pixels are dark.
    """
    if img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info:
        rgba = img.convert("RGBA")
        alpha = rgba.getchannel("A")
        rgb = ImageChops.multiply(rgba.convert("RGB"), Image.merge("RGB", (alpha, alpha, alpha)))
    else:
        rgb = img.convert("RGB")
    return rgb.convert("L", LUMINANCE_MATRIX)


def ink_table(threshold: float) -> List[int]:
    """Map luminance levels to 255 (ink) or 0 (paper); the boundary is inclusive."""
    return [255 if level / 255.0 <= threshold else 0 for level in range(256)]


def image_to_matrix(img: Image.Image, max_width: int, threshold: float) -> BitMatrix:
    """Threshold an image into a packed bit matrix.

    Columns beyond ``max_width`` are dropped, never scaled. A pixel becomes a
    printed dot when its luminance is less than or equal to ``threshold``.
    """
    width = max(0, min(img.width, max_width))
    height = img.height
    row_stride = row_stride_for(width)
    if width == 0 or height == 0:
        return BitMatrix(width=width, height=height, row_stride=row_stride, bits=bytes(row_stride * height))

    if width < img.width:
        img = img.crop((0, 0, width, height))
    # mode "1" packs each row MSB-first, padded to a whole byte, with set bits for 255
    dots = luminance_band(img).point(ink_table(threshold), "1")
    return BitMatrix(width=width, height=height, row_stride=row_stride, bits=dots.tobytes())
