from __future__ import annotations

import os
from typing import Optional, Set

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import DecodeError

SUPPORTED_EXTENSIONS: Set[str] = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff"}


class ImageLoader:
    """Decode image files into Pillow images ready for rasterization."""

    def __init__(self, resize_limit: Optional[int] = None) -> None:
        self.resize_limit = resize_limit

    def load(self, path: str) -> Image.Image:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")
        img = self._load_image(path)
        img = self._normalize_image(img)
        if self.resize_limit:
            img = self._fit_within(img, self.resize_limit)
        return img

    @staticmethod
    def _load_image(path: str) -> Image.Image:
        try:
            with Image.open(path) as img:
                img = ImageOps.exif_transpose(img)
                return img.copy()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise DecodeError(f"Cannot decode image {path}: {exc}") from exc

    @staticmethod
    def _normalize_image(img: Image.Image) -> Image.Image:
        if img.mode not in ("RGB", "RGBA", "L"):
            if "transparency" in img.info or img.mode in ("LA", "PA"):
                return img.convert("RGBA")
            return img.convert("RGB")
        return img

    @staticmethod
    def _fit_within(img: Image.Image, limit: int) -> Image.Image:
        """Downscale to ``limit`` dots wide when either side exceeds it."""
        if img.width <= limit and img.height <= limit:
            return img
        ratio = limit / float(img.width)
        height = max(1, int(img.height * ratio))
        return img.resize((limit, height), Image.LANCZOS)
