from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from PIL import Image

from .profiles import PrinterProfile
from .protocol import BitMatrix, build_job
from .rendering import SUPPORTED_EXTENSIONS, ImageLoader, image_to_matrix


@dataclass
class PrintSettings:
    max_width: Optional[int] = None
    threshold: Optional[float] = None
    resize: bool = True
    align: Optional[str] = None
    feed_lines: Optional[int] = None
    cut: Optional[bool] = None


class PrintJobBuilder:
    def __init__(self, profile: PrinterProfile, settings: Optional[PrintSettings] = None) -> None:
        self.profile = profile
        self.settings = settings or PrintSettings()

    def build_from_file(self, path: str) -> List[bytes]:
        self._validate_input_path(path)
        loader = ImageLoader(self._resize_limit())
        img = loader.load(path)
        return self.build_from_image(img)

    def build_from_image(self, img: Image.Image) -> List[bytes]:
        return self.build_from_matrix(self.rasterize(img))

    def build_from_matrix(self, matrix: BitMatrix) -> List[bytes]:
        return build_job(
            matrix,
            align=self._align(),
            feed_lines=self._feed_lines(),
            cut=self._cut(),
        )

    def rasterize(self, img: Image.Image) -> BitMatrix:
        return image_to_matrix(img, self._max_width(), self._threshold())

    def _max_width(self) -> int:
        if self.settings.max_width is not None:
            return self.settings.max_width
        return self.profile.max_width

    def _threshold(self) -> float:
        if self.settings.threshold is not None:
            return self.settings.threshold
        return self.profile.threshold

    def _resize_limit(self) -> Optional[int]:
        if not self.settings.resize:
            return None
        return self.profile.resize_limit

    def _align(self) -> Optional[str]:
        if self.settings.align is not None:
            return self.settings.align
        return self.profile.align

    def _feed_lines(self) -> int:
        if self.settings.feed_lines is not None:
            return self.settings.feed_lines
        return self.profile.feed_lines

    def _cut(self) -> bool:
        if self.settings.cut is not None:
            return self.settings.cut
        return self.profile.cut

    @staticmethod
    def _validate_input_path(path: str) -> None:
        ext = os.path.splitext(path)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise ValueError("Supported formats: " + ", ".join(sorted(SUPPORTED_EXTENSIONS)))
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")
