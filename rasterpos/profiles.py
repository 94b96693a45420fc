from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

DATA_PATH = Path(__file__).resolve().parent / "data" / "printer_profiles.json"
PROFILES_ENV_VAR = "RASTERPOS_PROFILES"
DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class PrinterProfile:
    name: str
    max_width: int = 512
    threshold: float = 0.5
    resize_limit: Optional[int] = 450
    align: Optional[str] = "center"
    queue: str = "lp"
    ack_timeout: float = 5.0
    feed_lines: int = 3
    cut: bool = True
    description: str = ""


class PrinterProfileRegistry:
    _cache: Dict[Path, "PrinterProfileRegistry"] = {}

    def __init__(self, profiles: Iterable[PrinterProfile]) -> None:
        self._profiles = list(profiles)

    @classmethod
    def default_path(cls) -> Path:
        override = os.environ.get(PROFILES_ENV_VAR)
        if override:
            return Path(override)
        return DATA_PATH

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PrinterProfileRegistry":
        if path is None:
            path = cls.default_path()
        key = Path(path).resolve()
        cached = cls._cache.get(key)
        if cached:
            return cached
        raw = json.loads(key.read_text(encoding="utf-8"))
        profiles = [PrinterProfile(**item) for item in raw]
        registry = cls(profiles)
        cls._cache[key] = registry
        return registry

    @property
    def profiles(self) -> List[PrinterProfile]:
        return list(self._profiles)

    def get(self, name: str) -> Optional[PrinterProfile]:
        for profile in self._profiles:
            if profile.name == name:
                return profile
        return None

    def require(self, name: Optional[str]) -> PrinterProfile:
        name = name or DEFAULT_PROFILE
        profile = self.get(name)
        if not profile:
            raise RuntimeError(f"Unknown printer profile '{name}'")
        return profile
