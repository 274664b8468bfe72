"""Dimensiones de imagen (p.ej. "1920x1080")."""

from __future__ import annotations

import re
from dataclasses import dataclass
from math import gcd

REM_PX = 16

_DIMENSION_RE = re.compile(r"(\d+)\s*[xX×]\s*(\d+)")


@dataclass(frozen=True)
class Dimension:
    width: int
    height: int

    @classmethod
    def from_string(cls, text: str | None) -> "Dimension | None":
        """Parsea "WxH"; devuelve `None` si no hay dimensiones válidas."""

        if not text:
            return None
        match = _DIMENSION_RE.search(text)
        if not match:
            return None
        width, height = int(match.group(1)), int(match.group(2))
        if width <= 0 or height <= 0:
            return None
        return cls(width=width, height=height)

    def get_aspect_ratio(self) -> str:
        divisor = gcd(self.width, self.height)
        return f"{self.width // divisor}:{self.height // divisor}"

    def get_width_in_px(self) -> int:
        return self.width

    def get_height_in_px(self) -> int:
        return self.height

    def get_width_in_rem(self) -> float:
        return self.width / REM_PX

    def get_height_in_rem(self) -> float:
        return self.height / REM_PX

    @property
    def full_size(self) -> int:
        return self.width * self.height

    def formatted(self) -> str:
        return f"{self.width}x{self.height}"
