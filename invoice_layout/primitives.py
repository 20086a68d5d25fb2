"""Drawing primitives produced by the layout engine.

Coordinates are PDF user space: origin at the bottom-left corner, y grows
upwards. Text ``y`` is the baseline; rectangle ``y`` is its bottom edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

Color = Tuple[int, int, int]


class FontFace(str, Enum):
    REGULAR = "regular"
    BOLD = "bold"


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    face: FontFace
    size: int
    color: Color

    @property
    def bold(self) -> bool:
        return self.face is FontFace.BOLD


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float
    fill_color: Color
    border_color: Optional[Color] = None
    border_width: Optional[float] = None


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float
    color: Color


Primitive = Union[TextRun, Rectangle, Line]
