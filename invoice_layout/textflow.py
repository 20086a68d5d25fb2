"""Line splitting and vertical stacking for free-text blocks."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .pdf_constants import LINE_HEIGHT

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: Optional[str]) -> List[str]:
    """Split on line breaks only. Empty input gives one empty line, never none."""
    if not text:
        return [""]
    return _LINE_BREAK.split(text)


def line_offsets(base_y: float, count: int, line_height: float = LINE_HEIGHT) -> List[float]:
    return [base_y - index * line_height for index in range(count)]


def flow_below(base_y: float, lines: Sequence[str], line_height: float = LINE_HEIGHT) -> float:
    """Baseline of the line that directly follows ``lines`` stacked from ``base_y``."""
    return base_y - len(lines) * line_height
