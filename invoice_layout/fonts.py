"""Font discovery and embedding for the two invoice faces."""

from __future__ import annotations

import logging
import os
import threading
from typing import List, Optional, Tuple

from fpdf import FPDF

LOGGER = logging.getLogger(__name__)

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def find_font_path(env_var: str, candidates: List[str]) -> Optional[str]:
    override = os.getenv(env_var)
    if override and os.path.exists(override):
        return override

    for path in candidates:
        if os.path.exists(path):
            return path
    return None


FONT_INIT_LOCK = threading.Lock()


class FontManager:
    """Regular and bold faces embedded into one document.

    A Unicode TTF pair is embedded when one can be found; otherwise the core
    Helvetica pair is used, which covers Latin-1 text.
    """

    FAMILY = "InvoiceFont"
    CORE_FAMILY = "helvetica"
    BUNDLED_REGULAR = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans.ttf")
    BUNDLED_BOLD = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans-Bold.ttf")
    SYSTEM_REGULAR_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/DejaVuSans.ttf",
    ]
    SYSTEM_BOLD_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
    ]

    def __init__(self, pdf: FPDF) -> None:
        self.pdf = pdf
        self.family = self.CORE_FAMILY
        self.has_bold = True

        regular_path = find_font_path(
            "INVOICE_FONT_PATH",
            [self.BUNDLED_REGULAR, *self.SYSTEM_REGULAR_CANDIDATES],
        )
        if not regular_path:
            LOGGER.warning(
                "No TTF font found; using core %s faces, which only cover Latin-1. "
                "Set INVOICE_FONT_PATH to embed a Unicode font.",
                self.CORE_FAMILY,
            )
            return

        bold_path = find_font_path(
            "INVOICE_FONT_BOLD_PATH",
            [self.BUNDLED_BOLD, *self.SYSTEM_BOLD_CANDIDATES],
        )

        with FONT_INIT_LOCK:
            self.pdf.add_font(self.FAMILY, "", regular_path)
            self.family = self.FAMILY
            self.has_bold = False
            if bold_path:
                self.pdf.add_font(self.FAMILY, "B", bold_path)
                self.has_bold = True
        LOGGER.debug("Embedded %s (bold: %s)", regular_path, bold_path or "synthesized")

    def _style(self, bold: bool) -> str:
        return "B" if bold and self.has_bold else ""

    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        self.pdf.set_font(self.family, self._style(bold), size)
        return self.pdf.get_string_width(text)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        size: int,
        color: Tuple[int, int, int],
        bold: bool = False,
    ) -> None:
        """Draw ``text`` with its baseline at ``(x, y)`` in top-left page coordinates."""
        self.pdf.set_text_color(*color)
        self.pdf.set_font(self.family, self._style(bold), size)
        if bold and not self.has_bold:
            self.pdf.text(x, y, text)
            self.pdf.text(x + 0.4, y, text)
        else:
            self.pdf.text(x, y, text)
