"""fpdf-backed document emitter for layout primitives."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from fpdf import FPDF

from .fonts import FontManager
from .pdf_constants import PAGE_H, PAGE_W
from .primitives import Line, Primitive, Rectangle, TextRun


class PdfEmitter:
    """Draws primitives given in bottom-left coordinates onto an fpdf page.

    fpdf measures y from the top edge, so every y is flipped against the page
    height here and nowhere else.
    """

    def __init__(self, generated_on: date, width: float = PAGE_W, height: float = PAGE_H) -> None:
        self.width = width
        self.height = height
        self.pdf = FPDF(unit="pt", format=(width, height))
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(0, 0, 0)
        # Pinned so identical input serializes to identical bytes.
        self.pdf.creation_date = datetime.combine(generated_on, time(0), tzinfo=timezone.utc)
        self.fonts: Optional[FontManager] = None

    def add_page(self) -> None:
        self.pdf.add_page()

    def embed_fonts(self) -> FontManager:
        if self.fonts is None:
            self.fonts = FontManager(self.pdf)
        return self.fonts

    def draw_text(self, run: TextRun) -> None:
        self.embed_fonts().draw_text(run.x, self.height - run.y, run.text, run.size, run.color, bold=run.bold)

    def draw_rectangle(self, rect: Rectangle) -> None:
        self.pdf.set_fill_color(*rect.fill_color)
        style = "F"
        if rect.border_color is not None:
            self.pdf.set_draw_color(*rect.border_color)
            self.pdf.set_line_width(rect.border_width if rect.border_width is not None else 1.0)
            style = "DF"
        top = self.height - (rect.y + rect.height)
        self.pdf.rect(rect.x, top, rect.width, rect.height, style=style)

    def draw_line(self, line: Line) -> None:
        self.pdf.set_draw_color(*line.color)
        self.pdf.set_line_width(line.thickness)
        self.pdf.line(line.x1, self.height - line.y1, line.x2, self.height - line.y2)

    def draw(self, primitives: Iterable[Primitive]) -> int:
        count = 0
        for primitive in primitives:
            if isinstance(primitive, TextRun):
                self.draw_text(primitive)
            elif isinstance(primitive, Rectangle):
                self.draw_rectangle(primitive)
            elif isinstance(primitive, Line):
                self.draw_line(primitive)
            else:
                raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")
            count += 1
        return count

    def serialize(self) -> bytes:
        pdf_blob = self.pdf.output()
        if isinstance(pdf_blob, (bytes, bytearray)):
            return bytes(pdf_blob)
        raise RuntimeError(f"Unexpected PDF output type: {type(pdf_blob).__name__}")
