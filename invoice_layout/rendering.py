"""Invoice PDF rendering: totals, layout and serialization in one call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from .config import LAYOUT_VARIANT
from .emitter import PdfEmitter
from .layout import layout_invoice
from .mapping import record_from_payload
from .models import InvoiceRecord, RenderedTotals
from .totals import compute_totals

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    pdf: bytes
    totals: RenderedTotals


def render_invoice(
    record: InvoiceRecord,
    variant: Optional[str] = None,
    generated_on: Optional[date] = None,
) -> RenderResult:
    """Render ``record`` to a single-page PDF.

    Emitter and font failures propagate unchanged; nothing is kept between calls.
    """
    variant = variant or LAYOUT_VARIANT
    generated_on = generated_on or date.today()

    totals = compute_totals(record.line_items)

    emitter = PdfEmitter(generated_on)
    emitter.add_page()
    fonts = emitter.embed_fonts()
    primitives = layout_invoice(record, totals, fonts, variant=variant, generated_on=generated_on)
    emitter.draw(primitives)
    pdf = emitter.serialize()

    LOGGER.debug(
        "Rendered invoice %s (%s layout): %d items, %d primitives, %d bytes",
        record.invoice_number,
        variant,
        len(record.line_items),
        len(primitives),
        len(pdf),
    )
    return RenderResult(pdf=pdf, totals=totals)


def render_invoice_payload(
    data: Mapping[str, Any],
    variant: Optional[str] = None,
    generated_on: Optional[date] = None,
) -> RenderResult:
    return render_invoice(record_from_payload(data), variant=variant, generated_on=generated_on)
