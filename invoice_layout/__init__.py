"""Public package API for invoice layout and rendering."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from .models import InvoiceRecord, InvoiceStatus, LineItem, Party, RenderedTotals
from .totals import compute_totals


def render_invoice(record: InvoiceRecord, variant: Optional[str] = None, generated_on: Optional[date] = None):
    from .rendering import render_invoice as _render_invoice

    return _render_invoice(record, variant=variant, generated_on=generated_on)


def render_invoice_payload(
    data: Mapping[str, Any],
    variant: Optional[str] = None,
    generated_on: Optional[date] = None,
):
    from .rendering import render_invoice_payload as _render_invoice_payload

    return _render_invoice_payload(data, variant=variant, generated_on=generated_on)


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "InvoiceRecord",
    "InvoiceStatus",
    "LineItem",
    "Party",
    "RenderedTotals",
    "compute_totals",
    "render_invoice",
    "render_invoice_payload",
    "run",
]
