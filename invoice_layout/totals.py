"""Line amounts, subtotal, tax and grand total for a render."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Sequence

from .formatting import to_decimal
from .models import LineItem, PricedLineItem, RenderedTotals
from .pdf_constants import TAX_RATE


def compute_totals(line_items: Sequence[LineItem], tax_rate: Decimal = TAX_RATE) -> RenderedTotals:
    # Full precision throughout; rounding is a display concern.
    priced: List[PricedLineItem] = []
    subtotal = Decimal("0")
    for item in line_items:
        unit_price = to_decimal(item.unit_price)
        amount = item.quantity * unit_price
        priced.append(
            PricedLineItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=unit_price,
                amount=amount,
            )
        )
        subtotal += amount

    tax_amount = subtotal * tax_rate
    return RenderedTotals(
        items=tuple(priced),
        subtotal=subtotal,
        tax_amount=tax_amount,
        grand_total=subtotal + tax_amount,
        tax_rate=tax_rate,
    )
