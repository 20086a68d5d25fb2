"""Typed invoice records consumed by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from .formatting import money_str
from .pdf_constants import TAX_RATE


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Party:
    name: str
    address: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class PricedLineItem:
    description: str
    quantity: int
    unit_price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class InvoiceRecord:
    invoice_number: str
    invoice_date: date
    due_date: date
    company: Party
    client: Party
    line_items: Tuple[LineItem, ...]
    notes: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT


@dataclass(frozen=True)
class RenderedTotals:
    """Amounts derived for one render; never written back to the record."""

    items: Tuple[PricedLineItem, ...]
    subtotal: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    tax_rate: Decimal = TAX_RATE

    def as_dict(self) -> Dict[str, object]:
        return {
            "items": [
                {
                    "description": item.description,
                    "quantity": item.quantity,
                    "unitPrice": money_str(item.unit_price),
                    "amount": money_str(item.amount),
                }
                for item in self.items
            ],
            "subtotal": money_str(self.subtotal),
            "taxRate": str(self.tax_rate),
            "taxAmount": money_str(self.tax_amount),
            "grandTotal": money_str(self.grand_total),
        }
