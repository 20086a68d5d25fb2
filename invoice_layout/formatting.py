"""Money, quantity and date formatting helpers."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol, Union

from dateutil import parser as dateutil_parser

from .pdf_constants import CURRENCY_SYMBOL, TAX_RATE

DateLike = Union[date, datetime, str]

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_CENT = Decimal("0.01")


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        ...


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps float inputs at their shortest repr instead of the binary expansion.
    return Decimal(str(value))


def money_str(value: Any) -> str:
    return str(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def fmt_money(amount: Any, symbol: str = CURRENCY_SYMBOL) -> str:
    """Return ``amount`` as ``$1234.50``: two decimals, no grouping."""
    return f"{symbol}{money_str(amount)}"


def fmt_qty(qty: Any) -> str:
    if isinstance(qty, int):
        return str(qty)
    quantity = float(qty)
    if quantity.is_integer():
        return str(int(quantity))
    return str(quantity)


def fmt_percent(rate: Decimal) -> str:
    return f"{(to_decimal(rate) * 100).normalize():f}"


def tax_label(rate: Decimal = TAX_RATE) -> str:
    return f"Tax ({fmt_percent(rate)}%):"


def fmt_date(value: DateLike) -> str:
    """Format a date, datetime or date string as 'January 5, 2024'.

    Time of day and timezone are ignored: the calendar fields of the parsed
    value are used as they appear. Unparseable strings raise from the parser.
    """
    if isinstance(value, (date, datetime)):
        parsed = value
    else:
        parsed = dateutil_parser.parse(str(value).strip())
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"
