"""Mapping of JSON invoice payloads onto typed records.

Payloads use the camelCase field names of the invoice API. Every problem is
collected into a field -> message mapping so callers can report them together.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from dateutil import parser as dateutil_parser

from .models import InvoiceRecord, InvoiceStatus, LineItem, Party

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
STATUS_VALUES = tuple(status.value for status in InvoiceStatus)


class PayloadError(ValueError):
    """Raised when a payload cannot be mapped onto an ``InvoiceRecord``."""

    def __init__(self, fields: Dict[str, str]) -> None:
        super().__init__("Invalid invoice data.")
        self.fields = fields


def _required_str(payload: Mapping[str, Any], key: str, label: str, errors: Dict[str, str]) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        errors[key] = f"{label} is required"
        return ""
    return value.strip()


def _email(payload: Mapping[str, Any], key: str, label: str, errors: Dict[str, str]) -> str:
    value = _required_str(payload, key, label, errors)
    if value and not EMAIL_PATTERN.match(value):
        errors[key] = f"Invalid {label.lower()}"
    return value


def _date(payload: Mapping[str, Any], key: str, label: str, errors: Dict[str, str]) -> Optional[date]:
    value = payload.get(key)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        errors[key] = f"{label} is required"
        return None
    try:
        return dateutil_parser.parse(value.strip()).date()
    except (ValueError, OverflowError):
        errors[key] = f"Invalid {label.lower()}"
        return None


def _quantity(value: Any, key: str, errors: Dict[str, str]) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors[key] = "Quantity is required"
        return 0
    if isinstance(value, float) and not value.is_integer():
        errors[key] = "Quantity must be a whole number"
        return 0
    quantity = int(value)
    if quantity < 1:
        errors[key] = "Quantity must be positive"
    return quantity


def _unit_price(value: Any, key: str, errors: Dict[str, str]) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        errors[key] = "Unit price is required"
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        errors[key] = "Unit price must be a number"
        return Decimal("0")
    if not price.is_finite():
        errors[key] = "Unit price must be a number"
    elif price < 0:
        errors[key] = "Unit price must not be negative"
    return price


def _line_items(payload: Mapping[str, Any], errors: Dict[str, str]) -> List[LineItem]:
    raw_items = payload.get("lineItems")
    if not isinstance(raw_items, list) or not raw_items:
        errors["lineItems"] = "At least one line item is required"
        return []

    items: List[LineItem] = []
    for index, raw in enumerate(raw_items):
        prefix = f"lineItems.{index}"
        if not isinstance(raw, Mapping):
            errors[prefix] = "Line item must be an object"
            continue
        item_errors: Dict[str, str] = {}
        description = _required_str(raw, "description", "Description", item_errors)
        quantity = _quantity(raw.get("quantity"), "quantity", item_errors)
        unit_price = _unit_price(raw.get("unitPrice"), "unitPrice", item_errors)
        for field, message in item_errors.items():
            errors[f"{prefix}.{field}"] = message
        # A stored "amount" is ignored; the renderer always recomputes it.
        items.append(LineItem(description=description, quantity=quantity, unit_price=unit_price))
    return items


def _status(payload: Mapping[str, Any], errors: Dict[str, str]) -> InvoiceStatus:
    value = payload.get("status")
    if value is None or value == "":
        return InvoiceStatus.DRAFT
    if isinstance(value, str) and value.strip().lower() in STATUS_VALUES:
        return InvoiceStatus(value.strip().lower())
    errors["status"] = f"Status must be one of: {', '.join(STATUS_VALUES)}"
    return InvoiceStatus.DRAFT


def _notes(payload: Mapping[str, Any], errors: Dict[str, str]) -> Optional[str]:
    value = payload.get("notes")
    if value is None:
        return None
    if not isinstance(value, str):
        errors["notes"] = "Notes must be text"
        return None
    return value.strip() or None


def record_from_payload(payload: Mapping[str, Any]) -> InvoiceRecord:
    if not isinstance(payload, Mapping):
        raise PayloadError({"": "Invoice must be a JSON object"})

    errors: Dict[str, str] = {}
    invoice_number = _required_str(payload, "invoiceNumber", "Invoice number", errors)
    invoice_date = _date(payload, "invoiceDate", "Invoice date", errors)
    due_date = _date(payload, "dueDate", "Due date", errors)
    company = Party(
        name=_required_str(payload, "companyName", "Company name", errors),
        address=_required_str(payload, "companyAddress", "Company address", errors),
        email=_email(payload, "companyEmail", "Company email", errors),
        phone=_required_str(payload, "companyPhone", "Company phone", errors),
    )
    client = Party(
        name=_required_str(payload, "clientName", "Client name", errors),
        address=_required_str(payload, "clientAddress", "Client address", errors),
        email=_email(payload, "clientEmail", "Client email", errors),
    )
    line_items = _line_items(payload, errors)
    status = _status(payload, errors)
    notes = _notes(payload, errors)

    if errors or invoice_date is None or due_date is None:
        raise PayloadError(errors)

    return InvoiceRecord(
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        due_date=due_date,
        company=company,
        client=client,
        line_items=tuple(line_items),
        notes=notes,
        status=status,
    )
