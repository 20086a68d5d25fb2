import copy
import unittest
from datetime import date
from decimal import Decimal

from invoice_layout.mapping import PayloadError, record_from_payload
from invoice_layout.models import InvoiceStatus

VALID_PAYLOAD = {
    "invoiceNumber": "INV-1",
    "invoiceDate": "2024-01-05",
    "dueDate": "2024-02-04T00:00:00.000Z",
    "companyName": "Acme Corp",
    "companyAddress": "1 Main St\nSpringfield",
    "companyEmail": "billing@acme.test",
    "companyPhone": "555-0100",
    "clientName": "Client LLC",
    "clientAddress": "9 Elm Rd",
    "clientEmail": "ap@client.test",
    "notes": "Net 30",
    "status": "sent",
    "lineItems": [{"description": "Consulting", "quantity": 2, "unitPrice": 100, "amount": 999}],
}


def payload(**overrides):
    data = copy.deepcopy(VALID_PAYLOAD)
    data.update(overrides)
    return data


class RecordMappingTests(unittest.TestCase):
    def assertFieldError(self, data, field: str) -> None:
        with self.assertRaises(PayloadError) as ctx:
            record_from_payload(data)
        self.assertIn(field, ctx.exception.fields)

    def test_maps_valid_payload(self) -> None:
        record = record_from_payload(payload())

        self.assertEqual(record.invoice_number, "INV-1")
        self.assertEqual(record.invoice_date, date(2024, 1, 5))
        self.assertEqual(record.due_date, date(2024, 2, 4))
        self.assertEqual(record.company.address, "1 Main St\nSpringfield")
        self.assertEqual(record.client.phone, "")
        self.assertEqual(record.status, InvoiceStatus.SENT)
        self.assertEqual(record.notes, "Net 30")
        self.assertEqual(len(record.line_items), 1)
        self.assertEqual(record.line_items[0].unit_price, Decimal("100"))

    def test_persisted_amount_is_not_carried_over(self) -> None:
        item = record_from_payload(payload()).line_items[0]

        self.assertFalse(hasattr(item, "amount"))

    def test_status_defaults_to_draft_and_ignores_case(self) -> None:
        data = payload()
        del data["status"]
        self.assertEqual(record_from_payload(data).status, InvoiceStatus.DRAFT)
        self.assertEqual(record_from_payload(payload(status="PAID")).status, InvoiceStatus.PAID)

    def test_blank_notes_become_none(self) -> None:
        self.assertIsNone(record_from_payload(payload(notes="   ")).notes)

    def test_strings_are_trimmed(self) -> None:
        record = record_from_payload(payload(companyName="  Acme Corp  "))

        self.assertEqual(record.company.name, "Acme Corp")

    def test_rejects_missing_required_fields(self) -> None:
        data = payload()
        del data["companyName"]
        self.assertFieldError(data, "companyName")
        self.assertFieldError(payload(clientAddress=""), "clientAddress")

    def test_rejects_invalid_email(self) -> None:
        self.assertFieldError(payload(clientEmail="not-an-email"), "clientEmail")

    def test_rejects_unparseable_dates(self) -> None:
        self.assertFieldError(payload(invoiceDate="someday"), "invoiceDate")

    def test_rejects_empty_line_items(self) -> None:
        self.assertFieldError(payload(lineItems=[]), "lineItems")

    def test_rejects_bad_quantities(self) -> None:
        for quantity in (0, -1, 1.5, "2", True):
            item = {"description": "Work", "quantity": quantity, "unitPrice": 10}
            self.assertFieldError(payload(lineItems=[item]), "lineItems.0.quantity")

    def test_accepts_integral_float_quantity(self) -> None:
        item = {"description": "Work", "quantity": 3.0, "unitPrice": "12.50"}
        record = record_from_payload(payload(lineItems=[item]))

        self.assertEqual(record.line_items[0].quantity, 3)
        self.assertEqual(record.line_items[0].unit_price, Decimal("12.50"))

    def test_rejects_negative_or_non_numeric_prices(self) -> None:
        for price in (-1, "abc", "NaN", None):
            item = {"description": "Work", "quantity": 1, "unitPrice": price}
            self.assertFieldError(payload(lineItems=[item]), "lineItems.0.unitPrice")

    def test_accepts_zero_price(self) -> None:
        item = {"description": "Courtesy", "quantity": 1, "unitPrice": 0}

        self.assertEqual(record_from_payload(payload(lineItems=[item])).line_items[0].unit_price, Decimal("0"))

    def test_rejects_unknown_status(self) -> None:
        self.assertFieldError(payload(status="archived"), "status")

    def test_collects_all_errors(self) -> None:
        with self.assertRaises(PayloadError) as ctx:
            record_from_payload({})

        self.assertIn("invoiceNumber", ctx.exception.fields)
        self.assertIn("dueDate", ctx.exception.fields)
        self.assertIn("lineItems", ctx.exception.fields)


if __name__ == "__main__":
    unittest.main()
