import unittest
from datetime import date
from decimal import Decimal
from importlib import util as importlib_util
from unittest.mock import MagicMock, patch

from invoice_layout.models import InvoiceRecord, InvoiceStatus, LineItem, Party
from invoice_layout.pdf_constants import PAGE_H
from invoice_layout.primitives import FontFace, Line, Rectangle, TextRun

FPDF_AVAILABLE = importlib_util.find_spec("fpdf") is not None
if FPDF_AVAILABLE:
    from fpdf import FPDF

    from invoice_layout.emitter import PdfEmitter
    from invoice_layout.fonts import FontManager
    from invoice_layout.rendering import render_invoice, render_invoice_payload

GENERATED_ON = date(2024, 2, 1)

RECORD = InvoiceRecord(
    invoice_number="INV-001",
    invoice_date=date(2026, 1, 15),
    due_date=date(2026, 2, 14),
    company=Party("ACME Inc.", "1 Main St\nSpringfield", "billing@acme.test", "555-0100"),
    client=Party("Client LLC", "123 Main St\nCity, ST 12345", "ap@client.test"),
    line_items=(
        LineItem("Consulting", 2, Decimal("150.00")),
        LineItem("Hosting", 1, Decimal("20.00")),
    ),
    notes="Net 30",
    status=InvoiceStatus.PAID,
)


@unittest.skipUnless(FPDF_AVAILABLE, "fpdf is not installed")
class RenderingTests(unittest.TestCase):
    def test_render_invoice_returns_pdf_bytes_and_totals(self) -> None:
        result = render_invoice(RECORD, generated_on=GENERATED_ON)

        self.assertIsInstance(result.pdf, bytes)
        self.assertTrue(result.pdf.startswith(b"%PDF"))
        self.assertGreater(len(result.pdf), 100)
        self.assertEqual(result.totals.subtotal, Decimal("320.00"))
        self.assertEqual(result.totals.tax_amount, Decimal("16.00"))
        self.assertEqual(result.totals.grand_total, Decimal("336.00"))

    def test_identical_input_serializes_identically(self) -> None:
        first = render_invoice(RECORD, variant="detailed", generated_on=GENERATED_ON)
        second = render_invoice(RECORD, variant="detailed", generated_on=GENERATED_ON)

        self.assertEqual(first.pdf, second.pdf)

    def test_classic_variant_renders(self) -> None:
        result = render_invoice(RECORD, variant="classic", generated_on=GENERATED_ON)

        self.assertTrue(result.pdf.startswith(b"%PDF"))

    def test_render_invoice_payload_maps_and_renders(self) -> None:
        payload = {
            "invoiceNumber": "INV-2",
            "invoiceDate": "2024-01-05",
            "dueDate": "2024-02-04",
            "companyName": "ACME Inc.",
            "companyAddress": "1 Main St",
            "companyEmail": "billing@acme.test",
            "companyPhone": "555-0100",
            "clientName": "Client LLC",
            "clientAddress": "9 Elm Rd",
            "clientEmail": "ap@client.test",
            "lineItems": [{"description": "Consulting", "quantity": 2, "unitPrice": 100}],
        }

        result = render_invoice_payload(payload, generated_on=GENERATED_ON)

        self.assertTrue(result.pdf.startswith(b"%PDF"))
        self.assertEqual(result.totals.grand_total, Decimal("210"))


@unittest.skipUnless(FPDF_AVAILABLE, "fpdf is not installed")
class EmitterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.emitter = PdfEmitter(GENERATED_ON)
        self.emitter.pdf = MagicMock()
        self.emitter.fonts = MagicMock()

    def test_rectangle_is_flipped_to_top_left_origin(self) -> None:
        self.emitter.draw_rectangle(Rectangle(50.0, 100.0, 200.0, 25.0, (1, 2, 3)))

        self.emitter.pdf.set_fill_color.assert_called_once_with(1, 2, 3)
        self.emitter.pdf.rect.assert_called_once_with(50.0, PAGE_H - 125.0, 200.0, 25.0, style="F")

    def test_bordered_rectangle_strokes_and_fills(self) -> None:
        self.emitter.draw_rectangle(Rectangle(0.0, 0.0, 10.0, 10.0, (9, 9, 9), (4, 5, 6), 1.5))

        self.emitter.pdf.set_draw_color.assert_called_once_with(4, 5, 6)
        self.emitter.pdf.set_line_width.assert_called_once_with(1.5)
        self.assertEqual(self.emitter.pdf.rect.call_args.kwargs["style"], "DF")

    def test_line_and_text_are_flipped(self) -> None:
        self.emitter.draw(
            [
                Line(50.0, 700.0, 570.0, 700.0, 2.0, (204, 204, 204)),
                TextRun(60.0, 400.0, "Consulting", FontFace.BOLD, 10, (0, 0, 0)),
            ]
        )

        self.emitter.pdf.line.assert_called_once_with(50.0, PAGE_H - 700.0, 570.0, PAGE_H - 700.0)
        self.emitter.fonts.draw_text.assert_called_once_with(
            60.0, PAGE_H - 400.0, "Consulting", 10, (0, 0, 0), bold=True
        )

    def test_unknown_primitive_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self.emitter.draw([object()])

    def test_serialization_failures_propagate(self) -> None:
        self.emitter.pdf.output.side_effect = RuntimeError("disk full")

        with self.assertRaises(RuntimeError):
            self.emitter.serialize()


@unittest.skipUnless(FPDF_AVAILABLE, "fpdf is not installed")
class FontFallbackTests(unittest.TestCase):
    def test_missing_ttf_warns_and_uses_core_faces(self) -> None:
        with patch("invoice_layout.fonts.find_font_path", return_value=None):
            with self.assertLogs("invoice_layout.fonts", level="WARNING") as logs:
                fonts = FontManager(FPDF(unit="pt"))

        self.assertEqual(fonts.family, FontManager.CORE_FAMILY)
        self.assertTrue(fonts.has_bold)
        self.assertIn("Latin-1", logs.output[0])


if __name__ == "__main__":
    unittest.main()
