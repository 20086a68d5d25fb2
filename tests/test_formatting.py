import unittest
from datetime import date, datetime
from decimal import Decimal

from invoice_layout.formatting import fmt_date, fmt_money, fmt_percent, fmt_qty, money_str, tax_label


class MoneyFormattingTests(unittest.TestCase):
    def test_fmt_money_uses_two_decimals_without_grouping(self) -> None:
        self.assertEqual(fmt_money(Decimal("1234.5")), "$1234.50")
        self.assertEqual(fmt_money(Decimal("1234567.891")), "$1234567.89")

    def test_fmt_money_accepts_int_and_float(self) -> None:
        self.assertEqual(fmt_money(200), "$200.00")
        self.assertEqual(fmt_money(0.1 + 0.2), "$0.30")

    def test_fmt_money_rounds_half_up(self) -> None:
        self.assertEqual(fmt_money(Decimal("2.675")), "$2.68")
        self.assertEqual(fmt_money(Decimal("2.674")), "$2.67")

    def test_money_str_has_no_symbol(self) -> None:
        self.assertEqual(money_str(Decimal("10")), "10.00")

    def test_fmt_qty_handles_integer_and_float_values(self) -> None:
        self.assertEqual(fmt_qty(3), "3")
        self.assertEqual(fmt_qty(2.0), "2")
        self.assertEqual(fmt_qty(2.5), "2.5")

    def test_tax_label_reflects_rate(self) -> None:
        self.assertEqual(tax_label(), "Tax (5%):")
        self.assertEqual(tax_label(Decimal("0.125")), "Tax (12.5%):")
        self.assertEqual(fmt_percent(Decimal("1")), "100")


class DateFormattingTests(unittest.TestCase):
    def test_fmt_date_formats_date_objects(self) -> None:
        self.assertEqual(fmt_date(date(2024, 1, 5)), "January 5, 2024")
        self.assertEqual(fmt_date(datetime(2023, 12, 31, 23, 59)), "December 31, 2023")

    def test_fmt_date_formats_date_only_strings(self) -> None:
        self.assertEqual(fmt_date("2026-01-15"), "January 15, 2026")

    def test_fmt_date_ignores_time_and_timezone(self) -> None:
        self.assertEqual(fmt_date("2024-03-09T23:30:00-08:00"), "March 9, 2024")
        self.assertEqual(fmt_date("2024-03-09T00:15:00Z"), "March 9, 2024")

    def test_fmt_date_raises_for_unparseable_input(self) -> None:
        with self.assertRaises(ValueError):
            fmt_date("not-a-date")


if __name__ == "__main__":
    unittest.main()
