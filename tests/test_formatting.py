import datetime as dt
import unittest
from decimal import Decimal

from gst_invoice.formatting import fmt_amount, fmt_invoice_date, fmt_qty, parse_invoice_date, wrap_text


class FixedWidthFonts:
    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        return float(len(text))


class FormattingTests(unittest.TestCase):
    def test_fmt_amount_uses_two_decimals(self) -> None:
        self.assertEqual(fmt_amount(Decimal(200)), "200.00")
        self.assertEqual(fmt_amount(Decimal("0.125")), "0.13")

    def test_fmt_amount_handles_totals_beyond_default_precision(self) -> None:
        self.assertEqual(fmt_amount(Decimal("1e26")), "1" + "0" * 26 + ".00")
        self.assertEqual(fmt_amount(Decimal("1" + "0" * 28 + ".005")), "1" + "0" * 28 + ".01")

    def test_fmt_qty_handles_integer_and_fractional_values(self) -> None:
        self.assertEqual(fmt_qty(Decimal("3.00")), "3")
        self.assertEqual(fmt_qty(Decimal("2.50")), "2.5")

    def test_parse_invoice_date_reads_day_first(self) -> None:
        self.assertEqual(parse_invoice_date("02/01/2026"), dt.date(2026, 1, 2))
        self.assertEqual(parse_invoice_date("2026-01-15"), dt.date(2026, 1, 15))

    def test_parse_invoice_date_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            parse_invoice_date("not-a-date")

    def test_fmt_invoice_date(self) -> None:
        self.assertEqual(fmt_invoice_date(dt.date(2026, 1, 5)), "05/01/2026")

    def test_wrap_text_breaks_on_words(self) -> None:
        self.assertEqual(wrap_text(FixedWidthFonts(), "aaa bbb ccc", 7, 10), ["aaa bbb", "ccc"])

    def test_wrap_text_splits_long_words(self) -> None:
        self.assertEqual(wrap_text(FixedWidthFonts(), "abcdefgh", 3, 10), ["abc", "def", "gh"])

    def test_wrap_text_keeps_explicit_line_breaks(self) -> None:
        self.assertEqual(wrap_text(FixedWidthFonts(), "one\ntwo", 20, 10), ["one", "two"])


if __name__ == "__main__":
    unittest.main()
