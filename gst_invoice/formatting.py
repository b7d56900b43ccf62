"""Formatting and text wrapping helpers."""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Context, Decimal, Inexact, InvalidOperation, Overflow, localcontext
from typing import List, Protocol

from dateutil import parser as dateutil_parser

PAISE = Decimal("0.01")

# Wide enough for any product and sum of the bounded line-item values, so
# money arithmetic never rounds. Inexact is trapped to keep it that way.
AMOUNT_CONTEXT = Context(prec=64, traps=[InvalidOperation, Overflow, Inexact])


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        ...


def fmt_amount(amount: Decimal) -> str:
    with localcontext(AMOUNT_CONTEXT) as ctx:
        ctx.traps[Inexact] = False
        return f"{amount.quantize(PAISE, rounding=ROUND_HALF_UP):.2f}"


def fmt_qty(qty: Decimal) -> str:
    if qty == qty.to_integral_value():
        return str(int(qty))
    return str(qty.normalize())


def parse_invoice_date(raw: str) -> dt.date:
    """Parse a user supplied date; ambiguous numeric dates are read day first."""
    try:
        return dateutil_parser.parse(raw.strip(), dayfirst=True).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"unrecognised date: {raw!r}") from exc


def fmt_invoice_date(value: dt.date) -> str:
    return value.strftime("%d/%m/%Y")


def wrap_text(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: int,
    bold: bool = False,
) -> List[str]:
    def line_width(value: str) -> float:
        return fonts_obj.text_width(value, font_size, bold=bold)

    def wrap_paragraph(paragraph: str) -> List[str]:
        words = paragraph.split()
        if not words:
            return [paragraph]

        lines: List[str] = []
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if line_width(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            # Break words that are wider than the column on their own.
            chunk = ""
            for char in word:
                candidate_chunk = chunk + char
                if chunk and line_width(candidate_chunk) > max_width:
                    lines.append(chunk)
                    chunk = char
                else:
                    chunk = candidate_chunk
            current = chunk

        if current:
            lines.append(current)
        return lines

    result: List[str] = []
    for paragraph in text.split("\n"):
        result.extend(wrap_paragraph(paragraph))
    return result if result else [text]
