"""Invoice PDF rendering logic."""

from __future__ import annotations

import os
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF

from . import config
from .config import Letterhead
from .fonts import FontManager
from .formatting import fmt_amount, fmt_invoice_date, fmt_qty, wrap_text
from .models import Contact, InvoiceRequest
from .pdf_constants import (
    CELL_BASELINE,
    CELL_LINE_H,
    CELL_PAD,
    CONTENT_W,
    CONTINUATION_TOP,
    DETAILS_RIGHT,
    FONT_SIZE_LABEL,
    FONT_SIZE_NAME,
    FONT_SIZE_NORMAL,
    FONT_SIZE_TITLE,
    FOOTER_GAP,
    FOOTER_Y,
    HEADER_RULE_Y,
    INVOICE_DATE_Y,
    INVOICE_NO_Y,
    ITEM_COL_WIDTHS,
    ITEM_HEADERS,
    LETTERHEAD_FIRST_Y,
    LETTERHEAD_LINE_H,
    LINE_WIDTH,
    MARGIN,
    NAME_Y,
    PAGE_BOTTOM,
    PAGE_FORMAT,
    PAGE_W,
    PARTY_BOX_BOTTOM_PAD,
    PARTY_BOX_MIN_H,
    PARTY_BOX_TOP,
    PARTY_FIRST_LINE_OFFSET,
    PARTY_LABEL_INSET,
    PARTY_LABEL_OFFSET,
    PARTY_LINE_H,
    PARTY_TEXT_INSET,
    SIGNATURE_H,
    SIGNATURE_OFFSET,
    SIGNATURE_W,
    SIGNATURE_X,
    SUMMARY_COL_WIDTHS,
    SUMMARY_GAP,
    SUMMARY_ROW_H,
    TABLE_GAP,
    TERMS_LINE_H,
    TITLE_Y,
)
from .words import rupees_in_words


class InvoiceRenderer:
    def __init__(
        self,
        invoice: InvoiceRequest,
        letterhead: Letterhead = config.LETTERHEAD,
        signature_path: Optional[str] = None,
    ) -> None:
        self.invoice = invoice
        self.letterhead = letterhead
        self.signature_path = signature_path if signature_path is not None else config.SIGNATURE_PATH

        self.pdf = FPDF(unit="pt", format=PAGE_FORMAT)
        self.pdf.set_auto_page_break(False)
        self.pdf.add_page()
        self.pdf.set_line_width(LINE_WIDTH)
        self.pdf.set_draw_color(0, 0, 0)
        self.pdf.set_text_color(0, 0, 0)

        self.fonts = FontManager(self.pdf)
        self.total = invoice.total_amount

    def _draw_header(self) -> None:
        self.fonts.draw_text_centered(PAGE_W / 2.0, TITLE_Y, "INVOICE", FONT_SIZE_TITLE, bold=True)
        self.fonts.draw_text(MARGIN, NAME_Y, self.letterhead.name, FONT_SIZE_NAME, bold=True)

        for index, line in enumerate(self.letterhead.detail_lines()):
            y = LETTERHEAD_FIRST_Y + index * LETTERHEAD_LINE_H
            self.fonts.draw_text(MARGIN, y, line, FONT_SIZE_NORMAL)

        self.fonts.draw_text_right(
            DETAILS_RIGHT,
            INVOICE_NO_Y,
            f"Invoice No: {self.invoice.invoice_num}",
            FONT_SIZE_NORMAL,
            bold=True,
        )
        self.fonts.draw_text_right(
            DETAILS_RIGHT,
            INVOICE_DATE_Y,
            f"Invoice Date: {fmt_invoice_date(self.invoice.invoice_date)}",
            FONT_SIZE_NORMAL,
            bold=True,
        )

        self.pdf.line(MARGIN, HEADER_RULE_Y, PAGE_W - MARGIN, HEADER_RULE_Y)

    def _party_lines(self, contact: Contact, width: float) -> List[str]:
        raw_lines = [contact.name]
        raw_lines.extend(contact.address_lines or (self.letterhead.default_region,))
        if contact.phone:
            raw_lines.append(contact.phone)
        raw_lines.append(self.invoice.gst_num)

        lines: List[str] = []
        for raw in raw_lines:
            lines.extend(wrap_text(self.fonts, raw, width, FONT_SIZE_NORMAL))
        return lines

    def _draw_parties(self) -> float:
        column_w = CONTENT_W / 2.0
        text_w = column_w - PARTY_TEXT_INSET - CELL_PAD
        columns: Sequence[Tuple[str, Contact]] = (
            ("Bill To:", self.invoice.bill_to),
            ("Ship To:", self.invoice.ship_to),
        )
        blocks = [(label, self._party_lines(contact, text_w)) for label, contact in columns]

        tallest = max(len(lines) for _, lines in blocks)
        box_h = max(
            PARTY_BOX_MIN_H,
            PARTY_FIRST_LINE_OFFSET + (tallest - 1) * PARTY_LINE_H + PARTY_BOX_BOTTOM_PAD,
        )

        self.pdf.rect(MARGIN, PARTY_BOX_TOP, CONTENT_W, box_h)
        self.pdf.line(MARGIN + column_w, PARTY_BOX_TOP, MARGIN + column_w, PARTY_BOX_TOP + box_h)

        for index, (label, lines) in enumerate(blocks):
            x = MARGIN + index * column_w
            self.fonts.draw_text(x + PARTY_LABEL_INSET, PARTY_BOX_TOP + PARTY_LABEL_OFFSET, label, FONT_SIZE_LABEL, bold=True)
            for line_index, line in enumerate(lines):
                y = PARTY_BOX_TOP + PARTY_FIRST_LINE_OFFSET + line_index * PARTY_LINE_H
                self.fonts.draw_text(x + PARTY_TEXT_INSET, y, line, FONT_SIZE_NORMAL)

        return PARTY_BOX_TOP + box_h

    def _wrap_cells(self, cells: Sequence[str], widths: Sequence[float], bold: bool) -> List[List[str]]:
        return [
            wrap_text(self.fonts, text, width - 2 * CELL_PAD, FONT_SIZE_NORMAL, bold=bold)
            for text, width in zip(cells, widths)
        ]

    def _row_height(self, wrapped: Sequence[Sequence[str]]) -> float:
        tallest = max(len(lines) for lines in wrapped)
        return tallest * CELL_LINE_H + 2 * CELL_PAD

    def _draw_row(
        self,
        y: float,
        cells: Sequence[str],
        widths: Sequence[float],
        bold: bool = False,
        min_height: float = 0.0,
    ) -> float:
        """Draw one bordered table row at ``y`` and return the next row's top."""
        wrapped = self._wrap_cells(cells, widths, bold)
        height = max(self._row_height(wrapped), min_height)

        x = MARGIN
        for lines, width in zip(wrapped, widths):
            self.pdf.rect(x, y, width, height)
            for line_index, line in enumerate(lines):
                self.fonts.draw_text(
                    x + CELL_PAD,
                    y + CELL_BASELINE + line_index * CELL_LINE_H,
                    line,
                    FONT_SIZE_NORMAL,
                    bold=bold,
                )
            x += width
        return y + height

    def _fits(self, y: float, height: float) -> bool:
        return y + height <= PAGE_BOTTOM

    def _measure_row(self, cells: Sequence[str], widths: Sequence[float], bold: bool = False) -> float:
        wrapped = self._wrap_cells(cells, widths, bold)
        return self._row_height(wrapped)

    def _new_page(self) -> float:
        self.pdf.add_page()
        return CONTINUATION_TOP

    def _draw_items(self, top: float) -> float:
        y = self._draw_row(top, ITEM_HEADERS, ITEM_COL_WIDTHS, bold=True)

        for index, item in enumerate(self.invoice.items, start=1):
            cells = (
                str(index),
                item.description,
                fmt_amount(item.rate),
                fmt_qty(item.quantity),
                fmt_amount(item.amount),
            )
            height = self._measure_row(cells, ITEM_COL_WIDTHS)
            if not self._fits(y, height):
                y = self._new_page()
                y = self._draw_row(y, ITEM_HEADERS, ITEM_COL_WIDTHS, bold=True)
            y = self._draw_row(y, cells, ITEM_COL_WIDTHS)

        return y

    def _draw_summary(self, top: float) -> float:
        rows = (
            (("Amount Payable", fmt_amount(self.total)), True),
            (("In Words", rupees_in_words(int(self.total))), False),
        )
        needed = sum(
            max(self._measure_row(cells, SUMMARY_COL_WIDTHS, bold=bold), SUMMARY_ROW_H)
            for cells, bold in rows
        )
        y = top if self._fits(top, needed) else self._new_page()

        for cells, bold in rows:
            y = self._draw_row(y, cells, SUMMARY_COL_WIDTHS, bold=bold, min_height=SUMMARY_ROW_H)
        return y

    def _footer_height(self) -> float:
        return SIGNATURE_OFFSET + SIGNATURE_H

    def _draw_footer(self, after_y: float) -> None:
        footer_y = max(FOOTER_Y, after_y + FOOTER_GAP)
        if not self._fits(footer_y, self._footer_height()):
            footer_y = self._new_page() + FONT_SIZE_NORMAL

        self.fonts.draw_text(MARGIN, footer_y, "Terms and Conditions:", FONT_SIZE_NORMAL, bold=True)
        y = footer_y
        for number, term in enumerate(self.letterhead.terms, start=1):
            for line in wrap_text(self.fonts, f"{number}. {term}", CONTENT_W, FONT_SIZE_NORMAL):
                y += TERMS_LINE_H
                self.fonts.draw_text(MARGIN, y, line, FONT_SIZE_NORMAL)

        self._draw_signature(max(footer_y + SIGNATURE_OFFSET, y + TERMS_LINE_H))

    def _draw_signature(self, y: float) -> None:
        if not self.signature_path or not os.path.isfile(self.signature_path):
            return
        self.pdf.image(self.signature_path, x=SIGNATURE_X, y=y, w=SIGNATURE_W, h=SIGNATURE_H)

    def render(self) -> bytes:
        self._draw_header()
        parties_bottom = self._draw_parties()
        items_bottom = self._draw_items(parties_bottom + TABLE_GAP)
        summary_bottom = self._draw_summary(items_bottom + SUMMARY_GAP)
        self._draw_footer(summary_bottom)

        pdf_blob = self.pdf.output()
        if isinstance(pdf_blob, (bytes, bytearray)):
            return bytes(pdf_blob)
        raise RuntimeError(f"Unexpected PDF output type: {type(pdf_blob).__name__}")


def render_invoice(invoice: InvoiceRequest, signature_path: Optional[str] = None) -> bytes:
    return InvoiceRenderer(invoice, signature_path=signature_path).render()
