"""Page geometry for the invoice layout (points, top-left origin, y is a baseline)."""

from __future__ import annotations

PAGE_FORMAT = "A4"
PAGE_W = 595.28
PAGE_H = 841.89
MARGIN = 50.0
CONTENT_W = PAGE_W - 2 * MARGIN
PAGE_BOTTOM = PAGE_H - MARGIN
CONTINUATION_TOP = MARGIN

LINE_WIDTH = 1.0

FONT_SIZE_NAME = 18
FONT_SIZE_TITLE = 16
FONT_SIZE_LABEL = 12
FONT_SIZE_NORMAL = 10

# Header
TITLE_Y = 40.0
NAME_Y = 62.0
LETTERHEAD_FIRST_Y = 78.0
LETTERHEAD_LINE_H = 13.0
HEADER_RULE_Y = 166.0
DETAILS_RIGHT = PAGE_W - MARGIN
INVOICE_NO_Y = 92.0
INVOICE_DATE_Y = 107.0

# Bill To / Ship To box
PARTY_BOX_TOP = 176.0
PARTY_BOX_MIN_H = 90.0
PARTY_LABEL_OFFSET = 18.0
PARTY_FIRST_LINE_OFFSET = 34.0
PARTY_LINE_H = 14.0
PARTY_BOX_BOTTOM_PAD = 10.0
PARTY_LABEL_INSET = 10.0
PARTY_TEXT_INSET = 20.0

# Item table
TABLE_GAP = 30.0
ITEM_HEADERS = ("SL", "ITEM DESCRIPTION", "RATE/ITEM", "QUANTITY", "AMOUNT")
ITEM_COL_WIDTHS = (40.0, 175.0, 95.0, 90.0, 95.0)
CELL_PAD = 5.0
CELL_LINE_H = 12.0
# Distance from a cell's top edge to the first text baseline.
CELL_BASELINE = CELL_PAD + 8.5

# Amount Payable / In Words
SUMMARY_GAP = 20.0
SUMMARY_COL_WIDTHS = (200.0, CONTENT_W - 200.0)
SUMMARY_ROW_H = 25.0

# Footer
FOOTER_Y = 596.0
FOOTER_GAP = 30.0
TERMS_LINE_H = 15.0
SIGNATURE_W = 100.0
SIGNATURE_H = 50.0
SIGNATURE_X = PAGE_W - MARGIN - 150.0
SIGNATURE_OFFSET = 104.0
