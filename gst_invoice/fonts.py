"""Font discovery and text rendering helpers."""

from __future__ import annotations

import os
from typing import List, Optional

from fpdf import FPDF

from .config import env_str


def find_font_path(env_var: str, candidates: List[str]) -> Optional[str]:
    override = env_str(env_var)
    if override and os.path.exists(override):
        return override

    for path in candidates:
        if os.path.exists(path):
            return path
    return None


class FontManager:
    """Selects the invoice font and measures/draws text with it.

    A DejaVu Sans install (or the TTF named by ``INVOICE_FONT_PATH``) is
    preferred; without one the core Helvetica font is used. Core fonts only
    cover Latin-1, so other characters are drawn as ``?``.
    """

    CORE_FAMILY = "Helvetica"
    UNICODE_FAMILY = "InvoiceFont"
    SYSTEM_REGULAR_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/DejaVuSans.ttf",
    ]
    SYSTEM_BOLD_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
    ]

    def __init__(self, pdf: FPDF) -> None:
        self.pdf = pdf
        self.family = self.CORE_FAMILY
        self.use_unicode = False
        self.has_bold = True

        regular_path = find_font_path("INVOICE_FONT_PATH", self.SYSTEM_REGULAR_CANDIDATES)
        if regular_path:
            self.pdf.add_font(self.UNICODE_FAMILY, "", regular_path)
            self.family = self.UNICODE_FAMILY
            self.use_unicode = True
            bold_path = find_font_path("INVOICE_FONT_BOLD_PATH", self.SYSTEM_BOLD_CANDIDATES)
            if bold_path:
                self.pdf.add_font(self.UNICODE_FAMILY, "B", bold_path)
            else:
                self.has_bold = False

    def _encode(self, text: str) -> str:
        if self.use_unicode:
            return text
        return text.encode("latin-1", "replace").decode("latin-1")

    def _select(self, size: int, bold: bool) -> None:
        style = "B" if bold and self.has_bold else ""
        self.pdf.set_font(self.family, style, size)

    def text_width(self, text: str, size: int, bold: bool = False) -> float:
        self._select(size, bold)
        return self.pdf.get_string_width(self._encode(text))

    def draw_text(self, x: float, y: float, text: str, size: int, bold: bool = False) -> None:
        self._select(size, bold)
        text = self._encode(text)
        if bold and not self.has_bold:
            self.pdf.text(x, y, text)
            self.pdf.text(x + 0.4, y, text)
        else:
            self.pdf.text(x, y, text)

    def draw_text_right(self, right: float, y: float, text: str, size: int, bold: bool = False) -> None:
        self.draw_text(right - self.text_width(text, size, bold=bold), y, text, size, bold=bold)

    def draw_text_centered(self, center: float, y: float, text: str, size: int, bold: bool = False) -> None:
        self.draw_text(center - self.text_width(text, size, bold=bold) / 2.0, y, text, size, bold=bold)
