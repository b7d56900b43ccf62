"""Public package API for GST invoice generation."""

from __future__ import annotations

from typing import Optional

from .models import InvoiceRequest, ValidationError, parse_invoice_request
from .words import amount_in_words


def render_invoice(invoice: InvoiceRequest, signature_path: Optional[str] = None) -> bytes:
    from .rendering import render_invoice as _render_invoice

    return _render_invoice(invoice, signature_path=signature_path)


def run(host: str = "0.0.0.0", port: int = 5000) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "InvoiceRequest",
    "ValidationError",
    "amount_in_words",
    "parse_invoice_request",
    "render_invoice",
    "run",
]
