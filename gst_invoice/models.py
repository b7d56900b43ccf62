"""Invoice request data model and payload parsing."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional, Tuple

from .formatting import AMOUNT_CONTEXT, parse_invoice_date

MISSING_FIELDS_MESSAGE = "Missing or invalid required fields"
INVALID_ITEM_MESSAGE = "Invalid item data: ensure all fields are correct"

MAX_INTEGER_DIGITS = 15
MAX_DECIMAL_PLACES = 12
NUMBER_FIELDS = ("qty", "rate_item", "tax")


class ValidationError(ValueError):
    """Raised when an invoice payload cannot be accepted.

    ``str(exc)`` is the message returned to the caller.
    """

    status = 400


@dataclass(frozen=True)
class Contact:
    name: str
    phone: Optional[str] = None
    address_lines: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: Decimal
    rate: Decimal
    # Validated but not part of any total.
    tax: Decimal = Decimal(0)

    @property
    def amount(self) -> Decimal:
        with localcontext(AMOUNT_CONTEXT):
            return self.quantity * self.rate


@dataclass(frozen=True)
class InvoiceRequest:
    invoice_num: str
    bill_to: Contact
    ship_to: Contact
    gst_num: str
    items: Tuple[LineItem, ...] = ()
    invoice_date: dt.date = field(default_factory=dt.date.today)

    @property
    def total_amount(self) -> Decimal:
        with localcontext(AMOUNT_CONTEXT):
            return sum((item.amount for item in self.items), Decimal(0))

    @property
    def filename(self) -> str:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in self.invoice_num)
        return f"invoice_{safe}.pdf"


def parse_number(value: Any) -> Decimal:
    """Read a JSON scalar as a finite ``Decimal`` the way ``Number()`` would.

    ``null`` and a blank string count as zero and booleans as 0 or 1. Values
    must stay below 10**15 with at most 12 decimal places, which keeps every
    line amount and total exact in ``AMOUNT_CONTEXT``.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return Decimal(0)
        if "_" in text:
            raise ValueError(f"not a number: {value!r}")
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise ValueError(f"not a number: {value!r}")

    if not number.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    if not number:
        return Decimal(0)

    sign, digits, exponent = number.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    number = Decimal((sign, tuple(digits), exponent))

    if number.adjusted() >= MAX_INTEGER_DIGITS or exponent < -MAX_DECIMAL_PLACES:
        raise ValueError(f"number out of range: {value!r}")
    return number


def _text_field(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    if isinstance(value, str):
        return value.strip() or None
    return None


def parse_contact(value: Any) -> Contact:
    """Accept either a plain label or ``{"name", "phone"?, "address"?}``."""
    if isinstance(value, str):
        name = value.strip()
        if not name:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        return Contact(name=name)

    if not isinstance(value, dict):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    name = value.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    phone = value.get("phone")
    if phone is not None and (isinstance(phone, bool) or not isinstance(phone, (str, int))):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    phone_text = str(phone).strip() if phone is not None else ""

    address = value.get("address")
    if address is None:
        address_lines: Tuple[str, ...] = ()
    elif isinstance(address, str):
        address_lines = tuple(line.strip() for line in address.split("\n") if line.strip())
    elif isinstance(address, list) and all(isinstance(line, str) for line in address):
        address_lines = tuple(line.strip() for line in address if line.strip())
    else:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    return Contact(name=name.strip(), phone=phone_text or None, address_lines=address_lines)


def parse_line_item(value: Any) -> LineItem:
    if not isinstance(value, dict):
        raise ValidationError(INVALID_ITEM_MESSAGE)

    description = value.get("item_desc")
    if not description or isinstance(description, bool) or not isinstance(description, (str, int, float)):
        raise ValidationError(INVALID_ITEM_MESSAGE)
    description = str(description).strip()
    if not description:
        raise ValidationError(INVALID_ITEM_MESSAGE)

    # An absent field is NaN to Number(); an explicit null is zero.
    if any(name not in value for name in NUMBER_FIELDS):
        raise ValidationError(INVALID_ITEM_MESSAGE)
    try:
        quantity, rate, tax = (parse_number(value[name]) for name in NUMBER_FIELDS)
    except ValueError as exc:
        raise ValidationError(INVALID_ITEM_MESSAGE) from exc

    if quantity < 0 or rate < 0:
        raise ValidationError(INVALID_ITEM_MESSAGE)

    return LineItem(description=description, quantity=quantity, rate=rate, tax=tax)


def parse_invoice_request(payload: Dict[str, Any]) -> InvoiceRequest:
    """Validate a decoded JSON body and build an :class:`InvoiceRequest`.

    Header fields are checked before any line item, so a request that is wrong
    in both places reports the missing fields.
    """
    if not isinstance(payload, dict):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    invoice_num = _text_field(payload.get("invoice_num"))
    gst_num = _text_field(payload.get("gst_num"))
    raw_bill_to = payload.get("bill_to")
    raw_ship_to = payload.get("ship_to")
    items = payload.get("items")

    if not invoice_num or not gst_num or not raw_bill_to or not raw_ship_to or not isinstance(items, list):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    bill_to = parse_contact(raw_bill_to)
    ship_to = parse_contact(raw_ship_to)

    raw_date = payload.get("invoice_date")
    if raw_date is None or raw_date == "":
        invoice_date = dt.date.today()
    elif isinstance(raw_date, str):
        try:
            invoice_date = parse_invoice_date(raw_date)
        except ValueError as exc:
            raise ValidationError(MISSING_FIELDS_MESSAGE) from exc
    else:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    line_items = tuple(parse_line_item(item) for item in items)

    return InvoiceRequest(
        invoice_num=invoice_num,
        bill_to=bill_to,
        ship_to=ship_to,
        gst_num=gst_num,
        items=line_items,
        invoice_date=invoice_date,
    )
