"""Spell rupee amounts in English using the Indian numbering scale."""

from __future__ import annotations

from typing import List

BELOW_TWENTY = [
    "",
    "One",
    "Two",
    "Three",
    "Four",
    "Five",
    "Six",
    "Seven",
    "Eight",
    "Nine",
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def two_digit_words(value: int) -> str:
    if value < 20:
        return BELOW_TWENTY[value]
    tens, units = divmod(value, 10)
    if units:
        return f"{TENS[tens]} {BELOW_TWENTY[units]}"
    return TENS[tens]


def three_digit_words(value: int) -> str:
    hundreds, rest = divmod(value, 100)
    parts: List[str] = []
    if hundreds:
        parts.append(f"{BELOW_TWENTY[hundreds]} Hundred")
    if rest:
        parts.append(two_digit_words(rest))
    return " ".join(parts)


def amount_in_words(amount: int) -> str:
    """Return ``amount`` spelled out with crore/lakh/thousand grouping.

    ``amount`` must be a non-negative integer; callers truncate paise before
    calling. ``amount_in_words(1234567)`` gives
    ``"Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven"``.
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if amount == 0:
        return "Zero"

    crore, remainder = divmod(amount, CRORE)
    lakh, remainder = divmod(remainder, LAKH)
    thousand, hundred = divmod(remainder, THOUSAND)

    parts: List[str] = []
    if crore:
        # Amounts of a thousand crore and above spell the crore count in full.
        crore_words = three_digit_words(crore) if crore < THOUSAND else amount_in_words(crore)
        parts.append(f"{crore_words} Crore")
    if lakh:
        parts.append(f"{three_digit_words(lakh)} Lakh")
    if thousand:
        parts.append(f"{three_digit_words(thousand)} Thousand")
    if hundred:
        parts.append(three_digit_words(hundred))
    return " ".join(parts).strip()


def rupees_in_words(amount: int) -> str:
    return f"{amount_in_words(amount)} Rupees Only"
