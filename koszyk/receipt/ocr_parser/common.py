"""Shared helpers for OCR receipt parsing."""

import re
from decimal import Decimal, InvalidOperation

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_LEADING_INT = re.compile(r"^[+-]?\d+")
_LEADING_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def split_lines(full_text: str) -> list[str]:
    """Split raw OCR text into trimmed, non-empty lines, preserving order."""
    if not full_text:
        return []
    return [line.strip() for line in _LINE_BREAK.split(full_text) if line.strip()]


def parse_leading_int(text: str) -> int | None:
    """Parse the integer prefix of ``text`` ("2 szt" -> 2), or None."""
    match = _LEADING_INT.match(text.strip())
    if not match:
        return None
    return int(match.group(0))


def parse_amount(text: str) -> Decimal | None:
    """
    Parse the numeric prefix of a receipt amount with a comma decimal separator.

    Only the first comma is treated as the separator, so "4,50" -> 4.50 and
    "12,99 A" -> 12.99. Returns None when the text does not start with a number.
    """
    normalized = text.strip().replace(",", ".", 1)
    match = _LEADING_DECIMAL.match(normalized)
    if not match:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None
