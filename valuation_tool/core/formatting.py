"""Display helpers for INR amounts and P/E bands."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

PEBand = Literal["high", "medium", "low"]

HIGH_PE_THRESHOLD = Decimal(25)
LOW_PE_THRESHOLD = Decimal(15)

_CENT = Decimal("0.01")
_SUFFIXES = (
    (Decimal(10) ** 12, "T"),
    (Decimal(10) ** 9, "B"),
    (Decimal(10) ** 6, "M"),
    (Decimal(10) ** 3, "K"),
)


def _group_indian(digits: str) -> str:
    """Group an integer string as lakh/crore: 12,34,567."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(value: Decimal | float | int) -> str:
    amount = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):f}".partition(".")
    return f"{sign}₹{_group_indian(whole)}.{fraction}"


def format_large_number(value: Decimal | float | int) -> str:
    amount = Decimal(str(value))
    for threshold, suffix in _SUFFIXES:
        if amount >= threshold:
            scaled = (amount / threshold).quantize(_CENT, rounding=ROUND_HALF_UP)
            return f"₹{scaled}{suffix}"
    return f"₹{amount.quantize(_CENT, rounding=ROUND_HALF_UP)}"


def format_percentage(value: Decimal | float | int) -> str:
    return f"{Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)}%"


def classify_pe(pe: Decimal | float | int) -> PEBand:
    pe = Decimal(str(pe))
    if pe > HIGH_PE_THRESHOLD:
        return "high"
    if pe < LOW_PE_THRESHOLD:
        return "low"
    return "medium"


__all__ = [
    "format_currency",
    "format_large_number",
    "format_percentage",
    "classify_pe",
    "PEBand",
]
