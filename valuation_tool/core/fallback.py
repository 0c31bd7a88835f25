"""Deterministic offline quotes derived from the symbol itself."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from .models import FALLBACK_PROVIDER, ProviderResult

_CENT = Decimal("0.01")

_NAME_PREFIXES = ("Tech", "Global", "India", "National", "Bharat", "Future", "Prime")
_NAME_SUFFIXES = (
    "Solutions",
    "Enterprises",
    "Industries",
    "Technologies",
    "Corp",
    "Limited",
    "Motors",
)


def symbol_seed(symbol: str) -> int:
    """Position-weighted sum of character codes."""

    return sum((index + 1) * ord(char) for index, char in enumerate(symbol.upper()))


def fallback_company_name(symbol: str) -> str:
    symbol = symbol.upper()
    prefix = _NAME_PREFIXES[ord(symbol[0]) % len(_NAME_PREFIXES)]
    suffix = _NAME_SUFFIXES[ord(symbol[-1]) % len(_NAME_SUFFIXES)]
    return f"{prefix} {symbol} {suffix}"


def synthesize_quote(symbol: str, now: datetime) -> ProviderResult:
    """Build a plausible quote for ``symbol`` with no upstream dependency.

    Every numeric field is a function of the symbol's characters only, so two
    calls for the same symbol differ only in ``last_updated``.
    """

    symbol = symbol.upper()
    seed = symbol_seed(symbol)
    price = Decimal(100) + Decimal((seed * 7919) % 90000) / 100
    eps = Decimal(5) + Decimal((seed * 104729) % 4500) / 100
    return ProviderResult(
        symbol=symbol,
        company_name=fallback_company_name(symbol),
        current_price=price.quantize(_CENT),
        eps=eps.quantize(_CENT),
        pe_ratio=(price / eps).quantize(_CENT),
        high_52_week=(price * Decimal("1.2")).quantize(_CENT),
        low_52_week=(price * Decimal("0.8")).quantize(_CENT),
        market_cap=(price * 1_000_000).quantize(Decimal(1)),
        last_updated=now,
        provider=FALLBACK_PROVIDER,
    )


__all__ = ["symbol_seed", "fallback_company_name", "synthesize_quote"]
