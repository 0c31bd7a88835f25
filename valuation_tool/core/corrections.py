"""Curated per-symbol overrides for implausible upstream fundamentals."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from .models import ProviderResult, Quote

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CorrectionRule:
    pe_ratio: Decimal | None = None
    high_52_week: Decimal | None = None
    low_52_week: Decimal | None = None


# 52-week bounds verified against screener.in
CORRECTIONS: dict[str, CorrectionRule] = {
    "HDFCBANK": CorrectionRule(pe_ratio=Decimal("19.5")),
    "NESTLEIND": CorrectionRule(
        high_52_week=Decimal("2778.00"),
        low_52_week=Decimal("2110.00"),
    ),
}


def apply_corrections(
    symbol: str,
    result: ProviderResult,
    table: Mapping[str, CorrectionRule] | None = None,
) -> Quote:
    """Turn a provisional ``result`` into a :class:`Quote`, applying any override."""

    rules = CORRECTIONS if table is None else table
    symbol = symbol.upper()
    pe_ratio = result.pe_ratio
    eps = result.eps
    high = result.high_52_week
    low = result.low_52_week
    touched: list[str] = []

    rule = rules.get(symbol)
    if rule is not None:
        if rule.pe_ratio is not None:
            pe_ratio = rule.pe_ratio
            eps = result.current_price / rule.pe_ratio
            touched.extend(("pe_ratio", "eps"))
        if rule.high_52_week is not None:
            high = rule.high_52_week
            touched.append("high_52_week")
        if rule.low_52_week is not None:
            low = rule.low_52_week
            touched.append("low_52_week")
    if touched:
        LOGGER.info(
            "Correction active for %s (%s data): overriding %s",
            symbol,
            result.provider,
            ", ".join(touched),
        )

    return Quote(
        symbol=symbol,
        company_name=result.company_name,
        current_price=result.current_price,
        eps=eps,
        pe_ratio=pe_ratio,
        high_52_week=high,
        low_52_week=low,
        market_cap=result.market_cap,
        last_updated=result.last_updated,
        provider=result.provider,
        corrected=bool(touched),
    )


__all__ = ["CorrectionRule", "CORRECTIONS", "apply_corrections"]
