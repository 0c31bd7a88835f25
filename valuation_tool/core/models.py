"""Domain models for the valuation tool."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

FALLBACK_PROVIDER = "fallback"

_DECIMAL_FIELDS = (
    "current_price",
    "eps",
    "pe_ratio",
    "high_52_week",
    "low_52_week",
    "market_cap",
)


def _ensure_aware(name: str, value: datetime) -> datetime:
    """Ensure that datetimes stored on models are timezone-aware."""

    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError(f"{name} must be timezone-aware")
    return value


@dataclass(frozen=True, slots=True)
class SymbolInfo:
    symbol: str
    name: str


@dataclass(frozen=True, slots=True)
class ProviderResult:
    """Normalised adapter output, provisional until corrections are applied."""

    symbol: str
    company_name: str
    current_price: Decimal
    eps: Decimal
    pe_ratio: Decimal
    high_52_week: Decimal
    low_52_week: Decimal
    market_cap: Decimal
    last_updated: datetime
    provider: str

    def __post_init__(self) -> None:
        _ensure_aware("ProviderResult.last_updated", self.last_updated)


@dataclass(frozen=True, slots=True)
class Quote:
    """Valuation snapshot for one ticker symbol."""

    symbol: str
    company_name: str
    current_price: Decimal
    eps: Decimal
    pe_ratio: Decimal
    high_52_week: Decimal
    low_52_week: Decimal
    market_cap: Decimal
    last_updated: datetime
    provider: str
    corrected: bool = False

    def __post_init__(self) -> None:
        if not self.symbol or self.symbol != self.symbol.upper():
            raise ValueError(f"Quote.symbol must be a non-empty uppercase ticker: {self.symbol!r}")
        if self.current_price <= 0:
            raise ValueError(f"Quote.current_price must be positive for {self.symbol}")
        if self.market_cap < 0:
            raise ValueError(f"Quote.market_cap must be non-negative for {self.symbol}")
        _ensure_aware("Quote.last_updated", self.last_updated)

    @property
    def is_fallback(self) -> bool:
        return self.provider == FALLBACK_PROVIDER

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, Decimal):
                value = str(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[item.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Quote":
        kwargs = {name: Decimal(str(data[name])) for name in _DECIMAL_FIELDS}
        return cls(
            symbol=str(data["symbol"]),
            company_name=str(data["company_name"]),
            last_updated=datetime.fromisoformat(str(data["last_updated"])),
            provider=str(data.get("provider", "")),
            corrected=bool(data.get("corrected", False)),
            **kwargs,
        )


__all__ = ["FALLBACK_PROVIDER", "SymbolInfo", "ProviderResult", "Quote"]
