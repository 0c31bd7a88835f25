"""Tracked-symbol portfolio backed by the quote resolver."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from valuation_tool.data.repo_json import JSONPortfolioRepository

from .cache import DEFAULT_VALIDITY
from .models import Quote
from .resolver import QuoteResolver, normalise_symbol

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PEExtreme:
    symbol: str
    value: Decimal


@dataclass(frozen=True, slots=True)
class PortfolioStats:
    average_pe: Decimal
    highest_pe: PEExtreme
    lowest_pe: PEExtreme
    total_stocks: int


class PortfolioService:
    """Add, remove and refresh tracked symbols, persisting after every change."""

    def __init__(
        self,
        repo: JSONPortfolioRepository,
        resolver: QuoteResolver,
        *,
        stale_after: timedelta = DEFAULT_VALIDITY,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self.repo = repo
        self.resolver = resolver
        self.stale_after = stale_after
        self._now = now_fn or (lambda: datetime.now(timezone.utc))
        self._stocks: list[Quote] = repo.load()

    def stocks(self) -> list[Quote]:
        return list(self._stocks)

    def symbols(self) -> list[str]:
        return [quote.symbol for quote in self._stocks]

    def add_stock(self, symbol: str) -> Quote | None:
        """Resolve and track ``symbol``; ``None`` if it is already tracked."""

        symbol = normalise_symbol(symbol)
        if symbol in self.symbols():
            LOGGER.info("%s is already in the portfolio", symbol)
            return None
        quote = self.resolver.resolve(symbol)
        self._stocks.append(quote)
        self.repo.save(self._stocks)
        LOGGER.info("Added %s to portfolio (provider=%s)", symbol, quote.provider)
        return quote

    def remove_stock(self, symbol: str) -> bool:
        symbol = (symbol or "").strip().upper()
        remaining = [quote for quote in self._stocks if quote.symbol != symbol]
        if len(remaining) == len(self._stocks):
            return False
        self._stocks = remaining
        self.repo.save(self._stocks)
        LOGGER.info("Removed %s from portfolio", symbol)
        return True

    def refresh(self) -> dict[str, Quote]:
        """Re-resolve every tracked symbol; failures keep their previous quote."""

        if not self._stocks:
            return {}
        fresh = self.resolver.resolve_many(self.symbols())
        self._stocks = [fresh.get(quote.symbol, quote) for quote in self._stocks]
        self.repo.save(self._stocks)
        return fresh

    def is_stale(self) -> bool:
        now = self._now()
        return any(now - quote.last_updated > self.stale_after for quote in self._stocks)

    def refresh_if_stale(self) -> bool:
        if not self.is_stale():
            return False
        LOGGER.info("Portfolio data is stale, refreshing")
        self.refresh()
        return True

    def stats(self) -> PortfolioStats:
        if not self._stocks:
            empty = PEExtreme(symbol="", value=Decimal(0))
            return PortfolioStats(
                average_pe=Decimal(0), highest_pe=empty, lowest_pe=empty, total_stocks=0
            )
        highest = max(self._stocks, key=lambda quote: quote.pe_ratio)
        lowest = min(self._stocks, key=lambda quote: quote.pe_ratio)
        total = sum((quote.pe_ratio for quote in self._stocks), Decimal(0))
        return PortfolioStats(
            average_pe=total / len(self._stocks),
            highest_pe=PEExtreme(highest.symbol, highest.pe_ratio),
            lowest_pe=PEExtreme(lowest.symbol, lowest.pe_ratio),
            total_stocks=len(self._stocks),
        )


__all__ = ["PortfolioService", "PortfolioStats", "PEExtreme"]
