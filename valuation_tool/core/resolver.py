"""Quote resolution: cache, ordered provider fallback, corrections, synthesis."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Sequence

from valuation_tool.providers.base import QuoteProvider
from valuation_tool.providers.nsetools_provider import FALLBACK_SYMBOLS

from .cache import QuoteCache
from .corrections import CORRECTIONS, CorrectionRule, apply_corrections
from .errors import InvalidSymbolError, QuoteError, ResolutionError, UpstreamError
from .fallback import synthesize_quote
from .models import ProviderResult, Quote, SymbolInfo

LOGGER = logging.getLogger(__name__)

MIN_SYMBOL_LENGTH = 2
MIN_QUERY_LENGTH = 2


def normalise_symbol(symbol: str) -> str:
    cleaned = (symbol or "").strip().upper()
    if len(cleaned) < MIN_SYMBOL_LENGTH:
        raise InvalidSymbolError(f"Invalid stock symbol: {symbol!r}")
    return cleaned


class QuoteResolver:
    """Resolve symbols to corrected quotes through an ordered provider chain."""

    def __init__(
        self,
        providers: Sequence[QuoteProvider],
        cache: QuoteCache,
        *,
        corrections: Mapping[str, CorrectionRule] | None = None,
        synthesize_fallback: bool = True,
        max_workers: int = 8,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self.providers = list(providers)
        self.cache = cache
        self.corrections = CORRECTIONS if corrections is None else corrections
        self.synthesize_fallback = synthesize_fallback
        self.max_workers = max(max_workers, 1)
        self._now = now_fn or (lambda: datetime.now(timezone.utc))
        self._symbol_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # -- public api -------------------------------------------------------------
    def resolve(self, symbol: str) -> Quote:
        symbol = normalise_symbol(symbol)
        cached = self.cache.get(symbol)
        if cached is not None:
            LOGGER.debug("Using cached quote for %s", symbol)
            return cached

        # check again under the lock so concurrent misses fetch only once
        with self._lock_for(symbol):
            cached = self.cache.get(symbol)
            if cached is not None:
                return cached
            result = self._fetch_from_providers(symbol)
            if result is None:
                result = self._synthesize(symbol)
            quote = apply_corrections(symbol, result, self.corrections)
            self.cache.put(symbol, quote)
            return quote

    def resolve_many(self, symbols: Iterable[str]) -> dict[str, Quote]:
        """Resolve every symbol concurrently; one failure never aborts the rest."""

        unique = list(dict.fromkeys(s.strip().upper() for s in symbols if s))
        if not unique:
            return {}
        results: dict[str, Quote] = {}
        workers = min(self.max_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolve") as pool:
            futures = {symbol: pool.submit(self.resolve, symbol) for symbol in unique}
            for symbol, future in futures.items():
                try:
                    results[symbol] = future.result()
                except QuoteError as exc:
                    LOGGER.warning("Could not resolve %s: %s", symbol, exc)
        return results

    def search(self, query: str) -> list[SymbolInfo]:
        needle = (query or "").strip().lower()
        if len(needle) < MIN_QUERY_LENGTH:
            return []
        return [
            info
            for info in self._symbol_list()
            if needle in info.symbol.lower() or needle in info.name.lower()
        ]

    # -- internals --------------------------------------------------------------
    def _lock_for(self, symbol: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._symbol_locks.get(symbol)
            if lock is None:
                lock = self._symbol_locks[symbol] = threading.Lock()
            return lock

    def _fetch_from_providers(self, symbol: str) -> ProviderResult | None:
        for provider in self.providers:
            try:
                result = provider.fetch_quote(symbol)
            except UpstreamError as exc:
                LOGGER.warning("Quote provider %s failed for %s: %s", provider.name, symbol, exc)
                continue
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning(
                    "Quote provider %s raised unexpectedly for %s: %r", provider.name, symbol, exc
                )
                continue
            LOGGER.info("Resolved %s via %s", symbol, provider.name)
            return result
        return None

    def _synthesize(self, symbol: str) -> ProviderResult:
        if not self.synthesize_fallback:
            raise ResolutionError(f"All quote providers failed for {symbol}")
        LOGGER.warning("All quote providers failed for %s; using synthesized fallback", symbol)
        return synthesize_quote(symbol, self._now())

    def _symbol_list(self) -> list[SymbolInfo]:
        for provider in self.providers:
            fetch_list = getattr(provider, "fetch_symbol_list", None)
            if fetch_list is None:
                continue
            try:
                return list(fetch_list())
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning("Symbol list from %s failed: %s", provider.name, exc)
                break
        return list(FALLBACK_SYMBOLS)


__all__ = ["QuoteResolver", "normalise_symbol", "MIN_SYMBOL_LENGTH"]
