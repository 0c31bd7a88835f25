"""In-memory quote cache with a fixed validity window."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from .models import Quote

DEFAULT_VALIDITY = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    quote: Quote
    stored_at: datetime


class QuoteCache:
    """Map symbol -> last resolved quote.

    Entries are never evicted. An entry older than the validity window reads as
    a miss and is overwritten by the next ``put`` for the same symbol.
    """

    def __init__(
        self,
        *,
        validity: timedelta = DEFAULT_VALIDITY,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self.validity = validity
        self._now = now_fn or (lambda: datetime.now(timezone.utc))
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, symbol: str) -> Quote | None:
        with self._lock:
            entry = self._entries.get(symbol)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry.quote

    def put(self, symbol: str, quote: Quote) -> None:
        entry = CacheEntry(quote=quote, stored_at=self._now())
        with self._lock:
            self._entries[symbol] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._now() - entry.stored_at <= self.validity

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheEntry", "QuoteCache", "DEFAULT_VALIDITY"]
