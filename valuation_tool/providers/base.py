"""Provider protocol and shared HTTP plumbing for quote adapters."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Protocol

import httpx

from valuation_tool.core.errors import UpstreamError
from valuation_tool.core.models import ProviderResult, SymbolInfo

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 8.0
USER_AGENT = "ValuationTool/1.0"

_CENT = Decimal("0.01")
_ZERO = Decimal(0)


class QuoteProvider(Protocol):
    """Protocol implemented by every upstream quote adapter."""

    name: str

    def fetch_quote(self, symbol: str) -> ProviderResult:
        """Return a normalised result or raise :class:`UpstreamError`."""


class SymbolListProvider(Protocol):
    name: str

    def fetch_symbol_list(self) -> list[SymbolInfo]:
        """Return the searchable symbol universe. Must not raise."""


def parse_decimal(value: object) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def decimal_or_zero(value: object) -> Decimal:
    parsed = parse_decimal(value)
    return _ZERO if parsed is None else parsed


def ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator`` to the cent, or zero for a non-positive denominator."""

    if denominator <= 0:
        return _ZERO
    return (numerator / denominator).quantize(_CENT)


def default_company_name(symbol: str) -> str:
    return f"{symbol.upper()} Ltd."


class HTTPQuoteProvider:
    """Base for adapters that talk JSON over HTTP with basic retries."""

    name = "http"

    def __init__(
        self,
        *,
        client_factory: Callable[[], httpx.Client] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retries: int = 1,
        backoff_seconds: float = 0.5,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self._client_factory = client_factory or (
            lambda: httpx.Client(timeout=timeout, headers={"User-Agent": USER_AGENT})
        )
        self._retries = max(retries, 0)
        self._backoff = max(backoff_seconds, 0.0)
        self._now = now_fn or (lambda: datetime.now(timezone.utc))

    def _require_price(self, symbol: str, value: object) -> Decimal:
        price = parse_decimal(value)
        if price is None or price <= 0:
            raise UpstreamError(self.name, f"missing or non-positive price for {symbol}")
        return price

    def _build_result(
        self,
        symbol: str,
        *,
        company_name: str | None,
        current_price: Decimal,
        eps: Decimal,
        pe_ratio: Decimal,
        high_52_week: Decimal,
        low_52_week: Decimal,
        market_cap: Decimal,
    ) -> ProviderResult:
        if market_cap < 0:
            raise UpstreamError(self.name, f"negative market cap for {symbol}")
        return ProviderResult(
            symbol=symbol,
            company_name=company_name or default_company_name(symbol),
            current_price=current_price,
            eps=eps,
            pe_ratio=pe_ratio,
            high_52_week=high_52_week,
            low_52_week=low_52_week,
            market_cap=market_cap,
            last_updated=self._now(),
            provider=self.name,
        )

    def _get_json(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        attempt = 0
        while True:
            try:
                with self._client_factory() as client:
                    response = client.get(url, params=params, headers=headers)
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if status < 500 or attempt >= self._retries:
                    raise UpstreamError(self.name, f"HTTP {status} from {url}") from exc
                last_error: Exception = exc
            except (httpx.HTTPError, ValueError) as exc:
                if attempt >= self._retries:
                    raise UpstreamError(self.name, f"request to {url} failed: {exc}") from exc
                last_error = exc
            attempt += 1
            LOGGER.debug("%s retry %d after %s", self.name, attempt, last_error)
            time.sleep(self._backoff)


__all__ = [
    "QuoteProvider",
    "SymbolListProvider",
    "HTTPQuoteProvider",
    "parse_decimal",
    "decimal_or_zero",
    "ratio",
    "default_company_name",
    "DEFAULT_TIMEOUT_SECONDS",
]
