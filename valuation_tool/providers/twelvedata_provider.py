from __future__ import annotations

import logging
from typing import Any

from valuation_tool.core.errors import UpstreamError
from valuation_tool.core.models import ProviderResult

from .base import HTTPQuoteProvider, decimal_or_zero, ratio

LOGGER = logging.getLogger(__name__)


class TwelveDataProvider(HTTPQuoteProvider):
    """Quotes from api.twelvedata.com.

    Price and fundamentals live behind separate endpoints, so each quote costs
    two requests against the key's daily credit allowance.
    """

    name = "twelvedata"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.twelvedata.com",
        exchange_suffix: str = ".NS",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.exchange_suffix = exchange_suffix

    def _fetch(self, endpoint: str, symbol: str) -> dict[str, Any]:
        params = {"symbol": f"{symbol}{self.exchange_suffix}", "apikey": self.api_key}
        payload = self._get_json(f"{self.base_url}/{endpoint}", params=params)
        if not isinstance(payload, dict):
            raise UpstreamError(self.name, f"/{endpoint} returned a non-object body for {symbol}")
        # errors come back as HTTP 200 with a status field
        if payload.get("status") == "error":
            raise UpstreamError(
                self.name, f"/{endpoint} error for {symbol}: {payload.get('message', 'unknown')}"
            )
        return payload

    def fetch_quote(self, symbol: str) -> ProviderResult:
        symbol = symbol.upper()
        price_data = self._fetch("price", symbol)
        info_data = self._fetch("quote", symbol)
        return self._parse_quote(symbol, price_data, info_data)

    def _parse_quote(
        self, symbol: str, price_data: dict[str, Any], info_data: dict[str, Any]
    ) -> ProviderResult:
        price = self._require_price(symbol, price_data.get("price"))
        pe_ratio = decimal_or_zero(info_data.get("pe_ratio"))
        week_range = info_data.get("fifty_two_week")
        if not isinstance(week_range, dict):
            week_range = {}
        return self._build_result(
            symbol,
            company_name=info_data.get("name"),
            current_price=price,
            eps=ratio(price, pe_ratio),
            pe_ratio=pe_ratio,
            high_52_week=decimal_or_zero(week_range.get("high")),
            low_52_week=decimal_or_zero(week_range.get("low")),
            market_cap=decimal_or_zero(info_data.get("market_cap")),
        )


__all__ = ["TwelveDataProvider"]
