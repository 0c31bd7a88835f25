from __future__ import annotations

import logging
from typing import Any

from valuation_tool.core.errors import UpstreamError
from valuation_tool.core.models import ProviderResult

from .base import HTTPQuoteProvider, decimal_or_zero, ratio

LOGGER = logging.getLogger(__name__)

RAPIDAPI_HOST = "real-time-finance-data.p.rapidapi.com"


class RapidAPIProvider(HTTPQuoteProvider):
    """Quotes from the RapidAPI "Real-Time Finance Data" listing (NSE symbols)."""

    name = "rapidapi"

    def __init__(
        self,
        api_key: str,
        *,
        host: str = RAPIDAPI_HOST,
        exchange_suffix: str = ".NS",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.host = host
        self.exchange_suffix = exchange_suffix

    def _build_request(self, symbol: str) -> tuple[str, dict[str, str], dict[str, str]]:
        url = f"https://{self.host}/stock-quote"
        params = {"symbol": f"{symbol}{self.exchange_suffix}", "language": "en"}
        headers = {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host}
        return url, params, headers

    def fetch_quote(self, symbol: str) -> ProviderResult:
        symbol = symbol.upper()
        url, params, headers = self._build_request(symbol)
        LOGGER.debug("Fetching %s from RapidAPI", symbol)
        payload = self._get_json(url, params=params, headers=headers)
        return self._parse_quote(symbol, payload)

    def _parse_quote(self, symbol: str, payload: Any) -> ProviderResult:
        stock = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(stock, dict):
            raise UpstreamError(self.name, f"response for {symbol} has no data object")

        price = self._require_price(symbol, stock.get("price"))
        pe_ratio = decimal_or_zero(stock.get("pe_ratio"))
        return self._build_result(
            symbol,
            company_name=stock.get("name"),
            current_price=price,
            eps=ratio(price, pe_ratio),
            pe_ratio=pe_ratio,
            high_52_week=decimal_or_zero(stock.get("52_week_high")),
            low_52_week=decimal_or_zero(stock.get("52_week_low")),
            market_cap=decimal_or_zero(stock.get("market_cap")),
        )


__all__ = ["RapidAPIProvider", "RAPIDAPI_HOST"]
