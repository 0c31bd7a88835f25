"""Keyless NSE quotes and symbol list via api.nsetools.in."""
from __future__ import annotations

import logging
from typing import Any

from valuation_tool.core.errors import UpstreamError
from valuation_tool.core.models import ProviderResult, SymbolInfo

from .base import HTTPQuoteProvider, decimal_or_zero, ratio

LOGGER = logging.getLogger(__name__)

NSETOOLS_BASE_URL = "https://api.nsetools.in/nse-data"

FALLBACK_SYMBOLS: tuple[SymbolInfo, ...] = tuple(
    SymbolInfo(symbol, name)
    for symbol, name in (
        ("RELIANCE", "Reliance Industries Ltd."),
        ("TCS", "Tata Consultancy Services Ltd."),
        ("HDFCBANK", "HDFC Bank Ltd."),
        ("INFY", "Infosys Ltd."),
        ("ICICIBANK", "ICICI Bank Ltd."),
        ("HINDUNILVR", "Hindustan Unilever Ltd."),
        ("ITC", "ITC Ltd."),
        ("SBIN", "State Bank of India"),
        ("BHARTIARTL", "Bharti Airtel Ltd."),
        ("KOTAKBANK", "Kotak Mahindra Bank Ltd."),
        ("LT", "Larsen & Toubro Ltd."),
        ("AXISBANK", "Axis Bank Ltd."),
        ("BAJFINANCE", "Bajaj Finance Ltd."),
        ("ASIANPAINT", "Asian Paints Ltd."),
        ("MARUTI", "Maruti Suzuki India Ltd."),
        ("TITAN", "Titan Company Ltd."),
        ("HCLTECH", "HCL Technologies Ltd."),
        ("WIPRO", "Wipro Ltd."),
        ("ULTRACEMCO", "UltraTech Cement Ltd."),
        ("ADANIPORTS", "Adani Ports and Special Economic Zone Ltd."),
        ("ADANIENT", "Adani Enterprises Ltd."),
        ("NESTLEIND", "Nestle India Ltd."),
        ("SUNPHARMA", "Sun Pharmaceutical Industries Ltd."),
        ("TATAMOTORS", "Tata Motors Ltd."),
        ("TATASTEEL", "Tata Steel Ltd."),
        ("POWERGRID", "Power Grid Corporation of India Ltd."),
        ("NTPC", "NTPC Ltd."),
        ("ONGC", "Oil & Natural Gas Corporation Ltd."),
        ("COALINDIA", "Coal India Ltd."),
        ("JSWSTEEL", "JSW Steel Ltd."),
        ("M&M", "Mahindra & Mahindra Ltd."),
        ("BAJAJFINSV", "Bajaj Finserv Ltd."),
        ("TECHM", "Tech Mahindra Ltd."),
        ("GRASIM", "Grasim Industries Ltd."),
        ("INDUSINDBK", "IndusInd Bank Ltd."),
        ("DRREDDY", "Dr. Reddy's Laboratories Ltd."),
        ("CIPLA", "Cipla Ltd."),
        ("DIVISLAB", "Divi's Laboratories Ltd."),
        ("BRITANNIA", "Britannia Industries Ltd."),
        ("EICHERMOT", "Eicher Motors Ltd."),
        ("HEROMOTOCO", "Hero MotoCorp Ltd."),
        ("APOLLOHOSP", "Apollo Hospitals Enterprise Ltd."),
    )
)


class NSEToolsProvider(HTTPQuoteProvider):
    """Default provider; needs no API key and also serves the search universe."""

    name = "nsetools"

    def __init__(self, *, base_url: str = NSETOOLS_BASE_URL, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    def fetch_quote(self, symbol: str) -> ProviderResult:
        symbol = symbol.upper()
        payload = self._get_json(f"{self.base_url}/quote", params={"symbol": symbol})
        return self._parse_quote(symbol, payload)

    def _parse_quote(self, symbol: str, payload: Any) -> ProviderResult:
        stock = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(stock, dict):
            raise UpstreamError(self.name, f"response for {symbol} has no data object")

        price = self._require_price(symbol, stock.get("lastPrice") or stock.get("closePrice"))
        eps = decimal_or_zero(stock.get("eps"))
        return self._build_result(
            symbol,
            company_name=stock.get("companyName"),
            current_price=price,
            eps=eps,
            pe_ratio=ratio(price, eps),
            high_52_week=decimal_or_zero(stock.get("high52")),
            low_52_week=decimal_or_zero(stock.get("low52")),
            market_cap=decimal_or_zero(stock.get("marketCap")),
        )

    def fetch_symbol_list(self) -> list[SymbolInfo]:
        try:
            payload = self._get_json(f"{self.base_url}/list")
            symbols = self._parse_symbol_list(payload)
        except UpstreamError as exc:
            LOGGER.warning("NSETools symbol list unavailable, using built-in list: %s", exc)
            return list(FALLBACK_SYMBOLS)
        if not symbols:
            LOGGER.warning("NSETools symbol list was empty, using built-in list")
            return list(FALLBACK_SYMBOLS)
        return symbols

    def _parse_symbol_list(self, payload: Any) -> list[SymbolInfo]:
        entries = payload.get("symbols") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            raise UpstreamError(self.name, "symbol list response has no symbols array")
        results: list[SymbolInfo] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("symbol"):
                continue
            symbol = str(entry["symbol"]).upper()
            results.append(SymbolInfo(symbol=symbol, name=str(entry.get("name") or symbol)))
        return results


__all__ = ["NSEToolsProvider", "FALLBACK_SYMBOLS", "NSETOOLS_BASE_URL"]
