"""Upstream quote adapters."""

from .base import HTTPQuoteProvider, QuoteProvider, SymbolListProvider
from .nsetools_provider import FALLBACK_SYMBOLS, NSEToolsProvider
from .rapidapi_provider import RapidAPIProvider
from .twelvedata_provider import TwelveDataProvider

__all__ = [
    "HTTPQuoteProvider",
    "QuoteProvider",
    "SymbolListProvider",
    "NSEToolsProvider",
    "RapidAPIProvider",
    "TwelveDataProvider",
    "FALLBACK_SYMBOLS",
]
