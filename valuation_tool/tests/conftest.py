from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from valuation_tool.core.cache import QuoteCache
from valuation_tool.core.errors import UpstreamError
from valuation_tool.core.models import ProviderResult


def _result(symbol: str, provider: str = "dummy", **overrides) -> ProviderResult:
    values = {
        "company_name": f"{symbol} Ltd.",
        "current_price": Decimal("100.00"),
        "eps": Decimal("5.00"),
        "pe_ratio": Decimal("20.00"),
        "high_52_week": Decimal("120.00"),
        "low_52_week": Decimal("80.00"),
        "market_cap": Decimal("1000000"),
        "last_updated": datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return ProviderResult(symbol=symbol, provider=provider, **values)


class DummyProvider:
    def __init__(self, name: str, *, fail: bool = False, fail_symbols=(), **overrides) -> None:
        self.name = name
        self.fail = fail
        self.fail_symbols = set(fail_symbols)
        self.overrides = overrides
        self.calls: list[str] = []

    def fetch_quote(self, symbol: str) -> ProviderResult:
        self.calls.append(symbol)
        if self.fail or symbol in self.fail_symbols:
            raise UpstreamError(self.name, f"{symbol} unavailable")
        return _result(symbol, provider=self.name, **self.overrides)


class DummyClient:
    """Stand-in for ``httpx.Client`` that serves canned responses by URL."""

    def __init__(self, routes: dict[str, object]) -> None:
        self.routes = routes
        self.requests: list[dict[str, object]] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def get(self, url, params=None, headers=None):
        self.requests.append({"url": url, "params": params, "headers": headers})
        route = self.routes.get(url)
        if route is None:
            raise httpx.ConnectError("no route", request=httpx.Request("GET", url))
        if isinstance(route, Exception):
            raise route
        status, body = route
        request = httpx.Request("GET", url)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body, request=request)
        return httpx.Response(status, json=body, request=request)


@pytest.fixture
def now():
    return [datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)]


@pytest.fixture
def cache(now) -> QuoteCache:
    return QuoteCache(now_fn=lambda: now[0])


@pytest.fixture
def make_result():
    return _result


@pytest.fixture
def make_provider():
    return DummyProvider


@pytest.fixture
def make_client():
    return DummyClient
