from __future__ import annotations

import json
from datetime import timedelta
from decimal import Decimal

import pytest

from valuation_tool.core.errors import InvalidSymbolError
from valuation_tool.core.portfolio import PortfolioService
from valuation_tool.core.resolver import QuoteResolver
from valuation_tool.data.repo_json import PORTFOLIO_KEY, JSONPortfolioRepository, RepositoryError


@pytest.fixture
def repo(tmp_path):
    return JSONPortfolioRepository(tmp_path / "portfolio.json")


def _service(repo, provider, cache, now):
    resolver = QuoteResolver([provider], cache, now_fn=lambda: now[0])
    return PortfolioService(repo, resolver, now_fn=lambda: now[0])


def test_add_persists_under_fixed_key(repo, make_provider, cache, now):
    service = _service(repo, make_provider("primary"), cache, now)
    quote = service.add_stock("infy")
    assert quote is not None and quote.symbol == "INFY"

    state = json.loads(repo.path.read_text(encoding="utf-8"))
    assert [row["symbol"] for row in state[PORTFOLIO_KEY]["stocks"]] == ["INFY"]

    reloaded = _service(repo, make_provider("primary"), cache, now)
    assert reloaded.stocks() == [quote]


def test_add_duplicate_returns_none(repo, make_provider, cache, now):
    provider = make_provider("primary")
    service = _service(repo, provider, cache, now)
    service.add_stock("TCS")
    assert service.add_stock("tcs") is None
    assert service.symbols() == ["TCS"]
    assert provider.calls == ["TCS"]


def test_add_invalid_symbol_propagates(repo, make_provider, cache, now):
    service = _service(repo, make_provider("primary"), cache, now)
    with pytest.raises(InvalidSymbolError):
        service.add_stock("A")
    assert service.stocks() == []


def test_add_with_dead_providers_uses_fallback(repo, make_provider, cache, now):
    service = _service(repo, make_provider("dead", fail=True), cache, now)
    quote = service.add_stock("AB")
    assert quote is not None and quote.is_fallback


def test_remove(repo, make_provider, cache, now):
    service = _service(repo, make_provider("primary"), cache, now)
    service.add_stock("TCS")
    service.add_stock("INFY")
    assert service.remove_stock("tcs") is True
    assert service.remove_stock("TCS") is False
    assert [q.symbol for q in repo.load()] == ["INFY"]


def test_refresh_keeps_order_and_updates_quotes(repo, make_provider, cache, now):
    provider = make_provider("primary")
    service = _service(repo, provider, cache, now)
    for symbol in ("TCS", "INFY", "SBIN"):
        service.add_stock(symbol)
    now[0] = now[0] + timedelta(hours=25)

    fresh = service.refresh()
    assert set(fresh) == {"TCS", "INFY", "SBIN"}
    assert service.symbols() == ["TCS", "INFY", "SBIN"]
    assert provider.calls.count("TCS") == 2


def test_refresh_empty_portfolio(repo, make_provider, cache, now):
    assert _service(repo, make_provider("primary"), cache, now).refresh() == {}


def test_staleness_and_refresh_if_stale(repo, make_provider, cache, now):
    provider = make_provider("primary", last_updated=now[0])
    service = _service(repo, provider, cache, now)
    service.add_stock("TCS")
    assert service.is_stale() is False
    assert service.refresh_if_stale() is False

    now[0] = now[0] + timedelta(hours=24, minutes=1)
    provider.overrides["last_updated"] = now[0]
    assert service.is_stale() is True
    assert service.refresh_if_stale() is True
    assert service.is_stale() is False


def test_stats(repo, cache, now, make_result):
    pe_values = {"TCS": "30", "INFY": "25", "SBIN": "11"}

    class PEProvider:
        name = "pe"

        def fetch_quote(self, symbol):
            return make_result(symbol, provider=self.name, pe_ratio=Decimal(pe_values[symbol]))

    service = _service(repo, PEProvider(), cache, now)
    for symbol in pe_values:
        service.add_stock(symbol)

    stats = service.stats()
    assert stats.total_stocks == 3
    assert stats.average_pe == Decimal(22)
    assert (stats.highest_pe.symbol, stats.highest_pe.value) == ("TCS", Decimal("30"))
    assert (stats.lowest_pe.symbol, stats.lowest_pe.value) == ("SBIN", Decimal("11"))


def test_stats_empty(repo, make_provider, cache, now):
    stats = _service(repo, make_provider("primary"), cache, now).stats()
    assert stats.total_stocks == 0
    assert stats.average_pe == 0
    assert stats.highest_pe.symbol == ""


def test_missing_file_loads_empty(repo):
    assert repo.load() == []


def test_corrupt_file_raises_repository_error(repo):
    repo.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RepositoryError):
        repo.load()


def test_save_keeps_unrelated_keys(repo, make_provider, cache, now):
    repo.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    _service(repo, make_provider("primary"), cache, now).add_stock("TCS")
    state = json.loads(repo.path.read_text(encoding="utf-8"))
    assert state["theme"] == "dark"
    assert PORTFOLIO_KEY in state
