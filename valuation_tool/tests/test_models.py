from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from valuation_tool.core.models import Quote


def _quote(**overrides) -> Quote:
    values = dict(
        symbol="TCS",
        company_name="Tata Consultancy Services Ltd.",
        current_price=Decimal("3850.40"),
        eps=Decimal("125.10"),
        pe_ratio=Decimal("30.78"),
        high_52_week=Decimal("4250.00"),
        low_52_week=Decimal("3300.00"),
        market_cap=Decimal("1400000000000"),
        last_updated=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
        provider="nsetools",
    )
    values.update(overrides)
    return Quote(**values)


def test_quote_dict_roundtrip_preserves_decimals():
    quote = _quote(corrected=True)
    restored = Quote.from_dict(quote.to_dict())
    assert restored == quote
    assert quote.to_dict()["current_price"] == "3850.40"


@pytest.mark.parametrize(
    "overrides",
    [
        {"symbol": ""},
        {"symbol": "tcs"},
        {"current_price": Decimal("0")},
        {"market_cap": Decimal("-1")},
        {"last_updated": datetime(2024, 1, 1, 9, 0)},
    ],
)
def test_quote_rejects_invalid_fields(overrides):
    with pytest.raises(ValueError):
        _quote(**overrides)


def test_quote_allows_loss_making_eps():
    quote = _quote(eps=Decimal("-4.20"), pe_ratio=Decimal("0"))
    assert quote.eps < 0


def test_quote_is_immutable():
    quote = _quote()
    with pytest.raises(AttributeError):
        quote.current_price = Decimal("1")  # type: ignore[misc]


def test_fallback_flag():
    assert _quote(provider="fallback").is_fallback
    assert not _quote().is_fallback
