from __future__ import annotations

from decimal import Decimal

from valuation_tool.core.corrections import CorrectionRule, apply_corrections


def test_hdfcbank_pe_override_recomputes_eps(make_result):
    result = make_result("HDFCBANK", current_price=Decimal("1650.00"), pe_ratio=Decimal("15"))
    quote = apply_corrections("HDFCBANK", result)
    assert quote.pe_ratio == Decimal("19.5")
    assert quote.eps == Decimal("1650.00") / Decimal("19.5")
    assert quote.high_52_week == result.high_52_week
    assert quote.corrected is True


def test_nestleind_week_range_override(make_result):
    result = make_result("NESTLEIND", high_52_week=Decimal("3000"), low_52_week=Decimal("1"))
    quote = apply_corrections("nestleind", result)
    assert quote.symbol == "NESTLEIND"
    assert quote.high_52_week == Decimal("2778.00")
    assert quote.low_52_week == Decimal("2110.00")
    assert quote.pe_ratio == result.pe_ratio
    assert quote.eps == result.eps


def test_unlisted_symbol_passes_through(make_result):
    result = make_result("TCS")
    quote = apply_corrections("TCS", result)
    assert quote.corrected is False
    for name in ("current_price", "eps", "pe_ratio", "high_52_week", "low_52_week", "market_cap"):
        assert getattr(quote, name) == getattr(result, name)
    assert quote.provider == result.provider


def test_custom_table(make_result):
    table = {"TCS": CorrectionRule(pe_ratio=Decimal("25"), low_52_week=Decimal("10"))}
    quote = apply_corrections("TCS", make_result("TCS"), table)
    assert quote.pe_ratio == Decimal("25")
    assert quote.eps == Decimal("100.00") / Decimal("25")
    assert quote.low_52_week == Decimal("10")
    assert quote.high_52_week == Decimal("120.00")


def test_correction_is_logged(make_result, caplog):
    caplog.set_level("INFO", logger="valuation_tool.core.corrections")
    apply_corrections("HDFCBANK", make_result("HDFCBANK"))
    assert "Correction active for HDFCBANK" in caplog.text
