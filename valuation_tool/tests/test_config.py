from __future__ import annotations

from pathlib import Path

from valuation_tool.config import Config, load_config
from valuation_tool.providers.registry import build_providers


def test_defaults_when_file_missing(tmp_path):
    cfg = load_config(tmp_path / "missing.toml", environ={})
    assert cfg.pricing.provider_order == ["rapidapi", "twelvedata", "nsetools"]
    assert cfg.pricing.cache_ttl_hours == 24.0
    assert cfg.rapidapi.api_key == ""
    assert [p.name for p in build_providers(cfg)] == ["nsetools"]


def test_load_toml_values(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                'portfolio_path = "~/stocks.json"',
                "[pricing]",
                'provider_order = ["TwelveData", "nsetools"]',
                "timeout_seconds = 5",
                "synthesize_fallback = false",
                "[twelvedata]",
                'api_key = "from-file"',
                "[nsetools]",
                'base_url = "http://localhost:9000/nse"',
            ]
        ),
        encoding="utf-8",
    )
    cfg = load_config(path, environ={})
    assert cfg.portfolio_path == Path("~/stocks.json").expanduser()
    assert cfg.pricing.provider_order == ["twelvedata", "nsetools"]
    assert cfg.pricing.timeout_seconds == 5.0
    assert cfg.pricing.synthesize_fallback is False
    assert cfg.twelvedata.api_key == "from-file"

    providers = build_providers(cfg)
    assert [p.name for p in providers] == ["twelvedata", "nsetools"]
    assert providers[1].base_url == "http://localhost:9000/nse"


def test_environment_keys_take_precedence(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[rapidapi]\napi_key = "file-key"\n', encoding="utf-8")
    cfg = load_config(path, environ={"RAPID_API_KEY": "env-key", "TWELVE_DATA_API_KEY": "td"})
    assert cfg.rapidapi.api_key == "env-key"
    assert cfg.twelvedata.api_key == "td"
    assert [p.name for p in build_providers(cfg)] == ["rapidapi", "twelvedata", "nsetools"]


def test_unknown_and_duplicate_providers_are_skipped():
    cfg = Config()
    cfg.pricing.provider_order = ["nsetools", "bloomberg", "nsetools"]
    assert [p.name for p in build_providers(cfg)] == ["nsetools"]
