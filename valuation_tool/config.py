from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import tomllib

from valuation_tool.providers.nsetools_provider import NSETOOLS_BASE_URL

DEFAULT_CONFIG_DIR = Path(os.environ.get("VALUATION_TOOL_HOME", Path.home() / ".valuation_tool"))
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"
DEFAULT_PORTFOLIO_PATH = DEFAULT_CONFIG_DIR / "portfolio.json"

RAPID_API_KEY_ENV = "RAPID_API_KEY"
TWELVE_DATA_API_KEY_ENV = "TWELVE_DATA_API_KEY"


@dataclass
class PricingConfig:
    provider_order: list[str] = field(
        default_factory=lambda: ["rapidapi", "twelvedata", "nsetools"]
    )
    cache_ttl_hours: float = 24.0
    timeout_seconds: float = 8.0
    retries: int = 1
    max_workers: int = 8
    synthesize_fallback: bool = True


@dataclass
class APIKeyConfig:
    api_key: str = ""


@dataclass
class NSEToolsConfig:
    base_url: str = NSETOOLS_BASE_URL


@dataclass
class Config:
    portfolio_path: Path = DEFAULT_PORTFOLIO_PATH
    pricing: PricingConfig = field(default_factory=PricingConfig)
    rapidapi: APIKeyConfig = field(default_factory=APIKeyConfig)
    twelvedata: APIKeyConfig = field(default_factory=APIKeyConfig)
    nsetools: NSEToolsConfig = field(default_factory=NSEToolsConfig)


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(
    path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> Config:
    cfg_path = path or DEFAULT_CONFIG_PATH
    data = _load_toml(cfg_path)
    env = os.environ if environ is None else environ

    cfg = Config()

    if "portfolio_path" in data:
        cfg.portfolio_path = Path(data["portfolio_path"]).expanduser()

    pricing = data.get("pricing", {})
    if pricing:
        cfg.pricing = PricingConfig(
            provider_order=[
                str(name).lower()
                for name in pricing.get("provider_order", cfg.pricing.provider_order)
            ],
            cache_ttl_hours=float(pricing.get("cache_ttl_hours", cfg.pricing.cache_ttl_hours)),
            timeout_seconds=float(pricing.get("timeout_seconds", cfg.pricing.timeout_seconds)),
            retries=int(pricing.get("retries", cfg.pricing.retries)),
            max_workers=int(pricing.get("max_workers", cfg.pricing.max_workers)),
            synthesize_fallback=bool(
                pricing.get("synthesize_fallback", cfg.pricing.synthesize_fallback)
            ),
        )

    rapid = data.get("rapidapi", {})
    cfg.rapidapi = APIKeyConfig(api_key=str(env.get(RAPID_API_KEY_ENV) or rapid.get("api_key", "")))
    twelve = data.get("twelvedata", {})
    cfg.twelvedata = APIKeyConfig(
        api_key=str(env.get(TWELVE_DATA_API_KEY_ENV) or twelve.get("api_key", ""))
    )

    nse = data.get("nsetools", {})
    if nse:
        cfg.nsetools = NSEToolsConfig(base_url=str(nse.get("base_url", cfg.nsetools.base_url)))

    return cfg


__all__ = [
    "Config",
    "PricingConfig",
    "APIKeyConfig",
    "NSEToolsConfig",
    "load_config",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_PORTFOLIO_PATH",
]
