from __future__ import annotations

import logging

from valuation_tool.config import Config

from .base import QuoteProvider
from .nsetools_provider import NSEToolsProvider
from .rapidapi_provider import RapidAPIProvider
from .twelvedata_provider import TwelveDataProvider

LOGGER = logging.getLogger(__name__)


def _build_provider(cfg: Config, name: str) -> QuoteProvider | None:
    http_options = {
        "timeout": cfg.pricing.timeout_seconds,
        "retries": cfg.pricing.retries,
    }
    match name:
        case "rapidapi":
            if not cfg.rapidapi.api_key:
                LOGGER.info("RapidAPI provider skipped: api key not configured")
                return None
            return RapidAPIProvider(cfg.rapidapi.api_key, **http_options)
        case "twelvedata":
            if not cfg.twelvedata.api_key:
                LOGGER.info("Twelve Data provider skipped: api key not configured")
                return None
            return TwelveDataProvider(cfg.twelvedata.api_key, **http_options)
        case "nsetools":
            return NSEToolsProvider(base_url=cfg.nsetools.base_url, **http_options)
        case _:
            LOGGER.warning("Unknown quote provider '%s'", name)
            return None


def build_providers(cfg: Config) -> list[QuoteProvider]:
    """Instantiate the configured providers in priority order, skipping unusable ones."""

    providers: list[QuoteProvider] = []
    seen: set[str] = set()
    for name in cfg.pricing.provider_order:
        if not name or name in seen:
            continue
        seen.add(name)
        provider = _build_provider(cfg, name)
        if provider is not None:
            providers.append(provider)
    LOGGER.debug("Active quote providers: %s", [p.name for p in providers])
    return providers


__all__ = ["build_providers"]
