from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path
from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.table import Table

from valuation_tool.config import APIKeyConfig, Config, load_config
from valuation_tool.core.cache import QuoteCache
from valuation_tool.core.errors import InvalidSymbolError, QuoteError
from valuation_tool.core.formatting import (
    classify_pe,
    format_currency,
    format_large_number,
)
from valuation_tool.core.models import Quote
from valuation_tool.core.portfolio import PortfolioService
from valuation_tool.core.resolver import QuoteResolver
from valuation_tool.data import JSONPortfolioRepository, RepositoryError
from valuation_tool.logging_utils import configure_logging, get_api_log_path
from valuation_tool.providers.registry import build_providers

console = Console()
app = typer.Typer(help="Stock valuation tracker")

_PE_STYLES = {"high": "red", "medium": "yellow", "low": "green"}


@dataclass
class Services:
    cfg: Config
    resolver: QuoteResolver
    portfolio: PortfolioService


def build_services(cfg: Config) -> Services:
    cache = QuoteCache(validity=timedelta(hours=cfg.pricing.cache_ttl_hours))
    resolver = QuoteResolver(
        build_providers(cfg),
        cache,
        synthesize_fallback=cfg.pricing.synthesize_fallback,
        max_workers=cfg.pricing.max_workers,
    )
    portfolio = PortfolioService(
        JSONPortfolioRepository(cfg.portfolio_path),
        resolver,
        stale_after=cache.validity,
    )
    return Services(cfg=cfg, resolver=resolver, portfolio=portfolio)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
):
    cfg = load_config(config)
    configure_logging()
    try:
        ctx.obj = build_services(cfg)
    except RepositoryError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _source_label(quote: Quote) -> str:
    label = quote.provider
    if quote.is_fallback:
        label = "[yellow]fallback[/yellow]"
    if quote.corrected:
        label += " [cyan](corrected)[/cyan]"
    return label


def _quotes_table(title: str, quotes: Iterable[Quote]) -> Table:
    table = Table(title=title)
    table.add_column("Symbol")
    table.add_column("Company")
    table.add_column("Price", justify="right")
    table.add_column("EPS", justify="right")
    table.add_column("P/E", justify="right")
    table.add_column("52W High", justify="right")
    table.add_column("52W Low", justify="right")
    table.add_column("Market Cap", justify="right")
    table.add_column("Source")
    for quote in quotes:
        style = _PE_STYLES[classify_pe(quote.pe_ratio)]
        table.add_row(
            quote.symbol,
            quote.company_name,
            format_currency(quote.current_price),
            f"{quote.eps:.2f}",
            f"[{style}]{quote.pe_ratio:.2f}[/{style}]",
            format_currency(quote.high_52_week),
            format_currency(quote.low_52_week),
            format_large_number(quote.market_cap),
            _source_label(quote),
        )
    return table


def _warn_fallback(quotes: Iterable[Quote]) -> None:
    fallback = sorted(q.symbol for q in quotes if q.is_fallback)
    if fallback:
        console.print(
            "[yellow]No provider reachable for "
            f"{', '.join(fallback)}; showing synthesized fallback data.[/yellow]"
        )


@app.command()
def quote(ctx: typer.Context, symbols: list[str]):
    """Resolve quotes without touching the portfolio."""

    services: Services = ctx.obj
    quotes: list[Quote] = []
    for symbol in symbols:
        try:
            quotes.append(services.resolver.resolve(symbol))
        except InvalidSymbolError as exc:
            raise typer.BadParameter(str(exc)) from exc
        except QuoteError as exc:
            console.print(f"[red]{exc}[/red]")
    if quotes:
        console.print(_quotes_table("Quotes", quotes))
        _warn_fallback(quotes)


@app.command()
def search(ctx: typer.Context, query: str):
    services: Services = ctx.obj
    matches = services.resolver.search(query)
    if not matches:
        console.print(f"No symbols match '{query}'")
        return
    table = Table(title=f"Search: {query}")
    table.add_column("Symbol")
    table.add_column("Name")
    for info in matches:
        table.add_row(info.symbol, info.name)
    console.print(table)


@app.command()
def add(ctx: typer.Context, symbol: str):
    services: Services = ctx.obj
    try:
        added = services.portfolio.add_stock(symbol)
    except InvalidSymbolError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except QuoteError as exc:
        console.print(f"[red]Failed to add {symbol.upper()}: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    if added is None:
        console.print(f"{symbol.upper()} is already in your portfolio")
        return
    console.print(f"Added {added.symbol} to portfolio")
    _warn_fallback([added])


@app.command()
def remove(ctx: typer.Context, symbol: str):
    services: Services = ctx.obj
    if not services.portfolio.remove_stock(symbol):
        raise typer.BadParameter(f"{symbol.upper()} is not in your portfolio")
    console.print(f"Removed {symbol.upper()} from portfolio")


@app.command("list")
def list_portfolio(
    ctx: typer.Context,
    refresh_stale: bool = typer.Option(
        True, "--refresh-stale/--no-refresh-stale", help="Refresh when data is older than the cache window"
    ),
):
    services: Services = ctx.obj
    portfolio = services.portfolio
    if refresh_stale and portfolio.refresh_if_stale():
        console.print("Portfolio data was stale and has been refreshed")
    stocks = portfolio.stocks()
    if not stocks:
        console.print("Your portfolio is empty. Add a symbol with 'add SYMBOL'.")
        return
    console.print(_quotes_table("Portfolio", stocks))
    stats = portfolio.stats()
    summary = Table(title="Summary")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Stocks", str(stats.total_stocks))
    summary.add_row("Average P/E", f"{stats.average_pe:.2f}")
    summary.add_row("Highest P/E", f"{stats.highest_pe.symbol} ({stats.highest_pe.value:.2f})")
    summary.add_row("Lowest P/E", f"{stats.lowest_pe.symbol} ({stats.lowest_pe.value:.2f})")
    console.print(summary)
    _warn_fallback(stocks)


@app.command()
def refresh(ctx: typer.Context):
    services: Services = ctx.obj
    if not services.portfolio.symbols():
        console.print("Nothing to refresh")
        return
    fresh = services.portfolio.refresh()
    console.print(_quotes_table("Portfolio refreshed", services.portfolio.stocks()))
    missing = sorted(set(services.portfolio.symbols()) - set(fresh))
    if missing:
        console.print(f"[red]Kept previous data for: {', '.join(missing)}[/red]")
    _warn_fallback(fresh.values())


@app.command()
def status(ctx: typer.Context):
    services: Services = ctx.obj
    cfg = services.cfg
    table = Table(title="Valuation Tool Status")
    table.add_column("Metric")
    table.add_column("Value", overflow="fold")
    providers = [provider.name for provider in services.resolver.providers]
    table.add_row("Providers", " -> ".join(providers) or "none")
    table.add_row("Fallback Synthesis", "Yes" if cfg.pricing.synthesize_fallback else "No")
    table.add_row("Cache Window Hours", f"{cfg.pricing.cache_ttl_hours:g}")
    table.add_row("Provider Timeout Seconds", f"{cfg.pricing.timeout_seconds:g}")
    table.add_row("Portfolio Path", str(cfg.portfolio_path))
    table.add_row("Tracked Symbols", str(len(services.portfolio.symbols())))
    table.add_row("Portfolio Stale", "Yes" if services.portfolio.is_stale() else "No")
    log_path = get_api_log_path()
    table.add_row("Session Log", str(log_path) if log_path else "-")
    console.print(table)


def _mask(key_cfg: APIKeyConfig) -> APIKeyConfig:
    return APIKeyConfig(api_key="****" if key_cfg.api_key else "")


@app.command("config")
def config_show(ctx: typer.Context):
    cfg: Config = ctx.obj.cfg
    console.print(replace(cfg, rapidapi=_mask(cfg.rapidapi), twelvedata=_mask(cfg.twelvedata)))


if __name__ == "__main__":
    app()
