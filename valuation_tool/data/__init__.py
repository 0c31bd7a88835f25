"""Persistence helpers."""

from .repo_json import PORTFOLIO_KEY, JSONPortfolioRepository, RepositoryError

__all__ = ["JSONPortfolioRepository", "RepositoryError", "PORTFOLIO_KEY"]
