"""JSON-backed persistence for the tracked symbol list."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from valuation_tool.core.models import Quote

PORTFOLIO_KEY = "stock-portfolio"


class RepositoryError(RuntimeError):
    """Raised when the repository encounters an unrecoverable error."""


class JSONPortfolioRepository:
    """Store tracked quotes as ``{"stock-portfolio": {"stocks": [...]}}``."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> list[Quote]:
        state = self._read_state()
        portfolio = state.get(PORTFOLIO_KEY) or {}
        rows = portfolio.get("stocks") or []
        try:
            return [Quote.from_dict(row) for row in rows]
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise RepositoryError(f"Invalid portfolio entry in {self.path}: {exc}") from exc

    def save(self, quotes: Iterable[Quote]) -> None:
        state = self._read_state()
        state[PORTFOLIO_KEY] = {"stocks": [quote.to_dict() for quote in quotes]}
        self._write_state(state)

    # ------------------------------------------------------------------
    def _read_state(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                state = json.load(fh)
        except json.JSONDecodeError as exc:
            raise RepositoryError(f"Invalid JSON repository: {exc}") from exc
        if not isinstance(state, dict):
            raise RepositoryError(f"Invalid JSON repository: expected an object in {self.path}")
        return state

    def _write_state(self, state: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(state, fh, indent=2, sort_keys=True)


__all__ = ["JSONPortfolioRepository", "RepositoryError", "PORTFOLIO_KEY"]
