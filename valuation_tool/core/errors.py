"""Exceptions raised by the quote-resolution subsystem."""
from __future__ import annotations


class QuoteError(RuntimeError):
    """Base class for quote resolution failures."""


class InvalidSymbolError(QuoteError, ValueError):
    """Raised when a symbol is empty or shorter than two characters."""


class UpstreamError(QuoteError):
    """Raised by a provider adapter when its upstream call or payload fails."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class ResolutionError(QuoteError):
    """Raised when every provider failed and fallback synthesis is disabled."""


__all__ = ["QuoteError", "InvalidSymbolError", "UpstreamError", "ResolutionError"]
