"""Core domain exports.

The resolver and portfolio service depend on the provider package and are
imported from their own modules.
"""
from .models import FALLBACK_PROVIDER, ProviderResult, Quote, SymbolInfo
from .errors import InvalidSymbolError, QuoteError, ResolutionError, UpstreamError
from .cache import CacheEntry, QuoteCache
from .corrections import CORRECTIONS, CorrectionRule, apply_corrections
from .fallback import synthesize_quote

__all__ = [
    "FALLBACK_PROVIDER",
    "ProviderResult",
    "Quote",
    "SymbolInfo",
    "QuoteError",
    "InvalidSymbolError",
    "UpstreamError",
    "ResolutionError",
    "CacheEntry",
    "QuoteCache",
    "CORRECTIONS",
    "CorrectionRule",
    "apply_corrections",
    "synthesize_quote",
]
