"""Stock valuation tracker: P/E, EPS and 52-week ranges for a watchlist."""

__version__ = "0.1.0"
