"""Paginated market-news feed for a single stock ticker."""

__version__ = "0.1.0"
