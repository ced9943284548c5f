"""Paginated document query services."""

from stocknews.store.base import DocumentQueryService, FeedQuery, Page, QueryError, QueryErrorKind

__all__ = [
    "DocumentQueryService",
    "FeedQuery",
    "Page",
    "QueryError",
    "QueryErrorKind",
]
