"""Abstract base class for paginated document query services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from stocknews.models import MarketNewsArticle


class QueryErrorKind(str, Enum):
    NETWORK_UNAVAILABLE = "NETWORK_UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


class QueryError(Exception):
    """Raised when a page query fails or returns undecodable records."""

    def __init__(self, kind: QueryErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


@dataclass(frozen=True)
class FeedQuery:
    """Ordered, filtered, limited query resumable from a cursor."""

    collection: str
    filters: dict[str, Any]
    order_by: str
    limit: int
    descending: bool = True
    start_after: Optional[Any] = None


@dataclass(frozen=True)
class Page:
    """One page of records plus the cursor of its last record."""

    records: tuple[MarketNewsArticle, ...] = field(default_factory=tuple)
    cursor: Optional[Any] = None

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)


class DocumentQueryService(ABC):
    """Interface for running page queries against a document store."""

    @abstractmethod
    async def query(self, query: FeedQuery) -> Page:
        """Run one page query.

        Args:
            query: Collection, equality filters, ordering, limit and the
                cursor to resume after (None for the first page).

        Returns:
            Page with at most `query.limit` records. `cursor` references the
            last record and is only meaningful to the service that made it.

        Raises:
            QueryError: If the store is unreachable, rejects the query, or
                any returned record is malformed.
        """
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        return None
