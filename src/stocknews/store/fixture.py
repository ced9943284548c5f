"""In-memory query service seeded from a YAML fixture file."""

from pathlib import Path
from typing import Any, Optional

import structlog
import yaml
from pydantic import ValidationError

from stocknews.config import AppConfig, Secrets
from stocknews.models import MarketNewsArticle
from stocknews.store.base import DocumentQueryService, FeedQuery, Page, QueryError, QueryErrorKind

logger = structlog.get_logger(__name__)


def load_fixture_documents(path: Path) -> list[dict[str, Any]]:
    """Read raw documents from a fixture file.

    The file holds a top-level `documents:` list; each entry needs an `id`
    plus the stored (camelCase) fields.
    """
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    documents = raw.get("documents", [])
    if not isinstance(documents, list):
        raise ValueError(f"{path}: 'documents' must be a list")
    return documents


class FixtureQueryService(DocumentQueryService):
    """Answers feed queries from raw documents held in memory.

    Cursors are the id of the last record on a page. Documents are decoded
    only when they land on a page, so one malformed document fails exactly
    the page that contains it.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        secrets: Optional[Secrets] = None,
        documents: Optional[list[dict[str, Any]]] = None,
    ):
        if documents is None:
            path = Path(config.fixture.path) if config else Path("config/fixtures/market_news.yaml")
            documents = load_fixture_documents(path)
            logger.info("fixture.loaded", path=str(path), documents=len(documents))
        self._documents = [dict(d) for d in documents]

    def _matching(self, query: FeedQuery) -> list[dict[str, Any]]:
        docs = [
            d for d in self._documents
            if all(d.get(name) == value for name, value in query.filters.items())
        ]
        try:
            docs.sort(key=lambda d: d[query.order_by], reverse=query.descending)
        except (KeyError, TypeError) as e:
            raise QueryError(QueryErrorKind.UNKNOWN, f"Cannot order by {query.order_by}: {e}") from e
        return docs

    async def query(self, query: FeedQuery) -> Page:
        docs = self._matching(query)

        start = 0
        if query.start_after is not None:
            ids = [str(d.get("id")) for d in docs]
            if query.start_after not in ids:
                raise QueryError(QueryErrorKind.UNKNOWN, f"Unknown cursor: {query.start_after}")
            start = ids.index(query.start_after) + 1

        window = docs[start:start + query.limit]
        try:
            records = tuple(MarketNewsArticle.model_validate(d) for d in window)
        except ValidationError as e:
            logger.error("fixture.malformed_record", collection=query.collection, error=str(e))
            raise QueryError(QueryErrorKind.UNKNOWN, f"Malformed record in page: {e}") from e

        return Page(records=records, cursor=records[-1].id if records else None)
