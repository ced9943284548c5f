"""Firestore-backed page queries over the market-news collection."""

import inspect
from typing import Optional

import structlog
from google.api_core import exceptions as gexc
from google.api_core.retry_async import AsyncRetry
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore  # type: ignore
from pydantic import ValidationError

from stocknews.config import AppConfig, Secrets, resolve_project_id
from stocknews.models import MarketNewsArticle
from stocknews.store.base import DocumentQueryService, FeedQuery, Page, QueryError, QueryErrorKind

logger = structlog.get_logger(__name__)

_NETWORK_ERRORS = (
    gexc.ServiceUnavailable,
    gexc.DeadlineExceeded,
    auth_exceptions.TransportError,
    OSError,
)


def classify_error(error: Exception) -> QueryErrorKind:
    """Map a client library exception onto the query error taxonomy."""
    # Exhausted retries wrap the last transient error
    if isinstance(error, gexc.RetryError) and error.cause is not None:
        error = error.cause
    if isinstance(error, _NETWORK_ERRORS):
        return QueryErrorKind.NETWORK_UNAVAILABLE
    return QueryErrorKind.UNKNOWN


def decode_snapshot(snapshot) -> MarketNewsArticle:
    """Convert a DocumentSnapshot into an article. Raises ValidationError if malformed."""
    data = snapshot.to_dict() or {}
    return MarketNewsArticle.model_validate({**data, "id": snapshot.id})


class FirestoreQueryService(DocumentQueryService):
    """Runs feed page queries with the async Firestore client.

    The cursor handed back in each Page is the last DocumentSnapshot, which
    Firestore accepts directly in `start_after`.
    """

    def __init__(self, config: AppConfig, secrets: Secrets, client=None):
        self._timeout = config.firestore.timeout_seconds
        project_id = resolve_project_id(config, secrets)

        if client is not None:
            self._client = client
        elif secrets.google_application_credentials:
            self._client = firestore.AsyncClient.from_service_account_json(
                secrets.google_application_credentials,
                project=project_id,
                database=config.firestore.database,
            )
        else:
            self._client = firestore.AsyncClient(
                project=project_id,
                database=config.firestore.database,
            )

        logger.info(
            "firestore.client_initialized",
            project_id=project_id or "inferred",
            database=config.firestore.database,
        )

    def _build(self, query: FeedQuery):
        q = self._client.collection(query.collection)
        for field_name, value in query.filters.items():
            q = q.where(filter=firestore.FieldFilter(field_name, "==", value))

        direction = firestore.Query.DESCENDING if query.descending else firestore.Query.ASCENDING
        q = q.order_by(query.order_by, direction=direction).limit(query.limit)

        if query.start_after is not None:
            q = q.start_after(query.start_after)
        return q

    async def query(self, query: FeedQuery) -> Page:
        try:
            snapshots = await self._build(query).get(
                retry=AsyncRetry(timeout=self._timeout),
                timeout=self._timeout,
            )
        except Exception as e:
            kind = classify_error(e)
            logger.error(
                "firestore.query_failed",
                collection=query.collection,
                kind=kind.value,
                error=str(e),
            )
            raise QueryError(kind, f"Firestore query failed: {e}") from e

        try:
            records = tuple(decode_snapshot(s) for s in snapshots)
        except ValidationError as e:
            logger.error(
                "firestore.malformed_record",
                collection=query.collection,
                error_count=e.error_count(),
                error=str(e),
            )
            raise QueryError(QueryErrorKind.UNKNOWN, f"Malformed record in page: {e}") from e

        cursor: Optional[object] = snapshots[-1] if snapshots else None
        logger.debug(
            "firestore.page_fetched",
            collection=query.collection,
            count=len(records),
            resumed=query.start_after is not None,
        )
        return Page(records=records, cursor=cursor)

    async def close(self) -> None:
        try:
            result = self._client.close()
            if inspect.isawaitable(result):
                await result
            logger.debug("firestore.client_closed")
        except Exception as e:
            logger.warning("firestore.close_failed", error=str(e))
