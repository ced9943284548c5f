"""Cursor-based incremental loader for a single ticker's news feed."""

import asyncio
from typing import Any, Optional

import structlog

from stocknews.config import FeedConfig
from stocknews.feed.channel import StateChannel
from stocknews.models import FeedFailure, FeedResult, FeedState, FeedSuccess
from stocknews.store.base import DocumentQueryService, FeedQuery, QueryError, QueryErrorKind

logger = structlog.get_logger(__name__)

ERROR_MESSAGES = {
    QueryErrorKind.NETWORK_UNAVAILABLE: "Network error. Please check your connection.",
    QueryErrorKind.UNKNOWN: "An unknown error occurred.",
}


def error_message(error: Exception) -> str:
    """User-facing message for a failed page load."""
    kind = error.kind if isinstance(error, QueryError) else QueryErrorKind.UNKNOWN
    return ERROR_MESSAGES[kind]


class PagedFeedController:
    """Loads a ticker's articles page by page and publishes each state change.

    Only one query is ever outstanding: `load` returns immediately while a
    page is in flight, and once the end of the data has been seen it does
    nothing until a forced refresh.
    """

    def __init__(self, service: DocumentQueryService, config: Optional[FeedConfig] = None):
        self._service = service
        self._config = config or FeedConfig()
        self._channel: StateChannel[FeedResult] = StateChannel(FeedSuccess())
        self._cursor: Optional[Any] = None
        self._ticker: Optional[str] = None

    @property
    def channel(self) -> StateChannel[FeedResult]:
        return self._channel

    @property
    def result(self) -> FeedResult:
        return self._channel.value

    @property
    def ticker(self) -> Optional[str]:
        return self._ticker

    @property
    def has_cursor(self) -> bool:
        return self._cursor is not None

    def _current_state(self) -> FeedState:
        result = self._channel.value
        return result.state if isinstance(result, FeedSuccess) else FeedState()

    async def load(self, ticker: str, force_refresh: bool = False) -> None:
        ticker = (ticker or "").strip()
        if not ticker:
            raise ValueError("ticker must be a non-empty string")

        if self._channel.closed:
            logger.debug("feed.load_skipped", ticker=ticker, reason="closed")
            return

        current = self._current_state()
        if current.is_loading:
            logger.debug("feed.load_skipped", ticker=ticker, reason="in_flight")
            return

        if self._ticker is not None and ticker != self._ticker:
            force_refresh = True
        if not force_refresh and current.end_reached:
            logger.debug("feed.load_skipped", ticker=ticker, reason="end_reached")
            return

        self._ticker = ticker
        if force_refresh:
            self._cursor = None
        is_initial = self._cursor is None

        if force_refresh:
            base = FeedState()
        else:
            base = current.model_copy(update={"error_loading_next_page": None})
        in_flight = base.model_copy(
            update={
                "is_loading_initial_page": is_initial,
                "is_loading_next_page": not is_initial,
            }
        )
        self._publish(FeedSuccess(state=in_flight))

        logger.info(
            "feed.load_started",
            ticker=ticker,
            initial=is_initial,
            refresh=force_refresh,
            loaded=len(base.articles),
        )

        query = FeedQuery(
            collection=self._config.collection,
            filters={"stockTicker": ticker, "eventSource": self._config.source},
            order_by="eventTime",
            descending=True,
            limit=self._config.page_size,
            start_after=self._cursor,
        )

        try:
            page = await self._service.query(query)
        except asyncio.CancelledError:
            # Leave no loading flag behind, or later loads would be refused
            logger.info("feed.load_cancelled", ticker=ticker, initial=is_initial)
            self._publish(FeedSuccess(state=base))
            raise
        except Exception as e:
            message = error_message(e)
            logger.error(
                "feed.load_failed",
                ticker=ticker,
                initial=is_initial,
                error=str(e),
                exc_info=not isinstance(e, QueryError),
            )
            if is_initial:
                self._publish(FeedFailure(message=message))
            else:
                self._publish(
                    FeedSuccess(
                        state=base.model_copy(update={"error_loading_next_page": message})
                    )
                )
            return

        if page.is_empty:
            self._publish(FeedSuccess(state=base.model_copy(update={"end_reached": True})))
            logger.info("feed.end_reached", ticker=ticker, loaded=len(base.articles))
            return

        self._cursor = page.cursor
        articles = base.articles + tuple(page.records)
        end_reached = len(page.records) < self._config.page_size
        self._publish(
            FeedSuccess(state=FeedState(articles=articles, end_reached=end_reached))
        )
        logger.info(
            "feed.page_loaded",
            ticker=ticker,
            count=len(page.records),
            loaded=len(articles),
            end_reached=end_reached,
        )

    async def retry(self) -> None:
        """Reload the page that failed, keeping what is already shown."""
        await self._resume("retry")

    async def on_near_end_of_list(self) -> None:
        await self._resume("near_end")

    async def _resume(self, trigger: str) -> None:
        if self._ticker is None:
            logger.debug("feed.load_skipped", reason="no_ticker", trigger=trigger)
            return
        await self.load(self._ticker)

    def _publish(self, result: FeedResult) -> None:
        # A controller closed mid-flight drops the late result.
        if self._channel.closed:
            logger.debug("feed.result_discarded", ticker=self._ticker, phase=result.phase.value)
            return
        self._channel.publish(result)

    def close(self) -> None:
        self._channel.close()
