"""Translate renderer intents into feed controller calls."""

from typing import Optional

import structlog

from stocknews.config import FeedConfig
from stocknews.feed.controller import PagedFeedController

logger = structlog.get_logger(__name__)


class FeedScreen:
    """The seam between a renderer and one PagedFeedController."""

    def __init__(self, controller: PagedFeedController, config: Optional[FeedConfig] = None):
        self._controller = controller
        self._gap = (config or FeedConfig()).scroll_refresh_gap
        self._ticker: Optional[str] = None
        self._last_visible_index: Optional[int] = None

    @property
    def controller(self) -> PagedFeedController:
        return self._controller

    async def on_mount(self, ticker: str) -> None:
        self._ticker = ticker
        self._last_visible_index = None
        await self._controller.load(ticker, force_refresh=True)

    async def on_pull_to_refresh(self) -> None:
        if self._ticker is None:
            logger.debug("screen.refresh_before_mount")
            return
        self._last_visible_index = None
        await self._controller.load(self._ticker, force_refresh=True)

    async def on_scroll_near(self, last_visible_index: int, total_count: int) -> bool:
        """Report the last visible row. Returns True if a next page was requested."""
        if last_visible_index == self._last_visible_index:
            return False
        self._last_visible_index = last_visible_index

        if total_count <= 0 or total_count - last_visible_index > self._gap:
            return False

        logger.debug(
            "screen.near_end",
            last_visible_index=last_visible_index,
            total_count=total_count,
        )
        await self._controller.on_near_end_of_list()
        return True

    async def on_retry_tapped(self) -> None:
        await self._controller.retry()
