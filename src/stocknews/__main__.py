"""Entry point: python -m stocknews"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from stocknews.config import AppConfig, Secrets, load_config, resolve_ticker
from stocknews.feed.controller import PagedFeedController
from stocknews.feed.intents import FeedScreen
from stocknews.logging_config import configure_logging
from stocknews.models import FeedResult, FeedSuccess
from stocknews.providers import create_query_service
from stocknews.render import render_result
from stocknews.store.base import DocumentQueryService

logger = structlog.get_logger(__name__)


async def run_session(screen: FeedScreen, ticker: str, max_pages: int, tz_name: str) -> FeedResult:
    """Mount the feed, then keep scrolling to the bottom until there is nothing more to load."""
    controller = screen.controller

    def show(result: FeedResult) -> None:
        print(render_result(result, ticker, tz_name))
        print("-" * 40)

    unsubscribe = controller.channel.subscribe(show)
    try:
        await screen.on_mount(ticker)
        pages = 1
        while pages < max_pages:
            result = controller.result
            if not isinstance(result, FeedSuccess):
                break
            state = result.state
            if state.end_reached or state.error_loading_next_page is not None:
                break
            # One extra row for the list footer
            total = len(state.articles) + 1
            if not await screen.on_scroll_near(total - 1, total):
                break
            pages += 1
        return controller.result
    finally:
        unsubscribe()


async def _main(config: AppConfig, service: DocumentQueryService, ticker: str, max_pages: int) -> int:
    controller = PagedFeedController(service, config.feed)
    screen = FeedScreen(controller, config.feed)
    try:
        result = await run_session(screen, ticker, max_pages, config.render.timezone)
    finally:
        controller.close()
        await service.close()
    return 0 if isinstance(result, FeedSuccess) else 1


def main():
    parser = argparse.ArgumentParser(prog="stocknews", description="Page through a ticker's market news.")
    parser.add_argument("--config", type=Path, default=Path("config/settings.yaml"))
    parser.add_argument("--ticker", help="Ticker to show (overrides config and STOCKNEWS_TICKER)")
    parser.add_argument("--pages", type=int, default=3, help="Maximum pages to load")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (OSError, ValidationError) as e:
        print(f"Failed to load config from {args.config}: {e}")
        sys.exit(1)

    try:
        secrets = Secrets()
    except ValidationError as e:
        print(f"Failed to load secrets from .env: {e}")
        sys.exit(1)

    configure_logging(config.logging)

    try:
        service = create_query_service(config, secrets)
    except (OSError, ValueError) as e:
        print(f"Failed to create '{config.providers.store}' store: {e}")
        sys.exit(1)

    ticker = args.ticker.strip().upper() if args.ticker else resolve_ticker(config)
    logger.info("stocknews.starting", ticker=ticker, store=config.providers.store, pages=args.pages)
    sys.exit(asyncio.run(_main(config, service, ticker, max(1, args.pages))))


if __name__ == "__main__":
    main()
