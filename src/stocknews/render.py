"""Plain-text rendering of feed results for the console session."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from stocknews.models import FeedFailure, FeedPhase, FeedResult, MarketNewsArticle

DEFAULT_TZ = "America/New_York"


def format_event_time(when: datetime, tz_name: str = DEFAULT_TZ) -> str:
    """Format like "9/15/2023 3:30 PM ET" in the given zone."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    local = when.astimezone(ZoneInfo(tz_name))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    suffix = " ET" if tz_name == DEFAULT_TZ else f" {local.tzname()}"
    return f"{local.month}/{local.day}/{local.year} {hour}:{local.minute:02d} {meridiem}{suffix}"


def render_article(article: MarketNewsArticle, tz_name: str = DEFAULT_TZ) -> str:
    lines = [article.event_title, f"  {format_event_time(article.event_time, tz_name)}"]
    if article.event_publisher:
        lines[-1] += f"  ({article.event_publisher})"
    return "\n".join(lines)


def render_result(result: FeedResult, ticker: str, tz_name: str = DEFAULT_TZ) -> str:
    """Render one published result as the whole screen."""
    header = f"{ticker} Stock News"

    if isinstance(result, FeedFailure):
        return f"{header}\n\nError: {result.message}"

    state = result.state
    body: list[str] = []

    if not state.articles and not state.is_loading_initial_page:
        body.append(f"No articles found for {ticker}.")

    for index, article in enumerate(state.articles, start=1):
        body.append(f"{index:>3}. {render_article(article, tz_name)}")

    # Footer
    if result.phase == FeedPhase.LOADING_NEXT:
        body.append("  ... loading more")
    elif result.phase == FeedPhase.READY_WITH_ERROR:
        body.append(f"  Error: {state.error_loading_next_page}  [retry]")
    elif state.end_reached and state.articles:
        body.append("  -- end of feed --")

    if state.is_loading_initial_page:
        body.append("Loading...")

    return "\n".join([header, ""] + body)
