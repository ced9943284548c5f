"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from stocknews.config import AppConfig, Secrets
from stocknews.models import MarketNewsArticle


@pytest.fixture
def test_config() -> AppConfig:
    """Provide a test configuration with safe defaults."""
    return AppConfig(
        providers={"store": "fixture"},
        feed={
            "ticker": "AAPL",
            "collection": "market-news",
            "source": "Finnhub News",
            "page_size": 5,
            "scroll_refresh_gap": 3,
        },
        firestore={"project_id": "test-project", "timeout_seconds": 5},
        fixture={"path": "config/fixtures/market_news.yaml"},
        logging={
            "level": "DEBUG",
            "app_log": "/tmp/test_stocknews.log",
        },
    )


@pytest.fixture
def mock_secrets() -> Secrets:
    """Provide fake credentials for unit tests."""
    return Secrets(gcp_project_id="env-project", google_application_credentials="")


def _make_document(n: int, ticker: str = "AAPL", source: str = "Finnhub News") -> dict:
    """Raw stored document; higher n means older."""
    when = datetime(2026, 10, 15, 20, 0, tzinfo=timezone.utc) - timedelta(hours=n)
    return {
        "id": f"{ticker.lower()}-{n:04d}",
        "stockTicker": ticker,
        "eventSource": source,
        "eventTime": when,
        "eventTitle": f"{ticker} headline {n}",
        "eventPublisher": "Reuters",
        "eventImpact": 5,
    }


def _make_article(n: int, ticker: str = "AAPL") -> MarketNewsArticle:
    return MarketNewsArticle.model_validate(_make_document(n, ticker))


@pytest.fixture
def make_document():
    """Factory for raw stored documents."""
    return _make_document


@pytest.fixture
def make_article():
    """Factory for decoded articles."""
    return _make_article


@pytest.fixture
def sample_article() -> MarketNewsArticle:
    """Provide a realistic sample article."""
    return MarketNewsArticle(
        id="aapl-0001",
        stock_ticker="AAPL",
        event_time=datetime(2026, 10, 15, 20, 5, tzinfo=timezone.utc),
        event_title="Apple shares climb after services revenue tops estimates",
        event_source="Finnhub News",
        event_summary="Services revenue rose 14% year over year, ahead of consensus.",
        event_publisher="Reuters",
        event_impact=7,
    )
