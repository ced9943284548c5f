"""Configuration loading and validation using Pydantic."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class FeedConfig(BaseModel):
    ticker: str = "AAPL"
    collection: str = "market-news"
    source: str = "Finnhub News"
    page_size: int = Field(default=5, ge=1, le=500)
    scroll_refresh_gap: int = Field(default=3, ge=0)

    @field_validator("ticker", "collection", "source")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class FirestoreConfig(BaseModel):
    project_id: Optional[str] = None
    database: str = "(default)"
    timeout_seconds: float = Field(default=10.0, gt=0)


class FixtureConfig(BaseModel):
    path: str = "config/fixtures/market_news.yaml"


class RenderConfig(BaseModel):
    timezone: str = "America/New_York"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    app_log: str = "logs/stocknews.log"
    max_bytes: int = 10485760
    backup_count: int = 5


class ProvidersConfig(BaseModel):
    store: str = "firestore"


class AppConfig(BaseModel):
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    firestore: FirestoreConfig = Field(default_factory=FirestoreConfig)
    fixture: FixtureConfig = Field(default_factory=FixtureConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Secrets(BaseSettings):
    """Loaded from .env file automatically."""

    gcp_project_id: str = ""
    google_application_credentials: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return AppConfig(**raw)


def resolve_ticker(config: AppConfig) -> str:
    """Resolve the ticker to show.

    Priority:
    1. STOCKNEWS_TICKER env var
    2. feed.ticker from config
    """
    env_ticker = os.getenv("STOCKNEWS_TICKER", "").strip()
    if env_ticker:
        return env_ticker.upper()
    return config.feed.ticker.upper()


def resolve_project_id(config: AppConfig, secrets: Secrets) -> Optional[str]:
    """Firestore project: config wins over the .env value; None lets the client infer it."""
    return config.firestore.project_id or secrets.gcp_project_id or None
