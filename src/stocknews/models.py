"""Domain models for the stock news feed."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class FeedPhase(str, Enum):
    IDLE = "IDLE"
    LOADING_INITIAL = "LOADING_INITIAL"
    LOADING_NEXT = "LOADING_NEXT"
    READY = "READY"
    READY_WITH_ERROR = "READY_WITH_ERROR"
    FAILED = "FAILED"


class MarketNewsArticle(BaseModel):
    """A market-news document as stored in the `market-news` collection."""

    id: str
    stock_ticker: str = Field(alias="stockTicker")
    event_time: datetime = Field(alias="eventTime")
    event_title: str = Field(alias="eventTitle")

    event_source: Optional[str] = Field(None, alias="eventSource")
    event_summary: Optional[str] = Field(None, alias="eventSummary")
    event_publisher: Optional[str] = Field(None, alias="eventPublisher")
    event_url: Optional[str] = Field(None, alias="eventURL")
    event_image_url: Optional[str] = Field(None, alias="eventImageURL")
    event_id: Optional[int] = Field(None, alias="eventId")
    event_type: Optional[str] = Field(None, alias="eventType")
    event_sub_type: Optional[str] = Field(None, alias="eventSubType")
    event_impact: Optional[int] = Field(None, alias="eventImpact")
    event_duration: Optional[str] = Field(None, alias="eventDuration")

    # LLM annotations
    why_impact: Optional[str] = Field(None, alias="whyImpact")
    why_event_type: Optional[str] = Field(None, alias="whyEventType")
    why_duration: Optional[str] = Field(None, alias="whyDuration")
    ai_done: bool = Field(False, alias="aiDone")
    ai_processing: bool = Field(False, alias="aiProcessing")
    ai_finished_at: Optional[datetime] = Field(None, alias="aiFinishedAt")
    ai_processing_started_at: Optional[datetime] = Field(None, alias="aiProcessingStartedAt")

    ttl_delete_time: Optional[datetime] = Field(None, alias="ttlDeleteTime")

    model_config = {"populate_by_name": True, "frozen": True}


class FeedState(BaseModel):
    """Snapshot of the paginated feed handed to the renderer."""

    articles: tuple[MarketNewsArticle, ...] = ()
    is_loading_initial_page: bool = False
    is_loading_next_page: bool = False
    end_reached: bool = False
    error_loading_next_page: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def single_loading_flag(self):
        if self.is_loading_initial_page and self.is_loading_next_page:
            raise ValueError("initial and next page cannot be loading at the same time")
        return self

    @property
    def is_loading(self) -> bool:
        return self.is_loading_initial_page or self.is_loading_next_page


class FeedSuccess(BaseModel):
    kind: Literal["success"] = "success"
    state: FeedState = Field(default_factory=FeedState)

    model_config = {"frozen": True}

    @property
    def phase(self) -> FeedPhase:
        state = self.state
        if state.is_loading_initial_page:
            return FeedPhase.LOADING_INITIAL
        if state.is_loading_next_page:
            return FeedPhase.LOADING_NEXT
        if state.error_loading_next_page is not None:
            return FeedPhase.READY_WITH_ERROR
        if not state.articles and not state.end_reached:
            return FeedPhase.IDLE
        return FeedPhase.READY


class FeedFailure(BaseModel):
    """The first page could not be loaded; nothing else to show."""

    kind: Literal["failure"] = "failure"
    message: str

    model_config = {"frozen": True}

    @property
    def phase(self) -> FeedPhase:
        return FeedPhase.FAILED


FeedResult = Annotated[Union[FeedSuccess, FeedFailure], Field(discriminator="kind")]
