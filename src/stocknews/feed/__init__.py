"""Feed pagination core: controller, state channel and renderer intents."""

from stocknews.feed.channel import StateChannel
from stocknews.feed.controller import PagedFeedController, error_message
from stocknews.feed.intents import FeedScreen

__all__ = [
    "StateChannel",
    "PagedFeedController",
    "FeedScreen",
    "error_message",
]
