"""Single-slot broadcast of the latest feed result."""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class StateChannel(Generic[T]):
    """Holds the current value and pushes every new one to subscribers.

    No history is kept: a subscriber that joins late sees the current value
    only, and an async reader that falls behind skips to the latest value.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._version = 0
        self._callbacks: list[Callable[[T], None]] = []
        self._waiters: list[asyncio.Future] = []
        self._closed = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, value: T) -> None:
        if self._closed:
            raise RuntimeError("cannot publish on a closed channel")
        self._value = value
        self._version += 1
        for callback in list(self._callbacks):
            self._deliver(callback, value)
        self._wake()

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Deliver the current value now and each later one. Returns an unsubscribe function."""
        self._callbacks.append(callback)
        self._deliver(callback, self._value)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def updates(self) -> AsyncIterator[T]:
        """Yield the current value, then each newer one until the channel closes."""
        seen = self._version
        yield self._value
        while True:
            if self._version == seen and not self._closed:
                waiter = asyncio.get_running_loop().create_future()
                self._waiters.append(waiter)
                try:
                    await waiter
                finally:
                    if waiter in self._waiters:
                        self._waiters.remove(waiter)
            if self._version == seen:
                return
            seen = self._version
            yield self._value

    def close(self) -> None:
        self._closed = True
        self._callbacks.clear()
        self._wake()

    def _deliver(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.error("channel.subscriber_failed", error=str(e), exc_info=True)

    def _wake(self) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)
