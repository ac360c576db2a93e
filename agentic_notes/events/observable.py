"""
Reactive State Channels.

A StateChannel holds a current value and pushes every change to its
subscribers, in the order the changes were applied. Setting a value equal
to the current one is not a change and is not delivered.

Derived channels (``map`` and ``combine``) recompute whenever any source
changes, so the UI never has to re-fetch anything.

Usage:
    from agentic_notes.events.observable import StateChannel, combine

    query = StateChannel("")
    subscription = query.subscribe(lambda value: print("query:", value))
    query.set("milk")
    subscription.cancel()

    # Async consumers
    async for value in query.stream():
        ...
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any, Generic, TypeVar

from agentic_notes.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Callback = Callable[[T], None]


class Subscription:
    """Handle returned by StateChannel.subscribe."""

    def __init__(self, channel: "StateChannel[Any]", callback: Callable[[Any], None]) -> None:
        self._channel = channel
        self._callback = callback
        self.active = True

    def cancel(self) -> None:
        """Stop receiving values. Safe to call more than once."""
        if self.active:
            self._channel._remove(self._callback)
            self.active = False


class StateChannel(Generic[T]):
    """Observable value with push delivery to subscribers."""

    def __init__(self, initial: T, name: str | None = None) -> None:
        self._value = initial
        self.name = name or self.__class__.__name__
        self._callbacks: list[Callable[[T], None]] = []

    def __repr__(self) -> str:
        return f"<StateChannel(name={self.name!r}, value={self._value!r})>"

    @property
    def value(self) -> T:
        """Current value."""
        return self._value

    def set(self, value: T) -> bool:
        """
        Replace the current value and notify subscribers.

        Returns:
            True if the value changed and was delivered
        """
        if value == self._value:
            return False
        self._value = value
        self._notify(value)
        return True

    def update(self, fn: Callable[[T], T]) -> T:
        """Apply fn to the current value and set the result."""
        self.set(fn(self._value))
        return self._value

    def subscribe(self, callback: Callable[[T], None], *, replay: bool = True) -> Subscription:
        """
        Register a callback for value changes.

        Args:
            callback: Called with each new value
            replay: Also call it immediately with the current value

        Returns:
            Subscription handle; cancel() it to unsubscribe
        """
        self._callbacks.append(callback)
        if replay:
            self._deliver(callback, self._value)
        return Subscription(self, callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    async def stream(self) -> AsyncIterator[T]:
        """
        Iterate over the current value and every later change.

        Each consumer gets its own unbounded queue, so no value is dropped
        even if the consumer is slower than the producer.
        """
        queue: asyncio.Queue[T] = asyncio.Queue()
        subscription = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.cancel()

    def map(self, fn: Callable[[T], R], name: str | None = None) -> "StateChannel[R]":
        """Derive a channel holding fn(value), kept in sync with this one."""
        return combine([self], lambda value: fn(value), name=name)

    def _remove(self, callback: Callable[[T], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify(self, value: T) -> None:
        for callback in list(self._callbacks):
            self._deliver(callback, value)

    def _deliver(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception(
                "Channel subscriber failed",
                extra={"channel": self.name},
            )


def combine(
    sources: Sequence[StateChannel[Any]],
    transform: Callable[..., R],
    name: str | None = None,
) -> StateChannel[R]:
    """
    Derive a channel from several sources.

    ``transform`` receives the current value of every source, in order, and
    is re-run whenever any of them changes.
    """
    derived: StateChannel[R] = StateChannel(
        transform(*(source.value for source in sources)),
        name=name,
    )

    def _recompute(_: Any) -> None:
        derived.set(transform(*(source.value for source in sources)))

    for source in sources:
        source.subscribe(_recompute, replay=False)
    return derived
