"""
Event Bus.

In-process publish/subscribe for note domain events. Handlers are plain
callables or coroutine functions registered per event type; "*" receives
every event.

Usage:
    from agentic_notes.events.bus import EventBus

    bus = EventBus()
    bus.subscribe("notes.note.binned", on_binned)
    await bus.publish(event)
"""

import inspect
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from agentic_notes.core.logging import get_logger
from agentic_notes.events.schemas import EventEnvelope

logger = get_logger(__name__)

ALL_EVENTS = "*"

Handler = Callable[[EventEnvelope], Awaitable[None] | None]


class EventBus:
    """Dispatches events to handlers in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for an event type.

        Returns:
            A function that unregisters the handler
        """
        self._handlers[event_type].append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return _unsubscribe

    async def publish(self, event: EventEnvelope) -> int:
        """
        Deliver an event to every matching handler.

        A failing handler is logged and does not stop delivery to the rest.

        Returns:
            Number of handlers that completed successfully
        """
        handlers = [*self._handlers[event.event_type], *self._handlers[ALL_EVENTS]]
        delivered = 0

        structlog.contextvars.bind_contextvars(
            event_id=event.event_id,
            event_type=event.event_type,
        )
        try:
            for handler in handlers:
                try:
                    result: Any = handler(event)
                    if inspect.isawaitable(result):
                        await result
                    delivered += 1
                except Exception as exc:
                    logger.error(
                        "Event handler failed",
                        extra={"handler": getattr(handler, "__name__", repr(handler)), "error": str(exc)},
                    )
        finally:
            structlog.contextvars.unbind_contextvars("event_id", "event_type")

        logger.debug("Event published", extra={"handlers": delivered})
        return delivered
