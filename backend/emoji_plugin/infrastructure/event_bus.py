"""In-Process Event Bus — publish/subscribe for emoji lifecycle events.

Invariants:
    - Handlers for a topic run in subscription order, each awaited before the next
    - A handler error propagates to the publisher; later handlers do not run
    - Publishing to a topic with no subscribers is a no-op
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, dict], Awaitable[None]]


class InProcessEventBus:
    """Event bus for single-process hosts."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: EventHandler) -> Callable[[], None]:
        """Register `handler` for `topic`. Returns an unsubscribe callable."""
        self._handlers[topic].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[topic]:
                self._handlers[topic].remove(handler)

        return unsubscribe

    async def publish(self, topic: str, payload: dict) -> None:
        handlers = list(self._handlers.get(topic, ()))
        logger.debug(
            f"Publishing to {len(handlers)} handler(s)", extra={"topic": topic},
        )
        for handler in handlers:
            await handler(topic, payload)
