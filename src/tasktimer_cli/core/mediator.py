"""Publish/subscribe mediator.

Tasks publish lifecycle events here instead of calling the board that
displays them. Dispatch is synchronous: every subscriber of a topic has
run before ``publish`` returns.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable
from enum import Enum
from functools import lru_cache
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class Topic(str, Enum):
    """Topics published by tasks and the task store."""

    TASK_ADDED = "TASK_ADDED"
    TASK_REMOVE = "TASK_REMOVE"  # removal requested, awaiting confirmation
    TASK_REMOVED = "TASK_REMOVED"
    TASK_FINISHED = "TASK_FINISHED"
    TASK_TICK = "TASK_TICK"

    def __str__(self) -> str:
        return self.value


class Subscription:
    """Handle returned by :meth:`Mediator.subscribe`.

    Dispose it when the subscriber goes away; it can also be used as a
    context manager to scope the subscription to a block.
    """

    def __init__(self, mediator: Mediator, topic: str, callback: Callback):
        self._mediator = mediator
        self.topic = topic
        self.callback = callback
        self.active = True

    def dispose(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self.active:
            self._mediator.unsubscribe(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "active" if self.active else "disposed"
        return f"<Subscription {self.topic} {state}>"


class Mediator:
    """In-process event bus keyed by topic."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[Subscription]] = defaultdict(list)
        self._pending: deque[tuple[str, Any]] = deque()
        self._dispatching = False

    def subscribe(self, topic: str, callback: Callback) -> Subscription:
        """Register *callback* for *topic*.

        The same callback may be registered several times; each registration
        is called once per publish.
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {callback!r}")
        key = str(topic)
        subscription = Subscription(self, key, callback)
        self._subscribers[key].append(subscription)
        logger.debug("subscribed to %s (%d total)", key, len(self._subscribers[key]))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        subscribers = self._subscribers.get(subscription.topic)
        if not subscribers:
            return
        for index, existing in enumerate(subscribers):
            if existing is subscription:
                del subscribers[index]
                break
        if not subscribers:
            del self._subscribers[subscription.topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(str(topic), ()))

    def clear(self) -> None:
        """Drop every subscription."""
        for subscribers in self._subscribers.values():
            for subscription in subscribers:
                subscription.active = False
        self._subscribers.clear()

    def publish(self, topic: str, payload: Any = None) -> None:
        """Deliver *payload* to every subscriber of *topic*, in order.

        A publish made by a subscriber while a dispatch is in progress is
        queued and delivered once the current subscriber list has finished,
        still before the outermost ``publish`` returns.
        """
        self._pending.append((str(topic), payload))
        if self._dispatching:
            logger.debug("queued re-entrant publish on %s", topic)
            return

        self._dispatching = True
        try:
            while self._pending:
                key, item = self._pending.popleft()
                self._dispatch(key, item)
        finally:
            self._dispatching = False
            self._pending.clear()

    def _dispatch(self, topic: str, payload: Any) -> None:
        subscribers = list(self._subscribers.get(topic, ()))
        if not subscribers:
            logger.debug("no subscribers for %s", topic)
            return

        for subscription in subscribers:
            # Disposed by an earlier subscriber during this dispatch.
            if not subscription.active:
                continue
            try:
                subscription.callback(payload)
            except Exception:
                logger.exception(
                    "subscriber %r failed on %s", subscription.callback, topic
                )


@lru_cache(maxsize=1)
def get_mediator() -> Mediator:
    """Get the process-wide mediator."""
    return Mediator()
