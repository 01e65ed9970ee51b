"""A small in-process publish/subscribe message bus."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

Callback = Callable[[Any], None]


class Bus:
    """Delivers messages to the callbacks subscribed to a topic, in subscription order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callback]] = defaultdict(list)

    def subscribe(self, topic: str, callback: Callback) -> Callable[[], None]:
        """Register ``callback`` for ``topic``; return a function that removes it."""
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(topic, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def publish(self, topic: str, message: Any) -> None:
        """Hand ``message`` to every callback subscribed to ``topic``."""
        for callback in list(self._subscribers.get(topic, ())):
            callback(message)