"""Simulation event stream: typed events and a predicate-filtered bus."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

EventListener = Callable[["Event"], Any]
EventPredicate = Callable[["Event"], bool]


@dataclass(frozen=True)
class Event:
    """A simulation event: a type string plus named attributes."""

    type: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


@dataclass(frozen=True, eq=False)
class Subscription:
    """Handle returned by EventBus.subscribe; pass it back to unsubscribe."""

    listener: EventListener
    predicate: EventPredicate


def type_prefix_filter(prefix: str) -> EventPredicate:
    """Build a predicate accepting events whose type starts with prefix."""

    def _accepts(event: Event) -> bool:
        return event.type.startswith(prefix)

    return _accepts


class EventBus:
    """
    Delivers published events to subscribed listeners.

    Delivery is synchronous, in the publisher's thread. Each publish works on
    a copy of the registry, so subscribing or unsubscribing from inside a
    listener (or another thread) never disturbs an ongoing delivery. A
    listener that raises is logged and skipped; the publisher never sees
    the exception.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(self, listener: EventListener, predicate: EventPredicate) -> Subscription:
        subscription = Subscription(listener=listener, predicate=predicate)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug(f"Subscribed {listener!r}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """
        Remove a subscription.

        Returns:
            True if it was registered, False if it was already gone
        """
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                return False
        logger.debug(f"Unsubscribed {subscription.listener!r}")
        return True

    def publish(self, event: Event) -> int:
        """
        Deliver an event to every subscription whose predicate accepts it.

        Returns:
            Number of listeners the event was handed to
        """
        with self._lock:
            subscriptions = list(self._subscriptions)

        delivered = 0
        for subscription in subscriptions:
            try:
                if not subscription.predicate(event):
                    continue
                delivered += 1
                subscription.listener(event)
            except Exception:
                logger.exception(f"Listener failed on event '{event.type}'")
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)
