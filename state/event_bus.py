"""Simple publish/subscribe event bus used by the asset loader."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List

EventCallback = Callable[..., None]


class EventBus:
    """Minimalistic event dispatcher.

    Subscribers register callbacks for string based event identifiers.  When an
    event is published all callbacks for that name are invoked with the supplied
    positional arguments.  Callbacks run synchronously on the publisher's
    thread.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventCallback]] = defaultdict(list)

    def subscribe(self, event: str, callback: EventCallback) -> None:
        """Register ``callback`` to be invoked when ``event`` is published."""

        self._subscribers[event].append(callback)

    def publish(self, event: str, *args: Any) -> None:
        """Invoke all callbacks subscribed to ``event``."""

        for cb in list(self._subscribers.get(event, [])):
            cb(*args)

    def reset(self) -> None:
        """Drop every subscription."""

        self._subscribers.clear()


# Global bus instance used by modules -----------------------------------
EVENT_BUS = EventBus()

# Event name constants ---------------------------------------------------
ON_ASSET_LOADED = "on_asset_loaded"
ON_ASSET_SKIPPED = "on_asset_skipped"
ON_ASSET_LOAD_PROGRESS = "on_asset_load_progress"
