from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable

Listener = Callable[[Any], None]


class MapEvent(str, Enum):
    station_clicked = "station-clicked"
    cluster_clicked = "cluster-clicked"
    marker_ready = "marker-ready"


class EventBus:
    """
    Process-wide notifications for host-application listeners.

    Dispatch is synchronous and in subscription order; there is no queuing or batching.
    """

    def __init__(self) -> None:
        self._listeners: dict[MapEvent, list[Listener]] = defaultdict(list)

    def subscribe(self, event: MapEvent, listener: Listener) -> Callable[[], None]:
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners[event].remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event: MapEvent, payload: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            listener(payload)


_BUS: EventBus | None = None


def get_event_bus() -> EventBus:
    global _BUS
    if _BUS is None:
        _BUS = EventBus()
    return _BUS
