"""Synchronous in-process event bus.

Listeners are called in priority order (lower = earlier) with the event
object, which they may populate. The populated event is returned to the
dispatcher.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


class CoreEvents:
    """Event names dispatched by the core."""

    GLOBAL_SEARCH = "backoffice.global_search"


class ListenerPriority:
    """Listener execution priority (lower = earlier)."""

    HIGH = 100
    NORMAL = 200
    LOW = 300


@dataclass
class GlobalSearchEvent:
    """Search fan-out payload; providers append their results by group."""

    search_string: str
    results: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

    def add_results(self, group: str, items: List[Dict[str, Any]]) -> None:
        if items:
            self.results.setdefault(group, []).extend(items)


Listener = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Tuple[int, int, Listener]]] = {}
        self._sequence = 0

    def subscribe(
        self, event_name: str, listener: Listener, priority: int = ListenerPriority.NORMAL
    ) -> None:
        # Sequence keeps registration order stable within one priority
        self._sequence += 1
        listeners = self._listeners.setdefault(event_name, [])
        listeners.append((priority, self._sequence, listener))
        listeners.sort(key=lambda entry: (entry[0], entry[1]))

    def listeners(self, event_name: str) -> List[Listener]:
        return [listener for _, _, listener in self._listeners.get(event_name, [])]

    def dispatch(self, event_name: str, event: Any) -> Any:
        listeners = self.listeners(event_name)
        logger.debug(f"Dispatching {event_name} to {len(listeners)} listeners")
        for listener in listeners:
            listener(event)
        return event
