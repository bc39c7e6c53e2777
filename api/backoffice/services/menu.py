"""Navigation menu used for breadcrumbs and global search."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from backoffice.services.events import GlobalSearchEvent

logger = logging.getLogger(__name__)

MENU_SEARCH_GROUP = "menu"


@dataclass(frozen=True)
class MenuItem:
    route_name: str
    label: str
    uri: str
    parent: Optional[str] = None


class MenuRegistry:
    """Menu items keyed by route name, linked to their parents."""

    def __init__(self) -> None:
        self._items: Dict[str, MenuItem] = {}

    def add(self, item: MenuItem) -> None:
        if item.parent and item.parent not in self._items:
            raise ValueError(
                f"Parent '{item.parent}' of menu item '{item.route_name}' is not registered"
            )
        self._items[item.route_name] = item

    def get(self, route_name: str) -> Optional[MenuItem]:
        item = self._items.get(route_name)
        if item is None and "|" in route_name:
            item = self._items.get(route_name.split("|", 1)[0])
        return item

    def find_by_uri(self, uri: str) -> Optional[MenuItem]:
        path = uri.split("?", 1)[0]
        for item in self._items.values():
            if item.uri == path:
                return item
        return None

    def trail(self, route_name: Optional[str] = None, uri: Optional[str] = None) -> List[MenuItem]:
        """Breadcrumb trail from the root to the matching item.

        The route name wins over the URI; an unknown route yields an empty trail.
        """
        item = self.get(route_name) if route_name else None
        if item is None and uri:
            item = self.find_by_uri(uri)

        trail: List[MenuItem] = []
        while item is not None:
            trail.append(item)
            item = self._items.get(item.parent) if item.parent else None
        trail.reverse()
        return trail

    def search(self, needle: str) -> List[MenuItem]:
        needle = needle.strip().lower()
        if not needle:
            return []
        return [item for item in self._items.values() if needle in item.label.lower()]

    def on_global_search(self, event: GlobalSearchEvent) -> None:
        matches = self.search(event.search_string)
        event.add_results(
            MENU_SEARCH_GROUP,
            [{"label": item.label, "uri": item.uri} for item in matches],
        )
