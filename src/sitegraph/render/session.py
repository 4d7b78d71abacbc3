"""
Session-scoped visited tracking.

``SessionStorage`` mirrors the browser's sessionStorage: string keys and
string values that live exactly as long as one browsing session. The
visited set is stored under a single key as a JSON array of slugs and is
purely advisory; it only changes node colors.
"""

import json
import logging
from typing import Dict, List, Optional, Set

from ..config import VISITED_STORAGE_KEY

logger = logging.getLogger(__name__)


class SessionStorage:
    """In-memory key/value store scoped to one session."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class VisitedSet:
    """Slugs the user navigated to during this session."""

    def __init__(self, storage: SessionStorage, key: str = VISITED_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def slugs(self) -> List[str]:
        """Visited slugs in the order they were first visited."""
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring malformed visited set under '{self.key}'")
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring visited set under '{self.key}': not a list")
            return []
        return list(dict.fromkeys(str(slug) for slug in data))

    def load(self) -> Set[str]:
        return set(self.slugs())

    def add(self, slug: str) -> None:
        slugs = self.slugs()
        if slug not in slugs:
            slugs.append(slug)
            self.storage.set_item(self.key, json.dumps(slugs))

    def __contains__(self, slug: object) -> bool:
        return slug in self.load()

    def __len__(self) -> int:
        return len(self.slugs())
