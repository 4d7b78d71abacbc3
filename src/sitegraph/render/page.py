"""
Page model.

The render layer draws into named containers on a page and reacts to events
dispatched to them. ``Page`` stands in for the browser document: it owns
the containers, the session storage and the navigation history.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from .session import SessionStorage

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """A user input event. ``target`` is the slug of the node under the pointer."""
    type: str
    target: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    k: float = 1.0
    key: str = ""


Listener = Callable[[Event], Any]


class EventTarget:
    """Minimal add/remove/dispatch listener registry."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            self._listeners.pop(event_type, None)

    def dispatch(self, event: Event) -> None:
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)

    def listener_count(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())


class Container(EventTarget):
    """A drawing target identified by id, carrying the graph configuration."""

    def __init__(
        self,
        id: str,
        width: float = 800.0,
        height: float = 250.0,
        cfg: Any = None,
    ):
        super().__init__()
        self.id = id
        self.width = width
        self.height = height
        self.cfg = cfg
        self.children: List[Any] = []
        self.classes: Set[str] = set()
        self.empty_state = False
        self.view: Any = None

    def append(self, child: Any) -> None:
        self.children.append(child)

    def clear(self) -> None:
        """Remove every child and any previous empty state."""
        self.children.clear()
        self.empty_state = False


class Page(EventTarget):
    """The document the graph is rendered into."""

    def __init__(self, location: str = "/", session: SessionStorage | None = None):
        super().__init__()
        self.location = location
        self.session = session or SessionStorage()
        self.history: List[str] = []
        self._elements: Dict[str, Container] = {}

    def add_container(self, container: Container) -> Container:
        self._elements[container.id] = container
        return container

    def get_element_by_id(self, element_id: str) -> Optional[Container]:
        return self._elements.get(element_id)

    def assign(self, href: str) -> None:
        """Navigate to ``href`` (relative to the current location)."""
        logger.debug(f"Navigating from {self.location} to {href}")
        self.history.append(href)
