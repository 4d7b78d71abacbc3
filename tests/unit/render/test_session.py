"""Unit tests for session storage and the visited set."""

import json

from sitegraph.config import VISITED_STORAGE_KEY
from sitegraph.render.session import SessionStorage, VisitedSet


class TestVisitedSet:
    def test_fresh_session_is_empty(self):
        visited = VisitedSet(SessionStorage())
        assert visited.load() == set()
        assert len(visited) == 0

    def test_additions_persist_within_session(self):
        storage = SessionStorage()
        VisitedSet(storage).add("guides/setup")
        VisitedSet(storage).add("reference/api")
        VisitedSet(storage).add("guides/setup")

        visited = VisitedSet(storage)
        assert visited.slugs() == ["guides/setup", "reference/api"]
        assert "reference/api" in visited
        assert json.loads(storage.get_item(VISITED_STORAGE_KEY)) == ["guides/setup", "reference/api"]

    def test_new_session_forgets(self):
        storage = SessionStorage()
        VisitedSet(storage).add("a")
        assert len(VisitedSet(SessionStorage())) == 0
        storage.clear()
        assert len(VisitedSet(storage)) == 0

    def test_malformed_value_is_treated_as_empty(self):
        storage = SessionStorage()
        storage.set_item(VISITED_STORAGE_KEY, "{not json")
        assert VisitedSet(storage).load() == set()

        storage.set_item(VISITED_STORAGE_KEY, '{"a": 1}')
        assert VisitedSet(storage).load() == set()

        VisitedSet(storage).add("b")
        assert VisitedSet(storage).slugs() == ["b"]

    def test_removed_key_resets_visited(self):
        storage = SessionStorage()
        VisitedSet(storage).add("a")
        storage.remove_item(VISITED_STORAGE_KEY)
        assert storage.get_item(VISITED_STORAGE_KEY) is None
        assert len(VisitedSet(storage)) == 0
