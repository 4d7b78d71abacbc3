"""
Unit tests for the watch command and watcher logic.
"""

import time
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent

from sitegraph.cli.commands.watch import watch
from sitegraph.cli.watcher import FileSystemWatcher, RebuildEventHandler
from sitegraph.core.document import load_graph_document
from sitegraph.indexing import IndexConfig


@pytest.fixture
def handler(docs_root, tmp_path):
    return RebuildEventHandler(IndexConfig(root_dir=docs_root), tmp_path / "sitemap.json", cooldown=0.0)


class TestRebuildEventHandler:
    def test_markdown_change_rebuilds(self, handler, docs_root):
        handler.on_modified(FileModifiedEvent(str(docs_root / "index.md")))

        assert handler.rebuild_count == 1
        assert "guides/setup" in load_graph_document(handler.output)

    def test_ignored_directory(self, handler, docs_root):
        handler.on_modified(FileModifiedEvent(str(docs_root / "node_modules" / "pkg" / "readme.md")))
        assert handler.rebuild_count == 0
        assert not handler.output.exists()

    def test_non_markdown_file(self, handler, docs_root):
        handler.on_modified(FileModifiedEvent(str(docs_root / "assets" / "logo.png")))
        assert handler.rebuild_count == 0

    def test_outside_root(self, handler, tmp_path):
        handler.on_modified(FileModifiedEvent(str(tmp_path / "elsewhere" / "a.md")))
        assert handler.rebuild_count == 0

    def test_directory_events(self, handler, docs_root):
        handler.on_modified(DirModifiedEvent(str(docs_root / "guides")))
        assert handler.rebuild_count == 0

    def test_rename_into_markdown(self, handler, docs_root):
        handler.on_moved(FileMovedEvent(str(docs_root / "draft.txt"), str(docs_root / "draft.md")))
        assert handler.rebuild_count == 1

    def test_debounce_defers_second_rebuild(self, docs_root, tmp_path):
        handler = RebuildEventHandler(IndexConfig(root_dir=docs_root), tmp_path / "s.json", cooldown=60.0)
        handler.on_modified(FileModifiedEvent(str(docs_root / "index.md")))
        handler.on_modified(FileModifiedEvent(str(docs_root / "index.md")))
        handler.on_modified(FileModifiedEvent(str(docs_root / "index.md")))
        assert handler.rebuild_count == 1
        assert handler.pending

        assert handler.flush() is not None
        assert handler.rebuild_count == 2
        assert not handler.pending
        assert handler.flush() is None

    def test_back_to_back_saves_index_last_content(self, tmp_path):
        root = tmp_path / "docs"
        root.mkdir()
        doc = root / "a.md"
        doc.write_text("[c](./b/c.md)\n")
        handler = RebuildEventHandler(IndexConfig(root_dir=root), tmp_path / "s.json", cooldown=60.0)

        handler.on_modified(FileModifiedEvent(str(doc)))
        doc.write_text("[c](./d/c.md)\n")
        handler.on_modified(FileModifiedEvent(str(doc)))
        assert load_graph_document(handler.output).get("a").links == ["b"]

        handler.flush()
        assert load_graph_document(handler.output).get("a").links == ["d"]

    def test_deferred_rebuild_fires_after_cooldown(self, tmp_path):
        root = tmp_path / "docs"
        root.mkdir()
        doc = root / "a.md"
        doc.write_text("[c](./b/c.md)\n")
        handler = RebuildEventHandler(IndexConfig(root_dir=root), tmp_path / "s.json", cooldown=0.05)

        handler.on_modified(FileModifiedEvent(str(doc)))
        doc.write_text("[c](./d/c.md)\n")
        handler.on_modified(FileModifiedEvent(str(doc)))

        deadline = time.time() + 5.0
        while handler.rebuild_count < 2 and time.time() < deadline:
            time.sleep(0.01)

        assert handler.rebuild_count == 2
        assert load_graph_document(handler.output).get("a").links == ["d"]

    def test_failed_rebuild(self, tmp_path):
        handler = RebuildEventHandler(IndexConfig(root_dir=tmp_path / "gone"), tmp_path / "s.json")
        assert handler.rebuild() is None
        assert handler.rebuild_count == 0


class TestFileSystemWatcher:
    @patch("sitegraph.cli.watcher.Observer")
    def test_start_builds_and_schedules(self, mock_observer_cls, docs_root, tmp_path):
        output = tmp_path / "sitemap.json"
        watcher = FileSystemWatcher(docs_root, output)

        watcher.start(block=False)

        observer = mock_observer_cls.return_value
        observer.schedule.assert_called_once_with(watcher.handler, str(docs_root), recursive=True)
        observer.start.assert_called_once()
        assert output.exists()

        watcher.stop()
        observer.stop.assert_called_once()
        observer.join.assert_called_once()
        assert watcher.observer is None


class TestWatchCommand:
    @patch("sitegraph.cli.watcher.FileSystemWatcher")
    def test_watch_starts_watcher(self, mock_watcher_cls, docs_root):
        runner = CliRunner()
        result = runner.invoke(watch, [str(docs_root), "-o", "out.json", "--no-content"])

        assert result.exit_code == 0, result.output
        args, kwargs = mock_watcher_cls.call_args
        assert args[0] == Path(docs_root).resolve()
        assert args[1].name == "out.json"
        assert kwargs == {"include_content": False}
        mock_watcher_cls.return_value.start.assert_called_once()
