"""
FileSystem Watcher Module.

Keeps the graph document in sync with the documentation tree. Any change
to a Markdown document outside the ignored directories triggers a full
re-index; the graph document is replaced atomically, so readers never
observe a partial write.

Key Components:
- RebuildEventHandler: watchdog handler that filters events and rebuilds.
- FileSystemWatcher: Main controller that owns the observer.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..config import is_document
from ..indexing import IndexConfig, IndexStats, index_to_file

logger = logging.getLogger(__name__)


class RebuildEventHandler(FileSystemEventHandler):
    """
    Handles file system events and re-indexes the tree.

    The first change rebuilds immediately. Changes inside the cooldown window
    schedule a single follow-up rebuild that runs when the window closes.
    """

    def __init__(self, config: IndexConfig, output: Path, cooldown: float = 0.5):
        """
        Initialize the event handler.

        Args:
            config: Index configuration (root and skip rules).
            output: Graph document to replace on every rebuild.
            cooldown: Minimum seconds between two rebuilds.
        """
        self.config = config
        self.output = output
        self._cooldown = cooldown
        self._last_rebuild_time = 0.0
        self._lock = threading.Lock()
        self._rebuild_lock = threading.Lock()
        self._pending: Optional[threading.Timer] = None
        self.rebuild_count = 0

    @property
    def pending(self) -> bool:
        """True while a follow-up rebuild is scheduled."""
        return self._pending is not None

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._handle_change(Path(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._handle_change(Path(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._handle_change(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if self.is_relevant(Path(event.src_path)):
            self._handle_change(Path(event.src_path))
        else:
            self._handle_change(Path(event.dest_path))

    def is_relevant(self, file_path: Path) -> bool:
        """True for Markdown documents inside the root and outside skipped directories."""
        try:
            rel_path = file_path.relative_to(self.config.root_dir)
        except ValueError:
            return False
        if not is_document(rel_path):
            return False
        return not any(self.config.should_skip_dir(part) for part in rel_path.parts[:-1])

    def _handle_change(self, file_path: Path) -> None:
        if not self.is_relevant(file_path):
            return
        logger.info(f"⚡ Change detected: {file_path.relative_to(self.config.root_dir)}")
        self.schedule_rebuild()

    def schedule_rebuild(self) -> None:
        """Rebuild now, or once when the cooldown window closes."""
        with self._lock:
            if self._pending is not None:
                return
            remaining = self._cooldown - (time.time() - self._last_rebuild_time)
            if remaining > 0:
                logger.debug(f"Rebuild deferred by {remaining:.2f}s")
                self._pending = threading.Timer(remaining, self._run_pending)
                self._pending.daemon = True
                self._pending.start()
                return
        self.rebuild()

    def _run_pending(self) -> None:
        with self._lock:
            self._pending = None
        self.rebuild()

    def flush(self) -> Optional[IndexStats]:
        """Run a scheduled rebuild right away instead of waiting for its timer."""
        with self._lock:
            pending, self._pending = self._pending, None
        if pending is None:
            return None
        pending.cancel()
        return self.rebuild()

    def rebuild(self) -> Optional[IndexStats]:
        """Re-index the tree and replace the graph document."""
        with self._rebuild_lock:
            logger.info("🔄 Rebuilding graph document...")
            result = index_to_file(self.config, self.output)
            self._last_rebuild_time = time.time()

            if result.is_err():
                logger.error(f"❌ Rebuild failed: {result.unwrap_err().message}")
                return None

            stats = result.unwrap()
            self.rebuild_count += 1
            logger.info(f"✅ Graph synced ({stats.entries} entries, {stats.links} links).")
            return stats


class FileSystemWatcher:
    """
    Main controller for the watch process.
    """

    def __init__(self, root_dir: Path, output: Path, include_content: bool = True):
        self.root_dir = root_dir
        self.output = output
        self.include_content = include_content
        self.observer: Optional[Observer] = None
        self.handler: Optional[RebuildEventHandler] = None

    def start(self, block: bool = True) -> None:
        """Build once, then start the watcher loop."""
        logger.info(f"Initializing watcher for {self.root_dir}...")
        logger.info(f"Graph document: {self.output}")

        config = IndexConfig(root_dir=self.root_dir, include_content=self.include_content)
        self.handler = RebuildEventHandler(config, self.output)
        self.handler.rebuild()

        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.root_dir), recursive=True)
        self.observer.start()

        logger.info("👀 sitegraph is watching for changes. Press Ctrl+C to stop.")

        if not block:
            return
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        """Gracefully stop the watcher."""
        logger.info("Stopping watcher...")
        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None
        if self.handler:
            self.handler.flush()
