"""
Graph Indexer.

Walks a document tree, extracts links and tags from every Markdown file and
assembles the graph document, deriving backlinks as the transpose of the
link relation once every document has been visited.

Per-file failures are reported through the Result type and logged; a bad
document never aborts the run.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Set

from ..config import IGNORE_DIRECTORIES, MAX_FILE_SIZE_BYTES, is_document
from ..core.document import write_graph_document
from ..core.result import Err, Ok, Result, map_ok
from ..core.slugs import is_tag_slug, normalize_slug, slug_for_path, tag_slug
from ..core.types import DocumentEntry, GraphDocument
from .extractor import FrontmatterError, extract_frontmatter, extract_links, extract_tags

logger = logging.getLogger(__name__)


@dataclass
class IndexConfig:
    root_dir: Path = field(default_factory=lambda: Path.cwd())
    skip_dirs: Set[str] = field(default_factory=lambda: IGNORE_DIRECTORIES.copy())
    include_content: bool = True
    max_file_size: int = MAX_FILE_SIZE_BYTES

    def should_skip_dir(self, dir_name: str) -> bool:
        return dir_name in self.skip_dirs


@dataclass
class IndexStats:
    files_indexed: int = 0
    files_failed: int = 0
    entries: int = 0
    links: int = 0
    tags: int = 0
    index_time_ms: float = 0.0


@dataclass
class IndexingError:
    """Structured error for indexing operations."""
    message: str
    file_path: str | None = None
    cause: Exception | None = None


@dataclass
class ParsedDocument:
    title: str
    content: str
    raw_links: List[str]
    tags: List[str]


@dataclass
class IndexResult:
    document: GraphDocument
    stats: IndexStats


class GraphBuilder:
    """
    Mutable graph under construction.

    ``get_or_create`` inserts a stub entry on first miss, which lets a
    document link to a slug before (or without) that slug being indexed.
    """

    def __init__(self):
        self._entries: Dict[str, DocumentEntry] = {}

    def __contains__(self, slug: str) -> bool:
        return slug in self._entries

    def get_or_create(self, slug: str) -> DocumentEntry:
        entry = self._entries.get(slug)
        if entry is None:
            entry = DocumentEntry.stub(slug)
            self._entries[slug] = entry
        return entry

    def add_document(self, slug: str, parsed: ParsedDocument) -> DocumentEntry:
        """Overwrite the (possibly stub) entry for ``slug`` with full data."""
        links = list(dict.fromkeys(
            target for target in (normalize_slug(raw) for raw in parsed.raw_links)
            if target != slug
        ))

        entry = self.get_or_create(slug)
        entry.title = parsed.title
        entry.content = parsed.content
        entry.links = links
        entry.tags = parsed.tags

        for target in links:
            self.get_or_create(target)
        for tag in parsed.tags:
            self.get_or_create(tag_slug(tag))
        return entry

    def build(self) -> GraphDocument:
        """Derive backlinks and freeze the result into a GraphDocument."""
        for entry in self._entries.values():
            entry.backlinks = []

        for source, entry in list(self._entries.items()):
            for target in entry.links:
                self.get_or_create(target).backlinks.append(source)

        for entry in self._entries.values():
            entry.backlinks = list(dict.fromkeys(entry.backlinks))

        return GraphDocument(
            entries={slug: entry.model_copy(deep=True) for slug, entry in self._entries.items()}
        )


def iter_documents(config: IndexConfig) -> Iterator[Path]:
    """Yield every Markdown file under the root, in sorted order."""
    for dirpath, dirnames, filenames in os.walk(config.root_dir):
        dirnames[:] = sorted(d for d in dirnames if not config.should_skip_dir(d))
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if is_document(path):
                yield path


def read_document(path: Path, max_size: int = MAX_FILE_SIZE_BYTES) -> Result[str, IndexingError]:
    """Read a document as UTF-8 text, dropping a leading byte order mark."""
    try:
        size = path.stat().st_size
        if size > max_size:
            return Err(IndexingError(f"file too large ({size} bytes)", file_path=str(path)))
        return Ok(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(IndexingError(f"unreadable: {e}", file_path=str(path), cause=e))


def parse_document(path: Path, text: str, include_content: bool = True) -> ParsedDocument:
    """
    Extract title, tags and raw link targets from document text.

    Raises:
        FrontmatterError: If the frontmatter block is malformed.
    """
    metadata, _ = extract_frontmatter(text)
    title = metadata.get("title")
    return ParsedDocument(
        title=str(title) if title else path.stem,
        content=text if include_content else "",
        raw_links=extract_links(text),
        tags=extract_tags(metadata),
    )


class GraphIndexer:
    """Builds a graph document from a directory of Markdown files."""

    def __init__(self, config: IndexConfig | None = None):
        self.config = config or IndexConfig()
        self._logger = logging.getLogger(f"{__name__}.GraphIndexer")

    def build(
        self,
        progress_callback: Callable[[Path, int], None] | None = None,
    ) -> IndexResult:
        start_time = time.perf_counter()
        stats = IndexStats()
        builder = GraphBuilder()
        root = self.config.root_dir

        for i, path in enumerate(iter_documents(self.config)):
            if progress_callback:
                progress_callback(path, i + 1)

            slug = slug_for_path(path.relative_to(root).as_posix())
            result = self._index_file(path)
            if result.is_err():
                error = result.unwrap_err()
                self._logger.warning(f"Skipping {error.file_path}: {error.message}")
                stats.files_failed += 1
                continue

            builder.add_document(slug, result.unwrap())
            stats.files_indexed += 1

        document = builder.build()
        stats.entries = len(document)
        stats.links = sum(len(entry.links) for _, entry in document.items())
        stats.tags = sum(1 for slug in document.slugs() if is_tag_slug(slug))
        stats.index_time_ms = (time.perf_counter() - start_time) * 1000

        self._logger.info(
            f"Indexed {stats.files_indexed} documents "
            f"({stats.files_failed} failed, {stats.entries} entries, {stats.links} links)"
        )
        return IndexResult(document=document, stats=stats)

    def _index_file(self, path: Path) -> Result[ParsedDocument, IndexingError]:
        text_result = read_document(path, self.config.max_file_size)
        if text_result.is_err():
            return text_result
        try:
            return map_ok(
                text_result,
                lambda text: parse_document(path, text, self.config.include_content),
            )
        except FrontmatterError as e:
            return Err(IndexingError(str(e), file_path=str(path), cause=e))


def index_to_file(config: IndexConfig, output: Path) -> Result[IndexStats, IndexingError]:
    """Index ``config.root_dir`` and atomically replace ``output``."""
    if not config.root_dir.is_dir():
        return Err(IndexingError(f"document root not found: {config.root_dir}"))

    try:
        result = GraphIndexer(config).build()
    except OSError as e:
        return Err(IndexingError(f"document discovery failed: {e}", cause=e))

    try:
        write_graph_document(result.document, output)
    except OSError as e:
        return Err(IndexingError(f"cannot write {output}: {e}", file_path=str(output), cause=e))
    return Ok(result.stats)
