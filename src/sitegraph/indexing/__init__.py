"""
Indexing: turn a tree of Markdown documents into a graph document.

- extractor: Link, frontmatter and tag extraction for one document
- indexer: Tree walk, stub materialization and backlink derivation
"""

from .extractor import extract_frontmatter, extract_links, extract_tags, to_directory_target
from .indexer import (
    GraphBuilder,
    GraphIndexer,
    IndexConfig,
    IndexingError,
    IndexResult,
    IndexStats,
    index_to_file,
)

__all__ = [
    "extract_links", "extract_frontmatter", "extract_tags", "to_directory_target",
    "GraphBuilder", "GraphIndexer", "IndexConfig", "IndexingError",
    "IndexResult", "IndexStats", "index_to_file",
]
