"""
Core modules for sitegraph.

This package contains the fundamental building blocks:
- slugs: Canonical identifiers for documents and tags
- types: Graph document data structures
- document: Graph document IO
- result: Explicit Ok/Err results for indexing
"""

from .errors import ConfigError, GraphDocumentError, SiteGraphError
from .result import Err, Ok, Result
from .slugs import normalize_slug, relative_path, slug_for_path, tag_slug
from .types import DocumentEntry, GraphDocument, LinkEdge, NodeKind

__all__ = [
    # Errors
    "SiteGraphError", "GraphDocumentError", "ConfigError",
    # Result
    "Ok", "Err", "Result",
    # Slugs
    "normalize_slug", "slug_for_path", "tag_slug", "relative_path",
    # Types
    "DocumentEntry", "GraphDocument", "LinkEdge", "NodeKind",
]
