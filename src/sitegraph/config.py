"""
Global Configuration and Safe Defaults.

Centralizes the constants shared by the indexer, the watcher and the CLI:
where artifacts go, which directories are never walked and which link
targets are never treated as documents.
"""

import re
from pathlib import Path
from typing import Set

# --- Artifacts ---

# Default output of `sitegraph index`, fetched as static JSON at runtime
DEFAULT_GRAPH_PATH = Path("public/sitemap.json")

# Default runtime configuration written by `sitegraph init`
DEFAULT_CONFIG_PATH = Path(".sitegraph/graph.yaml")

# Session storage key holding the JSON array of visited slugs
VISITED_STORAGE_KEY = "graph-visited"

# --- Documents ---

DOCUMENT_EXTENSIONS: Set[str] = {".md"}

# Files larger than this are skipped to prevent memory exhaustion
MAX_FILE_SIZE_BYTES = 2 * 1024 * 1024

# Directories to completely ignore during traversal
IGNORE_DIRECTORIES: Set[str] = {
    # Version Control
    ".git",
    ".svn",
    ".hg",
    # Environments & Dependencies
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    # sitegraph internal
    ".sitegraph",
}

# --- Links ---

# A target starting with a URI scheme (http:, mailto:, ...) is external
EXTERNAL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def is_document(path: Path) -> bool:
    """Check if a file participates in indexing."""
    return path.suffix.lower() in DOCUMENT_EXTENSIONS


def is_external_target(target: str) -> bool:
    """External references never become graph nodes."""
    return bool(EXTERNAL_SCHEME_PATTERN.match(target)) or target.startswith("//")
