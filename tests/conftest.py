"""Shared fixtures for the sitegraph test suite."""

from pathlib import Path
from typing import Dict

import pytest

from sitegraph.core.types import DocumentEntry, GraphDocument
from sitegraph.render.page import Container, Page


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create ``files`` (relative path -> text) under ``root``."""
    for rel_path, text in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def docs_root(tmp_path):
    """A small documentation tree with links, tags and a stub target."""
    return write_tree(tmp_path / "docs", {
        "index.md": (
            "---\ntitle: Home\ntags: [intro]\n---\n"
            "Start with the [setup guide](./guides/setup/) or the "
            "[API](./reference/api/).\n"
        ),
        "guides/setup.md": (
            "---\ntitle: Setup\ntags:\n  - intro\n  - howto\n---\n"
            "See [the API](../reference/api/) and [upstream](https://example.com/x).\n"
        ),
        "reference/api.md": (
            "---\ntitle: API\n---\n"
            "Back to [setup](../guides/setup/) and [changes](../changelog/latest/).\n"
        ),
        "node_modules/pkg/readme.md": "[ignored](./elsewhere/x.md)",
    })


@pytest.fixture
def chain_document():
    """A -> B -> C -> D, each document linking to the next."""
    return GraphDocument(entries={
        "a": DocumentEntry(title="A", links=["b"]),
        "b": DocumentEntry(title="B", links=["c"], backlinks=["a"]),
        "c": DocumentEntry(title="C", links=["d"], backlinks=["b"]),
        "d": DocumentEntry(title="D", backlinks=["c"]),
    })


@pytest.fixture
def tagged_document():
    """Two documents sharing a tag, one linking to the other."""
    return GraphDocument(entries={
        "guides/setup": DocumentEntry(title="Setup", links=["reference/api"], tags=["intro"]),
        "reference/api": DocumentEntry(title="API", backlinks=["guides/setup"], tags=["intro", "internal"]),
        "tags/intro": DocumentEntry(title="intro"),
        "tags/internal": DocumentEntry(title="internal"),
    })


@pytest.fixture
def page():
    """A page with a local graph container using the default configuration."""
    p = Page(location="/b")
    p.add_container(Container("graph-container", width=400, height=300, cfg={}))
    return p
