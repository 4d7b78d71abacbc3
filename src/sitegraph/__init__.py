"""
sitegraph - Bidirectional link graphs for Markdown document trees.

sitegraph indexes a tree of Markdown documents into a single JSON graph
(links, derived backlinks and tags) and turns that graph into an
interactive, force-directed neighborhood view around a focal document.

Key Components:
- indexing: Link extraction and graph document generation
- core: Slugs, data types and graph document IO
- graph: Runtime graph view and neighborhood selection
- layout: Force simulation
- render: Interaction state, scene model and HTML export

Usage:
    from sitegraph.indexing import GraphIndexer, IndexConfig

    result = GraphIndexer(IndexConfig(root_dir=Path("docs"))).build()
    document = result.document
"""

__version__ = "0.1.0"

from .core.types import DocumentEntry, GraphDocument, LinkEdge, NodeKind

__all__ = [
    "__version__",
    "DocumentEntry",
    "GraphDocument",
    "LinkEdge",
    "NodeKind",
]
