"""
Runtime Graph View backed by rustworkx.

Reconstructs the link graph from a graph document for traversal and
layout. The view is built once per page view and never mutated afterwards;
the document itself is never touched.

It manages:
- The bimap between slugs and rustworkx integer indices.
- The derived edge list: one edge per link to a known slug (dangling links
  are dropped) and one edge per document tag.
"""

import logging
from typing import Dict, Iterable, List, Set

import rustworkx as rx

from ..core.slugs import is_tag_slug, last_segment, normalize_slug, tag_name, tag_slug
from ..core.types import DocumentEntry, GraphDocument, LinkEdge, NodeKind

logger = logging.getLogger(__name__)


class RuntimeGraphView:
    """
    Read-only adjacency over a graph document.

    Nodes carry their slug as payload, edges carry a ``LinkEdge``.
    """

    def __init__(self, entries: Dict[str, DocumentEntry]):
        self._entries = entries
        self._graph = rx.PyDiGraph(multigraph=False)
        self._slug_to_idx: Dict[str, int] = {}
        self._idx_to_slug: Dict[int, str] = {}
        self._edges: List[LinkEdge] = []

    @classmethod
    def from_document(
        cls,
        document: GraphDocument,
        remove_tags: Iterable[str] = (),
    ) -> "RuntimeGraphView":
        """
        Build the view for ``document``.

        Keys are re-normalized so that documents written by older indexers
        still resolve. Tags listed in ``remove_tags`` produce no tag edge.
        """
        entries: Dict[str, DocumentEntry] = {}
        for slug, entry in document.items():
            entries[normalize_slug(slug)] = entry

        removed = {tag.strip().lower() for tag in remove_tags}
        view = cls(entries)
        for slug in entries:
            if is_tag_slug(slug) and tag_name(slug) in removed:
                continue
            view._add_node(slug)

        dangling = 0
        for source, entry in entries.items():
            for target in entry.links:
                if target in view._slug_to_idx:
                    view._add_edge(source, target)
                else:
                    dangling += 1

            for tag in entry.tags:
                if tag in removed:
                    continue
                slug = tag_slug(tag)
                view._add_node(slug)
                view._add_edge(source, slug)

        if dangling:
            logger.debug(f"Dropped {dangling} dangling links")
        return view

    def _add_node(self, slug: str) -> int:
        idx = self._slug_to_idx.get(slug)
        if idx is None:
            idx = self._graph.add_node(slug)
            self._slug_to_idx[slug] = idx
            self._idx_to_slug[idx] = slug
        return idx

    def _add_edge(self, source: str, target: str) -> None:
        u = self._slug_to_idx[source]
        v = self._slug_to_idx[target]
        if u == v or self._graph.has_edge(u, v):
            return
        edge = LinkEdge(source=source, target=target)
        self._graph.add_edge(u, v, edge)
        self._edges.append(edge)

    # =========================================================================
    # Queries
    # =========================================================================

    def has_node(self, slug: str) -> bool:
        return slug in self._slug_to_idx

    def kind(self, slug: str) -> NodeKind:
        return NodeKind.of(slug)

    def entry(self, slug: str) -> DocumentEntry | None:
        return self._entries.get(slug)

    def title(self, slug: str) -> str:
        """Display text: ``#name`` for tags, the entry title otherwise."""
        if is_tag_slug(slug):
            return "#" + tag_name(slug)
        entry = self._entries.get(slug)
        return entry.title if entry else last_segment(slug)

    def document_slugs(self) -> List[str]:
        """Every non-tag slug, in document order."""
        return [slug for slug in self._slug_to_idx if not is_tag_slug(slug)]

    def tag_slugs(self) -> List[str]:
        return [slug for slug in self._slug_to_idx if is_tag_slug(slug)]

    def outgoing(self, slug: str) -> List[str]:
        idx = self._slug_to_idx.get(slug)
        if idx is None:
            return []
        return [self._idx_to_slug[target] for _, target, _ in self._graph.out_edges(idx)]

    def incoming(self, slug: str) -> List[str]:
        idx = self._slug_to_idx.get(slug)
        if idx is None:
            return []
        return [self._idx_to_slug[source] for source, _, _ in self._graph.in_edges(idx)]

    def neighbors(self, slug: str) -> List[str]:
        """Slugs reachable over one edge in either direction."""
        return self.outgoing(slug) + self.incoming(slug)

    def edges_within(self, slugs: Set[str]) -> List[LinkEdge]:
        """Every edge whose both endpoints are in ``slugs``."""
        return [e for e in self._edges if e.source in slugs and e.target in slugs]

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()
