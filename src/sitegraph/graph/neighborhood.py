"""
Neighborhood Selection.

Computes the visible subset of the runtime view around a focal document:
every slug within a hop bound (links are followed in both directions) and
every edge between two selected slugs. A negative bound selects the whole
corpus.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Set

from ..core.slugs import ROOT_SLUG, is_tag_slug, strip_slashes
from ..core.types import LinkEdge
from .view import RuntimeGraphView


@dataclass
class Neighborhood:
    """Selected slugs in discovery order, plus the edges among them."""
    focal: str
    nodes: List[str] = field(default_factory=list)
    edges: List[LinkEdge] = field(default_factory=list)

    def __contains__(self, slug: str) -> bool:
        return slug in self.nodes

    def degree(self, slug: str) -> int:
        """Number of selected edges touching ``slug``."""
        return sum(1 for edge in self.edges if edge.touches(slug))

    def adjacent(self, slug: str) -> Set[str]:
        """``slug`` itself plus every slug sharing a selected edge with it."""
        connected = {slug}
        for edge in self.edges:
            if edge.touches(slug):
                connected.add(edge.source)
                connected.add(edge.target)
        return connected


@dataclass
class TraversalState:
    """BFS bookkeeping: the current level's frontier and the hops left."""
    frontier: Deque[str]
    remaining_depth: int


def normalize_focal(slug: str) -> str:
    return strip_slashes(slug) or ROOT_SLUG


def select(
    view: RuntimeGraphView,
    focal_slug: str,
    depth: int,
    show_tags: bool = True,
) -> Neighborhood:
    """
    Select the neighborhood of ``focal_slug`` within ``depth`` hops.

    A focal slug unknown to the view yields a single-node neighborhood so
    the caller can still draw an (empty) graph.
    """
    focal = normalize_focal(focal_slug)

    def allowed(slug: str) -> bool:
        return show_tags or not is_tag_slug(slug)

    if depth < 0:
        nodes = view.document_slugs()
        if show_tags:
            nodes += view.tag_slugs()
        selected = set(nodes)
        return Neighborhood(focal=focal, nodes=nodes, edges=view.edges_within(selected))

    if not view.has_node(focal):
        return Neighborhood(focal=focal, nodes=[focal])

    nodes: List[str] = [focal]
    selected: Set[str] = {focal}
    state = TraversalState(frontier=deque([focal]), remaining_depth=depth)

    while state.frontier and state.remaining_depth > 0:
        next_frontier: Deque[str] = deque()
        while state.frontier:
            current = state.frontier.popleft()
            for neighbor in view.neighbors(current):
                if neighbor in selected or not allowed(neighbor):
                    continue
                selected.add(neighbor)
                nodes.append(neighbor)
                next_frontier.append(neighbor)
        state = TraversalState(frontier=next_frontier, remaining_depth=state.remaining_depth - 1)

    return Neighborhood(focal=focal, nodes=nodes, edges=view.edges_within(selected))
