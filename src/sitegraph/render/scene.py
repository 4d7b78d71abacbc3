"""
Scene model.

Glyphs are the drawable state of the graph view: one circle and one label
per node, one line per edge. The simulation only moves points; the scene
copies positions into glyphs on every tick and carries the visual state
(opacity, color, font size, zoom transform) that interaction changes.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..layout.forces import LayoutPoint

# Theme colors, resolved by the page stylesheet
COLOR_FOCAL = "var(--secondary)"
COLOR_VISITED = "var(--tertiary)"
COLOR_DEFAULT = "var(--gray)"
COLOR_TAG_FILL = "var(--light)"
COLOR_EDGE = "var(--lightgray)"
COLOR_EDGE_HIGHLIGHT = "var(--gray)"

DIMMED_OPACITY = 0.2
MIN_ZOOM = 0.25
MAX_ZOOM = 4.0
MIN_HEIGHT = 250.0


def node_radius(degree: int) -> float:
    """Shared radius formula for drawing and hit-testing."""
    return 2 + math.sqrt(degree)


def label_opacity(k: float, opacity_scale: float) -> float:
    """Labels fade in as the user zooms in."""
    return max((k * opacity_scale - 1) / 3.75, 0.0)


@dataclass
class ZoomTransform:
    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, px: float, py: float) -> Tuple[float, float]:
        return self.x + self.k * px, self.y + self.k * py

    def invert(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k


@dataclass
class NodeGlyph:
    id: str
    radius: float
    fill: str
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    opacity: float = 1.0


@dataclass
class LabelGlyph:
    id: str
    text: str
    dy: float
    opacity: float
    font_size: float
    x: float = 0.0
    y: float = 0.0


@dataclass
class EdgeGlyph:
    source: str
    target: str
    stroke: str = COLOR_EDGE
    stroke_width: float = 1.0
    opacity: float = 1.0
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    def touches(self, slug: str) -> bool:
        return self.source == slug or self.target == slug


@dataclass
class Scene:
    """Everything drawn inside one container."""
    width: float
    height: float
    scale: float
    nodes: Dict[str, NodeGlyph] = field(default_factory=dict)
    labels: Dict[str, LabelGlyph] = field(default_factory=dict)
    edges: List[EdgeGlyph] = field(default_factory=list)
    transform: ZoomTransform = field(default_factory=ZoomTransform)

    @property
    def view_box(self) -> Tuple[float, float, float, float]:
        """Centered on the simulation origin and scaled by ``scale``."""
        return (
            -self.width / 2 / self.scale,
            -self.height / 2 / self.scale,
            self.width / self.scale,
            self.height / self.scale,
        )

    def sync(self, points: Iterable[LayoutPoint]) -> None:
        """Copy simulation positions into the glyphs."""
        positions = {p.id: (p.x, p.y) for p in points}
        for slug, (x, y) in positions.items():
            node = self.nodes.get(slug)
            if node is not None:
                node.cx, node.cy = x, y
            label = self.labels.get(slug)
            if label is not None:
                label.x, label.y = x, y
        for edge in self.edges:
            if edge.source in positions and edge.target in positions:
                edge.x1, edge.y1 = positions[edge.source]
                edge.x2, edge.y2 = positions[edge.target]

    def hit_test(self, sx: float, sy: float) -> Optional[str]:
        """
        Slug of the topmost node under a point given in view coordinates.

        The zoom transform is inverted first, so the test uses the same
        radius the node is drawn with.
        """
        x, y = self.transform.invert(sx, sy)
        for node in reversed(list(self.nodes.values())):
            if (node.cx - x) ** 2 + (node.cy - y) ** 2 <= node.radius ** 2:
                return node.id
        return None
