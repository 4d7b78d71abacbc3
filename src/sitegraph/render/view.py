"""
Graph View.

``GraphView`` is the explicit handle for one rendered neighborhood. It owns
the simulation, the scene and every listener it registers, and releases all
of them in ``teardown``. Input handlers run between simulation ticks and
only touch layout points, scene glyphs and the visited set.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

from ..core.errors import GraphDocumentError
from ..core.slugs import is_tag_slug, relative_path
from ..core.types import GraphDocument
from ..graph.neighborhood import Neighborhood, normalize_focal, select
from ..graph.view import RuntimeGraphView
from ..layout.simulation import ForceSimulation
from .config import RenderConfig
from .page import Container, Event, Page
from .scene import (
    COLOR_DEFAULT,
    COLOR_EDGE_HIGHLIGHT,
    COLOR_FOCAL,
    COLOR_TAG_FILL,
    COLOR_VISITED,
    DIMMED_OPACITY,
    MAX_ZOOM,
    MIN_HEIGHT,
    MIN_ZOOM,
    EdgeGlyph,
    LabelGlyph,
    NodeGlyph,
    Scene,
    ZoomTransform,
    label_opacity,
    node_radius,
)
from .session import VisitedSet

logger = logging.getLogger(__name__)

DocumentSource = Union[GraphDocument, Dict[str, Any], Callable[[], Any]]

GLOBAL_OUTER_ID = "global-graph-outer"
GLOBAL_CONTAINER_ID = "global-graph-container"


@dataclass
class HoverState:
    """Glyph values captured when a hover began, restored when it ends."""
    slug: str
    nodes: Dict[str, float] = field(default_factory=dict)
    labels: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    edges: List[Tuple[str, float, float]] = field(default_factory=list)


class GraphView:
    """
    A rendered neighborhood bound to one container.

    Construct through ``render_graph``; the constructor assumes the container
    is already cleared.
    """

    CONTAINER_EVENTS = ("mouseover", "mouseleave", "click", "dragstart", "drag", "dragend", "zoom")

    def __init__(
        self,
        page: Page,
        container: Container,
        slug: str,
        view: RuntimeGraphView,
        cfg: RenderConfig,
        seed: int = 0,
    ):
        self.page = page
        self.container = container
        self.view = view
        self.cfg = cfg
        self.visited = VisitedSet(page.session)
        self.slug = normalize_focal(slug)

        self._hover: Optional[HoverState] = None
        self._active_drags = 0
        self._torn_down = False
        self._handlers = {
            "mouseover": self._on_mouseover,
            "mouseleave": self._on_mouseleave,
            "click": self._on_click,
            "dragstart": self._on_dragstart,
            "drag": self._on_drag,
            "dragend": self._on_dragend,
            "zoom": self._on_zoom,
        }

        self.neighborhood = self._select(self.slug)
        self.simulation = ForceSimulation(
            self.neighborhood.nodes,
            self.neighborhood.edges,
            params=cfg.layout_params(),
            seed=seed,
        )
        self.scene = self._build_scene()
        self.container.append(self.scene)

        self.simulation.on("tick", self._on_tick)
        for event_type, handler in self._handlers.items():
            self.container.add_event_listener(event_type, handler)

    # =========================================================================
    # Construction
    # =========================================================================

    def _select(self, slug: str) -> Neighborhood:
        hood = select(self.view, slug, self.cfg.depth, show_tags=self.cfg.show_tags)
        logger.debug(
            f"Selected {len(hood.nodes)} nodes and {len(hood.edges)} edges around '{hood.focal}'"
        )
        return hood

    def color(self, slug: str, visited: Set[str]) -> str:
        if slug == self.slug:
            return COLOR_FOCAL
        if slug in visited or is_tag_slug(slug):
            return COLOR_VISITED
        return COLOR_DEFAULT

    def _build_scene(self) -> Scene:
        hood = self.neighborhood
        visited = self.visited.load()
        scene = Scene(
            width=self.container.width,
            height=max(self.container.height, MIN_HEIGHT),
            scale=self.cfg.scale,
        )

        for edge in hood.edges:
            scene.edges.append(EdgeGlyph(source=edge.source, target=edge.target))

        initial_opacity = (self.cfg.opacity_scale - 1) / 3.75
        for slug in hood.nodes:
            radius = node_radius(hood.degree(slug))
            color = self.color(slug, visited)
            if is_tag_slug(slug):
                glyph = NodeGlyph(
                    id=slug, radius=radius, fill=COLOR_TAG_FILL, stroke=color, stroke_width=2.0
                )
            else:
                glyph = NodeGlyph(id=slug, radius=radius, fill=color)
            scene.nodes[slug] = glyph
            scene.labels[slug] = LabelGlyph(
                id=slug,
                text=self.view.title(slug),
                dy=-radius,
                opacity=initial_opacity,
                font_size=self.cfg.font_size,
            )

        scene.sync(self.simulation.points)
        return scene

    # =========================================================================
    # Simulation
    # =========================================================================

    def _on_tick(self, simulation: ForceSimulation) -> None:
        self.scene.sync(simulation.points)

    def _check_tick_bound(self, max_ticks: Optional[int]) -> None:
        # A drag holds alpha_target at 1, so alpha never cools below alpha_min.
        if max_ticks is None and self.dragging:
            raise ValueError("max_ticks is required while a drag is in progress")

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Tick the layout until it cools, or for at most ``max_ticks``.

        Raises:
            ValueError: If ``max_ticks`` is omitted during a drag.
        """
        self._check_tick_bound(max_ticks)
        return self.simulation.run(max_ticks)

    async def run_async(self, max_ticks: Optional[int] = None) -> int:
        self._check_tick_bound(max_ticks)
        return await self.simulation.run_async(max_ticks)

    # =========================================================================
    # Hover
    # =========================================================================

    @property
    def hovered(self) -> Optional[str]:
        return self._hover.slug if self._hover else None

    def hover(self, slug: str) -> None:
        """Highlight ``slug`` and its edges; dim everything else in focus mode."""
        if slug not in self.scene.nodes:
            return
        if self._hover is not None:
            self.leave()

        scene = self.scene
        self._hover = HoverState(
            slug=slug,
            nodes={s: glyph.opacity for s, glyph in scene.nodes.items()},
            labels={s: (label.opacity, label.font_size) for s, label in scene.labels.items()},
            edges=[(edge.stroke, edge.stroke_width, edge.opacity) for edge in scene.edges],
        )

        connected = self.neighborhood.adjacent(slug)
        if self.cfg.focus_on_hover:
            for s, glyph in scene.nodes.items():
                if s not in connected:
                    glyph.opacity = DIMMED_OPACITY
                    label = scene.labels[s]
                    label.opacity = min(label.opacity, DIMMED_OPACITY)
            for edge in scene.edges:
                if not edge.touches(slug):
                    edge.opacity = DIMMED_OPACITY

        for edge in scene.edges:
            if edge.touches(slug):
                edge.stroke = COLOR_EDGE_HIGHLIGHT
                edge.stroke_width = 1.0

        label = scene.labels[slug]
        label.opacity = 1.0
        label.font_size = self.cfg.font_size * 1.5

    def leave(self) -> None:
        """Restore every glyph value captured by the current hover."""
        state = self._hover
        if state is None:
            return
        scene = self.scene
        for s, opacity in state.nodes.items():
            if s in scene.nodes:
                scene.nodes[s].opacity = opacity
        for s, (opacity, font_size) in state.labels.items():
            if s in scene.labels:
                scene.labels[s].opacity = opacity
                scene.labels[s].font_size = font_size
        for edge, (stroke, width, opacity) in zip(scene.edges, state.edges):
            edge.stroke = stroke
            edge.stroke_width = width
            edge.opacity = opacity
        self._hover = None

    # =========================================================================
    # Click
    # =========================================================================

    def click(self, slug: str) -> str:
        """Mark ``slug`` visited, navigate to it and return the relative href."""
        self.visited.add(slug)
        href = relative_path(self.slug, slug)
        self.page.assign(href)
        return href

    # =========================================================================
    # Drag
    # =========================================================================

    @property
    def dragging(self) -> bool:
        return self._active_drags > 0

    def drag_start(self, slug: str) -> None:
        if not self.cfg.drag:
            return
        point = self.simulation.point(slug)
        if point is None:
            return
        if self._active_drags == 0:
            self.simulation.set_alpha_target(1).restart()
        self._active_drags += 1
        self.simulation.pin(slug, point.x, point.y)

    def drag(self, slug: str, x: float, y: float) -> None:
        if not self.cfg.drag or self._active_drags == 0:
            return
        self.simulation.pin(slug, x, y)

    def drag_end(self, slug: str) -> None:
        if not self.cfg.drag or self._active_drags == 0:
            return
        self._active_drags -= 1
        if self._active_drags == 0:
            self.simulation.set_alpha_target(0)
        self.simulation.unpin(slug)

    # =========================================================================
    # Zoom
    # =========================================================================

    def zoom(self, k: float, x: float = 0.0, y: float = 0.0) -> Optional[ZoomTransform]:
        """Apply a pan/zoom transform; labels fade in with the zoom level."""
        if not self.cfg.zoom:
            return None
        k = min(max(k, MIN_ZOOM), MAX_ZOOM)
        self.scene.transform = ZoomTransform(k=k, x=x, y=y)
        opacity = label_opacity(k, self.cfg.opacity_scale)

        if self._hover is not None:
            for s, (_, font_size) in self._hover.labels.items():
                self._hover.labels[s] = (opacity, font_size)
        for s, label in self.scene.labels.items():
            if s == self.hovered:
                continue
            label.opacity = opacity
        return self.scene.transform

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def refocus(self, slug: str) -> None:
        """Re-select around ``slug`` and start a fresh layout."""
        self.leave()
        self._active_drags = 0
        self.slug = normalize_focal(slug)
        self.neighborhood = self._select(self.slug)
        self.simulation.reseed(self.neighborhood.nodes, self.neighborhood.edges)

        self.container.clear()
        self.scene = self._build_scene()
        self.container.append(self.scene)

    def teardown(self) -> None:
        """Stop the simulation and release every listener and glyph."""
        if self._torn_down:
            return
        self.simulation.stop()
        self.simulation.clear_listeners()
        for event_type, handler in self._handlers.items():
            self.container.remove_event_listener(event_type, handler)
        self.container.clear()
        if self.container.view is self:
            self.container.view = None
        self._hover = None
        self._torn_down = True
        logger.debug(f"Tore down graph view in '{self.container.id}'")

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    # =========================================================================
    # Event dispatch
    # =========================================================================

    def _target(self, event: Event) -> Optional[str]:
        if event.target is not None:
            return event.target
        return self.scene.hit_test(event.x, event.y)

    def _on_mouseover(self, event: Event) -> None:
        slug = self._target(event)
        if slug is not None:
            self.hover(slug)

    def _on_mouseleave(self, event: Event) -> None:
        self.leave()

    def _on_click(self, event: Event) -> None:
        slug = self._target(event)
        if slug is not None:
            self.click(slug)

    def _on_dragstart(self, event: Event) -> None:
        slug = self._target(event)
        if slug is not None:
            self.drag_start(slug)

    def _on_drag(self, event: Event) -> None:
        if event.target is not None:
            self.drag(event.target, event.x, event.y)

    def _on_dragend(self, event: Event) -> None:
        if event.target is not None:
            self.drag_end(event.target)

    def _on_zoom(self, event: Event) -> None:
        self.zoom(event.k, event.x, event.y)


def _resolve_document(source: DocumentSource) -> GraphDocument:
    data = source() if callable(source) else source
    if isinstance(data, GraphDocument):
        return data
    return GraphDocument.from_dict(data)


def render_graph(
    page: Page,
    container_id: str,
    slug: str,
    source: DocumentSource,
    seed: int = 0,
) -> Optional[GraphView]:
    """
    Render the neighborhood of ``slug`` into the container ``container_id``.

    Returns None without raising when the container does not exist. A graph
    document that fails validation leaves the container in its empty state.
    An invalid container configuration raises ``ConfigError``.
    """
    container = page.get_element_by_id(container_id)
    if container is None:
        logger.debug(f"No container '{container_id}', skipping render")
        return None

    if container.view is not None:
        container.view.teardown()
    container.clear()

    cfg = RenderConfig.coerce(container.cfg)
    try:
        document = _resolve_document(source)
    except GraphDocumentError as e:
        logger.error(f"Cannot render graph for '{slug}': {e}")
        container.empty_state = True
        return None

    view = RuntimeGraphView.from_document(document, remove_tags=cfg.remove_tags)
    graph_view = GraphView(page, container, slug, view, cfg, seed=seed)
    container.view = graph_view
    return graph_view


class GlobalGraph:
    """
    Full-page overlay showing the graph around the current location.

    ``Escape`` or a click on the backdrop closes it and tears the view down.
    """

    def __init__(self, page: Page, source: DocumentSource):
        self.page = page
        self.source = source
        self.view: Optional[GraphView] = None
        self._outer: Optional[Container] = None

    @property
    def is_open(self) -> bool:
        return self._outer is not None

    def open(self, slug: Optional[str] = None) -> Optional[GraphView]:
        if self.is_open:
            self.close()
        outer = self.page.get_element_by_id(GLOBAL_OUTER_ID)
        if outer is None:
            return None

        outer.classes.add("active")
        self._outer = outer
        self.page.add_event_listener("keydown", self._on_keydown)
        outer.add_event_listener("click", self._on_backdrop_click)

        self.view = render_graph(
            self.page,
            GLOBAL_CONTAINER_ID,
            slug if slug is not None else self.page.location,
            self.source,
        )
        return self.view

    def close(self) -> None:
        outer = self._outer
        if outer is None:
            return
        outer.classes.discard("active")
        self.page.remove_event_listener("keydown", self._on_keydown)
        outer.remove_event_listener("click", self._on_backdrop_click)
        if self.view is not None:
            self.view.teardown()
            self.view = None
        else:
            container = self.page.get_element_by_id(GLOBAL_CONTAINER_ID)
            if container is not None:
                container.clear()
        self._outer = None

    def _on_keydown(self, event: Event) -> None:
        if event.key == "Escape":
            self.close()

    def _on_backdrop_click(self, event: Event) -> None:
        self.close()
