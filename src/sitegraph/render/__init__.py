"""
Render layer: draws a neighborhood into a page container and reacts to
hover, click, zoom and drag input.
"""

from .config import RenderConfig
from .html import generate_html, write_html
from .page import Container, Event, EventTarget, Page
from .scene import Scene, ZoomTransform, node_radius
from .session import SessionStorage, VisitedSet
from .view import GlobalGraph, GraphView, render_graph

__all__ = [
    "RenderConfig",
    "Page", "Container", "Event", "EventTarget",
    "Scene", "ZoomTransform", "node_radius",
    "SessionStorage", "VisitedSet",
    "GraphView", "GlobalGraph", "render_graph",
    "generate_html", "write_html",
]
