"""
Simulation forces.

Python counterparts of the three d3-force forces the graph view uses:
many-body repulsion, link attraction and centering. Each force is bound to
the simulation's points by ``initialize`` and then nudges velocities (or, for
centering, positions) once per tick through ``apply``.
"""

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.types import LinkEdge


@dataclass
class LayoutPoint:
    """Transient per-node simulation state."""
    id: str
    index: int
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


def jiggle(rng: random.Random) -> float:
    """Tiny random offset separating coincident points."""
    return (rng.random() - 0.5) * 1e-6


class Force(ABC):
    """A force acting on the points of a simulation."""

    def __init__(self):
        self.points: List[LayoutPoint] = []
        self.rng = random.Random(0)

    def initialize(self, points: List[LayoutPoint], rng: random.Random) -> None:
        self.points = points
        self.rng = rng

    @abstractmethod
    def apply(self, alpha: float) -> None:
        """Apply the force for one tick at the given alpha."""


class ManyBodyForce(Force):
    """
    Pairwise inverse-square repulsion (negative strength) between all points.

    Exact O(n^2) evaluation of d3's ``forceManyBody``; neighborhoods are small
    enough that the Barnes-Hut approximation buys nothing.
    """

    def __init__(self, strength: float = -30.0, distance_min: float = 1.0):
        super().__init__()
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def apply(self, alpha: float) -> None:
        points = self.points
        if len(points) < 2:
            return

        for node in points:
            for other in points:
                if other is node:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                l = x * x + y * y
                if x == 0:
                    x = jiggle(self.rng)
                    l += x * x
                if y == 0:
                    y = jiggle(self.rng)
                    l += y * y
                if l < self.distance_min2:
                    l = math.sqrt(self.distance_min2 * l)
                w = self.strength * alpha / l
                node.vx += x * w
                node.vy += y * w


class LinkForce(Force):
    """
    Spring pulling linked points toward ``distance`` apart.

    Strength defaults to ``1 / min(degree(source), degree(target))`` and the
    correction is split between endpoints by degree, as in d3's ``forceLink``.
    """

    def __init__(self, edges: Sequence[LinkEdge] = (), distance: float = 30.0):
        super().__init__()
        self.edges = list(edges)
        self.distance = distance
        self._links: List[tuple] = []

    def initialize(self, points: List[LayoutPoint], rng: random.Random) -> None:
        super().initialize(points, rng)
        by_id: Dict[str, LayoutPoint] = {p.id: p for p in points}

        count: Dict[str, int] = {}
        resolved = []
        for edge in self.edges:
            source = by_id.get(edge.source)
            target = by_id.get(edge.target)
            if source is None or target is None:
                continue
            count[source.id] = count.get(source.id, 0) + 1
            count[target.id] = count.get(target.id, 0) + 1
            resolved.append((source, target))

        self._links = []
        for source, target in resolved:
            s, t = count[source.id], count[target.id]
            strength = 1.0 / min(s, t)
            bias = s / (s + t)
            self._links.append((source, target, strength, bias))

    def apply(self, alpha: float) -> None:
        if len(self.points) < 2:
            return

        for source, target, strength, bias in self._links:
            x = target.x + target.vx - source.x - source.vx or jiggle(self.rng)
            y = target.y + target.vy - source.y - source.vy or jiggle(self.rng)
            l = math.sqrt(x * x + y * y)
            l = (l - self.distance) / l * alpha * strength
            x *= l
            y *= l
            target.vx -= x * bias
            target.vy -= y * bias
            source.vx += x * (1 - bias)
            source.vy += y * (1 - bias)


class CenterForce(Force):
    """Shift every point so the mean position moves toward ``(x, y)``."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0):
        super().__init__()
        self.x = x
        self.y = y
        self.strength = strength

    def apply(self, alpha: float) -> None:
        n = len(self.points)
        if n == 0:
            return

        sx = (sum(p.x for p in self.points) / n - self.x) * self.strength
        sy = (sum(p.y for p in self.points) / n - self.y) * self.strength
        for point in self.points:
            point.x -= sx
            point.y -= sy
