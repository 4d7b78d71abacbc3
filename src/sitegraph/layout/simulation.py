"""
Force Simulation.

An iterative, cooling simulation in the style of d3-force. Every tick
advances alpha toward its target, applies the registered forces and
integrates velocities into positions. Listeners registered with ``on`` are
called after every tick (``"tick"``) and once when the simulation cools
below ``alpha_min`` (``"end"``).

The loop is cooperative: ``run`` ticks on the caller's thread and
``run_async`` yields to the event loop between ticks. Nothing blocks inside
a tick, so input handlers can pin or release points between two ticks.
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..core.types import LinkEdge
from .forces import CenterForce, Force, LayoutPoint, LinkForce, ManyBodyForce

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

TickListener = Callable[["ForceSimulation"], None]


@dataclass
class LayoutParams:
    repel_force: float = 0.5
    center_force: float = 0.3
    link_distance: float = 30.0


class ForceSimulation:
    """
    Owns the Layout Points of one neighborhood.

    Points are created by ``reseed`` and never outlive it: a new
    neighborhood always starts from a fresh spiral with no pinned point.
    """

    EVENTS = ("tick", "end")

    def __init__(
        self,
        nodes: Sequence[str],
        edges: Sequence[LinkEdge] = (),
        params: LayoutParams | None = None,
        seed: int = 0,
    ):
        self.params = params or LayoutParams()
        self.alpha = 1.0
        self.alpha_min = 0.001
        self.alpha_decay = 1 - math.pow(self.alpha_min, 1 / 300)
        self.alpha_target = 0.0
        self.velocity_decay = 0.4

        self._seed = seed
        self._rng = random.Random(seed)
        self._running = True
        self._listeners: Dict[str, List[TickListener]] = {event: [] for event in self.EVENTS}
        self._points: Dict[str, LayoutPoint] = {}
        self._forces: Dict[str, Force] = {}
        self.tick_count = 0

        self.reseed(nodes, edges)

    # =========================================================================
    # Setup
    # =========================================================================

    def reseed(self, nodes: Sequence[str], edges: Sequence[LinkEdge] = ()) -> None:
        """Discard every point and start over for a new neighborhood."""
        self._rng = random.Random(self._seed)
        self._points = {}
        for i, node_id in enumerate(dict.fromkeys(nodes)):
            radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
            angle = i * INITIAL_ANGLE
            self._points[node_id] = LayoutPoint(
                id=node_id,
                index=i,
                x=radius * math.cos(angle),
                y=radius * math.sin(angle),
            )

        self._forces = {
            "charge": ManyBodyForce(strength=-100 * self.params.repel_force),
            "link": LinkForce(edges, distance=self.params.link_distance),
            "center": CenterForce(strength=self.params.center_force),
        }
        points = self.points
        for force in self._forces.values():
            force.initialize(points, self._rng)

        self.alpha = 1.0
        self.alpha_target = 0.0
        self.tick_count = 0
        self._running = True
        logger.debug(f"Simulation seeded with {len(points)} points and {len(edges)} edges")

    @property
    def points(self) -> List[LayoutPoint]:
        return list(self._points.values())

    def point(self, node_id: str) -> LayoutPoint | None:
        return self._points.get(node_id)

    def force(self, name: str) -> Force | None:
        return self._forces.get(name)

    # =========================================================================
    # Events
    # =========================================================================

    def on(self, event: str, listener: TickListener) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown simulation event: {event}")
        self._listeners[event].append(listener)

    def off(self, event: str, listener: TickListener) -> None:
        if listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    def listener_count(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())

    def clear_listeners(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(self)

    # =========================================================================
    # Control
    # =========================================================================

    @property
    def running(self) -> bool:
        return self._running

    def restart(self) -> "ForceSimulation":
        self._running = True
        return self

    def stop(self) -> "ForceSimulation":
        self._running = False
        return self

    def set_alpha_target(self, value: float) -> "ForceSimulation":
        self.alpha_target = value
        return self

    def pin(self, node_id: str, x: float, y: float) -> None:
        point = self._points.get(node_id)
        if point is not None:
            point.fx = x
            point.fy = y

    def unpin(self, node_id: str) -> None:
        point = self._points.get(node_id)
        if point is not None:
            point.fx = None
            point.fy = None

    # =========================================================================
    # Integration
    # =========================================================================

    def tick(self, iterations: int = 1) -> None:
        """Advance the simulation without notifying listeners."""
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self._forces.values():
                force.apply(self.alpha)

            for point in self._points.values():
                if point.fx is None:
                    point.vx *= 1 - self.velocity_decay
                    point.x += point.vx
                else:
                    point.x = point.fx
                    point.vx = 0.0
                if point.fy is None:
                    point.vy *= 1 - self.velocity_decay
                    point.y += point.vy
                else:
                    point.y = point.fy
                    point.vy = 0.0

            self.tick_count += 1

    def step(self) -> bool:
        """
        One cooperative loop iteration: tick, then notify.

        Returns False once the simulation has cooled (or was stopped).
        """
        if not self._running:
            return False
        self.tick()
        self._emit("tick")
        if self.alpha < self.alpha_min:
            self._running = False
            self._emit("end")
            return False
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until cool, stopped, or ``max_ticks``; returns ticks taken."""
        start = self.tick_count
        while self._running and (max_ticks is None or self.tick_count - start < max_ticks):
            self.step()
        return self.tick_count - start

    async def run_async(self, max_ticks: Optional[int] = None) -> int:
        """Like ``run`` but yields to the event loop after every tick."""
        start = self.tick_count
        while self._running and (max_ticks is None or self.tick_count - start < max_ticks):
            self.step()
            await asyncio.sleep(0)
        return self.tick_count - start
