"""
Layout engine: a d3-force style simulation producing 2D positions for the
nodes of a neighborhood.
"""

from .forces import CenterForce, Force, LayoutPoint, LinkForce, ManyBodyForce
from .simulation import ForceSimulation, LayoutParams

__all__ = [
    "ForceSimulation", "LayoutParams", "LayoutPoint",
    "Force", "ManyBodyForce", "LinkForce", "CenterForce",
]
