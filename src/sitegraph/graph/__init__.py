"""
Runtime graph: the in-memory view of a graph document and the
neighborhood selected around a focal document.
"""

from .neighborhood import Neighborhood, TraversalState, select
from .view import RuntimeGraphView

__all__ = ["RuntimeGraphView", "Neighborhood", "TraversalState", "select"]
