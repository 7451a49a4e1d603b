from typing import Protocol, runtime_checkable

from astar_sim.domain.geometry import Vec2
from astar_sim.domain.graph import Node


# ------------- Search --------------------
@runtime_checkable
class Heuristic(Protocol):
    """
    Estimated remaining cost from ``node`` to ``goal``.
    Reads live body positions, so the estimate may change between search steps.
    Must be >= 0.
    """

    def estimate(self, node: Node, goal: Node) -> float: ...


# ------------- Interaction --------------------
@runtime_checkable
class Shape(Protocol):
    def contains(self, point: Vec2) -> bool: ...


@runtime_checkable
class Placement(Protocol):
    """Assigns initial positions to the bodies of a freshly built graph."""

    def place(self, graph, fixed: frozenset[str] = frozenset()) -> None:
        """Position every node whose name is not in ``fixed``."""
