import math

import numpy as np

from astar_sim.app.protocols import Placement
from astar_sim.domain.geometry import Vec2
from astar_sim.domain.graph import WeightedGraph


class GivenPlacement(Placement):
    """Every node brings its own coordinates."""

    def place(self, graph: WeightedGraph, fixed: frozenset[str] = frozenset()) -> None:
        missing = [n.name for n in graph.nodes if n.name not in fixed]
        if missing:
            raise ValueError(f"placement 'given' needs coordinates for {missing}")


class ScatterPlacement(Placement):
    """Uniform positions inside a box; each node draws from its own substream."""

    def __init__(self, box: tuple[float, float, float, float], rngs, margin: float = 0.0):
        x0, y0, x1, y1 = box
        x0, y0, x1, y1 = x0 + margin, y0 + margin, x1 - margin, y1 - margin
        if x1 < x0 or y1 < y0:
            raise ValueError(f"scatter box {box} is smaller than twice the margin {margin}")
        self.lo = np.array([x0, y0])
        self.hi = np.array([x1, y1])
        self.rngs = rngs

    def place(self, graph: WeightedGraph, fixed: frozenset[str] = frozenset()) -> None:
        for n in graph.nodes:
            if n.name in fixed:
                continue
            x, y = self.rngs.substream("placement", n.name).uniform(self.lo, self.hi)
            n.body.position = Vec2(float(x), float(y))


class CirclePlacement(Placement):
    """Evenly spaced on a circle, in insertion order."""

    def __init__(self, center: tuple[float, float], radius: float):
        self.center = Vec2(*center)
        self.radius = radius

    def place(self, graph: WeightedGraph, fixed: frozenset[str] = frozenset()) -> None:
        free = [n for n in graph.nodes if n.name not in fixed]
        for i, n in enumerate(free):
            a = 2 * math.pi * i / len(free)
            n.body.position = self.center + Vec2(math.cos(a), math.sin(a)) * self.radius
