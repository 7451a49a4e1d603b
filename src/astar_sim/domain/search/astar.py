"""Incremental A* over a WeightedGraph.

The search advances one node expansion per ``step`` so a frame loop can
interleave it with the layout simulation. The heuristic reads the bodies' live
positions, so estimates are computed when a node is (re)discovered and are not
revised afterwards.
"""

import math
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from astar_sim.app.protocols import Heuristic
from astar_sim.domain.graph import Node, WeightedGraph, node_name
from astar_sim.domain.search.heuristics import ScaledEuclideanHeuristic


class SearchStatus(Enum):
    SEARCHING = "searching"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class PathSearch:
    def __init__(
        self,
        graph: WeightedGraph,
        start: Node | str,
        goal: Node | str,
        heuristic: Heuristic | None = None,
    ):
        self.graph = graph
        self.start = graph.resolve(start)
        self.goal = graph.resolve(goal)
        self.heuristic = heuristic or ScaledEuclideanHeuristic()

        s = self.start.name
        # dict as an insertion-ordered set; min() over it breaks ties by insertion
        self._frontier: dict[str, None] = {s: None}
        self._cost: dict[str, float] = {s: 0.0}
        self._estimate: dict[str, float] = {s: self.heuristic.estimate(self.start, self.goal)}
        self._came_from: dict[str, str] = {}
        self._current = self.start
        self._steps = 0
        self._status = SearchStatus.FOUND if s == self.goal.name else SearchStatus.SEARCHING

    # ---------------- views ----------------

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status is not SearchStatus.SEARCHING

    @property
    def current(self) -> Node:
        return self._current

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def frontier(self) -> tuple[Node, ...]:
        return tuple(self.graph.get_node(n) for n in self._frontier)

    @property
    def cost_so_far(self) -> Mapping[str, float]:
        return MappingProxyType(self._cost)

    @property
    def estimated_total(self) -> Mapping[str, float]:
        return MappingProxyType(self._estimate)

    @property
    def came_from(self) -> Mapping[str, str]:
        return MappingProxyType(self._came_from)

    def cost_of(self, node: Node | str) -> float:
        return self._cost.get(node_name(node), math.inf)

    def estimate_of(self, node: Node | str) -> float:
        return self._estimate.get(node_name(node), math.inf)

    # ---------------- stepping ----------------

    def step(self) -> SearchStatus:
        """Expand the most promising frontier node; no-op once terminal."""
        if self.is_terminal:
            return self._status
        if not self._frontier:
            self._status = SearchStatus.EXHAUSTED
            return self._status

        name = min(self._frontier, key=self._estimate.__getitem__)
        self._current = self.graph.get_node(name)
        self._steps += 1
        if name == self.goal.name:
            self._status = SearchStatus.FOUND
            return self._status

        del self._frontier[name]
        base = self._cost[name]
        for nb in self.graph.get_neighbors(name):
            other = nb.node.name
            tentative = base + nb.weight
            if tentative >= self._cost.get(other, math.inf):
                continue
            self._came_from[other] = name
            self._cost[other] = tentative
            self._estimate[other] = tentative + self.heuristic.estimate(nb.node, self.goal)
            if other not in self._frontier:
                self._frontier[other] = None

        if not self._frontier:
            self._status = SearchStatus.EXHAUSTED
        return self._status

    def execute(self) -> list[Node] | None:
        while not self.is_terminal:
            self.step()
        if self._status is not SearchStatus.FOUND:
            return None
        return self.reconstruct_path(self.goal)

    def reconstruct_path(self, node: Node | str) -> list[Node] | None:
        """Best known path from start to ``node``, or None if none is known yet."""
        name = node_name(node)
        names = [name]
        seen = {name}
        while name != self.start.name:
            parent = self._came_from.get(name)
            if parent is None or parent in seen:
                return None
            names.append(parent)
            seen.add(parent)
            name = parent
        return [self.graph.get_node(n) for n in reversed(names)]

    @property
    def result(self) -> list[Node] | None:
        if self._status is not SearchStatus.FOUND:
            return None
        return self.reconstruct_path(self.goal)

    def __repr__(self) -> str:
        return (
            f"PathSearch({self.start.name!r} -> {self.goal.name!r}, "
            f"status={self._status.value}, steps={self._steps})"
        )
