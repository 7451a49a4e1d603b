"""Undirected weighted graph with named nodes.

Nodes are identified by name. Every node carries a PhysicsBody that the layout
simulation moves around and the search heuristic reads.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from astar_sim.domain.body import PhysicsBody


class UnknownNodeError(ValueError):
    """An operation referenced a node that is not part of the graph."""

    def __init__(self, name: str):
        super().__init__(f"node {name!r} is not contained in the graph")
        self.name = name


class NodeSignal(Enum):
    DUPLICATE = "duplicate"


@dataclass(eq=False)
class Node:
    name: str
    body: PhysicsBody = field(default_factory=PhysicsBody)
    data: Any = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Node({self.name!r})"


@dataclass(eq=False)
class Edge:
    a: Node
    b: Node
    weight: float = 1.0
    data: Any = None

    def joins(self, u: Node | str, v: Node | str) -> bool:
        u, v = node_name(u), node_name(v)
        return {self.a.name, self.b.name} == {u, v}

    def touches(self, node: Node | str) -> bool:
        n = node_name(node)
        return self.a.name == n or self.b.name == n

    def other(self, node: Node | str) -> Node:
        return self.b if self.a.name == node_name(node) else self.a

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return (
            self.joins(other.a, other.b)
            and self.weight == other.weight
            and self.data == other.data
        )

    def __hash__(self) -> int:
        return hash((frozenset((self.a.name, self.b.name)), self.weight))


class Neighbor(NamedTuple):
    node: Node
    weight: float
    data: Any


def node_name(node: Node | str) -> str:
    return node if isinstance(node, str) else node.name


class WeightedGraph:
    """Named nodes plus a list of undirected, non-negatively weighted edges.

    Neighbor lookups scan the edge list; graphs here are small and interactive.
    """

    def __init__(self):
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []

    # ---------------- nodes ----------------

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    def add_node(
        self, name: str, body: PhysicsBody | None = None, data: Any = None
    ) -> Node | NodeSignal:
        """Insert a node, or return ``NodeSignal.DUPLICATE`` if the name is taken.

        The existing node is left untouched in the duplicate case.
        """
        if name in self._nodes:
            return NodeSignal.DUPLICATE
        node = Node(name=name, body=body if body is not None else PhysicsBody(), data=data)
        self._nodes[name] = node
        return node

    def get_node(self, name: str) -> Node:
        try:
            return self._nodes[name]
        except KeyError:
            raise UnknownNodeError(name) from None

    def has_node(self, node: Node | str) -> bool:
        return node_name(node) in self._nodes

    def resolve(self, node: Node | str) -> Node:
        """Return the graph's own node object for a node or a name."""
        return self.get_node(node_name(node))

    def remove_node(self, node: Node | str, *, cascade: bool = True) -> bool:
        """Remove a node.

        With ``cascade`` (the default) incident edges are removed as well. Without
        it, removal is refused while any edge still references the node, so the
        graph never holds an edge with a missing endpoint.
        """
        name = node_name(node)
        if name not in self._nodes:
            return False
        incident = [e for e in self._edges if e.touches(name)]
        if incident and not cascade:
            raise ValueError(f"node {name!r} still has {len(incident)} edge(s)")
        self._edges = [e for e in self._edges if not e.touches(name)]
        del self._nodes[name]
        for other in self._nodes.values():
            other.body.contacts.discard(name)
        return True

    # ---------------- edges ----------------

    def add_edge(
        self, a: Node | str, b: Node | str, weight: float = 1.0, data: Any = None
    ) -> Edge:
        na, nb = self.resolve(a), self.resolve(b)
        if weight < 0:
            raise ValueError(f"edge weight must be >= 0, got {weight}")
        edge = Edge(na, nb, float(weight), data)
        self._edges.append(edge)
        return edge

    def remove_edge(self, a: Node | str, b: Node | str) -> int:
        before = len(self._edges)
        self._edges = [e for e in self._edges if not e.joins(a, b)]
        return before - len(self._edges)

    def edges_between(self, a: Node | str, b: Node | str) -> list[Edge]:
        return [e for e in self._edges if e.joins(a, b)]

    def get_neighbors(self, node: Node | str) -> list[Neighbor]:
        name = self.resolve(node).name
        out: list[Neighbor] = []
        for e in self._edges:
            if e.a.name == name:
                out.append(Neighbor(e.b, e.weight, e.data))
            elif e.b.name == name:
                out.append(Neighbor(e.a, e.weight, e.data))
        return out

    def are_connected(self, a: Node | str, b: Node | str) -> bool:
        target = node_name(b)
        return any(n.node.name == target for n in self.get_neighbors(a))

    def path_weight(self, path: Iterable[Node | str]) -> float:
        """Sum of the lightest edge between each consecutive pair of ``path``."""
        names = [node_name(n) for n in path]
        total = 0.0
        for u, v in zip(names, names[1:]):
            weights = [e.weight for e in self.edges_between(u, v)]
            if not weights:
                raise ValueError(f"{u!r} and {v!r} are not connected")
            total += min(weights)
        return total

    # ---------------- dunder ----------------

    def __contains__(self, node: object) -> bool:
        return isinstance(node, (Node, str)) and self.has_node(node)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedGraph):
            return NotImplemented
        return set(self._nodes) == set(other._nodes) and self._edges == other._edges

    def __repr__(self) -> str:
        return f"WeightedGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"
