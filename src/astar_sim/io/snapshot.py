# io/snapshot.py
"""Plain-dict snapshots of a graph and its bodies.

``export_graph`` output only holds JSON-friendly values (as long as node and
edge ``data`` are), so it can be dumped with ``json`` directly. ``import_graph``
validates its input before building anything. A node may carry its search
display state; ``import_states`` reads those back.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from astar_sim.domain.body import PhysicsBody
from astar_sim.domain.geometry import Vec2
from astar_sim.domain.graph import WeightedGraph
from astar_sim.domain.search.trace import NodeState


class BodySnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    ax: float = 0.0
    ay: float = 0.0
    disabled: bool = False
    anchor: bool = False


class NodeSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1)
    body: BodySnapshot = Field(default_factory=BodySnapshot)
    data: Any = None
    state: NodeState | None = None


class EdgeSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")
    a: str
    b: str
    weight: float = Field(default=1.0, ge=0)
    data: Any = None


class GraphSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")
    nodes: list[NodeSnapshot] = Field(default_factory=list)
    edges: list[EdgeSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_refs(self):
        names = [n.name for n in self.nodes]
        if len(set(names)) != len(names):
            raise ValueError("duplicate node names in snapshot")
        known = set(names)
        for e in self.edges:
            if e.a not in known or e.b not in known:
                raise ValueError(f"edge {e.a!r}-{e.b!r} references an unknown node")
        return self


def _body_dict(b: PhysicsBody) -> dict:
    return {
        "x": b.position.x,
        "y": b.position.y,
        "vx": b.velocity.x,
        "vy": b.velocity.y,
        "ax": b.acceleration.x,
        "ay": b.acceleration.y,
        "disabled": b.disabled,
        "anchor": b.anchor,
    }


def export_graph(graph: WeightedGraph, states: Mapping[str, NodeState] | None = None) -> dict:
    states = states or {}
    return {
        "nodes": [
            {
                "name": n.name,
                "body": _body_dict(n.body),
                "data": n.data,
                "state": states[n.name].value if n.name in states else None,
            }
            for n in graph.nodes
        ],
        "edges": [
            {"a": e.a.name, "b": e.b.name, "weight": e.weight, "data": e.data} for e in graph.edges
        ],
    }


def import_graph(data: dict) -> WeightedGraph:
    snap = GraphSnapshot.model_validate(data)
    graph = WeightedGraph()
    for n in snap.nodes:
        s = n.body
        body = PhysicsBody(
            position=Vec2(s.x, s.y),
            velocity=Vec2(s.vx, s.vy),
            acceleration=Vec2(s.ax, s.ay),
            disabled=s.disabled or s.anchor,
            anchor=s.anchor,
        )
        graph.add_node(n.name, body=body, data=n.data)
    for e in snap.edges:
        graph.add_edge(e.a, e.b, e.weight, e.data)
    return graph


def import_states(data: dict) -> dict[str, NodeState]:
    """Display states recorded in a snapshot, by node name."""
    snap = GraphSnapshot.model_validate(data)
    return {n.name: n.state for n in snap.nodes if n.state is not None}
