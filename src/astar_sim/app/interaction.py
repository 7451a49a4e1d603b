"""Pointer interaction with the layout: hit testing and dragging nodes."""

from dataclasses import dataclass

from astar_sim.config.models import PhysicsModel
from astar_sim.domain.geometry import ZERO, Vec2
from astar_sim.domain.graph import Node, WeightedGraph


@dataclass(frozen=True)
class Circle:
    center: Vec2
    radius: float

    def contains(self, point: Vec2) -> bool:
        return self.center.dist(point) <= self.radius


def node_at(graph: WeightedGraph, point: Vec2, radius: float) -> Node | None:
    """Topmost node under ``point``; later nodes are drawn above earlier ones."""
    for node in reversed(graph.nodes):
        if Circle(node.body.position, radius).contains(point):
            return node
    return None


class Drag:
    """Holds a node under the pointer and throws it on release.

    While held, the body is disabled so the simulation leaves it where the
    pointer puts it. ``move`` receives pointer positions with timestamps in
    seconds; the last two give the throw velocity.
    """

    def __init__(self, node: Node, graph: WeightedGraph, physics: PhysicsModel | None = None):
        self.node = node
        self.graph = graph
        self.physics = physics or PhysicsModel()
        self.active = False
        self.pointer_velocity = ZERO
        self._last: tuple[Vec2, float] | None = None

    def begin(self) -> None:
        self.node.body.grab()
        self.active = True
        self.pointer_velocity = ZERO
        self._last = None

    def move(self, position: Vec2, t: float) -> None:
        if not self.active:
            return
        if self._last is not None:
            prev, t_prev = self._last
            if t > t_prev:
                self.pointer_velocity = (position - prev) * (1 / (t - t_prev))
        self._last = (position, t)
        self.node.body.position = self._clamp(position)

    def end(self) -> Vec2:
        """Drop the node clear of its neighbors and release it; return the throw velocity."""
        if not self.active:
            return ZERO
        self.active = False
        body = self.node.body
        diameter = 2 * self.physics.radius
        for other in self.graph.nodes:
            if other.name == self.node.name:
                continue
            offset = body.position - other.body.position
            d = offset.length()
            if 0 < d < diameter:
                body.position = body.position + offset * (diameter / d - 1)
        throw = self.pointer_velocity * self.physics.throw_factor
        body.release(throw)
        return throw if not body.anchor else ZERO

    def _clamp(self, p: Vec2) -> Vec2:
        if not self.physics.bounded:
            return p
        r = self.physics.radius
        x = min(max(p.x, r), self.physics.width - r)
        y = min(max(p.y, r), self.physics.height - r)
        return Vec2(x, y)
