from astar_sim.app.protocols import Heuristic
from astar_sim.domain.graph import Node
from astar_sim.domain.mechanics.forces import LENGTH_SCALE_FACTOR


class ScaledEuclideanHeuristic(Heuristic):
    # A lone spring settles at length_scale * weight, so distance / length_scale
    # approximates the weight of a direct edge. Repulsion is ignored.
    def __init__(self, length_scale: float = LENGTH_SCALE_FACTOR):
        if length_scale <= 0:
            raise ValueError("length_scale must be > 0")
        self.length_scale = length_scale

    def estimate(self, node: Node, goal: Node) -> float:
        return node.body.position.dist(goal.body.position) / self.length_scale


class ZeroHeuristic(Heuristic):
    """Uniform-cost ordering (Dijkstra)."""

    def estimate(self, node: Node, goal: Node) -> float:
        return 0.0
