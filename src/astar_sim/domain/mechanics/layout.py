# domain/mechanics/layout.py
from dataclasses import dataclass

from astar_sim.config.models import PhysicsModel
from astar_sim.domain.body import PhysicsBody
from astar_sim.domain.geometry import ZERO, Vec2
from astar_sim.domain.graph import Node, WeightedGraph
from astar_sim.domain.mechanics import forces


@dataclass
class StepStats:
    t: float  # simulation time at the start of the step
    dt: float
    contacts_begun: int = 0
    separations: int = 0
    wall_hits: int = 0
    sanitized: int = 0
    kinetic_energy: float = 0.0


class LayoutSimulation:
    """Moves the bodies of a graph under repulsion, edge springs and friction.

    Each ``step`` first resolves overlapping pairs (one impulse per contact onset,
    positional separation every step), then accumulates forces from the positions
    the step started with, integrates with semi-implicit Euler and finally keeps
    bodies inside the configured bounds.
    """

    def __init__(self, graph: WeightedGraph, physics: PhysicsModel | None = None):
        self.graph = graph
        self.physics = physics or PhysicsModel()
        self.width = self.physics.width
        self.height = self.physics.height
        self._t = 0.0
        self._steps = 0

    @property
    def t(self) -> float:
        return self._t

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def bounded(self) -> bool:
        return self.width is not None and self.height is not None

    def set_bounds(self, width: float | None, height: float | None) -> None:
        if (width is None) != (height is None):
            raise ValueError("width and height must be given together")
        if width is not None and min(width, height) <= 2 * self.physics.radius:
            raise ValueError("bounds must exceed the body diameter")
        self.width, self.height = width, height

    # ---------------------------------------------------------------

    def step(self, dt: float) -> StepStats:
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        stats = StepStats(t=self._t, dt=dt)
        nodes = self.graph.nodes

        for n in nodes:
            if n.body.disabled:
                n.body.halt()

        start = {n.name: n.body.position for n in nodes}
        self._resolve_contacts(nodes, start, stats)

        acc = {n.name: self._acceleration(n, nodes, start) for n in nodes if not n.body.disabled}
        for n in nodes:
            b = n.body
            if b.disabled:
                continue
            b.acceleration = acc[n.name]
            b.velocity = b.velocity + b.acceleration * dt
            b.position = b.position + b.velocity * dt
            if self.bounded:
                stats.wall_hits += self._clamp_to_bounds(b)

        for n in nodes:
            stats.sanitized += self._sanitize(n.body)

        self._t += dt
        self._steps += 1
        stats.kinetic_energy = self.kinetic_energy()
        return stats

    def kinetic_energy(self) -> float:
        # unit mass
        return sum(0.5 * n.body.velocity.dot(n.body.velocity) for n in self.graph.nodes)

    def settle(
        self,
        dt: float,
        *,
        max_steps: int = 10_000,
        tolerance: float = 1e-3,
        calm_steps: int = 10,
    ) -> int:
        """Step until the kinetic energy has stayed below ``tolerance`` for
        ``calm_steps`` consecutive steps; return steps taken."""
        taken = calm = 0
        while taken < max_steps and calm < calm_steps:
            self.step(dt)
            taken += 1
            calm = calm + 1 if self.kinetic_energy() < tolerance else 0
        return taken

    # ---------------- helpers -----------------------------

    def _resolve_contacts(
        self, nodes: tuple[Node, ...], start: dict[str, Vec2], stats: StepStats
    ) -> None:
        diameter = 2 * self.physics.radius
        shift: dict[str, Vec2] = {}
        for i, ni in enumerate(nodes):
            for nj in nodes[i + 1 :]:
                bi, bj = ni.body, nj.body
                d = start[ni.name].dist(start[nj.name])
                if d == 0:
                    continue  # no usable normal
                if d >= diameter:
                    bi.contacts.discard(nj.name)
                    bj.contacts.discard(ni.name)
                    continue
                if bi.disabled and bj.disabled:
                    continue

                normal = start[ni.name].normal_to(start[nj.name])  # i -> j
                if nj.name not in bi.contacts:
                    if bi.disabled:
                        bj.velocity = forces.reflect_normal(bj.velocity, -normal)
                    elif bj.disabled:
                        bi.velocity = forces.reflect_normal(bi.velocity, normal)
                    else:
                        bi.velocity, bj.velocity = forces.exchange_normal(
                            bi.velocity, bj.velocity, normal
                        )
                    bi.contacts.add(nj.name)
                    bj.contacts.add(ni.name)
                    stats.contacts_begun += 1

                depth = diameter - d
                if bi.disabled:
                    shift[nj.name] = shift.get(nj.name, ZERO) + normal * depth
                elif bj.disabled:
                    shift[ni.name] = shift.get(ni.name, ZERO) - normal * depth
                else:
                    half = normal * (depth / 2)
                    shift[ni.name] = shift.get(ni.name, ZERO) - half
                    shift[nj.name] = shift.get(nj.name, ZERO) + half
                stats.separations += 1

        for n in nodes:
            if n.name in shift:
                n.body.position = n.body.position + shift[n.name]

    def _acceleration(self, node: Node, nodes: tuple[Node, ...], start: dict[str, Vec2]) -> Vec2:
        p = self.physics
        here = start[node.name]
        acc = ZERO

        for other in nodes:
            if other.name == node.name:
                continue
            d = here.dist(start[other.name])
            if d == 0 or d < 2 * p.radius:
                continue  # degenerate, or handled as a collision
            acc = acc - here.normal_to(start[other.name]) * forces.repulsion(d, p.repulsion)

        for nb in self.graph.get_neighbors(node):
            there = start[nb.node.name]
            d = here.dist(there)
            if d == 0:
                continue
            pull = forces.spring(
                d,
                nb.weight,
                strength=p.spring_strength,
                length_scale=p.length_scale,
                lo=p.min_spring_weight,
                hi=p.max_spring_weight,
            )
            acc = acc + here.normal_to(there) * pull

        return acc + forces.friction(node.body.velocity, p.friction)

    def _clamp_to_bounds(self, b: PhysicsBody) -> int:
        r, k = self.physics.radius, -self.physics.wall_restitution
        w = b.walls
        hits = 0

        if b.position.x <= r:
            if not w.left:
                b.velocity = b.velocity.with_x(b.velocity.x * k)
                hits += 1
            w.left = True
            b.acceleration = b.acceleration.with_x(0.0)
            b.position = b.position.with_x(r)
        else:
            w.left = False
            if b.position.x >= self.width - r:
                if not w.right:
                    b.velocity = b.velocity.with_x(b.velocity.x * k)
                    hits += 1
                w.right = True
                b.acceleration = b.acceleration.with_x(0.0)
                b.position = b.position.with_x(self.width - r)
            else:
                w.right = False

        if b.position.y <= r:
            if not w.top:
                b.velocity = b.velocity.with_y(b.velocity.y * k)
                hits += 1
            w.top = True
            b.acceleration = b.acceleration.with_y(0.0)
            b.position = b.position.with_y(r)
        else:
            w.top = False
            if b.position.y >= self.height - r:
                if not w.bottom:
                    b.velocity = b.velocity.with_y(b.velocity.y * k)
                    hits += 1
                w.bottom = True
                b.acceleration = b.acceleration.with_y(0.0)
                b.position = b.position.with_y(self.height - r)
            else:
                w.bottom = False

        return hits

    @staticmethod
    def _sanitize(b: PhysicsBody) -> int:
        b.position, n_pos = b.position.sanitized()
        b.velocity, n_vel = b.velocity.sanitized()
        b.acceleration, n_acc = b.acceleration.sanitized()
        return n_pos + n_vel + n_acc
