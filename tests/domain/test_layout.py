import math

import pytest

from astar_sim.config.models import PhysicsModel
from astar_sim.domain.body import PhysicsBody
from astar_sim.domain.geometry import Vec2
from astar_sim.domain.graph import WeightedGraph
from astar_sim.domain.mechanics.layout import LayoutSimulation

DT = 1 / 60


def _graph(**bodies: PhysicsBody) -> WeightedGraph:
    g = WeightedGraph()
    for name, body in bodies.items():
        g.add_node(name, body=body)
    return g


def test_isolated_body_at_rest_stays_put():
    g = _graph(a=PhysicsBody.at(123.0, 45.0))
    sim = LayoutSimulation(g)
    for _ in range(10):
        sim.step(DT)
    assert g.get_node("a").body.position == Vec2(123.0, 45.0)
    assert sim.kinetic_energy() == 0.0


def test_friction_strictly_decreases_speed():
    body = PhysicsBody(position=Vec2(0.0, 0.0), velocity=Vec2(10.0, 0.0))
    sim = LayoutSimulation(_graph(a=body))
    speeds = [body.speed()]
    for _ in range(5):
        sim.step(DT)
        speeds.append(body.speed())
    assert all(later < earlier for earlier, later in zip(speeds, speeds[1:]))
    assert abs(speeds[1] - 9.5) < 1e-9


def test_overlapping_pair_is_separated_to_two_radii_in_one_step():
    g = _graph(a=PhysicsBody.at(100.0, 100.0), b=PhysicsBody.at(110.0, 100.0))
    sim = LayoutSimulation(g, PhysicsModel(radius=15.0))
    stats = sim.step(DT)
    pa, pb = g.get_node("a").body.position, g.get_node("b").body.position
    assert pa.dist(pb) == 30.0
    assert pa == Vec2(90.0, 100.0) and pb == Vec2(120.0, 100.0)
    assert stats.contacts_begun == 1 and stats.separations == 1
    assert g.get_node("a").body.contacts == {"b"}


def test_diagonal_overlap_separates_along_the_normal():
    g = _graph(a=PhysicsBody.at(0.0, 0.0), b=PhysicsBody.at(6.0, 8.0))
    sim = LayoutSimulation(g, PhysicsModel(radius=15.0))
    sim.step(DT)
    pa, pb = g.get_node("a").body.position, g.get_node("b").body.position
    assert pa.dist(pb) == pytest.approx(30.0)
    assert pa.x == pytest.approx(-6.0) and pb.y == pytest.approx(16.0)


def test_contact_onset_exchanges_normal_velocity():
    a = PhysicsBody(position=Vec2(0.0, 0.0), velocity=Vec2(5.0, 0.0))
    b = PhysicsBody.at(30.0, 0.0)
    sim = LayoutSimulation(_graph(a=a, b=b), PhysicsModel(repulsion=0.0, friction=0.0))
    sim.step(DT)
    assert a.velocity == Vec2(0.0, 0.0)
    assert b.velocity == Vec2(5.0, 0.0)


def test_disabled_body_is_fixed_and_pushes_enabled_body_out():
    anchor = PhysicsBody.at(0.0, 0.0, anchor=True)
    free = PhysicsBody.at(10.0, 0.0)
    sim = LayoutSimulation(_graph(anchor=anchor, free=free), PhysicsModel(repulsion=0.0, friction=0.0))
    sim.step(DT)
    assert anchor.position == Vec2(0.0, 0.0)
    assert anchor.velocity == Vec2(0.0, 0.0)
    assert free.position == Vec2(40.0, 0.0)


def test_held_body_is_not_integrated_but_still_repels():
    held = PhysicsBody(position=Vec2(0.0, 0.0), velocity=Vec2(50.0, 50.0))
    held.grab()
    other = PhysicsBody.at(100.0, 0.0)
    sim = LayoutSimulation(_graph(held=held, other=other))
    sim.step(DT)
    assert held.position == Vec2(0.0, 0.0)
    assert held.velocity == Vec2(0.0, 0.0)
    assert other.velocity.x > 0  # pushed away from the held body
    assert other.velocity.y == 0.0


def test_spring_pulls_stretched_neighbors_together():
    g = _graph(a=PhysicsBody.at(0.0, 0.0), b=PhysicsBody.at(100.0, 0.0))
    g.add_edge("a", "b", 2.0)  # rest length 60
    sim = LayoutSimulation(g, PhysicsModel(repulsion=0.0))
    sim.step(DT)
    assert g.get_node("a").body.acceleration.x == pytest.approx(400.0)
    assert g.get_node("b").body.acceleration.x == pytest.approx(-400.0)


def test_repulsion_pushes_pair_apart():
    g = _graph(a=PhysicsBody.at(0.0, 0.0), b=PhysicsBody.at(100.0, 0.0))
    sim = LayoutSimulation(g)
    sim.step(DT)
    assert g.get_node("a").body.acceleration.x == pytest.approx(-500.0)
    assert g.get_node("b").body.acceleration.x == pytest.approx(500.0)


def test_pair_settles_at_spring_repulsion_balance():
    g = _graph(a=PhysicsBody.at(100.0, 300.0), b=PhysicsBody.at(300.0, 300.0))
    g.add_edge("a", "b", 1.0)
    sim = LayoutSimulation(g)
    steps = sim.settle(DT, max_steps=10_000, tolerance=1e-3)
    assert steps < 10_000
    assert sim.kinetic_energy() < 1e-3
    d = g.get_node("a").body.position.dist(g.get_node("b").body.position)
    # 5e6 / d**2 == 10 * (d - 30)
    assert d == pytest.approx(90.73, abs=0.5)


def test_wall_bounce_on_first_contact_only():
    body = PhysicsBody(position=Vec2(25.0, 100.0), velocity=Vec2(-600.0, 0.0))
    sim = LayoutSimulation(_graph(a=body), PhysicsModel(width=200.0, height=200.0))
    stats = sim.step(DT)
    assert stats.wall_hits == 1
    assert body.position.x == 20.0
    assert body.velocity.x == pytest.approx(285.0)
    assert body.walls.left

    body.velocity = Vec2(-600.0, 0.0)
    stats = sim.step(DT)
    assert stats.wall_hits == 0  # still touching: no second bounce
    assert body.position.x == 20.0
    assert body.velocity.x < 0


def test_unbounded_simulation_has_no_walls():
    body = PhysicsBody(position=Vec2(5.0, 5.0), velocity=Vec2(-600.0, 0.0))
    sim = LayoutSimulation(_graph(a=body))
    sim.step(DT)
    assert body.position.x < 0


def test_set_bounds_validates():
    sim = LayoutSimulation(WeightedGraph())
    with pytest.raises(ValueError):
        sim.set_bounds(100.0, None)
    with pytest.raises(ValueError):
        sim.set_bounds(30.0, 300.0)
    sim.set_bounds(800.0, 600.0)
    assert sim.bounded
    sim.set_bounds(None, None)
    assert not sim.bounded


def test_nan_state_is_sanitized():
    body = PhysicsBody(position=Vec2(10.0, 10.0), velocity=Vec2(math.nan, 0.0))
    sim = LayoutSimulation(_graph(a=body))
    stats = sim.step(DT)
    assert stats.sanitized == 3
    assert body.position == Vec2(0.0, 10.0)
    assert body.velocity == Vec2(0.0, 0.0)


def test_negative_dt_rejected_and_counters_advance():
    sim = LayoutSimulation(_graph(a=PhysicsBody()))
    with pytest.raises(ValueError):
        sim.step(-0.1)
    sim.step(0.25)
    sim.step(0.25)
    assert sim.t == 0.5 and sim.steps == 2


def test_release_throws_and_anchor_stays_put():
    body = PhysicsBody.at(0.0, 0.0)
    body.grab()
    assert body.disabled
    body.release(Vec2(3.0, 4.0))
    assert not body.disabled and body.velocity == Vec2(3.0, 4.0)

    anchor = PhysicsBody.at(0.0, 0.0, anchor=True)
    anchor.release(Vec2(3.0, 4.0))
    assert anchor.disabled and anchor.velocity == Vec2(0.0, 0.0)


def test_new_node_reusing_a_removed_name_gets_a_contact_impulse():
    g = _graph(a=PhysicsBody.at(0.0, 0.0, anchor=True), b=PhysicsBody.at(10.0, 0.0))
    sim = LayoutSimulation(g, PhysicsModel(repulsion=0.0, friction=0.0))
    assert sim.step(DT).contacts_begun == 1

    g.remove_node("b")
    g.add_node("b", body=PhysicsBody(position=Vec2(30.0, 0.0), velocity=Vec2(-5.0, 0.0)))
    stats = sim.step(DT)
    assert stats.contacts_begun == 1
    assert g.get_node("b").body.velocity == Vec2(5.0, 0.0)


def test_persisting_contact_is_not_reflected_again():
    anchor = PhysicsBody.at(0.0, 0.0, anchor=True)
    body = PhysicsBody(position=Vec2(30.0, 0.0), velocity=Vec2(-5.0, 0.0))
    g = _graph(anchor=anchor, body=body)
    sim = LayoutSimulation(g, PhysicsModel(repulsion=0.0, friction=0.0))

    first = sim.step(DT)
    assert first.contacts_begun == 1
    assert body.velocity == Vec2(5.0, 0.0)
    assert "anchor" in body.contacts

    # pushed back into the anchor while the contact is still recorded
    body.position = Vec2(30.0, 0.0)
    body.velocity = Vec2(-5.0, 0.0)
    second = sim.step(DT)
    assert second.contacts_begun == 0
    assert second.separations == 1
    assert body.velocity == Vec2(-5.0, 0.0)
    assert body.position.x == pytest.approx(40.0 - 5.0 * DT)
