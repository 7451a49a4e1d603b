# tests/sim/test_loop.py
import pytest

from astar_sim.config.models import PhysicsModel
from astar_sim.domain.body import PhysicsBody
from astar_sim.domain.graph import WeightedGraph
from astar_sim.domain.mechanics.layout import LayoutSimulation
from astar_sim.domain.search.astar import SearchStatus
from astar_sim.sim.hooks import NoopHooks
from astar_sim.sim.loop import FrameLoop

DT = 1 / 60


# --- test hook that records what the loop reports ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.calls = []

    def run_start(self, **kw):
        self.calls.append(("run_start", kw["frames"], kw["until"]))

    def run_end(self, *, processed, **_):
        self.calls.append(("run_end", processed))

    def frame(self, stats, *, frame, ms):
        self.calls.append(("frame", frame))

    def search_start(self, search, *, t):
        self.calls.append(("search_start", search.start.name))

    def search_step(self, search, *, t):
        self.calls.append(("search_step", search.current.name))

    def search_end(self, search, *, t, path):
        self.calls.append(("search_end", [n.name for n in path] if path else None))

    def settled(self, *, t, steps, kinetic_energy):
        self.calls.append(("settled", steps))

    def named(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def sim() -> LayoutSimulation:
    g = WeightedGraph()
    for i, name in enumerate("ABC"):
        g.add_node(name, body=PhysicsBody.at(100.0 + 90.0 * i, 100.0))
    g.add_edge("A", "B", 1)
    g.add_edge("B", "C", 2)
    return LayoutSimulation(g, PhysicsModel())


def test_search_steps_every_frame_by_default(sim):
    hooks = TraceHooks()
    loop = FrameLoop(sim, hooks=hooks)
    loop.start_search("A", "C")
    path = loop.run_search(DT)
    assert [n.name for n in path] == ["A", "B", "C"]
    assert loop.frames == 3
    assert [c[1] for c in hooks.named("search_step")] == ["A", "B", "C"]
    assert hooks.named("search_end") == [("search_end", ["A", "B", "C"])]
    assert len(hooks.named("frame")) == 3


def test_search_interval_spaces_out_steps(sim):
    loop = FrameLoop(sim, search_interval=0.1)
    search = loop.start_search("A", "C")
    loop.tick(0.05)
    assert search.steps == 0
    assert loop.scanning
    loop.tick(0.05)
    assert search.steps == 1
    assert not loop.scanning
    loop.run(4, dt=0.05)
    assert search.status is SearchStatus.FOUND
    assert search.steps == 3


def test_run_respects_frames_and_time_bound(sim):
    hooks = TraceHooks()
    loop = FrameLoop(sim, hooks=hooks)
    assert loop.run(5, dt=DT) == 5
    assert loop.run(dt=0.25, until=loop.now + 1.0) == 4
    assert hooks.named("run_start")[0] == ("run_start", 5, None)
    assert hooks.named("run_end") == [("run_end", 5), ("run_end", 4)]
    assert loop.frames == 9


def test_run_without_bound_is_rejected(sim):
    loop = FrameLoop(sim)
    with pytest.raises(ValueError):
        loop.run(dt=DT)
    with pytest.raises(ValueError):
        FrameLoop(sim, search_interval=-1.0)


def test_run_search_requires_a_search(sim):
    with pytest.raises(RuntimeError):
        FrameLoop(sim).run_search(DT)


def test_restarting_search_discards_previous(sim):
    hooks = TraceHooks()
    loop = FrameLoop(sim, hooks=hooks)
    first = loop.start_search("A", "C")
    loop.tick(DT)
    second = loop.start_search("C", "C")  # trivially found
    assert loop.search is second and first is not second
    assert second.status is SearchStatus.FOUND
    assert hooks.named("search_end") == [("search_end", ["C"])]
    loop.tick(DT)
    assert first.steps == 1


def test_settle_reports_and_leaves_search_alone(sim):
    hooks = TraceHooks()
    loop = FrameLoop(sim, hooks=hooks)
    search = loop.start_search("A", "C")
    steps = loop.settle(DT)
    assert steps == hooks.named("settled")[0][1]
    assert search.steps == 0
    assert loop.frames == 0


def test_stop_search_clears_state(sim):
    loop = FrameLoop(sim, search_interval=0.1)
    loop.start_search("A", "C")
    loop.tick(0.05)
    loop.stop_search()
    assert loop.search is None and loop.trace is None
    assert not loop.scanning
    loop.tick(0.05)  # nothing to step


def test_default_heuristic_uses_the_physics_length_scale():
    g = WeightedGraph()
    g.add_node("A", body=PhysicsBody.at(0.0, 0.0))
    g.add_node("B", body=PhysicsBody.at(300.0, 0.0))
    g.add_edge("A", "B", 5)
    loop = FrameLoop(LayoutSimulation(g, PhysicsModel(length_scale=60.0)))
    search = loop.start_search("A", "B")
    assert search.heuristic.length_scale == 60.0
    assert search.estimated_total["A"] == pytest.approx(5.0)
