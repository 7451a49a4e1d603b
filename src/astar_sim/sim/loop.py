# sim/loop.py

import time

from astar_sim.app.protocols import Heuristic
from astar_sim.domain.graph import Node
from astar_sim.domain.mechanics.layout import LayoutSimulation, StepStats
from astar_sim.domain.search.astar import PathSearch
from astar_sim.domain.search.heuristics import ScaledEuclideanHeuristic
from astar_sim.domain.search.trace import SearchTrace

from .hooks import LoopHooks, NoopHooks


class FrameLoop:
    """Drives the layout simulation frame by frame and interleaves search steps.

    Every ``tick`` advances the simulation once. A running search advances one
    step whenever the time accumulated since its last step reaches
    ``search_interval`` (every frame when the interval is 0), so the heuristic
    always sees positions at most one frame old.
    """

    def __init__(
        self,
        simulation: LayoutSimulation,
        hooks: LoopHooks | None = None,
        search_interval: float = 0.0,
    ):
        if search_interval < 0:
            raise ValueError(f"search_interval must be >= 0, got {search_interval}")
        self.simulation = simulation
        self.search_interval = search_interval
        self._hooks = hooks or NoopHooks()
        self._search: PathSearch | None = None
        self._trace: SearchTrace | None = None
        self._since_step = 0.0
        self._frames = 0

    @property
    def now(self) -> float:
        return self.simulation.t

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def search(self) -> PathSearch | None:
        return self._search

    @property
    def trace(self) -> SearchTrace | None:
        return self._trace

    @property
    def scanning(self) -> bool:
        """True during the second half of the interval between search steps."""
        if self.search_interval == 0:
            return False
        return self._since_step >= self.search_interval / 2

    def start_search(
        self, start: Node | str, goal: Node | str, heuristic: Heuristic | None = None
    ) -> PathSearch:
        if heuristic is None:
            heuristic = ScaledEuclideanHeuristic(self.simulation.physics.length_scale)
        search = PathSearch(self.simulation.graph, start, goal, heuristic)
        self._search = search
        self._trace = SearchTrace(search)
        self._since_step = 0.0
        self._hooks.search_start(search, t=self.now)
        if search.is_terminal:
            self._hooks.search_end(search, t=self.now, path=search.result)
        return search

    def stop_search(self) -> None:
        self._search = None
        self._trace = None
        self._since_step = 0.0

    def tick(self, dt: float) -> StepStats:
        t1 = time.perf_counter()
        stats = self.simulation.step(dt)
        self._frames += 1

        s = self._search
        if s is not None and not s.is_terminal:
            self._since_step += dt
            if self._since_step >= self.search_interval:
                self._since_step = 0.0
                s.step()
                self._trace.observe()
                self._hooks.search_step(s, t=self.now)
                if s.is_terminal:
                    self._hooks.search_end(s, t=self.now, path=s.result)

        self._hooks.frame(stats, frame=self._frames, ms=(time.perf_counter() - t1) * 1000)
        return stats

    def run(self, frames: int | None = None, *, dt: float, until: float | None = None) -> int:
        if frames is None and (until is None or dt <= 0):
            raise ValueError("run needs a frame budget or a reachable time bound")
        t0 = time.perf_counter()
        self._hooks.run_start(frames=frames, until=until, t=self.now)
        processed = 0
        while frames is None or processed < frames:
            if until is not None and self.now + 1e-12 >= until:
                break
            self.tick(dt)
            processed += 1
        self._hooks.run_end(
            processed=processed,
            last_t=self.now,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return processed

    def run_search(self, dt: float, max_frames: int = 10_000) -> list[Node] | None:
        """Tick until the current search is terminal; return its path or None."""
        s = self._search
        if s is None:
            raise RuntimeError("no search started")
        t0 = time.perf_counter()
        self._hooks.run_start(frames=max_frames, until=None, t=self.now)
        processed = 0
        while not s.is_terminal and processed < max_frames:
            self.tick(dt)
            processed += 1
        self._hooks.run_end(
            processed=processed,
            last_t=self.now,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return s.result

    def settle(self, dt: float, *, max_steps: int = 10_000, tolerance: float = 1e-3) -> int:
        """Run the layout alone until it comes to rest; the search does not advance."""
        steps = self.simulation.settle(dt, max_steps=max_steps, tolerance=tolerance)
        self._hooks.settled(
            t=self.now, steps=steps, kinetic_energy=self.simulation.kinetic_energy()
        )
        return steps
