# sim/hooks.py
from typing import Protocol

from astar_sim.domain.mechanics.layout import StepStats
from astar_sim.domain.search.astar import PathSearch


class LoopHooks(Protocol):
    def run_start(self, *, frames, until, t): ...
    def run_end(self, *, processed, last_t, wall_ms): ...
    def frame(self, stats: StepStats, *, frame: int, ms: float): ...
    def search_start(self, search: PathSearch, *, t): ...
    def search_step(self, search: PathSearch, *, t): ...
    def search_end(self, search: PathSearch, *, t, path): ...
    def settled(self, *, t, steps, kinetic_energy): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def frame(self, *_, **__):
        pass

    def search_start(self, *_, **__):
        pass

    def search_step(self, *_, **__):
        pass

    def search_end(self, *_, **__):
        pass

    def settled(self, **_):
        pass
