# io/loop_logging.py
import json
import logging
import sys

from astar_sim.domain.search.astar import PathSearch, SearchStatus
from astar_sim.io.recorder import Recorder
from astar_sim.io.records import (
    SearchFinishedRecord,
    SearchStartedRecord,
    SearchStepRecord,
    SettledRecord,
)
from astar_sim.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _default_json_logger(name="astar_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class LoopLogging(NoopHooks):
    """
    Structured logs for the frame loop and its search, plus records for sinks.
    Frames are only logged at DEBUG, and only every ``sample_every``-th one.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 60,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level="DEBUG" if debug else level)
        self._seq = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def _record(self, cls, t: float, **fields):
        if not self.recorder:
            return
        self._seq += 1
        name = cls.__name__.removesuffix("Record")
        self.recorder.emit(cls(run_id=self.run_id, t=t, seq=self._seq, name=name, **fields))

    # --------------------------------------------------------

    def run_start(self, *, frames, until, t):
        self._emit("INFO", "run_start", frames=frames, until=until, t=t)

    def run_end(self, *, processed: int, **extra):
        self._emit("INFO", "run_end", processed=processed, **extra)

    def frame(self, stats, *, frame: int, ms: float):
        if stats.sanitized:
            self._emit("WARNING", "nan_sanitized", frame=frame, t=stats.t, count=stats.sanitized)
        if self.debug and frame % self.sample_every == 0:
            self._emit(
                "DEBUG",
                "frame",
                frame=frame,
                t=stats.t,
                ms=round(ms, 3),
                contacts=stats.contacts_begun,
                separations=stats.separations,
                wall_hits=stats.wall_hits,
                kinetic_energy=stats.kinetic_energy,
            )

    def search_start(self, search: PathSearch, *, t):
        heuristic = type(search.heuristic).__name__
        self._emit("INFO", "search_start", start=search.start.name, goal=search.goal.name, heuristic=heuristic, t=t)
        self._record(
            SearchStartedRecord, t, start=search.start.name, goal=search.goal.name, heuristic=heuristic
        )

    def search_step(self, search: PathSearch, *, t):
        current = search.current.name
        if self.debug:
            self._emit("DEBUG", "search_step", current=current, frontier=len(search.frontier), t=t)
        self._record(
            SearchStepRecord,
            t,
            current=current,
            frontier=[n.name for n in search.frontier],
            cost=search.cost_of(current),
        )

    def search_end(self, search: PathSearch, *, t, path):
        names = [n.name for n in path] if path is not None else None
        cost = search.cost_of(search.goal) if search.status is SearchStatus.FOUND else None
        self._emit(
            "INFO", "search_end", status=search.status.value, steps=search.steps, path=names, cost=cost, t=t
        )
        self._record(
            SearchFinishedRecord, t, status=search.status.value, steps=search.steps, path=names, cost=cost
        )

    def settled(self, *, t, steps, kinetic_energy):
        self._emit("INFO", "settled", steps=steps, kinetic_energy=kinetic_energy, t=t)
        self._record(SettledRecord, t, steps=steps, kinetic_energy=kinetic_energy)
