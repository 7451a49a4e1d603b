# astar_sim/io/records.py

from dataclasses import dataclass
from typing import Literal


# Base type for analysis records (written to sinks, never fed back into the loop)
@dataclass
class Record:
    run_id: str
    t: float  # simulation time
    seq: int  # emission order within the run
    name: str  # stable record name


@dataclass
class SearchStartedRecord(Record):
    start: str
    goal: str
    heuristic: str


@dataclass
class SearchStepRecord(Record):
    current: str
    frontier: list[str]
    cost: float  # known cost to reach current


@dataclass
class SearchFinishedRecord(Record):
    status: Literal["found", "exhausted"]
    steps: int
    path: list[str] | None = None
    cost: float | None = None


@dataclass
class SettledRecord(Record):
    steps: int
    kinetic_energy: float
