# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger("astar_sim.recorder")


class Sink(Protocol):
    def write(self, rec) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, rec) -> None:
        self.fp.write(json.dumps(asdict(rec)) + "\n")


class MemorySink:
    def __init__(self):
        self.records: list = []

    def write(self, rec) -> None:
        self.records.append(rec)

    def named(self, name: str) -> list:
        return [r for r in self.records if r.name == name]


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failures = 0

    def emit(self, rec) -> None:
        for s in self.sinks:
            try:
                s.write(rec)
            except Exception:
                # a broken sink must not stop the loop
                self.failures += 1
                log.exception("sink %s failed to write %s", type(s).__name__, rec.name)
