# sim/rng.py
from __future__ import annotations

from dataclasses import dataclass
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _tag(part: object) -> int:
    if isinstance(part, (int, np.integer)):
        return _u32(int(part))
    text = part if isinstance(part, str) else repr(part)
    return _u32(crc32(text.encode("utf-8")))


@dataclass(frozen=True)
class StreamKey:
    """Stream name plus optional sub-keys, normalized to u32 words."""

    name: str
    words: tuple[int, ...]

    @classmethod
    def of(cls, name: str, *parts: object) -> StreamKey:
        return cls(name=name, words=(_tag(name), *(_tag(p) for p in parts)))


class RNGRegistry:
    """
    Deterministic numpy Generators keyed by name.
    Entropy path: [master_seed, scenario, *key.words]. A generator depends only on
    its own key, so the order in which streams are requested does not matter.
    """

    def __init__(self, master_seed: int, *, scenario: str = ""):
        self.master_seed = _u32(master_seed)
        self.scenario = scenario
        self._scenario_tag = _tag(scenario)
        self._cache: dict[StreamKey, np.random.Generator] = {}

    def generator(self, key: StreamKey) -> np.random.Generator:
        gen = self._cache.get(key)
        if gen is None:
            ss = np.random.SeedSequence(entropy=[self.master_seed, self._scenario_tag, *key.words])
            gen = np.random.Generator(np.random.PCG64(ss))
            self._cache[key] = gen
        return gen

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(StreamKey.of(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        """e.g. ``reg.substream("placement", node.name)``"""
        return self.generator(StreamKey.of(name, *parts))
