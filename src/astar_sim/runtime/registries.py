# runtime/registries.py
from collections.abc import Callable
from typing import Any

from astar_sim.app.protocols import Heuristic, Placement
from astar_sim.config.models import (
    HeuristicScaledEuclideanModel,
    HeuristicUnion,
    HeuristicZeroModel,
    PlacementCircleModel,
    PlacementGivenModel,
    PlacementScatterModel,
    PlacementUnion,
)
from astar_sim.domain.search.heuristics import ScaledEuclideanHeuristic, ZeroHeuristic
from astar_sim.runtime.placement import CirclePlacement, GivenPlacement, ScatterPlacement

HeuristicFactory = Callable[[HeuristicUnion, dict], Heuristic]
PlacementFactory = Callable[[PlacementUnion, dict], Placement]

_heuristic_registry: dict[str, HeuristicFactory] = {}
_placement_registry: dict[str, PlacementFactory] = {}


# ------------------- Heuristics ---------------------------


def register_heuristic(kind: str):
    def deco(fn: HeuristicFactory):
        _heuristic_registry[kind] = fn
        return fn

    return deco


def make_heuristic(cfg: HeuristicUnion, *, physics: Any) -> Heuristic:
    try:
        factory = _heuristic_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown heuristic kind {cfg.kind!r}") from None
    return factory(cfg, {"physics": physics})


@register_heuristic("scaled_euclidean")
def _make_scaled_euclidean(cfg: HeuristicScaledEuclideanModel, deps):
    return ScaledEuclideanHeuristic(cfg.length_scale or deps["physics"].length_scale)


@register_heuristic("zero")
def _make_zero(cfg: HeuristicZeroModel, deps):
    return ZeroHeuristic()


# ------------------- Placements ---------------------------


def register_placement(kind: str):
    def deco(fn: PlacementFactory):
        _placement_registry[kind] = fn
        return fn

    return deco


def make_placement(cfg: PlacementUnion, *, deps: dict) -> Placement:
    """deps: 'physics' (PhysicsModel) and 'rngs' (RNGRegistry)."""
    try:
        factory = _placement_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown placement kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_placement("given")
def _make_given(cfg: PlacementGivenModel, deps):
    return GivenPlacement()


@register_placement("scatter")
def _make_scatter(cfg: PlacementScatterModel, deps):
    box = cfg.box
    if box is None:
        physics = deps["physics"]
        if not physics.bounded:
            raise ValueError("scatter placement needs a box or physics width/height")
        box = (0.0, 0.0, physics.width, physics.height)
    return ScatterPlacement(box, deps["rngs"], margin=cfg.margin)


@register_placement("circle")
def _make_circle(cfg: PlacementCircleModel, deps):
    return CirclePlacement(cfg.center, cfg.radius)
