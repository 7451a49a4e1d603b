# astar_sim/app/build.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from astar_sim.app.protocols import Heuristic
from astar_sim.config.models import GraphModel, ScenarioModel
from astar_sim.domain.body import PhysicsBody
from astar_sim.domain.geometry import Vec2
from astar_sim.domain.graph import WeightedGraph
from astar_sim.domain.mechanics.layout import LayoutSimulation
from astar_sim.io.loop_logging import LoopLogging  # JSON logs
from astar_sim.io.recorder import JsonlSink, Recorder, Sink
from astar_sim.runtime.registries import make_heuristic, make_placement
from astar_sim.sim.hooks import NoopHooks
from astar_sim.sim.loop import FrameLoop
from astar_sim.sim.rng import RNGRegistry


@dataclass
class App:
    loop: FrameLoop
    simulation: LayoutSimulation
    graph: WeightedGraph
    rng: RNGRegistry
    heuristic: Heuristic
    config: ScenarioModel


def graph_from_model(model: GraphModel) -> tuple[WeightedGraph, frozenset[str]]:
    """Build the graph; also return the names of nodes that came with coordinates."""
    graph = WeightedGraph()
    fixed = set()
    for n in model.nodes:
        body = PhysicsBody(velocity=Vec2(n.vx, n.vy))
        if n.x is not None:
            body.position = Vec2(n.x, n.y)
            fixed.add(n.name)
        if n.anchor:
            body.make_anchor()
        graph.add_node(n.name, body=body)
    for e in model.edges:
        graph.add_edge(e.a, e.b, e.weight)
    return graph, frozenset(fixed)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: Sequence[Sink] | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.seed, scenario=model.name)

    # 2) Graph & initial layout
    graph, fixed = graph_from_model(model.graph)
    placement = make_placement(model.placement, deps={"physics": model.physics, "rngs": rng_registry})
    placement.place(graph, fixed)

    simulation = LayoutSimulation(graph, model.physics)

    # 3) Loop (with hooks)
    hooks = (
        LoopLogging(
            run_id=model.run_id,
            recorder=Recorder(*(sinks or (JsonlSink(),))),
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    loop = FrameLoop(simulation, hooks=hooks, search_interval=model.search.step_interval_s)

    # 4) Search
    heuristic = make_heuristic(model.search.heuristic, physics=model.physics)
    if model.search.start is not None:
        loop.start_search(model.search.start, model.search.goal, heuristic)

    return App(loop, simulation, graph, rng_registry, heuristic, model)
