import pytest
from pydantic import ValidationError

from astar_sim.config.models import (
    EdgeModel,
    GraphModel,
    PhysicsModel,
    ScenarioModel,
    SearchModel,
)


def test_physics_defaults():
    p = PhysicsModel()
    assert p.repulsion == 5_000_000.0
    assert p.friction == 3.0
    assert p.length_scale == 30.0
    assert p.spring_strength == 10.0
    assert p.radius == 20.0
    assert (p.min_spring_weight, p.max_spring_weight) == (1.0, 20.0)
    assert p.wall_restitution == 0.5
    assert p.throw_factor == 0.3
    assert not p.bounded


@pytest.mark.parametrize(
    "kw",
    [
        {"width": 800.0},
        {"width": 30.0, "height": 600.0},
        {"min_spring_weight": 5.0, "max_spring_weight": 2.0},
        {"radius": 0.0},
        {"friction": -1.0},
        {"gravity": 9.81},
    ],
)
def test_physics_rejects(kw):
    with pytest.raises(ValidationError):
        PhysicsModel(**kw)


def test_edge_weight_must_be_nonnegative():
    assert EdgeModel(a="a", b="b", weight=0.0).weight == 0.0
    with pytest.raises(ValidationError):
        EdgeModel(a="a", b="b", weight=-1.0)


def test_graph_checks_names_and_references():
    with pytest.raises(ValidationError):
        GraphModel(nodes=[{"name": "a"}, {"name": "a"}])
    with pytest.raises(ValidationError):
        GraphModel(nodes=[{"name": "a"}], edges=[{"a": "a", "b": "z"}])
    with pytest.raises(ValidationError):
        GraphModel(nodes=[{"name": "a", "x": 1.0}])


def test_search_endpoints_come_in_pairs():
    assert SearchModel().start is None
    with pytest.raises(ValidationError):
        SearchModel(start="a")
    with pytest.raises(ValidationError):
        SearchModel(step_interval_s=-0.5)


def test_scenario_discriminated_unions():
    s = ScenarioModel.model_validate(
        {
            "name": "demo",
            "graph": {"nodes": [{"name": "a"}, {"name": "b"}]},
            "placement": {"kind": "circle", "radius": 50.0},
            "search": {"start": "a", "goal": "b", "heuristic": {"kind": "zero"}},
        }
    )
    assert s.placement.kind == "circle"
    assert s.search.heuristic.kind == "zero"
    assert s.placement.center == (400.0, 300.0)

    with pytest.raises(ValidationError):
        ScenarioModel.model_validate({"name": "x", "placement": {"kind": "grid"}})
    with pytest.raises(ValidationError):
        ScenarioModel.model_validate(
            {"name": "x", "graph": {"nodes": [{"name": "a"}]}, "search": {"start": "a", "goal": "q"}}
        )
