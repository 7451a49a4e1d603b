from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from astar_sim.domain.mechanics import forces


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=60, ge=1)  # frames between sampled debug lines


# ----------------- PHYSICS ---------------------


class PhysicsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    repulsion: float = Field(default=forces.REPULSION_CONSTANT, ge=0)
    friction: float = Field(default=forces.FRICTION_CONSTANT, ge=0)
    length_scale: float = Field(default=forces.LENGTH_SCALE_FACTOR, gt=0)
    spring_strength: float = Field(default=forces.SPRING_STRENGTH_FACTOR, ge=0)
    radius: float = Field(default=forces.RADIUS, gt=0)
    min_spring_weight: float = forces.MIN_SPRING_WEIGHT
    max_spring_weight: float = forces.MAX_SPRING_WEIGHT
    wall_restitution: float = Field(default=forces.WALL_RESTITUTION, ge=0, le=1)
    throw_factor: float = Field(default=forces.THROW_FACTOR, ge=0)
    # no walls unless both are given
    width: float | None = None
    height: float | None = None

    @model_validator(mode="after")
    def _check(self):
        if self.min_spring_weight > self.max_spring_weight:
            raise ValueError("min_spring_weight must not exceed max_spring_weight")
        if (self.width is None) != (self.height is None):
            raise ValueError("width and height must be given together")
        if self.width is not None and min(self.width, self.height) <= 2 * self.radius:
            raise ValueError("width and height must exceed the body diameter")
        return self

    @property
    def bounded(self) -> bool:
        return self.width is not None


# ----------------- GRAPH ---------------------


class NodeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1)
    x: float | None = None
    y: float | None = None
    vx: float = 0.0
    vy: float = 0.0
    anchor: bool = False

    @model_validator(mode="after")
    def _both_coords(self):
        if (self.x is None) != (self.y is None):
            raise ValueError(f"node {self.name!r}: give both x and y or neither")
        return self


class EdgeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    a: str
    b: str
    weight: float = 1.0

    @field_validator("weight")
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


class GraphModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    nodes: list[NodeModel] = Field(default_factory=list)
    edges: list[EdgeModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_refs(self):
        seen: set[str] = set()
        for n in self.nodes:
            if n.name in seen:
                raise ValueError(f"duplicate node name {n.name!r}")
            seen.add(n.name)
        for e in self.edges:
            for end in (e.a, e.b):
                if end not in seen:
                    raise ValueError(f"edge {e.a!r}-{e.b!r} references unknown node {end!r}")
        return self


# --------------------- PLACEMENT -------------------------


class PlacementGivenModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["given"] = "given"


class PlacementScatterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["scatter"] = "scatter"
    # (min_x, min_y, max_x, max_y); falls back to the physics bounds
    box: tuple[float, float, float, float] | None = None
    margin: float = Field(default=40.0, ge=0)


class PlacementCircleModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["circle"] = "circle"
    center: tuple[float, float] = (400.0, 300.0)
    radius: float = Field(default=200.0, gt=0)


PlacementUnion = Annotated[
    PlacementGivenModel | PlacementScatterModel | PlacementCircleModel,
    Field(discriminator="kind"),
]

# ----------------- SEARCH ---------------------


class HeuristicScaledEuclideanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["scaled_euclidean"] = "scaled_euclidean"
    length_scale: float | None = Field(default=None, gt=0)  # None => physics.length_scale


class HeuristicZeroModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["zero"] = "zero"


HeuristicUnion = Annotated[
    HeuristicScaledEuclideanModel | HeuristicZeroModel,
    Field(discriminator="kind"),
]


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start: str | None = None
    goal: str | None = None
    heuristic: HeuristicUnion = Field(default_factory=HeuristicScaledEuclideanModel)
    step_interval_s: float = Field(default=0.0, ge=0)  # 0 => one search step per frame

    @model_validator(mode="after")
    def _pair(self):
        if (self.start is None) != (self.goal is None):
            raise ValueError("search start and goal must be given together")
        return self


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    seed: int = 0
    log: LogModel = LogModel()
    physics: PhysicsModel = PhysicsModel()
    graph: GraphModel = Field(default_factory=GraphModel)
    placement: PlacementUnion = Field(default_factory=PlacementGivenModel)
    search: SearchModel = Field(default_factory=SearchModel)

    @model_validator(mode="after")
    def _search_nodes_exist(self):
        names = {n.name for n in self.graph.nodes}
        for end in (self.search.start, self.search.goal):
            if end is not None and end not in names:
                raise ValueError(f"search references unknown node {end!r}")
        return self
