from astar_sim.domain.geometry import Vec2

# defaults; a simulation reads its own values from PhysicsModel
REPULSION_CONSTANT = 5_000_000.0
FRICTION_CONSTANT = 3.0
LENGTH_SCALE_FACTOR = 30.0
SPRING_STRENGTH_FACTOR = 10.0
RADIUS = 20.0
MIN_SPRING_WEIGHT = 1.0
MAX_SPRING_WEIGHT = 20.0
WALL_RESTITUTION = 0.5
THROW_FACTOR = 0.3


def repulsion(distance: float, k: float = REPULSION_CONSTANT) -> float:
    """Magnitude of the inverse-square push between two bodies."""
    if distance == 0:
        return 0.0
    return k / (distance * distance)


def rest_length(
    weight: float,
    length_scale: float = LENGTH_SCALE_FACTOR,
    lo: float = MIN_SPRING_WEIGHT,
    hi: float = MAX_SPRING_WEIGHT,
) -> float:
    return length_scale * min(max(weight, lo), hi)


def spring(
    distance: float,
    weight: float,
    *,
    strength: float = SPRING_STRENGTH_FACTOR,
    length_scale: float = LENGTH_SCALE_FACTOR,
    lo: float = MIN_SPRING_WEIGHT,
    hi: float = MAX_SPRING_WEIGHT,
) -> float:
    """Signed spring magnitude along the normal towards the neighbor.

    Positive pulls the pair together, negative pushes it apart.
    """
    return strength * (distance - rest_length(weight, length_scale, lo, hi))


def friction(velocity: Vec2, k: float = FRICTION_CONSTANT) -> Vec2:
    return velocity * -k


def exchange_normal(v_i: Vec2, v_j: Vec2, normal: Vec2) -> tuple[Vec2, Vec2]:
    """Equal-mass elastic collision: swap the velocity components along ``normal``."""
    ci, cj = v_i.dot(normal), v_j.dot(normal)
    return v_i + normal * (cj - ci), v_j + normal * (ci - cj)


def reflect_normal(v: Vec2, normal: Vec2) -> Vec2:
    """Bounce off an immovable body; ``normal`` points from the body to the obstacle."""
    c = v.dot(normal)
    if c <= 0:
        return v  # already moving away
    return v - normal * (2 * c)
