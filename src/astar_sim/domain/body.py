# domain/body.py
from dataclasses import dataclass, field

from astar_sim.domain.geometry import ZERO, Vec2


@dataclass
class WallContact:
    left: bool = False
    right: bool = False
    top: bool = False
    bottom: bool = False


@dataclass
class PhysicsBody:
    position: Vec2 = ZERO
    velocity: Vec2 = ZERO
    acceleration: Vec2 = ZERO
    disabled: bool = False  # anchor, or currently held by external input
    anchor: bool = False
    # names of bodies this one currently overlaps; an impulse is only applied on onset
    contacts: set[str] = field(default_factory=set, repr=False)
    walls: WallContact = field(default_factory=WallContact, repr=False)

    @classmethod
    def at(cls, x: float, y: float, *, anchor: bool = False) -> "PhysicsBody":
        body = cls(position=Vec2(float(x), float(y)))
        if anchor:
            body.make_anchor()
        return body

    def halt(self) -> None:
        self.velocity = ZERO
        self.acceleration = ZERO

    def make_anchor(self) -> None:
        self.anchor = True
        self.disabled = True
        self.halt()

    def grab(self) -> None:
        self.disabled = True
        self.halt()

    def release(self, throw_velocity: Vec2 | None = None) -> None:
        if self.anchor:
            return
        self.disabled = False
        if throw_velocity is not None:
            self.velocity = throw_velocity

    def speed(self) -> float:
        return self.velocity.length()
