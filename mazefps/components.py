"""Components shared between server and clients, and the ECS change protocol."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Union

if TYPE_CHECKING:
    from .gun import Gun
    from .world import World

UserID = int
Entity = int


@dataclass(frozen=True)
class Vec2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    ZERO: ClassVar["Vec2"]

    @staticmethod
    def from_angle(angle: float) -> "Vec2":
        """Unit vector pointing at the given angle in radians."""
        return Vec2(math.cos(angle), math.sin(angle))

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def rotate(self, other: "Vec2") -> "Vec2":
        """Rotate ``other`` by the angle of this vector (complex multiplication)."""
        return Vec2(
            self.x * other.x - self.y * other.y,
            self.y * other.x + self.x * other.y,
        )

    def perp(self) -> "Vec2":
        """This vector rotated by 90 degrees counter-clockwise."""
        return Vec2(-self.y, self.x)

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize_or_zero(self) -> "Vec2":
        length = self.length()
        if length == 0.0 or not math.isfinite(length):
            return Vec2.ZERO
        return Vec2(self.x / length, self.y / length)

    def is_normalized(self) -> bool:
        return abs(self.length_squared() - 1.0) <= 2e-4

    def distance(self, other: "Vec2") -> float:
        return (self - other).length()


Vec2.ZERO = Vec2(0.0, 0.0)


@dataclass
class Position:
    value: Vec2


@dataclass
class Velocity:
    value: Vec2


@dataclass
class LookDirection:
    value: Vec2


@dataclass
class Size:
    value: Vec2


@dataclass
class Health:
    value: float


@dataclass
class Kills:
    value: int


@dataclass
class Deaths:
    value: int


@dataclass
class HeldWeapon:
    gun: "Gun"
    ammo: int


@dataclass
class Bullet:
    owner: UserID
    gun: "Gun"

    @property
    def id(self) -> UserID:
        return self.owner


@dataclass
class WeaponCrate:
    gun: "Gun"


@dataclass
class DeadPlayer:
    pass


@dataclass
class Player:
    id: UserID
    name: str


@dataclass
class InputState:
    """A client's controls at one moment."""

    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False
    look_angle: float = 0.0
    shoot: bool = False


# Components that are replicated over the network, in protocol order.
SHARED_COMPONENTS: tuple[type, ...] = (
    Position,
    Velocity,
    LookDirection,
    Size,
    Health,
    HeldWeapon,
    Kills,
    Deaths,
    Player,
    Bullet,
    WeaponCrate,
    DeadPlayer,
)


@dataclass(frozen=True)
class Insert:
    """Insert (or replace) a component on an entity."""

    entity: Entity
    component: object


@dataclass(frozen=True)
class Remove:
    """Remove a component type from an entity."""

    entity: Entity
    component_type: type


@dataclass(frozen=True)
class Despawn:
    """Remove an entity entirely."""

    entity: Entity


EcsProtocol = Union[Insert, Remove, Despawn]


def _require_shared(component_type: type) -> None:
    if component_type not in SHARED_COMPONENTS:
        raise TypeError(f"{component_type.__name__} is not a shared component")


def apply_insert(world: "World", entity: Entity, component: object) -> None:
    """Insert a shared component into a world."""
    _require_shared(type(component))
    world.insert_one(entity, component)


def apply_remove(world: "World", entity: Entity, component_type: type) -> None:
    """Remove a shared component type from an entity in a world."""
    _require_shared(component_type)
    world.remove_one(entity, component_type)


def query_all(world: "World") -> list[Insert]:
    """Insert messages that rebuild every shared component of the world."""
    return [
        Insert(entity, copy.copy(component))
        for component_type in SHARED_COMPONENTS
        for entity, component in world.query(component_type)
    ]