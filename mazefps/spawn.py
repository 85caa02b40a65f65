"""Creating players, bullets and weapon crates in the server ECS."""

from __future__ import annotations

import random
from typing import Any

from .components import (
    Bullet,
    Deaths,
    Health,
    Kills,
    LookDirection,
    Player,
    Position,
    Vec2,
    Velocity,
    WeaponCrate,
)
from .defaults import DEFAULT_PLAYER_HP, WEAPON_CRATES_AMOUNT
from .gun import Gun, random_gun
from .map import Map
from .server_components import BulletDespawn, ShotBy, Speed
from .components import InputState

DEFAULT_SPEED = 2.5


def _random_spot(ecs: Any, rng: random.Random | None) -> Position:
    spot = ecs.resources.get(Map).random_empty_spot(rng)
    if spot is None:
        raise RuntimeError("Can't find a random spot")
    return spot


def spawn_bullet(
    ecs: Any,
    player: Player,
    pos: Position,
    direction: LookDirection,
    gun: Gun,
    rng: random.Random | None = None,
) -> list[int]:
    """Spawn the pellets of one shot and return their entities."""
    if not direction.value.is_normalized():
        raise ValueError(f"bullet direction must be normalized, got {direction.value}")
    rng = rng if rng is not None else random.Random()

    entities = []
    for _ in range(gun.pellets()):
        entity = ecs.world.reserve_entity()
        heading = direction.value
        spread = gun.spread()
        if spread is not None:
            heading = Vec2.from_angle(rng.uniform(-spread, spread)).rotate(heading)

        ecs.observed_world().insert(
            entity,
            Bullet(player.id, gun),
            Position(pos.value),
            Velocity(heading * gun.bullet_speed()),
        )
        ecs.world.insert(entity, BulletDespawn(gun.range() / gun.bullet_speed()))
        entities.append(entity)
    return entities


def spawn_player_at(pos: Position, ecs: Any, username: str) -> int:
    """Spawn a fresh player at ``pos``; its user id is its entity."""
    entity = ecs.world.reserve_entity()
    ecs.observed_world().insert(
        entity,
        Player(id=entity, name=username),
        Position(pos.value),
        Health(DEFAULT_PLAYER_HP),
        Velocity(Vec2.ZERO),
        LookDirection(Vec2.from_angle(0.0)),
        Gun.PISTOL.to_held_weapon(),
        Kills(0),
        Deaths(0),
    )
    ecs.world.insert(entity, ShotBy(None), InputState(), Speed(DEFAULT_SPEED))
    return entity


def spawn_player(
    ecs: Any, username: str, rng: random.Random | None = None
) -> tuple[Position, int]:
    """Spawn a player on a random empty cell of the map."""
    pos = _random_spot(ecs, rng)
    return pos, spawn_player_at(pos, ecs, username)


def spawn_weapon_crate(ecs: Any, rng: random.Random | None = None) -> int:
    """Spawn a crate with a random gun on a random empty cell."""
    rng = rng if rng is not None else random.Random()
    pos = _random_spot(ecs, rng)
    entity = ecs.world.reserve_entity()
    ecs.observed_world().insert(entity, WeaponCrate(random_gun(rng)), pos)
    return entity


def spawn_weapon_crates_init(ecs: Any, rng: random.Random | None = None) -> list[int]:
    """Spawn the initial crates: one more than ``WEAPON_CRATES_AMOUNT``."""
    return [spawn_weapon_crate(ecs, rng) for _ in range(WEAPON_CRATES_AMOUNT + 1)]