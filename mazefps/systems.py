"""Server-side systems run once per tick, in a fixed order."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from .components import (
    DeadPlayer,
    Deaths,
    Health,
    HeldWeapon,
    InputState,
    Kills,
    LookDirection,
    Player,
    Position,
    Vec2,
    Velocity,
    WeaponCrate,
)
from .defaults import DEFAULT_PLAYER_HP
from .collisions import collision_system
from .gun import Gun
from .logger import Logger
from .map import Map
from .server_components import (
    BulletDespawn,
    CorpseTimer,
    ShootCooldown,
    ShotBy,
    Speed,
)
from .spawn import spawn_bullet, spawn_weapon_crate

# How long a dead-player marker stays around, in seconds.
CORPSE_DURATION = 1.95
# How far in front of the player a bullet appears.
MUZZLE_OFFSET = 0.4
# Half-width of the square in which a player picks up a crate.
PICK_UP_REACH = 0.3


@dataclass
class _BulletSpawn:
    player: Player
    pos: Position
    direction: LookDirection
    gun: Gun


def input_system(ecs: Any, dt: float) -> None:
    """Apply each player's input state to its look direction and velocity."""
    for entity, (state, vel, look_dir, speed) in ecs.world.query(
        InputState, Velocity, LookDirection, Speed
    ):
        with ecs.observer.observe_component(entity, look_dir) as observed:
            observed.value = Vec2.from_angle(state.look_angle)

        forward = look_dir.value
        right = forward.perp()
        move_dir = Vec2.ZERO
        if state.forward:
            move_dir = move_dir + forward
        if state.backward:
            move_dir = move_dir - forward
        if state.right:
            move_dir = move_dir + right
        if state.left:
            move_dir = move_dir - right

        with ecs.observer.observe_component(entity, vel) as observed:
            observed.value = move_dir.normalize_or_zero() * speed.value


def move_system(ecs: Any, dt: float) -> None:
    """Move every entity that has a position and a velocity."""
    for entity, (vel, pos) in ecs.world.query(Velocity, Position):
        with ecs.observer.observe_component(entity, pos) as observed:
            observed.value = observed.value + vel.value * dt


def shoot_system(ecs: Any, dt: float) -> None:
    """Fire for players who hold the trigger and are not cooling down."""
    bullets: list[_BulletSpawn] = []
    cooldowns: list[tuple[int, ShootCooldown]] = []

    for entity, (player, state, look_dir, position, weapon) in ecs.world.query(
        Player, InputState, LookDirection, Position, HeldWeapon, without=ShootCooldown
    ):
        with ecs.observer.observe_component(entity, weapon) as held:
            if not state.shoot or (held.gun.max_ammo() != 0 and held.ammo == 0):
                continue

            bullets.append(
                _BulletSpawn(
                    player=copy.copy(player),
                    pos=Position(position.value + look_dir.value * MUZZLE_OFFSET),
                    direction=LookDirection(look_dir.value),
                    gun=held.gun,
                )
            )
            held.ammo = max(held.ammo - 1, 0)
            cooldowns.append((entity, ShootCooldown(held.gun.recharge())))

    for shot in bullets:
        spawn_bullet(ecs, shot.player, shot.pos, shot.direction, shot.gun)

    for entity, cooldown in cooldowns:
        ecs.world.insert_one(entity, cooldown)


def shoot_cooldown_system(ecs: Any, dt: float) -> None:
    """Drop finished shooting cooldowns."""
    ShootCooldown.system(ecs.world)


def bullet_despawn_system(ecs: Any, dt: float) -> None:
    """Despawn bullets whose flight time is over."""
    BulletDespawn.system_with(
        ecs.world, lambda world, entity, _: ecs.observer.observe(world).despawn(entity)
    )


def pick_up_system(ecs: Any, dt: float) -> None:
    """Give players the gun of any crate they stand on and replace the crate."""
    logger = ecs.resources.get(Logger)

    players = [
        (entity, Vec2(pos.value.x, pos.value.y))
        for entity, (pos, _) in ecs.world.query(Position, HeldWeapon)
    ]
    crates = [
        (entity, Vec2(pos.value.x, pos.value.y), crate.gun)
        for entity, (pos, crate) in ecs.world.query(Position, WeaponCrate)
    ]

    for player_entity, player_pos in players:
        for crate_entity, crate_pos, gun in crates:
            if (
                abs(player_pos.x - crate_pos.x) < PICK_UP_REACH
                and abs(player_pos.y - crate_pos.y) < PICK_UP_REACH
            ):
                ecs.observed_world().insert(player_entity, gun.to_held_weapon())
                ecs.observed_world().despawn(crate_entity)
                spawn_weapon_crate(ecs)
                logger.log("a weapon was picked up")


def respawn_system(ecs: Any, dt: float) -> None:
    """Respawn dead players, score the kills and leave a short-lived corpse."""
    killers: list[int | None] = []
    death_positions: list[Vec2] = []

    for entity, (pos, health, weapon, deaths, shot_by) in ecs.world.query(
        Position, Health, HeldWeapon, Deaths, ShotBy
    ):
        if health.value > 0.0:
            continue
        death_positions.append(pos.value)
        killers.append(shot_by.id)

        spot = ecs.resources.get(Map).random_empty_spot()
        if spot is None:
            raise RuntimeError("Can't find a random spot")
        with ecs.observer.observe_component(entity, pos) as observed:
            observed.value = spot.value

        with ecs.observer.observe_component(entity, health) as observed:
            observed.value = DEFAULT_PLAYER_HP

        with ecs.observer.observe_component(entity, weapon) as observed:
            observed.gun = Gun.PISTOL
            observed.ammo = observed.gun.max_ammo()

        with ecs.observer.observe_component(entity, deaths) as observed:
            observed.value += 1

    scored = [killer for killer in killers if killer is not None]
    for entity, (player, kills) in ecs.world.query(Player, Kills):
        if player.id in scored:
            with ecs.observer.observe_component(entity, kills) as observed:
                observed.value += 1

    for position in death_positions:
        corpse = ecs.observed_world().spawn(DeadPlayer(), Position(position))
        ecs.world.insert_one(corpse, CorpseTimer(CORPSE_DURATION))

    CorpseTimer.system_with(
        ecs.world, lambda world, entity, _: ecs.observer.observe(world).despawn(entity)
    )


def reset_to_pistol(ecs: Any, dt: float) -> None:
    """Swap empty weapons back to the pistol."""
    for _, weapon in ecs.world.query(HeldWeapon):
        if weapon.ammo == 0:
            weapon.gun = Gun.PISTOL
            weapon.ammo = weapon.gun.max_ammo()


def run_systems(ecs: Any, dt: float) -> None:
    """Run every server system once, in tick order."""
    input_system(ecs, dt)
    move_system(ecs, dt)
    shoot_system(ecs, dt)
    shoot_cooldown_system(ecs, dt)
    bullet_despawn_system(ecs, dt)
    pick_up_system(ecs, dt)
    respawn_system(ecs, dt)
    collision_system(ecs, dt)
    reset_to_pistol(ecs, dt)