"""Keeping players and bullets out of walls, and bullets hitting players."""

from __future__ import annotations

import math
from typing import Any

from .components import Bullet, Health, Player, Position, Vec2
from .defaults import PLAYER_SIZE
from .map import Cell, Map
from .server_components import BulletDespawn, ShotBy
from .world import NoSuchEntity

_NAN = math.nan

# Per corner index: the sign of the x and y corrections.
_CORNER_SHIFT = ((-1.0, -1.0), (-1.0, 1.0), (1.0, 1.0), (1.0, -1.0))


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0.0 else _NAN


def _acos(value: float) -> float:
    return math.acos(value) if -1.0 <= value <= 1.0 else _NAN


def _div(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0.0 or math.isnan(numerator):
            return _NAN
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _fmod(value: float, modulus: float) -> float:
    return math.fmod(value, modulus) if math.isfinite(value) else _NAN


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def _floor(value: float) -> tuple[float, int]:
    if math.isnan(value):
        return _NAN, 0
    if math.isinf(value):
        return value, 0
    floored = math.floor(value)
    return float(floored), floored


def _sides(game_map: Map, x_f: float, y_f: float, x_i: int, y_i: int) -> list[tuple[Vec2, Cell]]:
    return [
        (Vec2(x_f, y_f + 1.0), game_map.cell(x_i, y_i + 1)),
        (Vec2(x_f + 1.0, y_f), game_map.cell(x_i + 1, y_i)),
        (Vec2(x_f, y_f - 1.0), game_map.cell(x_i, y_i - 1)),
        (Vec2(x_f - 1.0, y_f), game_map.cell(x_i - 1, y_i)),
    ]


def _corners(game_map: Map, x_f: float, y_f: float, x_i: int, y_i: int) -> list[tuple[Vec2, Cell]]:
    return [
        (Vec2(x_f + 1.0, y_f + 1.0), game_map.cell(x_i + 1, y_i + 1)),
        (Vec2(x_f + 1.0, y_f - 1.0), game_map.cell(x_i + 1, y_i - 1)),
        (Vec2(x_f - 1.0, y_f - 1.0), game_map.cell(x_i - 1, y_i - 1)),
        (Vec2(x_f - 1.0, y_f + 1.0), game_map.cell(x_i - 1, y_i + 1)),
    ]


def _side_line(cell_pos: Vec2, side: int) -> tuple[Vec2, Vec2]:
    x, y = cell_pos.x, cell_pos.y
    return (
        (Vec2(x, y), Vec2(x + 1.0, y)),
        (Vec2(x, y), Vec2(x, y - 1.0)),
        (Vec2(x, y + 1.0), Vec2(x + 1.0, y + 1.0)),
        (Vec2(x + 1.0, y), Vec2(x + 1.0, y - 1.0)),
    )[side]


def _corner_point(cell_pos: Vec2, corner: int) -> Vec2:
    x, y = cell_pos.x, cell_pos.y
    return (
        Vec2(x, y),
        Vec2(x, y + 1.0),
        Vec2(x + 1.0, y + 1.0),
        Vec2(x + 1.0, y),
    )[corner]


def in_circle(line: tuple[Vec2, Vec2], position: Vec2) -> bool:
    """Whether the infinite line through ``line`` passes within a player's radius."""
    radius = PLAYER_SIZE / 2.0
    start, end = line
    length = math.hypot(start.x - end.x, start.y - end.y)
    cross = (position.x - start.x) * (end.y - start.y) - (position.y - start.y) * (end.x - start.x)
    return _div(abs(cross), length) <= radius


def resolve_wall_collision(game_map: Map, pos: Vec2, size: float) -> Vec2:
    """Where an object of diameter ``size`` at ``pos`` ends up after wall pushback."""
    x_f, x_i = _floor(pos.x)
    y_f, y_i = _floor(pos.y)
    to_x, to_y = pos.x, pos.y

    for side, (cell_pos, cell) in enumerate(_sides(game_map, x_f, y_f, x_i, y_i)):
        if cell is None:
            continue
        if not in_circle(_side_line(cell_pos, side), Vec2(to_x, to_y)):
            continue
        if side == 0:
            to_y = y_f + (1.0 - size / 2.0)
        elif side == 1:
            to_x = x_f + (1.0 - size / 2.0)
        elif side == 2:
            to_y = y_f + size / 2.0
        else:
            to_x = x_f + size / 2.0

    radius = size / 2.0
    for index, (cell_pos, cell) in enumerate(_corners(game_map, x_f, y_f, x_i, y_i)):
        if cell is None:
            continue
        corner = _corner_point(cell_pos, index)
        to_pos = Vec2(to_x, to_y)
        if not to_pos.distance(corner) < radius - 0.001:
            continue

        dink = abs(to_y - corner.y)
        if index in (0, 3):
            a = Vec2(corner.x, corner.y - dink).distance(to_pos)
        else:
            a = Vec2(corner.x, corner.y + dink).distance(to_pos)
        change_y = _sqrt(radius * radius - a * a) - dink

        d = pos.distance(corner)
        to_acos = _div(d * d + change_y * change_y - radius * radius, 2.0 * change_y * d)
        if not -1.0 <= to_acos <= 1.0:
            to_acos = to_acos - _fmod(to_acos, 1.0)

        alpha = 360.0 - 90.0 - _acos(to_acos)
        cos_alpha = math.cos(alpha)
        root = _sqrt((2.0 * d * cos_alpha) ** 2 + 4.0 * (radius * radius - d * d))
        change_x = _fmax(
            (2.0 * d * cos_alpha + root) / 2.0,
            (2.0 * d * cos_alpha - root) / 2.0,
        )

        sign_x, sign_y = _CORNER_SHIFT[index]
        to_x += sign_x * change_x
        to_y += sign_y * change_y

    return Vec2(to_x, to_y)


def player_collisions(ecs: Any) -> None:
    """Push players out of walls and apply damage from bullets that reach them."""
    game_map = ecs.resources.get(Map)
    bullets = [
        (entity, bullet, pos.value, timer.progress())
        for entity, (bullet, pos, timer) in ecs.world.query(Bullet, Position, BulletDespawn)
    ]
    to_remove: list[int] = []

    for entity, (player, health, pos, shot_by) in ecs.world.query(
        Player, Health, Position, ShotBy
    ):
        to_pos = resolve_wall_collision(game_map, pos.value, PLAYER_SIZE)
        with ecs.observer.observe_component(entity, pos) as observed:
            observed.value = to_pos

        for bullet_entity, bullet, bullet_pos, progress in bullets:
            if bullet_pos.distance(to_pos) < PLAYER_SIZE / 2.0 and player.id != bullet.id:
                to_remove.append(bullet_entity)
                shot_by.id = bullet.id
                damage = bullet.gun.damage_with_drop_off(progress)
                with ecs.observer.observe_component(entity, health) as observed:
                    observed.value -= damage

    for bullet_entity in to_remove:
        try:
            ecs.observed_world().despawn(bullet_entity)
        except NoSuchEntity:
            pass


def bullet_collisions(ecs: Any) -> None:
    """Despawn bullets that touch a wall."""
    game_map = ecs.resources.get(Map)
    to_remove = [
        entity
        for entity, (_, pos) in ecs.world.query(Bullet, Position)
        if resolve_wall_collision(game_map, pos.value, 0.0) != pos.value
    ]
    for entity in to_remove:
        ecs.observed_world().despawn(entity)


def collision_system(ecs: Any, dt: float) -> None:
    player_collisions(ecs)
    bullet_collisions(ecs)