import pytest

from mazefps.collisions import (
    bullet_collisions,
    collision_system,
    in_circle,
    player_collisions,
    resolve_wall_collision,
)
from mazefps.components import (
    Bullet,
    Despawn,
    Health,
    Insert,
    Player,
    Position,
    Vec2,
)
from mazefps.defaults import PLAYER_SIZE
from mazefps.gun import Gun
from mazefps.map import Map, Textured, TexturedWall, blank_map
from mazefps.observer import Observer
from mazefps.server_components import BulletDespawn, ShotBy
from mazefps.world import World

WALL = TexturedWall(Textured.BRICK1)


class _Resources:
    def __init__(self, *values):
        self._values = {type(v): v for v in values}

    def get(self, kind):
        return self._values[kind]


class _Ecs:
    def __init__(self, game_map):
        self.world = World()
        self.observer = Observer()
        self.resources = _Resources(game_map)

    def observed_world(self):
        return self.observer.observe(self.world)


def _map_with_walls(*cells):
    game_map = blank_map(3, 3)
    for x, y in cells:
        game_map.set_cell(x, y, WALL)
    return game_map


def test_in_circle_near_and_far():
    line = (Vec2(0.0, 0.0), Vec2(1.0, 0.0))
    assert in_circle(line, Vec2(0.5, 0.1)) is True
    assert in_circle(line, Vec2(0.5, 0.2)) is False


def test_open_map_leaves_position_alone():
    pos = Vec2(1.3, 1.6)
    assert resolve_wall_collision(blank_map(3, 3), pos, PLAYER_SIZE) == pos


def test_pushed_up_from_wall_below():
    game_map = _map_with_walls((0, 2), (1, 2), (2, 2))
    result = resolve_wall_collision(game_map, Vec2(1.5, 1.95), PLAYER_SIZE)
    assert result.x == 1.5
    assert result.y == pytest.approx(2.0 - PLAYER_SIZE / 2.0)


def test_pushed_left_from_wall_right():
    game_map = _map_with_walls((2, 1))
    result = resolve_wall_collision(game_map, Vec2(1.9, 1.5), PLAYER_SIZE)
    assert result.x == pytest.approx(2.0 - PLAYER_SIZE / 2.0)
    assert result.y == 1.5


def test_pushed_away_from_corner():
    game_map = _map_with_walls((2, 2))
    result = resolve_wall_collision(game_map, Vec2(1.95, 1.95), PLAYER_SIZE)
    assert result.x < 1.95
    assert result.y < 1.95


def _add_player(ecs, user_id, pos):
    return ecs.world.spawn(Player(user_id, "p"), Health(100.0), Position(pos), ShotBy())


def _add_bullet(ecs, owner, pos):
    return ecs.world.spawn(Bullet(owner, Gun.PISTOL), Position(pos), BulletDespawn(60.0))


def test_bullet_hits_other_player():
    ecs = _Ecs(blank_map(3, 3))
    player = _add_player(ecs, 1, Vec2(1.5, 1.5))
    bullet = _add_bullet(ecs, 2, Vec2(1.5, 1.5))
    player_collisions(ecs)
    health = ecs.world.get(player, Health).value
    assert 100.0 - Gun.PISTOL.damage() <= health < 100.0
    assert ecs.world.get(player, ShotBy).id == 2
    assert not ecs.world.contains(bullet)
    assert Despawn(bullet) in ecs.observer.drain_reliable()


def test_own_bullet_does_no_harm():
    ecs = _Ecs(blank_map(3, 3))
    player = _add_player(ecs, 1, Vec2(1.5, 1.5))
    bullet = _add_bullet(ecs, 1, Vec2(1.5, 1.5))
    player_collisions(ecs)
    assert ecs.world.get(player, Health).value == 100.0
    assert ecs.world.contains(bullet)


def test_bullet_touching_wall_is_despawned():
    ecs = _Ecs(_map_with_walls((0, 2), (1, 2), (2, 2)))
    near_wall = _add_bullet(ecs, 1, Vec2(1.5, 1.95))
    in_open = _add_bullet(ecs, 1, Vec2(1.5, 1.5))
    bullet_collisions(ecs)
    assert not ecs.world.contains(near_wall)
    assert ecs.world.contains(in_open)
    assert ecs.observer.drain_reliable() == [Despawn(near_wall)]


def test_collision_system_reports_player_position():
    ecs = _Ecs(blank_map(3, 3))
    player = _add_player(ecs, 1, Vec2(1.5, 1.5))
    collision_system(ecs, 0.01)
    assert ecs.world.get(player, Position) == Position(Vec2(1.5, 1.5))
    assert ecs.observer.drain_reliable() == [Insert(player, Position(Vec2(1.5, 1.5)))]