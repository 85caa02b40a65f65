import pytest

from mazefps.components import Insert, InputState, Player, Position, Vec2
from mazefps.ecs import CantGetResource, Resources, ServerEcs
from mazefps.logger import Logger
from mazefps.map import Map, default_map
from mazefps.spawn import spawn_player_at


def _ecs() -> ServerEcs:
    ecs = ServerEcs()
    ecs.resources.insert(default_map())
    ecs.resources.insert(Logger())
    return ecs


def test_resources_get_returns_inserted_value():
    resources = Resources()
    game_map = default_map()
    assert resources.insert(game_map) is None
    assert resources.get(Map) is game_map
    assert Map in resources


def test_resources_insert_replaces_and_returns_previous():
    resources = Resources()
    first, second = default_map(), default_map()
    resources.insert(first)
    assert resources.insert(second) is first
    assert resources.get(Map) is second
    assert len(resources) == 1


def test_resources_missing_raises():
    with pytest.raises(CantGetResource) as info:
        Resources().get(Map)
    assert info.value.kind is Map


def test_init_client_describes_every_shared_component():
    ecs = _ecs()
    entity = spawn_player_at(Position(Vec2(1.5, 1.5)), ecs, "alice")
    messages = ecs.init_client()
    assert all(isinstance(m, Insert) and m.entity == entity for m in messages)
    players = [m.component for m in messages if isinstance(m.component, Player)]
    assert players == [Player(id=entity, name="alice")]
    # Server-only components are not sent.
    assert not any(isinstance(m.component, InputState) for m in messages)


def test_observed_world_records_changes():
    ecs = _ecs()
    entity = ecs.observed_world().spawn(Position(Vec2(2.0, 3.0)))
    assert ecs.observer.drain_reliable() == [Insert(entity, Position(Vec2(2.0, 3.0)))]
    assert ecs.world.get(entity, Position) == Position(Vec2(2.0, 3.0))


def test_tick_moves_player_forward():
    ecs = _ecs()
    entity = spawn_player_at(Position(Vec2(1.5, 1.5)), ecs, "bob")
    ecs.world.insert_one(entity, InputState(forward=True))
    ecs.observer.drain_reliable()

    ecs.tick(0.1)

    pos = ecs.world.get(entity, Position).value
    assert pos.x > 1.5
    assert pos.y == pytest.approx(1.5)
    changes = ecs.observer.drain_reliable()
    assert any(
        isinstance(c, Insert) and c.entity == entity and isinstance(c.component, Position)
        for c in changes
    )