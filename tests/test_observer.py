import pytest

from mazefps.components import (
    Despawn,
    Health,
    Insert,
    Position,
    Remove,
    Vec2,
)
from mazefps.observer import Observer
from mazefps.server_components import Speed
from mazefps.world import ComponentError, NoSuchEntity, World


@pytest.fixture
def setup():
    return Observer(), World()


def test_spawn_records_inserts_in_order(setup):
    observer, world = setup
    entity = observer.observe(world).spawn(Position(Vec2(1.0, 2.0)), Health(5.0))
    assert world.get(entity, Health) == Health(5.0)
    assert observer.drain_reliable() == [
        Insert(entity, Position(Vec2(1.0, 2.0))),
        Insert(entity, Health(5.0)),
    ]
    assert observer.drain_unreliable() == []


def test_recorded_insert_is_a_copy(setup):
    observer, world = setup
    entity = observer.observe(world).spawn(Health(5.0))
    world.get(entity, Health).value = 1.0
    assert observer.drain_reliable() == [Insert(entity, Health(5.0))]


def test_insert_into_missing_entity_records_nothing(setup):
    observer, world = setup
    with pytest.raises(NoSuchEntity):
        observer.observe(world).insert(42, Health(1.0))
    assert observer.drain_reliable() == []


def test_insert_one(setup):
    observer, world = setup
    entity = world.reserve_entity()
    observer.observe(world).insert_one(entity, Health(3.0))
    assert world.get(entity, Health) == Health(3.0)
    assert observer.drain_reliable() == [Insert(entity, Health(3.0))]


def test_non_shared_component_rejected(setup):
    observer, world = setup
    with pytest.raises(TypeError):
        observer.observe(world).spawn(Health(1.0), Speed(2.0))
    assert len(world) == 0
    assert observer.drain_reliable() == []


def test_remove_records_and_returns(setup):
    observer, world = setup
    entity = world.spawn(Health(2.0), Position(Vec2.ZERO))
    removed = observer.observe(world).remove(entity, Health, Position)
    assert removed == (Health(2.0), Position(Vec2.ZERO))
    assert observer.drain_reliable() == [Remove(entity, Health), Remove(entity, Position)]


def test_remove_missing_component_still_recorded(setup):
    observer, world = setup
    entity = world.spawn(Position(Vec2.ZERO))
    with pytest.raises(ComponentError):
        observer.observe(world).remove_one(entity, Health)
    assert observer.drain_reliable() == [Remove(entity, Health)]


def test_despawn_records(setup):
    observer, world = setup
    entity = world.spawn(Health(1.0))
    observer.observe(world).despawn(entity)
    assert not world.contains(entity)
    assert observer.drain_reliable() == [Despawn(entity)]


def test_despawn_missing_entity_recorded_then_raises(setup):
    observer, world = setup
    with pytest.raises(NoSuchEntity):
        observer.observe(world).despawn(7)
    assert observer.drain_reliable() == [Despawn(7)]


def test_unreliable_world(setup):
    observer, world = setup
    entity = observer.observe(world).unreliable().spawn(Health(1.0))
    assert observer.drain_reliable() == []
    assert observer.drain_unreliable() == [Insert(entity, Health(1.0))]


def test_observe_component_records_on_exit(setup):
    observer, world = setup
    entity = world.spawn(Health(10.0))
    health = world.get(entity, Health)
    with observer.observe_component(entity, health) as h:
        h.value -= 4.0
        assert observer.drain_reliable() == []
    assert world.get(entity, Health) == Health(6.0)
    health.value = 0.0
    assert observer.drain_reliable() == [Insert(entity, Health(6.0))]


def test_observe_component_unreliable(setup):
    observer, world = setup
    entity = world.spawn(Health(1.0))
    with observer.observe_component(entity, world.get(entity, Health)).unreliable() as h:
        h.value = 2.0
    assert observer.drain_reliable() == []
    assert observer.drain_unreliable() == [Insert(entity, Health(2.0))]


def test_observe_component_rejects_non_shared(setup):
    observer, _ = setup
    with pytest.raises(TypeError):
        observer.observe_component(1, Speed(1.0))


def test_drain_empties_queue(setup):
    observer, world = setup
    observer.observe(world).spawn(Health(1.0))
    assert len(observer.drain_reliable()) == 1
    assert observer.drain_reliable() == []