from mazefps.components import Health
from mazefps.server_components import (
    BulletDespawn,
    CorpseTimer,
    ShootCooldown,
    ShotBy,
    Speed,
)
from mazefps.world import World


def test_shot_by_defaults_to_nobody():
    assert ShotBy().id is None
    assert ShotBy(4).id == 4


def test_speed_holds_value():
    assert Speed(2.5).value == 2.5


def test_timer_kinds_live_side_by_side():
    world = World()
    entity = world.spawn(ShootCooldown(0.0), BulletDespawn(3600.0), Health(1.0))
    assert ShootCooldown.finished_entities(world) == [entity]
    assert BulletDespawn.finished_entities(world) == []
    ShootCooldown.system(world)
    assert world.query(ShootCooldown) == []
    assert [e for e, _ in world.query(BulletDespawn)] == [entity]


def test_corpse_timer_callback_gets_none_data():
    world = World()
    entity = world.spawn(CorpseTimer(0.0))
    seen = []
    CorpseTimer.system_with(world, lambda w, e, data: seen.append((e, data)))
    assert seen == [(entity, None)]