"""Weapons and their ballistic properties."""

from __future__ import annotations

import math
import random
from enum import Enum

from .components import HeldWeapon

_RANGE = {
    "PISTOL": 10.0,
    "MACHINE_GUN": 10.0,
    "SNIPER": 10.0,
    "SHOTGUN": 10.0,
    "SUB_MACHINE_GUN": 10.0,
    "ASSAULT_RIFLE": 10.0,
}

_DAMAGE = {
    "PISTOL": 10.0,
    "MACHINE_GUN": 7.0,
    "SNIPER": 40.0,
    "SHOTGUN": 120.0,
    "SUB_MACHINE_GUN": 6.0,
    "ASSAULT_RIFLE": 15.0,
}

_BULLET_SPEED = {
    "PISTOL": 10.0,
    "MACHINE_GUN": 10.0,
    "SNIPER": 20.0,
    "SHOTGUN": 8.0,
    "SUB_MACHINE_GUN": 10.0,
    "ASSAULT_RIFLE": 12.0,
}

_DROP_OFF = {
    "PISTOL": 0.8,
    "MACHINE_GUN": 0.8,
    "SNIPER": 5.0,
    "SHOTGUN": 0.3,
    "SUB_MACHINE_GUN": 0.7,
    "ASSAULT_RIFLE": 0.8,
}

_RECHARGE = {
    "PISTOL": 0.2,
    "MACHINE_GUN": 0.1,
    "SNIPER": 1.5,
    "SHOTGUN": 0.2,
    "SUB_MACHINE_GUN": 0.05,
    "ASSAULT_RIFLE": 0.15,
}

_MAX_AMMO = {
    "PISTOL": 0,
    "MACHINE_GUN": 50,
    "SNIPER": 5,
    "SHOTGUN": 2,
    "SUB_MACHINE_GUN": 36,
    "ASSAULT_RIFLE": 26,
}

_SPREAD_DEGREES = {
    "MACHINE_GUN": 2.5,
    "SHOTGUN": 5.0,
    "SUB_MACHINE_GUN": 3.0,
    "ASSAULT_RIFLE": 2.0,
}

_DISPLAY_NAMES = {
    "PISTOL": "Glock 19",
    "MACHINE_GUN": "M2 Browning",
    "SNIPER": "Barrett m82A1",
    "SHOTGUN": "Browning BSS",
    "SUB_MACHINE_GUN": "KRISS Vector",
    "ASSAULT_RIFLE": "Remington ACR",
}


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class Gun(Enum):
    """A weapon a player can hold."""

    PISTOL = 0
    SNIPER = 1
    SHOTGUN = 2
    SUB_MACHINE_GUN = 3
    ASSAULT_RIFLE = 4
    MACHINE_GUN = 5

    def range(self) -> float:
        """Distance a bullet travels before despawning."""
        return _RANGE[self.name]

    def damage(self) -> float:
        """Total damage of one shot (all pellets together)."""
        return _DAMAGE[self.name]

    def bullet_speed(self) -> float:
        return _BULLET_SPEED[self.name]

    def dmg_drop_off(self) -> float:
        """Damage multiplier reached at the end of the bullet's flight."""
        return _DROP_OFF[self.name]

    def recharge(self) -> float:
        """Cooldown between shots, in seconds."""
        return _RECHARGE[self.name]

    def max_ammo(self) -> int:
        """Magazine size; zero means unlimited."""
        return _MAX_AMMO[self.name]

    def spread(self) -> float | None:
        """Half-angle of random spread in radians, or None for perfect aim."""
        degrees = _SPREAD_DEGREES.get(self.name)
        return None if degrees is None else math.radians(degrees)

    def pellets(self) -> int:
        """Number of bullets spawned per shot."""
        return 16 if self is Gun.SHOTGUN else 1

    def damage_with_drop_off(self, distance: float) -> float:
        """Per-pellet damage after travelling the given fraction of its flight."""
        per_pellet = self.damage() / self.pellets()
        return _lerp(per_pellet, per_pellet * self.dmg_drop_off(), distance)

    def to_held_weapon(self) -> HeldWeapon:
        """A freshly loaded weapon of this kind."""
        return HeldWeapon(gun=self, ammo=self.max_ammo())

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self.name]


_CRATE_GUNS = (
    Gun.SNIPER,
    Gun.SHOTGUN,
    Gun.SUB_MACHINE_GUN,
    Gun.ASSAULT_RIFLE,
    Gun.MACHINE_GUN,
)


def random_gun(rng: random.Random | None = None) -> Gun:
    """Pick a random non-pistol gun, uniformly."""
    rng = rng if rng is not None else random.Random()
    return rng.choice(_CRATE_GUNS)