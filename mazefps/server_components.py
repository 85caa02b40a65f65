"""Components that only the server keeps."""

from __future__ import annotations

from dataclasses import dataclass

from .components import UserID
from .timer import Timer


@dataclass
class Speed:
    """Movement speed in cells per second."""

    value: float


@dataclass
class ShotBy:
    """The player who last hit this one, if any."""

    id: UserID | None = None


class ShootCooldown(Timer):
    """Blocks shooting until it finishes."""


class BulletDespawn(Timer):
    """Despawns a bullet when it finishes."""


class CorpseTimer(Timer):
    """Despawns a dead-player marker when it finishes."""