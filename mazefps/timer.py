"""Countdown components that fire once their time is up."""

from __future__ import annotations

import time
from typing import Any, Callable

from .world import World


class Timer:
    """A component that finishes after ``duration`` seconds, carrying ``data``.

    Subclass it to give each kind of timer its own component type, so that
    several timers can live on one entity.
    """

    def __init__(self, duration: float, data: Any = None) -> None:
        if duration < 0:
            raise ValueError(f"timer duration cannot be negative, got {duration}")
        self.start_time = time.monotonic()
        self.end_time = self.start_time + duration
        self.data = data

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(duration={self.end_time - self.start_time!r}, "
            f"data={self.data!r})"
        )

    def progress(self) -> float:
        """Fraction of the duration that has elapsed; a zero-length timer is done."""
        total = self.end_time - self.start_time
        if total <= 0:
            return 1.0
        return (time.monotonic() - self.start_time) / total

    def is_finished(self, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        return self.end_time <= now

    @classmethod
    def finished_entities(cls, world: World) -> list[int]:
        """Entities whose timer of this kind has run out."""
        now = time.monotonic()
        return [entity for entity, timer in world.query(cls) if timer.is_finished(now)]

    @classmethod
    def system(cls, world: World) -> None:
        """Remove finished timers of this kind, dropping their data."""
        for entity in cls.finished_entities(world):
            world.remove_one(entity, cls)

    @classmethod
    def system_with(
        cls, world: World, callback: Callable[[World, int, Any], None]
    ) -> None:
        """Remove finished timers and call ``callback(world, entity, data)`` for each."""
        for entity in cls.finished_entities(world):
            timer = world.remove_one(entity, cls)
            callback(world, entity, timer.data)

    @classmethod
    def system_with_insert(cls, world: World) -> None:
        """Remove finished timers and insert their data back into the entity."""
        cls.system_with(world, lambda w, entity, data: w.insert_one(entity, data))