"""The server's ECS: world, change observer and shared resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

from .components import Insert, query_all
from .observer import ObservedWorld, Observer
from .systems import run_systems
from .world import World

R = TypeVar("R")


class CantGetResource(LookupError):
    """No resource of the requested type has been inserted."""

    def __init__(self, kind: type) -> None:
        super().__init__(f"no resource of type {kind.__name__}")
        self.kind = kind


class Resources:
    """Singleton values keyed by their type."""

    def __init__(self) -> None:
        self._values: dict[type, Any] = {}

    def __contains__(self, kind: object) -> bool:
        return kind in self._values

    def __len__(self) -> int:
        return len(self._values)

    def insert(self, value: Any) -> Any:
        """Store ``value`` under its type; return the value it replaced, if any."""
        kind = type(value)
        previous = self._values.get(kind)
        self._values[kind] = value
        return previous

    def get(self, kind: type[R]) -> R:
        try:
            return self._values[kind]
        except KeyError:
            raise CantGetResource(kind) from None


@dataclass
class ServerEcs:
    """Everything the server simulates, plus the record of what changed."""

    world: World = field(default_factory=World)
    observer: Observer = field(default_factory=Observer)
    resources: Resources = field(default_factory=Resources)

    def observed_world(self) -> ObservedWorld:
        """The world, with every change recorded by the observer."""
        return self.observer.observe(self.world)

    def tick(self, dt: float) -> None:
        """Run the systems once with ``dt`` seconds since the last tick."""
        run_systems(self, dt)

    def init_client(self) -> list[Insert]:
        """Messages that bring a new client up to the current state."""
        return query_all(self.world)