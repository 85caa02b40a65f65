"""Record changes made to a world as ECS protocol messages for clients."""

from __future__ import annotations

import copy
from typing import Any, Generic, TypeVar

from .components import SHARED_COMPONENTS, Despawn, EcsProtocol, Insert, Remove
from .world import World

T = TypeVar("T")


def _ensure_shared(component_type: type) -> None:
    if component_type not in SHARED_COMPONENTS:
        raise TypeError(f"{component_type.__name__} is not a shared component")


class Observer:
    """Collects protocol messages in a reliable and an unreliable queue."""

    def __init__(self) -> None:
        self._reliable: list[EcsProtocol] = []
        self._unreliable: list[EcsProtocol] = []

    def __repr__(self) -> str:
        return (
            f"Observer(reliable={len(self._reliable)}, "
            f"unreliable={len(self._unreliable)})"
        )

    def _push(self, item: EcsProtocol, reliable: bool) -> None:
        (self._reliable if reliable else self._unreliable).append(item)

    def observe(self, world: World) -> "ObservedWorld":
        """A view of ``world`` whose changes are recorded here."""
        return ObservedWorld(self, world)

    def observe_component(self, entity: int, component: T) -> "ObservedComponent[T]":
        """Wrap a component; leaving the ``with`` block records its new value."""
        return ObservedComponent(self, entity, component)

    def drain_reliable(self) -> list[EcsProtocol]:
        """Take every reliable message recorded since the last drain."""
        drained, self._reliable = self._reliable, []
        return drained

    def drain_unreliable(self) -> list[EcsProtocol]:
        """Take every unreliable message recorded since the last drain."""
        drained, self._unreliable = self._unreliable, []
        return drained


class ObservedWorld:
    """Mirrors the mutating operations of a world and records each of them."""

    def __init__(self, observer: Observer, world: World) -> None:
        self._observer = observer
        self._world = world
        self._reliable = True

    def _push(self, item: EcsProtocol) -> None:
        self._observer._push(item, self._reliable)

    def unreliable(self) -> "ObservedWorld":
        """Record following changes in the unreliable queue."""
        self._reliable = False
        return self

    def _push_inserts(self, entity: int, components: tuple[Any, ...]) -> None:
        for component in components:
            self._push(Insert(entity, copy.copy(component)))

    def spawn(self, *args: Any) -> int:
        for component in args:
            _ensure_shared(type(component))
        entity = self._world.spawn(*args)
        self._push_inserts(entity, args)
        return entity

    def insert(self, entity: int, *args: Any) -> None:
        for component in args:
            _ensure_shared(type(component))
        self._world.insert(entity, *args)
        self._push_inserts(entity, args)

    def insert_one(self, entity: int, component: Any) -> None:
        self.insert(entity, component)

    def remove(self, entity: int, *args: type) -> tuple[Any, ...]:
        """Remove component types; the removal is recorded even if it fails."""
        for component_type in args:
            _ensure_shared(component_type)
        try:
            return self._world.remove(entity, *args)
        finally:
            for component_type in args:
                self._push(Remove(entity, component_type))

    def remove_one(self, entity: int, component_type: type) -> Any:
        (removed,) = self.remove(entity, component_type)
        return removed

    def despawn(self, entity: int) -> None:
        """Despawn an entity; the despawn is recorded even if it fails."""
        try:
            self._world.despawn(entity)
        finally:
            self._push(Despawn(entity))


class ObservedComponent(Generic[T]):
    """Context manager that records a component's value when the block ends."""

    def __init__(self, observer: Observer, entity: int, component: T) -> None:
        _ensure_shared(type(component))
        self._observer = observer
        self._entity = entity
        self._component = component
        self._reliable = True

    def unreliable(self) -> "ObservedComponent[T]":
        """Record the change in the unreliable queue."""
        self._reliable = False
        return self

    def __enter__(self) -> T:
        return self._component

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self._observer._push(
            Insert(self._entity, copy.copy(self._component)), self._reliable
        )