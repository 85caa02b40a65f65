"""A small entity-component store keyed by component type."""

from __future__ import annotations

import itertools
from typing import Any, Iterable


class ComponentError(LookupError):
    """A component could not be found on an entity."""


class NoSuchEntity(ComponentError):
    """The entity does not exist in the world."""

    def __init__(self, entity: int) -> None:
        super().__init__(f"no such entity: {entity}")
        self.entity = entity


class World:
    """Entities are non-zero integers; each holds at most one component per type."""

    def __init__(self) -> None:
        self._entities: dict[int, dict[type, Any]] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def _components(self, entity: int) -> dict[type, Any]:
        try:
            return self._entities[entity]
        except KeyError:
            raise NoSuchEntity(entity) from None

    def reserve_entity(self) -> int:
        """Create an entity with no components."""
        entity = next(self._ids)
        self._entities[entity] = {}
        return entity

    def spawn(self, *args: Any) -> int:
        """Create an entity holding the given components."""
        entity = self.reserve_entity()
        self.insert(entity, *args)
        return entity

    def contains(self, entity: int) -> bool:
        return entity in self._entities

    def insert(self, entity: int, *args: Any) -> None:
        """Add or replace the given components on an entity."""
        components = self._components(entity)
        for component in args:
            components[type(component)] = component

    def insert_one(self, entity: int, component: Any) -> None:
        self.insert(entity, component)

    def get(self, entity: int, component_type: type) -> Any:
        components = self._components(entity)
        try:
            return components[component_type]
        except KeyError:
            raise ComponentError(
                f"entity {entity} has no {component_type.__name__} component"
            ) from None

    def remove(self, entity: int, *args: type) -> tuple[Any, ...]:
        """Remove several component types at once; nothing is removed if one is missing."""
        components = self._components(entity)
        for component_type in args:
            if component_type not in components:
                raise ComponentError(
                    f"entity {entity} has no {component_type.__name__} component"
                )
        return tuple(components.pop(component_type) for component_type in args)

    def remove_one(self, entity: int, component_type: type) -> Any:
        (removed,) = self.remove(entity, component_type)
        return removed

    def despawn(self, entity: int) -> None:
        self._components(entity)
        del self._entities[entity]

    def query(
        self, *args: type, without: type | Iterable[type] = ()
    ) -> list[tuple[int, Any]]:
        """Entities holding all given component types and none of ``without``.

        With one component type each item is ``(entity, component)``;
        with several it is ``(entity, (component, ...))``. The result is a
        snapshot, so the world may be changed while iterating over it.
        """
        if not args:
            raise TypeError("query needs at least one component type")
        excluded = (without,) if isinstance(without, type) else tuple(without)
        results: list[tuple[int, Any]] = []
        for entity, components in self._entities.items():
            if any(t not in components for t in args):
                continue
            if any(t in components for t in excluded):
                continue
            found = tuple(components[t] for t in args)
            results.append((entity, found[0] if len(args) == 1 else found))
        return results