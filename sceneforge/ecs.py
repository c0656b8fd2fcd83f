"""A small entity/component world with deferred removal."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TypeVar


class ComponentType(IntEnum):
    """Kinds of component; the world updates them in this order."""

    TRANSFORM = 0
    MODEL = 1
    TRANSFORMATION = 2
    FREE_MOVE = 3
    PING_PONG = 4
    CAMERA = 5
    QUAD = 6
    DIR_LIGHT = 7
    POINT_LIGHT = 8
    UVSCROLL = 9
    PARTICLE = 10


C = TypeVar("C", bound="Component")


def _type_of(component_class: type) -> ComponentType:
    component_type = getattr(component_class, "component_type", None)
    if not isinstance(component_type, ComponentType):
        raise TypeError(f"{component_class!r} does not declare a component_type")
    return component_type


class World:
    """Holds every entity and component and updates components type by type."""

    def __init__(self) -> None:
        self._components: dict[ComponentType, list[Component]] = {
            kind: [] for kind in ComponentType
        }
        self._entities: list[Entity] = []
        self._components_to_remove: list[Component] = []
        self._entities_to_remove: list[Entity] = []

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    def components_of(self, component_type: ComponentType) -> tuple[Component, ...]:
        """Return the live components of one type, in insertion order."""
        return tuple(self._components[ComponentType(component_type)])

    def update(self, delta: float) -> None:
        """Update all active components, then drop whatever was flagged for removal."""
        for kind in ComponentType:
            # Components added during this pass wait for the next frame.
            for component in list(self._components[kind]):
                if component.is_active:
                    component.update(delta)
        self._handle_dirty_components()
        self._handle_dirty_entities()

    def add_component(self, component: Component) -> None:
        self._components[component.type].append(component)

    def add_entity(self, entity: Entity) -> None:
        self._entities.append(entity)

    def remove_component(self, component: Component) -> None:
        """Flag a component; it is removed at the end of the next update."""
        self._components_to_remove.append(component)

    def remove_entity(self, entity: Entity) -> None:
        """Flag an entity; it is removed at the end of the next update."""
        self._entities_to_remove.append(entity)

    def _handle_dirty_components(self) -> None:
        for component in self._components_to_remove:
            bucket = self._components[component.type]
            if any(c is component for c in bucket):
                bucket.remove(component)
                component._on_destroy()
        self._components_to_remove.clear()

    def _handle_dirty_entities(self) -> None:
        for entity in self._entities_to_remove:
            if any(e is entity for e in self._entities):
                self._entities.remove(entity)
        self._entities_to_remove.clear()

    def empty(self) -> None:
        """Destroy every component and forget every entity."""
        for bucket in self._components.values():
            for component in bucket:
                component._on_destroy()
            bucket.clear()
        self._entities.clear()
        self._entities_to_remove.clear()
        self._components_to_remove.clear()


class Entity:
    """A bag of components that registers itself with a world."""

    def __init__(self, world: World) -> None:
        self.world = world
        self._components: list[Component] = []
        world.add_entity(self)

    @property
    def components(self) -> tuple[Component, ...]:
        return tuple(self._components)

    def add_component(self, component_class: type[C]) -> C:
        """Create a component of the given class, attached to this entity."""
        component = component_class(self)
        self._components.append(component)
        return component

    def get_component(self, component_class: type[C]) -> C | None:
        """Return the first component sharing the class's component type, or None."""
        wanted = _type_of(component_class)
        return next((c for c in self._components if c.type == wanted), None)  # type: ignore[return-value]

    def remove_component(self, component: Component) -> None:
        if any(c is component for c in self._components):
            self._components.remove(component)
        self.world.remove_component(component)

    def remove_entity(self) -> None:
        """Flag this entity and all its components for removal."""
        for component in self._components:
            self.world.remove_component(component)
        self.world.remove_entity(self)


class Component(ABC):
    """Base of all components; subclasses set ``component_type``."""

    component_type: ComponentType

    def __init__(self, parent: Entity) -> None:
        self._type = _type_of(type(self))
        self._active = True
        self.parent = parent
        parent.world.add_component(self)

    @property
    def type(self) -> ComponentType:
        return self._type

    @property
    def is_active(self) -> bool:
        return self._active

    @abstractmethod
    def update(self, delta: float) -> None:
        """Advance this component by ``delta`` seconds."""

    def set_active(self, active: bool) -> None:
        """Enable or disable updates of this component."""
        self._active = active

    def get_component(self, component_class: type[C]) -> C | None:
        """Look up a sibling component on the same entity."""
        return self.parent.get_component(component_class)

    def _on_destroy(self) -> None:
        """Called when the world drops this component."""