"""Components that move an entity's transform: free flight, spinning and oscillation."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from . import vecmath
from .ecs import Component, ComponentType, Entity
from .input_state import InputState, Key
from .transform import TransformComponent


def _require_transform(component: Component) -> TransformComponent:
    transform = component.get_component(TransformComponent)
    if transform is None:
        raise LookupError(f"{type(component).__name__} needs a TransformComponent on its entity")
    return transform


class _TransformDriven(Component):
    """Shared handling of the cached sibling transform."""

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self._transform_ref: TransformComponent | None = None

    @property
    def _transform(self) -> TransformComponent:
        if self._transform_ref is None:
            raise RuntimeError(f"{type(self).__name__} has not been initialised")
        return self._transform_ref

    def _attach_transform(self) -> TransformComponent:
        self._transform_ref = _require_transform(self)
        return self._transform_ref


class FreeMoveComponent(_TransformDriven):
    """Flies the entity with W/A/S/D, turns it with the mouse; left shift speeds it up."""

    component_type = ComponentType.FREE_MOVE

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.input_state: InputState | None = None
        self.move_speed = 0.0
        self.rotation_speed = 0.0
        self.shift_speed_multiplier = 2.0

    def init(
        self,
        input_state: InputState,
        movement_speed: float,
        rotation_speed: float,
        shift_speed_multiplier: float = 2.0,
    ) -> None:
        self.input_state = input_state
        self.move_speed = float(movement_speed)
        self.rotation_speed = float(rotation_speed)
        self.shift_speed_multiplier = float(shift_speed_multiplier)
        self._attach_transform()

    def update(self, delta: float) -> None:
        transform = self._transform
        keys = self.input_state
        if keys is None:
            raise RuntimeError("FreeMoveComponent has not been initialised")

        forward, right, _up = transform.all_axes()

        multiplier = self.shift_speed_multiplier if keys.is_key_held(Key.LSHIFT) else 1.0
        move_amount = self.move_speed * multiplier * delta

        key_x = float(keys.is_key_held(Key.D)) - float(keys.is_key_held(Key.A))
        key_y = float(keys.is_key_held(Key.W)) - float(keys.is_key_held(Key.S))

        direction = vecmath.normalize(right * key_x + forward * key_y)

        transform.add_rotation(
            (keys.mouse_y * self.rotation_speed, keys.mouse_x * self.rotation_speed, 0.0)
        )
        transform.add_translation(direction * move_amount)
        transform.build_world_matrix()


class RotationComponent(_TransformDriven):
    """Spins the entity by a fixed rotation (degrees) scaled by speed and time."""

    component_type = ComponentType.TRANSFORMATION

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.rotation = np.zeros(3)
        self.speed_rotation = 0.0

    def init(self, rotation: Sequence[float], speed_rotation: float) -> None:
        self.rotation = np.array(rotation, dtype=float)
        self.speed_rotation = float(speed_rotation)
        self._attach_transform()

    def update(self, delta: float) -> None:
        transform = self._transform
        transform.add_rotation(self.rotation * (self.speed_rotation * delta))
        transform.build_world_matrix()


class PingPongComponent(_TransformDriven):
    """Oscillates position, rotation and scale around their initial values on a sine wave."""

    component_type = ComponentType.PING_PONG

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.offset_position = np.zeros(3)
        self.offset_rotation = np.zeros(3)
        self.offset_scale = np.zeros(3)
        self.speed = 0.0
        self._timer = 0.0
        self._wave = 0.0
        self._initial_position = np.zeros(3)
        self._initial_rotation = np.zeros(3)
        self._initial_scale = np.ones(3)

    @property
    def wave(self) -> float:
        """The current sine value, in -1..1."""
        return self._wave

    def init(
        self,
        offset_position: Sequence[float],
        offset_speed: float,
        offset_rotation: Sequence[float] = (0.0, 0.0, 0.0),
        offset_scale: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.offset_position = np.array(offset_position, dtype=float)
        self.offset_rotation = np.array(offset_rotation, dtype=float)
        self.offset_scale = np.array(offset_scale, dtype=float)
        self.speed = float(offset_speed)

        transform = self._attach_transform()
        self._initial_position = np.array(transform.position, dtype=float)
        self._initial_rotation = np.array(transform.rotation, dtype=float)
        self._initial_scale = np.array(transform.scale, dtype=float)

    def update(self, delta: float) -> None:
        transform = self._transform
        self._timer += self.speed * delta
        self._wave = math.sin(self._timer)

        transform.position = self._initial_position + self.offset_position * self._wave
        transform.rotation = self._initial_rotation + self.offset_rotation * self._wave
        transform.scale = self._initial_scale + self.offset_scale * self._wave
        transform.build_world_matrix()