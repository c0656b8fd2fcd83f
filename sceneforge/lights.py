"""Directional and point light components and the manager gathering their shader data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .ecs import Component, ComponentType, Entity
from .transform import TransformComponent

MAX_POINT_LIGHTS = 1024

_log = logging.getLogger(__name__)


def _vec3(values: Sequence[float]) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in values)
    return (x, y, z)


def _vec4(values: Sequence[float]) -> tuple[float, float, float, float]:
    x, y, z, w = (float(v) for v in values)
    return (x, y, z, w)


class LightDirectionComponent(Component):
    """A directional light shining along its transform's forward axis."""

    component_type = ComponentType.DIR_LIGHT

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.light_color = np.zeros(4)
        self._transform: TransformComponent | None = None
        self._override_transform: TransformComponent | None = None
        self._light_manager: LightManager | None = None

    def init(
        self,
        light_manager: LightManager,
        light_color: Sequence[float],
        transform_override: TransformComponent | None = None,
    ) -> None:
        """Set the colour and make this the manager's directional light."""
        self.light_color = np.array(light_color, dtype=float)
        self._transform = self.get_component(TransformComponent)
        self._override_transform = transform_override
        if self._transform is None and transform_override is None:
            raise LookupError("directional light needs a TransformComponent or an override")
        self._light_manager = light_manager
        light_manager.directional_light = self

    def update(self, delta: float) -> None:
        """Directional lights have no per-frame behaviour."""

    def light_direction(self) -> np.ndarray:
        """The direction the light shines in."""
        transform = self._override_transform or self._transform
        if transform is None:
            raise RuntimeError("directional light has not been initialised")
        return transform.forward()

    def light_direction_inv(self) -> np.ndarray:
        """The direction towards the light."""
        return -self.light_direction()

    def _on_destroy(self) -> None:
        manager = self._light_manager
        if manager is not None and manager.directional_light is self:
            manager.directional_light = None


class LightPointComponent(Component):
    """A point light with radius, intensity, colour and attenuation."""

    component_type = ComponentType.POINT_LIGHT

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.color = np.zeros(3)
        self.intensity = 0.0
        self.radius = 0.0
        self.att_constant = 0.0
        self.att_linear = 1.0
        self.att_exponential = 0.0
        self._light_manager: LightManager | None = None

    def init(
        self,
        light_manager: LightManager,
        radius: float,
        intensity: float,
        color: Sequence[float],
        att_constant: float = 0.0,
        att_linear: float = 1.0,
        att_exponential: float = 0.0,
    ) -> None:
        """Set the light's properties and register it with the manager."""
        self.radius = float(radius)
        self.intensity = float(intensity)
        self.color = np.array(color, dtype=float)
        self.att_constant = float(att_constant)
        self.att_linear = float(att_linear)
        self.att_exponential = float(att_exponential)
        self._light_manager = light_manager
        light_manager.add_point_light(self)

    def update(self, delta: float) -> None:
        """Point lights have no per-frame behaviour."""

    def _on_destroy(self) -> None:
        if self._light_manager is not None:
            self._light_manager._remove_point_light(self)


@dataclass(frozen=True)
class PointLightData:
    """Per-light constants for the lighting pass."""

    light_position: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]
    intensity: float
    att_constant: float
    att_linear: float
    att_exponential: float
    num_lights: int


@dataclass(frozen=True)
class AmbientDirectionalData:
    """Ambient and directional light constants for the lighting pass."""

    ambient_color: tuple[float, float, float, float]
    dir_color: tuple[float, float, float, float]
    light_dir: tuple[float, float, float]


class LightManager:
    """Tracks the directional light and up to ``max_point_lights`` point lights."""

    def __init__(
        self,
        ambient_color: Sequence[float] = (0.0, 0.0, 0.0, 0.0),
        max_point_lights: int = MAX_POINT_LIGHTS,
    ) -> None:
        self.directional_light: LightDirectionComponent | None = None
        self.ambient_color = np.array(ambient_color, dtype=float)
        self.max_point_lights = max_point_lights
        self._point_lights: list[LightPointComponent] = []
        self.point_data: tuple[PointLightData, ...] = ()
        self.amb_dir_data: AmbientDirectionalData | None = None

    @property
    def point_lights(self) -> tuple[LightPointComponent, ...]:
        return tuple(self._point_lights)

    @property
    def num_point_lights(self) -> int:
        return len(self._point_lights)

    def add_point_light(self, light: LightPointComponent) -> bool:
        """Register a point light; when full, the light's entity is removed instead."""
        if len(self._point_lights) < self.max_point_lights:
            self._point_lights.append(light)
            return True
        light.parent.remove_entity()
        _log.warning("could not add light, already at maximum of %d", self.max_point_lights)
        return False

    def _remove_point_light(self, light: LightPointComponent) -> None:
        self._point_lights = [p for p in self._point_lights if p is not light]

    def update_light_buffers(self) -> tuple[tuple[PointLightData, ...], AmbientDirectionalData]:
        """Gather the current light data, store it and return it."""
        if self.directional_light is None:
            raise RuntimeError("no directional light is set")

        count = len(self._point_lights)
        point_data = []
        for light in self._point_lights:
            transform = light.get_component(TransformComponent)
            if transform is None:
                raise LookupError("point light entity has no TransformComponent")
            point_data.append(
                PointLightData(
                    light_position=_vec3(transform.position),
                    radius=light.radius,
                    color=_vec3(light.color),
                    intensity=light.intensity,
                    att_constant=light.att_constant,
                    att_linear=light.att_linear,
                    att_exponential=light.att_exponential,
                    num_lights=count,
                )
            )

        self.point_data = tuple(point_data)
        self.amb_dir_data = AmbientDirectionalData(
            ambient_color=_vec4(self.ambient_color),
            dir_color=_vec4(self.directional_light.light_color),
            light_dir=_vec3(self.directional_light.light_direction_inv()),
        )
        return self.point_data, self.amb_dir_data