"""Position, rotation (degrees) and scale of an entity, with derived matrices."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from . import vecmath
from .ecs import Component, ComponentType, Entity


class TransformComponent(Component):
    """Holds an entity's transform and the matrices built from it."""

    component_type = ComponentType.TRANSFORM

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.position = np.zeros(3)
        self.rotation = np.zeros(3)
        self.scale = np.ones(3)
        self.position_matrix = np.identity(4)
        self.rotation_matrix = np.identity(4)
        self.scale_matrix = np.identity(4)
        self.world_matrix = np.identity(4)
        self.world_matrix_trans = np.identity(4)

    def init(
        self,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        rotation: Sequence[float] = (0.0, 0.0, 0.0),
        scale: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> None:
        """Set the transform and build the world matrix."""
        self.position = np.array(position, dtype=float)
        self.rotation = np.array(rotation, dtype=float)
        self.scale = np.array(scale, dtype=float)
        self.build_world_matrix()

    def update(self, delta: float) -> None:
        """Transforms do nothing on their own each frame."""

    def add_translation(self, amount: Sequence[float]) -> None:
        self.position = np.asarray(amount, dtype=float) + self.position

    def add_rotation(self, amount: Sequence[float]) -> None:
        self.rotation = np.asarray(amount, dtype=float) + self.rotation

    def add_scale(self, amount: Sequence[float]) -> None:
        self.scale = np.asarray(amount, dtype=float) + self.scale

    def build_world_matrix(self) -> None:
        """Rebuild the position, scale, rotation and world matrices."""
        pitch, yaw, roll = (math.radians(a) for a in self.rotation)
        self.position_matrix = vecmath.translation(self.position)
        self.scale_matrix = vecmath.scaling(self.scale)
        self.rotation_matrix = vecmath.rotation_roll_pitch_yaw(pitch, yaw, roll)
        self.world_matrix = self.scale_matrix @ self.rotation_matrix @ self.position_matrix
        self.world_matrix_trans = self.world_matrix.T.copy()

    def _axis(self, base: Sequence[float]) -> np.ndarray:
        return vecmath.normalize(vecmath.transform_coord(base, self.rotation_matrix))

    def forward(self) -> np.ndarray:
        """Local +z in world space, from the last built rotation matrix."""
        return self._axis((0.0, 0.0, 1.0))

    def right(self) -> np.ndarray:
        """Local +x in world space, from the last built rotation matrix."""
        return self._axis((1.0, 0.0, 0.0))

    def up(self) -> np.ndarray:
        """Local +y in world space, from the last built rotation matrix."""
        return self._axis((0.0, 1.0, 0.0))

    def all_axes(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (forward, right, up)."""
        return self.forward(), self.right(), self.up()