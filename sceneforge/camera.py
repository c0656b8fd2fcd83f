"""Camera component computing view and projection matrices, and the camera registry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from . import vecmath
from .ecs import Component, ComponentType, Entity
from .transform import TransformComponent

NEAR_PLANE = 0.1
FAR_PLANE = 5000.0


class CameraComponent(Component):
    """Builds view, projection and view-projection matrices from the entity's transform."""

    component_type = ComponentType.CAMERA

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.view_matrix = np.identity(4)
        self.projection_matrix = np.identity(4)
        self.view_proj_matrix = np.identity(4)
        self.view_proj_matrix_trans = np.identity(4)
        self.render_texture: Any = None
        self._transform: TransformComponent | None = None

    def _attach_transform(self) -> None:
        transform = self.get_component(TransformComponent)
        if transform is None:
            raise LookupError("camera entity has no TransformComponent")
        self._transform = transform

    def init_3d(self, fov: float, aspect: float) -> None:
        """Perspective camera; ``fov`` is the vertical field of view in degrees."""
        self._attach_transform()
        self.projection_matrix = vecmath.perspective_fov_lh(
            math.radians(fov), aspect, NEAR_PLANE, FAR_PLANE
        )
        self.calculate_view_matrix()

    def init_2d(self, size: Sequence[float], near_far: Sequence[float]) -> None:
        """Orthographic camera of ``size`` (width, height) between ``near_far``."""
        self._attach_transform()
        width, height = size
        near, far = near_far
        self.projection_matrix = vecmath.orthographic_lh(width, height, near, far)
        self.calculate_view_matrix()

    def update(self, delta: float) -> None:
        self.calculate_view_matrix()

    def calculate_view_matrix(self) -> None:
        """Rebuild the view matrices from the transform's position and axes."""
        if self._transform is None:
            raise RuntimeError("camera has not been initialised")
        forward, _right, up = self._transform.all_axes()
        position = self._transform.position
        self.view_matrix = vecmath.look_at_lh(position, position + forward, up)
        self.view_proj_matrix = self.view_matrix @ self.projection_matrix
        self.view_proj_matrix_trans = self.view_proj_matrix.T.copy()


@dataclass
class CameraManager:
    """The cameras currently used for the game view, the UI and the depth map."""

    current_camera_game: CameraComponent | None = None
    current_camera_ui: CameraComponent | None = None
    current_camera_depth_map: CameraComponent | None = None