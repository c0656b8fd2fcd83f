"""Particle system component: spawning, simulation, sorting and per-instance data."""

from __future__ import annotations

import dataclasses
import math
import os
import random
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from . import vecmath
from .ecs import Component, ComponentType, Entity
from .particle_settings import BlendState, ParticleSettings, load_particle_settings
from .transform import TransformComponent

QUAD_INDICES: tuple[int, ...] = (0, 1, 2, 2, 1, 3)
TEXTURE_DIRECTORY = "Data/Textures/"
DEFAULT_TEXTURE = "textures/defaultDiffuse.dds"


def _zeros() -> np.ndarray:
    return np.zeros(3)


def _ones() -> np.ndarray:
    return np.ones(3)


@dataclass
class ParticleData:
    """Simulation state of one particle."""

    position: np.ndarray = field(default_factory=_zeros)
    z_rotation: float = 0.0
    scale: np.ndarray = field(default_factory=_ones)
    direction: np.ndarray = field(default_factory=_zeros)
    speed: np.ndarray = field(default_factory=_zeros)
    start_color_multiplier_rgb: np.ndarray = field(default_factory=_ones)
    end_color_multiplier_rgb: np.ndarray = field(default_factory=_ones)
    current_color_multiplier: np.ndarray = field(default_factory=_ones)
    current_alpha: float = 1.0
    fraction: float = 0.0
    life_time: float = 0.0
    drag_multiplier: float = 1.0
    active: bool = False
    distance: float = 0.0
    start_scale: float = 1.0
    end_scale: float = 1.0
    previous_position: np.ndarray = field(default_factory=_zeros)
    rotation_matrix: np.ndarray = field(default_factory=lambda: np.identity(4))
    z_rotation_speed: float = 0.0


@dataclass
class EmitterData:
    """Timers of one emitter."""

    life_time: float = 0.0
    spawn_ratio: float = 0.0
    spawn_timer: float = 0.0
    num_spawned_particles: int = 0


@dataclass(frozen=True)
class ParticleInstance:
    """What is uploaded per particle for drawing: world matrix and colour."""

    world_matrix: np.ndarray
    color: np.ndarray


def quad_vertices(
    size: Sequence[float],
) -> tuple[tuple[tuple[float, float, float], tuple[float, float]], ...]:
    """The four (position, texcoord) corners of a quad of ``size`` centred on the origin."""
    half_x = float(size[0]) * 0.5
    half_y = float(size[1]) * 0.5
    return (
        ((-half_x, half_y, 0.0), (0.0, 0.0)),
        ((half_x, half_y, 0.0), (1.0, 0.0)),
        ((-half_x, -half_y, 0.0), (0.0, 1.0)),
        ((half_x, -half_y, 0.0), (1.0, 1.0)),
    )


def _lerp_float(a: float, b: float, f: float) -> float:
    return a * (1.0 - f) + b * f


class ParticleSystemComponent(Component):
    """A set of emitters simulated around the entity's transform."""

    component_type = ComponentType.PARTICLE

    def __init__(self, parent: Entity) -> None:
        super().__init__(parent)
        self.rng = random.Random()
        self.num_emitters = 0
        self.texture_paths: list[str] = []
        self.quads: list[tuple] = []
        self._has_lifetime = False
        self._settings: list[ParticleSettings] = []
        self._emitter_data: list[EmitterData] = []
        self._particles: list[list[ParticleData]] = []
        self._instances: list[list[ParticleInstance]] = []
        self._previous_position = np.zeros(3)
        self._transform: TransformComponent | None = None
        self._camera: TransformComponent | None = None

    # -- setup -----------------------------------------------------------------

    def init(
        self, settings: Sequence[ParticleSettings], camera_transform: TransformComponent
    ) -> None:
        """Set up the emitters; ``camera_transform`` is used for sorting and billboarding."""
        transform = self.get_component(TransformComponent)
        if transform is None:
            raise LookupError("particle system entity has no TransformComponent")
        self._transform = transform
        self._camera = camera_transform

        self._settings = [dataclasses.replace(s) for s in settings]
        self.num_emitters = len(self._settings)
        self._emitter_data = [EmitterData() for _ in self._settings]
        self._particles = [
            [ParticleData() for _ in range(s.num_particles)] for s in self._settings
        ]
        self._has_lifetime = False
        self.texture_paths = []
        self.quads = []

        for index, s in enumerate(self._settings):
            emitter = self._emitter_data[index]
            emitter.life_time = s.particle_lifetime
            self.texture_paths.append(
                TEXTURE_DIRECTORY + s.texture_path if s.texture_path else DEFAULT_TEXTURE
            )
            if s.emitter_lifetime > 0:
                self._has_lifetime = True
            self.quads.append(quad_vertices(s.start_size))

            if s.burst:
                self._spawn_all_particles(index)
            else:
                for particle in self._particles[index]:
                    particle.active = False
                    particle.scale = np.zeros(3)
                emitter.spawn_ratio = (
                    s.particle_lifetime / s.num_particles if s.num_particles else math.inf
                )
                emitter.spawn_timer = emitter.spawn_ratio

        self._instances = [[] for _ in self._settings]
        self._previous_position = np.array(transform.position, dtype=float)

    def init_from_file(
        self, path: str | os.PathLike[str], camera_transform: TransformComponent
    ) -> None:
        """Read emitter settings from a JSON file and set up the system."""
        self.init(load_particle_settings(path), camera_transform)

    # -- accessors -------------------------------------------------------------

    def blend_state(self, index: int) -> BlendState:
        return self._settings[index].blend

    def num_particles(self, index: int) -> int:
        return self._settings[index].num_particles

    def emitter_settings(self, index: int) -> ParticleSettings:
        """A copy of the settings of one emitter."""
        return dataclasses.replace(self._settings[index])

    def system_position(self) -> np.ndarray:
        return np.array(self._require_transform().position, dtype=float)

    def particles(self, index: int) -> tuple[ParticleData, ...]:
        return tuple(self._particles[index])

    def instances(self, index: int) -> tuple[ParticleInstance, ...]:
        return tuple(self._instances[index])

    # -- simulation ------------------------------------------------------------

    def update(self, delta: float) -> None:
        self._update_life_time(delta)
        self._update_velocity(delta)
        self._update_lerps(delta)
        self._update_rotations(delta)
        for index, s in enumerate(self._settings):
            if s.blend == BlendState.ALPHA:
                self._sort_particles(index)
        self._update_instances()

    def _require_transform(self) -> TransformComponent:
        if self._transform is None:
            raise RuntimeError("particle system has not been initialised")
        return self._transform

    def _require_camera(self) -> TransformComponent:
        if self._camera is None:
            raise RuntimeError("particle system has no camera transform")
        return self._camera

    def _rand(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def _spawn_all_particles(self, index: int) -> None:
        for particle in self._particles[index]:
            self._spawn_particle(particle, index)
        self._emitter_data[index].life_time = self._settings[index].particle_lifetime

    def _spawn_particle(self, particle: ParticleData, index: int) -> None:
        s = self._settings[index]
        emitter_pos = self._require_transform().position
        half_radius = s.spawn_radius * 0.5

        direction = vecmath.normalize(
            [
                self._rand(d - spread * 0.5, d + spread * 0.5)
                for d, spread in zip(s.direction, s.velocity_spread)
            ]
        )
        if s.local_space:
            direction = self._direction_local(direction)

        start_color = np.array(
            [
                self._rand(lo, hi)
                for lo, hi in zip(s.start_color_multiplier_rgb_min, s.start_color_multiplier_rgb_max)
            ]
        )
        end_color = np.array(
            [
                self._rand(lo, hi)
                for lo, hi in zip(s.end_color_multiplier_rgb_min, s.end_color_multiplier_rgb_max)
            ]
        )
        speed = self._rand(*s.min_max_speed)
        start_scale = self._rand(*s.start_scale_min_max)
        end_scale = self._rand(*s.end_scale_min_max)
        rotation_speed = self._rand(*s.rotation_per_sec_min_max)

        spawn = np.array(
            [self._rand(p - half_radius, p + half_radius) for p in emitter_pos]
        )
        particle.position = spawn + np.array(s.spawn_offset, dtype=float)

        particle.z_rotation = 0.0
        particle.scale = np.ones(3)
        particle.direction = direction
        particle.speed = np.full(3, speed)
        particle.drag_multiplier = 1.0
        particle.life_time = s.particle_lifetime
        particle.active = True
        particle.current_color_multiplier = np.array(s.start_color_multiplier_rgb_min, dtype=float)
        particle.current_alpha = s.start_alpha
        particle.fraction = 0.0
        particle.start_color_multiplier_rgb = start_color
        particle.end_color_multiplier_rgb = end_color
        particle.start_scale = start_scale
        particle.end_scale = end_scale
        particle.z_rotation_speed = rotation_speed

    def _direction_local(self, direction: np.ndarray) -> np.ndarray:
        pitch, yaw, roll = (math.radians(a) for a in self._require_transform().rotation)
        rotation = vecmath.rotation_roll_pitch_yaw(pitch, yaw, roll)
        return vecmath.normalize(vecmath.transform_coord(direction, rotation))

    def _update_life_time(self, delta: float) -> None:
        for index, (s, emitter) in enumerate(zip(self._settings, self._emitter_data)):
            if self._has_lifetime:
                s.emitter_lifetime -= delta
                if s.emitter_lifetime <= 0:
                    self.parent.remove_entity()

            if s.burst:
                emitter.life_time -= delta
                if emitter.life_time <= 0:
                    self._spawn_all_particles(index)
                continue

            particles = self._particles[index]
            for particle in particles:
                if particle.active:
                    particle.life_time -= delta
                    if particle.life_time <= 0:
                        self._spawn_particle(particle, index)

            if emitter.num_spawned_particles >= s.num_particles:
                continue

            emitter.spawn_timer += delta
            if emitter.spawn_timer >= emitter.spawn_ratio:
                emitter.spawn_timer = 0.0
                self._spawn_particle(particles[emitter.num_spawned_particles], index)
                emitter.num_spawned_particles += 1

    def _update_velocity(self, delta: float) -> None:
        emitter_pos = np.array(self._require_transform().position, dtype=float)
        velocity = emitter_pos - self._previous_position

        for s, particles in zip(self._settings, self._particles):
            gravity = np.array(s.gravity, dtype=float)
            inherit = np.array(s.inherit_velocity_scale, dtype=float)
            for particle in particles:
                if not particle.active:
                    continue
                particle.previous_position = particle.position.copy()

                sign = np.where(particle.direction < 0.0, -1.0, 1.0)
                particle.speed = particle.speed + sign * gravity * delta

                particle.drag_multiplier = max(particle.drag_multiplier - s.drag * delta, 0.0)
                drag = particle.drag_multiplier

                particle.position = (
                    particle.position
                    + particle.direction * particle.speed * drag * delta
                    + velocity * inherit
                )
                particle.position = particle.position + gravity * drag * delta
                if s.follow_emitter:
                    particle.position = particle.position + velocity

        self._previous_position = emitter_pos

    def _update_lerps(self, delta: float) -> None:
        for s, particles in zip(self._settings, self._particles):
            for particle in particles:
                if not particle.active:
                    continue
                particle.fraction += delta / s.particle_lifetime
                particle.current_color_multiplier = vecmath.lerp(
                    particle.start_color_multiplier_rgb,
                    particle.end_color_multiplier_rgb,
                    particle.fraction,
                )
                particle.current_alpha = _lerp_float(s.start_alpha, s.end_alpha, particle.fraction)
                scale = _lerp_float(particle.start_scale, particle.end_scale, particle.fraction)
                particle.scale = np.full(3, scale)

    def _update_rotations(self, delta: float) -> None:
        forward, right, up = self._require_camera().all_axes()

        for s, particles in zip(self._settings, self._particles):
            if s.rotation_by_velocity:
                for particle in particles:
                    moved = vecmath.normalize(particle.position - particle.previous_position)
                    by_right = vecmath.normalize(vecmath.cross(forward, -moved))
                    by_up = vecmath.normalize(vecmath.cross(forward, by_right))
                    basis = np.identity(4)
                    basis[:3, 0] = by_right
                    basis[:3, 1] = by_up
                    basis[:3, 2] = forward
                    particle.rotation_matrix = basis.T.copy()
            else:
                basis = np.identity(4)
                basis[:3, 0] = right
                basis[:3, 1] = up
                basis[:3, 2] = forward
                for particle in particles:
                    particle.z_rotation += particle.z_rotation_speed * delta
                    z_matrix = vecmath.rotation_z(math.radians(particle.z_rotation))
                    particle.rotation_matrix = (basis @ z_matrix).T.copy()

    def _sort_particles(self, index: int) -> None:
        cam_pos = np.asarray(self._require_camera().position, dtype=float)
        particles = self._particles[index]
        for particle in particles:
            particle.distance = vecmath.length(particle.position - cam_pos)
        particles.sort(key=lambda p: p.distance, reverse=True)

    def _update_instances(self) -> None:
        instances = []
        for s, particles in zip(self._settings, self._particles):
            emitter_instances = []
            for particle in particles:
                world = (
                    vecmath.scaling(particle.scale)
                    @ particle.rotation_matrix
                    @ vecmath.translation(particle.position)
                )
                r, g, b = particle.current_color_multiplier
                alpha = particle.current_alpha
                if s.blend in (BlendState.ADDITIVE, BlendState.SUBTRACTIVE):
                    color = np.array([r, g, b, 1.0]) * alpha
                else:
                    color = np.array([r, g, b, alpha])
                emitter_instances.append(ParticleInstance(world_matrix=world, color=color))
            instances.append(emitter_instances)
        self._instances = instances