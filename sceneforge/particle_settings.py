"""Per-emitter particle settings and their JSON document format."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Mapping, TypeVar

T = TypeVar("T")

Float2 = tuple[float, float]
Float3 = tuple[float, float, float]


class BlendState(IntEnum):
    """How an emitter's particles are blended into the scene."""

    ALPHA = 0
    ADDITIVE = 1
    SUBTRACTIVE = 2


class ParticleSettingsError(ValueError):
    """Raised when a particle settings document is malformed."""


@dataclass
class ParticleSettings:
    """Settings of one emitter in a particle system."""

    num_particles: int = 1
    texture_path: str = ""
    start_size: Float2 = (1.0, 1.0)
    direction: Float3 = (0.0, 1.0, 0.0)
    min_max_speed: Float2 = (1.0, 1.0)
    gravity: Float3 = (0.0, 0.0, 0.0)
    drag: float = 0.0
    velocity_spread: Float3 = (0.0, 0.0, 0.0)
    emitter_lifetime: float = 0.0
    particle_lifetime: float = 1.0
    spawn_radius: float = 0.0
    burst: bool = False
    follow_emitter: bool = False
    start_color_multiplier_rgb_min: Float3 = (1.0, 1.0, 1.0)
    start_color_multiplier_rgb_max: Float3 = (1.0, 1.0, 1.0)
    end_color_multiplier_rgb_min: Float3 = (1.0, 1.0, 1.0)
    end_color_multiplier_rgb_max: Float3 = (1.0, 1.0, 1.0)
    start_alpha: float = 1.0
    end_alpha: float = 1.0
    blend: BlendState = BlendState.ALPHA
    spawn_offset: Float3 = (0.0, 0.0, 0.0)
    local_space: bool = False
    start_scale_min_max: Float2 = (1.0, 1.0)
    end_scale_min_max: Float2 = (1.0, 1.0)
    rotation_by_velocity: bool = False
    rotation_per_sec_min_max: Float2 = (0.0, 0.0)
    inherit_velocity_scale: Float3 = (0.0, 0.0, 0.0)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_int(value: Any, key: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ParticleSettingsError(f"{key!r} must be an integer, got {value!r}")
    return value


def _as_float(value: Any, key: str) -> float:
    if not _is_number(value):
        raise ParticleSettingsError(f"{key!r} must be a number, got {value!r}")
    return float(value)


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ParticleSettingsError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ParticleSettingsError(f"{key!r} must be a string, got {value!r}")
    return value


def _as_floats(value: Any, key: str, count: int) -> tuple[float, ...]:
    if not isinstance(value, list) or len(value) < count:
        raise ParticleSettingsError(f"{key!r} must be an array of at least {count} numbers")
    items = value[:count]
    if not all(_is_number(v) for v in items):
        raise ParticleSettingsError(f"{key!r} must hold numbers, got {value!r}")
    return tuple(float(v) for v in items)


def _as_float2(value: Any, key: str) -> Float2:
    x, y = _as_floats(value, key, 2)
    return (x, y)


def _as_float3(value: Any, key: str) -> Float3:
    x, y, z = _as_floats(value, key, 3)
    return (x, y, z)


def _as_blend(value: Any, key: str) -> BlendState:
    number = _as_int(value, key)
    try:
        return BlendState(number)
    except ValueError:
        raise ParticleSettingsError(f"{key!r} is not a known blend state: {number}") from None


# (settings field, document key prefix, converter), in document order
_FIELDS: tuple[tuple[str, str, Callable[[Any, str], Any]], ...] = (
    ("num_particles", "numParticles", _as_int),
    ("texture_path", "texture", _as_str),
    ("start_size", "startSize", _as_float2),
    ("direction", "direction", _as_float3),
    ("min_max_speed", "minMaxSpeed", _as_float2),
    ("gravity", "gravity", _as_float3),
    ("drag", "drag", _as_float),
    ("velocity_spread", "velocitySpread", _as_float3),
    ("emitter_lifetime", "emitterLifetime", _as_float),
    ("particle_lifetime", "particleLifetime", _as_float),
    ("spawn_radius", "spawnRadius", _as_float),
    ("burst", "burst", _as_bool),
    ("follow_emitter", "followEmitter", _as_bool),
    ("start_color_multiplier_rgb_min", "startColorMultiplierRGBMin", _as_float3),
    ("start_color_multiplier_rgb_max", "startColorMultiplierRGBMax", _as_float3),
    ("end_color_multiplier_rgb_min", "endColorMultiplierRGBMin", _as_float3),
    ("end_color_multiplier_rgb_max", "endColorMultiplierRGBMax", _as_float3),
    ("start_alpha", "startAlpha", _as_float),
    ("end_alpha", "endAlpha", _as_float),
    ("blend", "BLEND", _as_blend),
    ("spawn_offset", "spawnOffset", _as_float3),
    ("local_space", "localSpace", _as_bool),
    ("start_scale_min_max", "startScaleMinMax", _as_float2),
    ("end_scale_min_max", "endScaleMinMax", _as_float2),
    ("rotation_by_velocity", "rotationByVelocity", _as_bool),
    ("rotation_per_sec_min_max", "rotationPerSecMinMax", _as_float2),
    ("inherit_velocity_scale", "inheritVelocityScale", _as_float3),
)


def _lookup(document: Mapping[str, Any], key: str) -> Any:
    try:
        return document[key]
    except KeyError:
        raise ParticleSettingsError(f"missing key {key!r}") from None


def _parse_emitter(document: Mapping[str, Any], index: int) -> ParticleSettings:
    values = {}
    for name, prefix, convert in _FIELDS:
        key = f"{prefix}{index}"
        values[name] = convert(_lookup(document, key), key)
    if values["num_particles"] < 0:
        raise ParticleSettingsError(f"'numParticles{index}' must not be negative")
    return ParticleSettings(**values)


def parse_particle_settings(document: Mapping[str, Any]) -> list[ParticleSettings]:
    """Read every emitter's settings from a decoded settings document.

    The document holds ``numEmitters`` and, for each emitter ``i``, keys such as
    ``numParticles<i>`` and ``gravity<i>``.
    """
    if not isinstance(document, Mapping):
        raise ParticleSettingsError("settings document must be a JSON object")
    count = _as_int(_lookup(document, "numEmitters"), "numEmitters")
    if count < 0:
        raise ParticleSettingsError("'numEmitters' must not be negative")
    return [_parse_emitter(document, i) for i in range(count)]


def load_particle_settings(path: str | os.PathLike[str]) -> list[ParticleSettings]:
    """Read a JSON particle settings file."""
    with open(path, "rb") as fh:
        try:
            document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ParticleSettingsError(f"invalid JSON in {os.fspath(path)!r}: {exc}") from exc
    return parse_particle_settings(document)