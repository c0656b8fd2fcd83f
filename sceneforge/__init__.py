"""Entity/component scene simulation with transforms, cameras, input, lights and particles."""

__version__ = "0.1.0"

__all__ = [
    "camera",
    "color32",
    "ecs",
    "gamepad",
    "input_state",
    "lights",
    "motion",
    "particle_settings",
    "particles",
    "transform",
    "vecmath",
]