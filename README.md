# sceneforge

sceneforge is a small entity/component scene library. It keeps a `World` of
entities and components. Each frame it updates the active components one
`ComponentType` at a time, in the order the enum lists them. Components and
entities flagged for removal during a frame are dropped once the update has
finished.

## Modules

- `sceneforge.ecs`: `World`, `Entity`, `Component` and `ComponentType`.
  - `Entity.add_component(cls)` creates a component attached to the entity.
  - `Entity.get_component(cls)` returns the first component of that class's
    type, or `None`.
  - `World.components_of(type)` lists the live components of one type.
  - `World.empty()` clears the world.
- `sceneforge.color32`: `Color32`, a frozen RGBA colour with channels in
  0..255. `+`, `-` and `*` saturate at 0 and 255. `/` is integer division per
  channel. Presets are `WHITE`, `BLACK`, `RED`, `GREEN` and `BLUE`.
- `sceneforge.vecmath`: left-handed, row-vector helpers on numpy arrays:
  - `normalize`, `cross`, `length`, `lerp`
  - `translation`, `scaling`, `rotation_z`, `rotation_roll_pitch_yaw`
  - `transform_coord`, `look_at_lh`, `perspective_fov_lh`, `orthographic_lh`
- `sceneforge.transform`: `TransformComponent`.
  - It holds position, rotation in degrees and scale.
  - `build_world_matrix()` rebuilds the position, rotation, scale and world
    matrices.
  - `forward()`, `right()`, `up()` and `all_axes()` give the axes of the
    entity.
- `sceneforge.input_state`: `InputState` and the `Key` scan codes.
  - `update(keyboard, mouse_dx, mouse_dy, mouse_buttons)` takes a 256-byte
    keyboard state and four mouse button bytes. A key or button counts as
    down when bit `0x80` is set.
  - Queries: `is_key_held`, `is_key_pressed`, `is_key_released`,
    `is_mouse_held`, `is_mouse_pressed` and `is_mouse_released`.
  - The mouse movement of the frame is in `mouse_x` and `mouse_y`.
- `sceneforge.gamepad`: `Gamepad`, `GamepadState` and the `Button` flags.
  - Stick and trigger values are normalised.
  - `left_stick_dead()` and `right_stick_dead()` test the dead zones.
  - `set_rumble(left, right)` clamps both values to 0..1 and returns the raw
    motor speeds.
- `sceneforge.camera`: `CameraComponent` and `CameraManager`.
  - `init_3d(fov, aspect)` sets up a perspective camera; `fov` is in degrees
    and the planes are 0.1 and 5000.
  - `init_2d(size, near_far)` sets up an orthographic camera.
  - The view, projection and view-projection matrices are rebuilt from the
    entity's transform on every update.
- `sceneforge.motion`:
  - `FreeMoveComponent` flies the entity with W/A/S/D from an `InputState`,
    turns it with the mouse, and speeds it up while left shift is held.
  - `RotationComponent` spins the entity.
  - `PingPongComponent` swings position, rotation and scale on a sine wave.
- `sceneforge.lights`: `LightDirectionComponent`, `LightPointComponent` and
  `LightManager`.
  - The manager accepts up to 1024 point lights by default. When it is full,
    it removes the entity of a point light being added.
  - `update_light_buffers()` returns `PointLightData` records and an
    `AmbientDirectionalData` record.
- `sceneforge.particle_settings`: `ParticleSettings`, `BlendState`,
  `parse_particle_settings(document)` and `load_particle_settings(path)`.
  - A settings document holds `numEmitters` and, for each emitter `i`, keys
    such as `numParticles<i>`, `gravity<i>` and `BLEND<i>`.
  - A malformed document raises `ParticleSettingsError`.
- `sceneforge.particles`: `ParticleSystemComponent`, a CPU particle
  simulation.
  - Emitters are either burst or flow emitters.
  - Each particle gets gravity, drag, and inherited emitter velocity.
  - Colour, alpha and scale are interpolated over a particle's life.
  - Particles are billboarded towards a camera transform. They can also be
    rotated along their velocity.
  - Alpha-blended emitters are sorted back to front.
  - `instances(index)` gives the world matrix and colour of each particle.

## Installation

```
pip install .
```

## Examples

Spin an entity:

```python
from sceneforge.ecs import World, Entity
from sceneforge.transform import TransformComponent
from sceneforge.motion import RotationComponent

world = World()
entity = Entity(world)
transform = entity.add_component(TransformComponent)
transform.init((0, 0, 0), (0, 0, 0), (1, 1, 1))

spinner = entity.add_component(RotationComponent)
spinner.init((0, 1, 0), 90.0)

world.update(0.5)  # rotates 45 degrees around the y axis
print(transform.rotation)  # [ 0. 45.  0.]
```

Fly forward with the W key:

```python
from sceneforge.ecs import World, Entity
from sceneforge.input_state import InputState, Key
from sceneforge.transform import TransformComponent
from sceneforge.motion import FreeMoveComponent

world = World()
entity = Entity(world)
entity.add_component(TransformComponent).init()

keys = InputState()
mover = entity.add_component(FreeMoveComponent)
mover.init(keys, 5.0, 0.1)

state = bytearray(256)
state[Key.W] = 0x80
keys.update(state)
world.update(1.0)
print(entity.get_component(TransformComponent).position)  # [0. 0. 5.]
```

## What it does not do

sceneforge only simulates the scene. It does not:

- open a window or draw anything;
- create GPU buffers or load textures or models;
- read devices.

You supply keyboard, mouse and gamepad state to `InputState.update` and
`Gamepad.update` yourself. You read out the matrices, light data and
particle instances for your own renderer. A particle system records the
texture path each emitter would use in `texture_paths`, but never opens that
file.

## Running the tests

```
pip install .[test]
pytest
```