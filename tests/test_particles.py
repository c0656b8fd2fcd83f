import json
import random

import numpy as np
import pytest

from sceneforge.ecs import ComponentType, Entity, World
from sceneforge.particle_settings import BlendState, ParticleSettings
from sceneforge.particles import (
    QUAD_INDICES,
    ParticleSystemComponent,
    quad_vertices,
)
from sceneforge.transform import TransformComponent


def make_scene(emitter_position=(0.0, 0.0, 0.0), emitter_rotation=(0.0, 0.0, 0.0)):
    world = World()
    camera = Entity(world)
    cam_t = camera.add_component(TransformComponent)
    cam_t.init((0.0, 0.0, -10.0))
    emitter = Entity(world)
    t = emitter.add_component(TransformComponent)
    t.init(emitter_position, emitter_rotation)
    system = emitter.add_component(ParticleSystemComponent)
    system.rng = random.Random(7)
    return world, emitter, t, system, cam_t


def still_settings(**overrides):
    values = dict(
        num_particles=3,
        burst=True,
        particle_lifetime=10.0,
        min_max_speed=(0.0, 0.0),
        spawn_radius=0.0,
    )
    values.update(overrides)
    return ParticleSettings(**values)


def test_quad_vertices_layout():
    verts = quad_vertices((3.0, 5.0))
    positions = [np.array(p) for p, _ in verts]
    assert [uv for _, uv in verts] == [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)]
    assert positions[1][0] - positions[0][0] == pytest.approx(3.0)
    assert positions[0][1] - positions[2][1] == pytest.approx(5.0)
    assert sum(p for p in positions).tolist() == pytest.approx([0.0, 0.0, 0.0])
    assert QUAD_INDICES == (0, 1, 2, 2, 1, 3)


def test_requires_transform():
    world = World()
    entity = Entity(world)
    system = entity.add_component(ParticleSystemComponent)
    with pytest.raises(LookupError):
        system.init([still_settings()], None)


def test_burst_spawns_all_within_radius():
    _, _, _, system, cam = make_scene(emitter_position=(5.0, 5.0, 5.0))
    s = still_settings(num_particles=8, spawn_radius=2.0, spawn_offset=(0.0, 1.0, 0.0))
    system.init([s], cam)
    parts = system.particles(0)
    assert len(parts) == 8
    centre = np.array([5.0, 6.0, 5.0])
    for p in parts:
        assert p.active
        assert p.life_time == s.particle_lifetime
        assert np.all(np.abs(p.position - centre) <= 1.0 + 1e-9)


def test_flow_starts_inactive_and_spawns_over_time():
    _, _, _, system, cam = make_scene()
    system.init([still_settings(num_particles=4, burst=False, particle_lifetime=1.0)], cam)
    assert all(not p.active for p in system.particles(0))
    assert all(np.all(p.scale == 0) for p in system.particles(0))
    system.update(0.1)
    assert sum(p.active for p in system.particles(0)) == 1


def test_directions_are_unit_length():
    _, _, _, system, cam = make_scene()
    s = still_settings(num_particles=10, direction=(0.0, 1.0, 0.0), velocity_spread=(1.0, 1.0, 1.0))
    system.init([s], cam)
    for p in system.particles(0):
        assert np.linalg.norm(p.direction) == pytest.approx(1.0)


def test_particle_moves_along_direction():
    _, _, _, system, cam = make_scene()
    s = still_settings(num_particles=1, direction=(0.0, 1.0, 0.0), min_max_speed=(2.0, 2.0))
    system.init([s], cam)
    start = system.particles(0)[0].position.copy()
    system.update(0.5)
    moved = system.particles(0)[0].position - start
    assert moved[0] == pytest.approx(0.0)
    assert moved[2] == pytest.approx(0.0)
    assert moved[1] == pytest.approx(1.0)


def test_follow_emitter_moves_particles_with_entity():
    _, _, t, system, cam = make_scene()
    system.init([still_settings(num_particles=2, follow_emitter=True)], cam)
    before = [p.position.copy() for p in system.particles(0)]
    t.add_translation((1.0, 2.0, 3.0))
    system.update(0.1)
    after = sorted((p.position for p in system.particles(0)), key=lambda v: tuple(v))
    expected = sorted((b + np.array([1.0, 2.0, 3.0]) for b in before), key=lambda v: tuple(v))
    for a, e in zip(after, expected):
        assert a.tolist() == pytest.approx(e.tolist())


def test_lerps_follow_fraction():
    _, _, _, system, cam = make_scene()
    s = still_settings(
        num_particles=1,
        particle_lifetime=1.0,
        start_alpha=0.0,
        end_alpha=1.0,
        start_scale_min_max=(2.0, 2.0),
        end_scale_min_max=(2.0, 2.0),
    )
    system.init([s], cam)
    system.update(0.25)
    p = system.particles(0)[0]
    assert p.fraction == pytest.approx(0.25)
    assert p.current_alpha == pytest.approx(p.fraction)
    assert p.scale.tolist() == pytest.approx([2.0, 2.0, 2.0])


def test_z_rotation_accumulates():
    _, _, _, system, cam = make_scene()
    system.init([still_settings(num_particles=1, rotation_per_sec_min_max=(90.0, 90.0))], cam)
    system.update(1.0)
    assert system.particles(0)[0].z_rotation == pytest.approx(90.0)


@pytest.mark.parametrize("by_velocity", [False, True])
def test_rotation_matrices_are_orthonormal(by_velocity):
    _, _, _, system, cam = make_scene()
    cam.init((0.0, 0.0, -10.0), (20.0, 30.0, 0.0))
    s = still_settings(
        num_particles=3,
        direction=(0.0, 1.0, 0.0),
        min_max_speed=(1.0, 1.0),
        rotation_by_velocity=by_velocity,
        rotation_per_sec_min_max=(45.0, 45.0),
    )
    system.init([s], cam)
    system.update(0.2)
    for p in system.particles(0):
        r = p.rotation_matrix[:3, :3]
        assert (r @ r.T).tolist() == pytest.approx(np.identity(3).tolist(), abs=1e-9)


def test_alpha_emitter_sorted_far_to_near():
    _, _, _, system, cam = make_scene()
    s = still_settings(num_particles=6, spawn_radius=8.0, blend=BlendState.ALPHA)
    system.init([s], cam)
    system.update(0.1)
    distances = [p.distance for p in system.particles(0)]
    assert distances == sorted(distances, reverse=True)


def test_instances_for_additive_and_alpha():
    _, _, _, system, cam = make_scene()
    mult = (0.5, 0.5, 0.5)
    common = dict(
        num_particles=2,
        start_color_multiplier_rgb_min=mult,
        start_color_multiplier_rgb_max=mult,
        end_color_multiplier_rgb_min=mult,
        end_color_multiplier_rgb_max=mult,
    )
    additive = still_settings(blend=BlendState.ADDITIVE, start_alpha=1.0, end_alpha=1.0, **common)
    alpha = still_settings(blend=BlendState.ALPHA, start_alpha=0.4, end_alpha=0.4, **common)
    system.init([additive, alpha], cam)
    system.update(0.1)
    for inst in system.instances(0):
        assert inst.color.tolist() == pytest.approx([0.5, 0.5, 0.5, 1.0])
    for inst in system.instances(1):
        assert inst.color.tolist() == pytest.approx([0.5, 0.5, 0.5, 0.4])
    for inst, p in zip(system.instances(1), system.particles(1)):
        assert inst.world_matrix[3, :3].tolist() == pytest.approx(p.position.tolist())


def test_local_space_rotates_direction():
    _, _, _, system, cam = make_scene(emitter_rotation=(0.0, 90.0, 0.0))
    s = still_settings(num_particles=1, direction=(0.0, 0.0, 1.0), local_space=True)
    system.init([s], cam)
    assert system.particles(0)[0].direction.tolist() == pytest.approx([1.0, 0.0, 0.0], abs=1e-9)


def test_emitter_lifetime_removes_entity():
    world, emitter, _, system, cam = make_scene()
    system.init([still_settings(emitter_lifetime=0.5)], cam)
    world.update(0.3)
    assert emitter in world.entities
    world.update(0.3)
    assert emitter not in world.entities
    assert system not in world.components_of(ComponentType.PARTICLE)


def test_settings_are_copied():
    _, _, _, system, cam = make_scene()
    original = still_settings(emitter_lifetime=5.0, blend=BlendState.SUBTRACTIVE)
    system.init([original], cam)
    system.update(1.0)
    assert original.emitter_lifetime == 5.0
    assert system.emitter_settings(0).emitter_lifetime < 5.0
    assert system.blend_state(0) is BlendState.SUBTRACTIVE
    assert system.num_particles(0) == original.num_particles
    assert system.num_emitters == 1


def test_same_seed_same_spawn():
    results = []
    for _ in range(2):
        _, _, _, system, cam = make_scene()
        system.rng = random.Random(3)
        system.init([still_settings(num_particles=4, spawn_radius=3.0)], cam)
        results.append([p.position.tolist() for p in system.particles(0)])
    assert results[0] == results[1]


def test_system_position_and_texture_path():
    _, _, _, system, cam = make_scene(emitter_position=(1.0, 2.0, 3.0))
    system.init([still_settings(texture_path="spark.dds"), still_settings()], cam)
    assert system.system_position().tolist() == [1.0, 2.0, 3.0]
    assert system.texture_paths[0] == "Data/Textures/spark.dds"
    assert system.texture_paths[1] == "textures/defaultDiffuse.dds"


def test_init_from_file(tmp_path):
    doc = {
        "numEmitters": 1,
        "numParticles0": 5,
        "texture0": "smoke.dds",
        "startSize0": [1.0, 1.0],
        "direction0": [0.0, 1.0, 0.0],
        "minMaxSpeed0": [1.0, 2.0],
        "gravity0": [0.0, -1.0, 0.0],
        "drag0": 0.1,
        "velocitySpread0": [0.2, 0.2, 0.2],
        "emitterLifetime0": 0.0,
        "particleLifetime0": 2.0,
        "spawnRadius0": 1.0,
        "burst0": True,
        "followEmitter0": False,
        "startColorMultiplierRGBMin0": [1.0, 1.0, 1.0],
        "startColorMultiplierRGBMax0": [1.0, 1.0, 1.0],
        "endColorMultiplierRGBMin0": [0.0, 0.0, 0.0],
        "endColorMultiplierRGBMax0": [0.0, 0.0, 0.0],
        "startAlpha0": 1.0,
        "endAlpha0": 0.0,
        "BLEND0": 1,
        "spawnOffset0": [0.0, 0.0, 0.0],
        "localSpace0": False,
        "startScaleMinMax0": [1.0, 1.0],
        "endScaleMinMax0": [0.5, 0.5],
        "rotationByVelocity0": False,
        "rotationPerSecMinMax0": [0.0, 10.0],
        "inheritVelocityScale0": [0.0, 0.0, 0.0],
    }
    path = tmp_path / "fx.json"
    path.write_text(json.dumps(doc))
    _, _, _, system, cam = make_scene()
    system.init_from_file(path, cam)
    assert system.num_particles(0) == 5
    assert system.blend_state(0) is BlendState.ADDITIVE
    system.update(0.1)
    assert len(system.instances(0)) == 5


def test_update_without_init_raises():
    _, _, _, system, _ = make_scene()
    system._settings = [still_settings()]
    with pytest.raises(RuntimeError):
        system.update(0.1)