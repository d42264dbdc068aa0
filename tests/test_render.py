import numpy as np
import pygame
import pytest

from solar_sim.core.config import RENDER_CFG, SCENE_CFG
from solar_sim.core.scene import build_scene
from solar_sim.data.bodies import DEFAULT_BODIES
from solar_sim.render.assets import (
    SphereSpriteCache,
    make_sprite,
    precompute_sphere_grid,
    shade_sphere,
)
from solar_sim.render.camera import PerspectiveCamera
from solar_sim.render.draw import depth_sorted, draw_body, draw_orbit_ring
from solar_sim.render.ui import format_hud


def make_camera(position=(600.0, 400.0, 600.0), size=(800, 600)):
    camera = PerspectiveCamera(aspect=size[0] / size[1])
    camera.position[:] = position
    camera.look_at((0.0, 0.0, 0.0))
    return camera


def test_sphere_grid_mask():
    grid = precompute_sphere_grid(5)
    assert grid.mask.shape == (10, 10)
    assert grid.mask[5, 5]
    assert not grid.mask[0, 0]
    inside = grid.mask
    lengths = np.sqrt(grid.nx**2 + grid.ny**2 + grid.nz**2)
    assert np.allclose(lengths[inside], 1.0)


def test_sphere_grid_rejects_empty_radius():
    with pytest.raises(ValueError):
        precompute_sphere_grid(0)


def test_sprite_cache_reuses_grids():
    cache = SphereSpriteCache(max_entries=2)
    first = cache.get_grid(4)
    assert cache.get_grid(4) is first
    cache.get_grid(5)
    cache.get_grid(6)
    assert len(cache) == 2
    assert cache.get_grid(4) is not first


def test_unlit_sphere_is_flat_colour():
    grid = precompute_sphere_grid(6)
    rgb = shade_sphere(grid, (255, 255, 0), light_dir=None)
    assert rgb.shape == (12, 12, 3)
    assert tuple(rgb[6, 6]) == (255, 255, 0)
    assert tuple(rgb[0, 0]) == (0, 0, 0)


def test_lit_side_is_brighter_than_dark_side():
    grid = precompute_sphere_grid(20)
    rgb = shade_sphere(
        grid,
        (0, 120, 200),
        light_dir=np.array([1.0, 0.0, 0.0]),
        band_contrast=0.0,
    ).astype(int)
    lit = rgb[36, 20].sum()
    dark = rgb[3, 20].sum()
    assert lit > dark > 0


def test_make_sprite_alpha_follows_mask():
    grid = precompute_sphere_grid(5)
    sprite = make_sprite(grid, shade_sphere(grid, (200, 50, 50), light_dir=None))
    assert sprite.get_size() == (10, 10)
    assert sprite.get_at((5, 5)).a == 255
    assert sprite.get_at((0, 0)).a == 0


def test_orbit_rings_in_front_are_fully_drawn():
    state = build_scene(DEFAULT_BODIES)
    surface = pygame.Surface((800, 600), pygame.SRCALPHA)
    camera = make_camera()
    drawn = [draw_orbit_ring(surface, ring, camera, color=(255, 255, 255, 102)) for ring in state.rings]
    assert drawn == [SCENE_CFG.ring_segments] * len(state.rings)


def test_ring_segments_behind_camera_are_skipped():
    state = build_scene(DEFAULT_BODIES)
    surface = pygame.Surface((400, 300), pygame.SRCALPHA)
    camera = make_camera(position=(0.0, 20.0, 300.0), size=(400, 300))
    outer = state.rings[-1]
    assert 0 < draw_orbit_ring(surface, outer, camera, color=(255, 255, 255, 102)) < SCENE_CFG.ring_segments


def test_depth_sorted_draws_far_bodies_first():
    state = build_scene(DEFAULT_BODIES)
    camera = make_camera(position=(1000.0, 0.0, 0.0))
    ordered = depth_sorted(state.bodies, camera)
    assert ordered[-1].name == "Neptune"
    assert ordered[0].name == "Sun"


def test_draw_body_blits_visible_and_skips_hidden():
    state = build_scene(DEFAULT_BODIES)
    surface = pygame.Surface((800, 600))
    camera = make_camera()
    sprites = SphereSpriteCache()
    kwargs = dict(
        scene_cfg=SCENE_CFG,
        render_cfg=RENDER_CFG,
        ambient=state.ambient_light(),
        point_light=state.point_light(),
    )
    sun = state.body("Sun")
    assert draw_body(surface, sun, camera, sprites, **kwargs)
    assert tuple(surface.get_at((400, 300)))[:3] == (255, 255, 0)

    earth = state.body("Earth")
    assert draw_body(surface, earth, camera, sprites, **kwargs)

    earth.position[:] = (1200.0, 800.0, 1200.0)
    assert not draw_body(surface, earth, camera, sprites, **kwargs)


def test_hud_text():
    assert "paused" in format_hud(60.0, 2.0, 10.0, True)
    assert "x2" in format_hud(60.0, 2.0, 10.0, False)
