from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import SphereSpriteCache, make_sprite, shade_sphere
from .camera import PerspectiveCamera, ndc_to_screen, pixel_radius

if TYPE_CHECKING:  # pragma: no cover
    from solar_sim.core.config import RenderCfg, SceneCfg
    from solar_sim.core.model import CelestialBodyRuntime, Light, OrbitRing


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def project_to_screen(
    camera: PerspectiveCamera,
    points: np.ndarray,
    size: tuple[int, int],
) -> tuple[list[tuple[float, float]], np.ndarray]:
    width, height = size
    ndc, w = camera.project_many(points)
    screen = [ndc_to_screen(p, width, height) for p in ndc]
    return screen, w > camera.near


def draw_orbit_ring(
    surface: pygame.Surface,
    ring: OrbitRing,
    camera: PerspectiveCamera,
    *,
    color: tuple[int, int, int, int],
    width: int = 1,
) -> int:
    """Draw a closed ring; returns the number of segments drawn."""

    screen, in_front = project_to_screen(camera, ring.points, surface.get_size())
    count = len(screen)
    drawn = 0
    for i in range(count):
        j = (i + 1) % count
        if not (in_front[i] and in_front[j]):
            continue
        start = (int(screen[i][0]), int(screen[i][1]))
        end = (int(screen[j][0]), int(screen[j][1]))
        pygame.draw.line(surface, color, start, end, width)
        drawn += 1
    return drawn


def depth_sorted(
    bodies: Sequence[CelestialBodyRuntime], camera: PerspectiveCamera
) -> list[CelestialBodyRuntime]:
    """Bodies ordered far to near for painter's-style drawing."""

    return sorted(bodies, key=lambda body: float(camera.to_view(body.position)[2]))


def light_direction(
    camera: PerspectiveCamera, body_position: np.ndarray, light: Light
) -> np.ndarray:
    view = camera.view_matrix()[:3, :3]
    return view @ (np.asarray(light.position, dtype=float) - body_position)


def draw_body(
    surface: pygame.Surface,
    body: CelestialBodyRuntime,
    camera: PerspectiveCamera,
    sprites: SphereSpriteCache,
    *,
    scene_cfg: SceneCfg,
    render_cfg: RenderCfg,
    ambient: Light | None,
    point_light: Light | None,
) -> bool:
    width, height = surface.get_size()
    if body.config.is_central:
        radius = body.config.radius
    else:
        radius = body.config.radius * scene_cfg.planet_radius_scale
    radius_px = pixel_radius(camera, body.position, radius, height)
    if radius_px <= 0.0:
        return False
    radius_px = int(
        round(
            _clamp(
                radius_px,
                render_cfg.min_body_pixel_radius,
                render_cfg.max_body_pixel_radius,
            )
        )
    )
    center = ndc_to_screen(camera.project(body.position), width, height)
    if (
        center[0] + radius_px < 0
        or center[0] - radius_px > width
        or center[1] + radius_px < 0
        or center[1] - radius_px > height
    ):
        return False

    grid = sprites.get_grid(radius_px)
    if body.config.is_central or point_light is None:
        rgb = shade_sphere(grid, body.color, light_dir=None)
    else:
        rgb = shade_sphere(
            grid,
            body.color,
            light_dir=light_direction(camera, body.position, point_light),
            ambient=ambient.color if ambient is not None else (0, 0, 0),
            light_color=point_light.color,
            light_intensity=point_light.intensity,
            emissive=scene_cfg.planet_emissive_intensity,
            rotation=body.rotation,
            band_count=scene_cfg.planet_band_count,
            band_contrast=scene_cfg.planet_band_contrast,
        )
    sprite = make_sprite(grid, rgb)
    rect = sprite.get_rect(center=(int(center[0]), int(center[1])))
    surface.blit(sprite, rect)
    return True
