from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]


@dataclass(frozen=True)
class SphereGrid:
    """Per-pixel unit normals of a sphere seen head-on, indexed ``[x, y]``."""

    radius: int
    mask: np.ndarray
    nx: np.ndarray
    ny: np.ndarray
    nz: np.ndarray

    @property
    def diameter(self) -> int:
        return self.radius * 2


def precompute_sphere_grid(radius: int) -> SphereGrid:
    if radius <= 0:
        raise ValueError("Sphere radius must be positive")
    coords = np.arange(radius * 2, dtype=float) - radius + 0.5
    x = coords[:, None]
    y = coords[None, :]
    mask = x**2 + y**2 <= radius**2
    nx = np.broadcast_to(x / radius, mask.shape)
    # Screen y grows downwards, view space y grows upwards.
    ny = np.broadcast_to(-y / radius, mask.shape)
    nz = np.sqrt(np.maximum(1.0 - nx**2 - ny**2, 0.0))
    return SphereGrid(radius=radius, mask=mask, nx=nx, ny=ny, nz=nz)


class SphereSpriteCache:
    """Cache of sphere grids keyed by pixel radius."""

    def __init__(self, max_entries: int = 64) -> None:
        self._grids: OrderedDict[int, SphereGrid] = OrderedDict()
        self._max_entries = max(1, max_entries)

    def __len__(self) -> int:
        return len(self._grids)

    def get_grid(self, radius: int) -> SphereGrid:
        cached = self._grids.get(radius)
        if cached is not None:
            self._grids.move_to_end(radius)
            return cached
        grid = precompute_sphere_grid(radius)
        self._grids[radius] = grid
        if len(self._grids) > self._max_entries:
            self._grids.popitem(last=False)
        return grid


def shade_sphere(
    grid: SphereGrid,
    color: tuple[int, int, int],
    *,
    light_dir: np.ndarray | None,
    ambient: tuple[int, int, int] = (0x40, 0x40, 0x40),
    light_color: tuple[int, int, int] = (255, 255, 255),
    light_intensity: float = 2.0,
    emissive: float = 0.2,
    rotation: float = 0.0,
    band_count: int = 6,
    band_contrast: float = 0.12,
) -> np.ndarray:
    """Return an ``(d, d, 3)`` uint8 array with a lit sphere.

    ``light_dir`` is the view-space direction from the sphere towards the
    light; ``None`` renders an unlit sphere in its flat colour.
    """

    base = np.asarray(color, dtype=float) / 255.0
    if light_dir is None:
        rgb = np.broadcast_to(base, grid.mask.shape + (3,)).copy()
    else:
        light = np.asarray(light_dir, dtype=float)
        norm = float(np.linalg.norm(light))
        if norm > 0.0:
            light = light / norm
        diffuse = np.maximum(grid.nx * light[0] + grid.ny * light[1] + grid.nz * light[2], 0.0)
        light_rgb = np.asarray(light_color, dtype=float) / 255.0 * light_intensity
        ambient_rgb = np.asarray(ambient, dtype=float) / 255.0
        shade = ambient_rgb + emissive + diffuse[..., None] * light_rgb
        longitude = np.arctan2(grid.nx, grid.nz) + rotation
        bands = 1.0 - band_contrast * 0.5 * (1.0 + np.cos(band_count * longitude))
        rgb = base * shade * bands[..., None]
    rgb = np.clip(rgb, 0.0, 1.0) * 255.0
    rgb[~grid.mask] = 0.0
    return rgb.astype(np.uint8)


def make_sprite(grid: SphereGrid, rgb: np.ndarray) -> pygame.Surface:
    """Wrap a shaded array in a surface whose alpha is the sphere mask."""

    sprite = pygame.Surface((grid.diameter, grid.diameter), pygame.SRCALPHA)
    sprite.blit(pygame.surfarray.make_surface(rgb), (0, 0))
    alpha = pygame.surfarray.pixels_alpha(sprite)
    alpha[:] = np.where(grid.mask, 255, 0).astype(np.uint8)
    del alpha
    return sprite


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    fallback = names[0] if names else None
    return pygame.font.SysFont(fallback, size, bold=bold)
