"""Rendering helpers for the orrery."""

from .camera import OrbitControls, PerspectiveCamera, ndc_to_screen, pixel_radius
from .assets import (
    SphereSpriteCache,
    get_text_surface,
    load_font,
    make_sprite,
    shade_sphere,
)
from .draw import (
    depth_sorted,
    draw_body,
    draw_orbit_ring,
)
from .labels import LabelRenderer, update_label_positions
from .ui import (
    build_label_panel,
    draw_hud,
    format_hud,
)

__all__ = [
    "LabelRenderer",
    "OrbitControls",
    "PerspectiveCamera",
    "SphereSpriteCache",
    "build_label_panel",
    "depth_sorted",
    "draw_body",
    "draw_hud",
    "draw_orbit_ring",
    "format_hud",
    "get_text_surface",
    "load_font",
    "make_sprite",
    "ndc_to_screen",
    "pixel_radius",
    "shade_sphere",
    "update_label_positions",
]
