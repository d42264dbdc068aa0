"""Configuration dataclasses for the solar system orrery."""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class SceneCfg:
    sphere_segments: int = 32
    planet_radius_scale: float = 0.8
    ring_width: float = 0.5
    ring_segments: int = 128
    ring_color: tuple[int, int, int] = (255, 255, 255)
    ring_opacity: float = 0.4
    ambient_color: tuple[int, int, int] = (0x40, 0x40, 0x40)
    point_light_color: tuple[int, int, int] = (255, 255, 255)
    point_light_intensity: float = 2.0
    planet_emissive_intensity: float = 0.2
    planet_band_count: int = 6
    planet_band_contrast: float = 0.12
    # 0.01 rad per frame at 60 Hz
    spin_rate: float = 0.6
    use_orbit_periods: bool = False
    orbit_period_days_per_second: float = 5.0
    time_scale: float = 1.0
    min_time_scale: float = 0.0625
    max_time_scale: float = 64.0
    time_scale_step: float = 2.0


@dataclass(frozen=True)
class CameraCfg:
    fov: float = 75.0
    near: float = 0.1
    far: float = 3000.0
    position: np.ndarray = field(
        default_factory=lambda: np.array([600.0, 400.0, 600.0], dtype=float)
    )
    target: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 0.0, 0.0], dtype=float)
    )


@dataclass(frozen=True)
class ControlsCfg:
    enable_damping: bool = True
    damping_factor: float = 0.05
    screen_space_panning: bool = False
    min_distance: float = 100.0
    max_distance: float = 2000.0
    rotate_speed: float = 1.0
    zoom_speed: float = 1.0
    pan_speed: float = 1.0
    min_polar_angle: float = 1e-6


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1280
    height: int = 800
    background_color: tuple[int, int, int] = (0, 0, 0)
    target_fps: int = 60
    min_body_pixel_radius: int = 2
    max_body_pixel_radius: int = 600
    ring_line_width: int = 1
    label_font_names: tuple[str, ...] = ("arial", "helvetica", "dejavusans")
    label_font_size: int = 16
    label_text_color: tuple[int, int, int] = (255, 255, 255)
    label_background_color: tuple[int, int, int, int] = (0, 0, 0, int(255 * 0.85))
    label_padding: tuple[int, int] = (12, 6)
    label_radius: int = 4
    hud_font_names: tuple[str, ...] = ("consolas", "dejavusansmono", "couriernew")
    hud_font_size: int = 14
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_alpha: int = int(255 * 0.6)
    hud_margin: int = 10


SCENE_CFG = SceneCfg()
CAMERA_CFG = CameraCfg()
CONTROLS_CFG = ControlsCfg()
RENDER_CFG = RenderCfg()


__all__ = [
    "CAMERA_CFG",
    "CONTROLS_CFG",
    "RENDER_CFG",
    "SCENE_CFG",
    "CameraCfg",
    "ControlsCfg",
    "RenderCfg",
    "SceneCfg",
]
