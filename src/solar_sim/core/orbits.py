"""Kinematics helpers for circular orbits and body spin."""
from __future__ import annotations

import math
from typing import Iterable, TYPE_CHECKING

import numpy as np

from .config import SCENE_CFG, SceneCfg

if TYPE_CHECKING:  # pragma: no cover
    from .model import CelestialBodyRuntime


def rotation_speed(rotation_period: float) -> float:
    """Spin speed used for a body, the inverse of its rotation period."""

    if rotation_period <= 0.0:
        raise ValueError("Rotation period must be positive")
    return 1.0 / rotation_period


def orbit_speed(
    orbit_radius: float,
    orbit_period: float | None = None,
    cfg: SceneCfg = SCENE_CFG,
) -> float:
    """Angular speed (rad per simulated second) of a body on its orbit.

    Defaults to ``1 / sqrt(orbit_radius)`` so outer planets move slower.
    Bodies at the centre do not orbit. With ``cfg.use_orbit_periods`` and a
    known period in Earth days the speed follows that period instead.
    """

    if orbit_radius <= 0.0:
        return 0.0
    if cfg.use_orbit_periods and orbit_period:
        return 2.0 * math.pi * cfg.orbit_period_days_per_second / orbit_period
    return 1.0 / math.sqrt(orbit_radius)


def orbit_angle(elapsed: float, angular_speed: float) -> float:
    return elapsed * angular_speed


def orbital_position(angle: float, orbit_radius: float) -> np.ndarray:
    """Point on the circular orbit in the XZ plane for ``angle``."""

    return np.array(
        [math.cos(angle) * orbit_radius, 0.0, math.sin(angle) * orbit_radius],
        dtype=float,
    )


def advance_rotation(
    angle: float,
    speed: float,
    dt: float,
    spin_rate: float = SCENE_CFG.spin_rate,
) -> float:
    """Spin ``angle`` forward by ``dt`` seconds at ``speed``."""

    if dt <= 0.0:
        return angle
    return angle + spin_rate * speed * dt


def update_body(
    body: CelestialBodyRuntime,
    elapsed: float,
    dt: float,
    cfg: SceneCfg = SCENE_CFG,
) -> None:
    body.orbit_angle = orbit_angle(elapsed, body.orbit_speed)
    body.position[:] = orbital_position(body.orbit_angle, body.orbit_radius)
    body.rotation = advance_rotation(body.rotation, body.rotation_speed, dt, cfg.spin_rate)


def update_bodies(
    bodies: Iterable[CelestialBodyRuntime],
    elapsed: float,
    dt: float,
    cfg: SceneCfg = SCENE_CFG,
) -> None:
    """Advance every body to ``elapsed`` simulated seconds."""

    for body in bodies:
        update_body(body, elapsed, dt, cfg)


def ring_points(orbit_radius: float, segments: int = SCENE_CFG.ring_segments) -> np.ndarray:
    """Sample ``segments`` points on the orbit circle (shape ``(segments, 3)``)."""

    if segments < 3:
        raise ValueError("A ring needs at least three segments")
    theta = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    points = np.zeros((segments, 3), dtype=float)
    points[:, 0] = np.cos(theta) * orbit_radius
    points[:, 2] = np.sin(theta) * orbit_radius
    return points


__all__ = [
    "advance_rotation",
    "orbit_angle",
    "orbit_speed",
    "orbital_position",
    "ring_points",
    "rotation_speed",
    "update_bodies",
    "update_body",
]
