"""Scene setup: runtime records, labels, orbit rings and lights."""
from __future__ import annotations

from typing import Iterable

from solar_sim.data.bodies import DEFAULT_BODIES, CelestialBodyConfig

from .config import SCENE_CFG, SceneCfg
from .model import Light, OrbitRing, SolarSystemState, build_labels, build_runtime
from .orbits import ring_points


def build_rings(
    configs: Iterable[CelestialBodyConfig], cfg: SceneCfg = SCENE_CFG
) -> list[OrbitRing]:
    return [
        OrbitRing(radius=config.orbit_radius, points=ring_points(config.orbit_radius, cfg.ring_segments))
        for config in configs
        if config.orbit_radius > 0.0
    ]


def build_lights(cfg: SceneCfg = SCENE_CFG) -> list[Light]:
    return [
        Light(kind="ambient", color=cfg.ambient_color),
        Light(
            kind="point",
            color=cfg.point_light_color,
            intensity=cfg.point_light_intensity,
        ),
    ]


def build_scene(
    configs: Iterable[CelestialBodyConfig] = DEFAULT_BODIES,
    cfg: SceneCfg = SCENE_CFG,
) -> SolarSystemState:
    """Create the full scene once at startup."""

    configs = list(configs)
    if not configs:
        raise ValueError("At least one body is required")
    bodies = build_runtime(configs, cfg)
    return SolarSystemState(
        bodies=bodies,
        labels=build_labels(bodies),
        rings=build_rings(configs, cfg),
        lights=build_lights(cfg),
        time_scale=cfg.time_scale,
    )


__all__ = ["build_lights", "build_rings", "build_scene"]
