"""Data models for the orrery runtime state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from solar_sim.data.bodies import CelestialBodyConfig, Color, check_unique_names

from .config import SCENE_CFG, SceneCfg
from .orbits import orbit_speed, orbital_position, rotation_speed


@dataclass
class CelestialBodyRuntime:
    """Mutable per-frame state derived from a :class:`CelestialBodyConfig`."""

    config: CelestialBodyConfig
    orbit_radius: float
    rotation_speed: float
    orbit_speed: float
    position: np.ndarray = field(
        default_factory=lambda: np.zeros(3, dtype=float)
    )
    rotation: float = 0.0
    orbit_angle: float = 0.0

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def color(self) -> Color:
        return self.config.color

    @classmethod
    def from_config(
        cls, config: CelestialBodyConfig, cfg: SceneCfg = SCENE_CFG
    ) -> "CelestialBodyRuntime":
        return cls(
            config=config,
            orbit_radius=config.orbit_radius,
            rotation_speed=rotation_speed(config.rotation_period),
            orbit_speed=orbit_speed(config.orbit_radius, config.orbit_period, cfg),
            position=orbital_position(0.0, config.orbit_radius),
        )


@dataclass
class Label:
    """Screen-space text overlay bound to one body."""

    text: str
    body_name: str
    position: tuple[float, float] = (0.0, 0.0)
    visible: bool = True


@dataclass
class OrbitRing:
    radius: float
    points: np.ndarray


@dataclass(frozen=True)
class Light:
    kind: str
    color: tuple[int, int, int]
    intensity: float = 1.0
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class SolarSystemState:
    """Everything the frame callback and the resize handler touch."""

    bodies: list[CelestialBodyRuntime]
    labels: list[Label]
    rings: list[OrbitRing] = field(default_factory=list)
    lights: list[Light] = field(default_factory=list)
    elapsed: float = 0.0
    time_scale: float = 1.0
    paused: bool = False

    def body(self, name: str) -> CelestialBodyRuntime:
        for body in self.bodies:
            if body.name == name:
                return body
        raise KeyError(name)

    def ambient_light(self) -> Light | None:
        return next((light for light in self.lights if light.kind == "ambient"), None)

    def point_light(self) -> Light | None:
        return next((light for light in self.lights if light.kind == "point"), None)


def build_runtime(
    configs: Iterable[CelestialBodyConfig], cfg: SceneCfg = SCENE_CFG
) -> list[CelestialBodyRuntime]:
    configs = list(configs)
    check_unique_names(configs)
    return [CelestialBodyRuntime.from_config(config, cfg) for config in configs]


def build_labels(bodies: Iterable[CelestialBodyRuntime]) -> list[Label]:
    return [Label(text=body.name, body_name=body.name) for body in bodies]


__all__ = [
    "CelestialBodyRuntime",
    "Label",
    "Light",
    "OrbitRing",
    "SolarSystemState",
    "build_labels",
    "build_runtime",
]
