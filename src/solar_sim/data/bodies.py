"""Catalog of celestial bodies shown in the orrery."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence


Color = tuple[int, int, int]


@dataclass(frozen=True)
class CelestialBodyConfig:
    """Static constants for one body.

    ``radius`` and ``orbit_radius`` are scene units (sun radius = 30),
    ``rotation_period`` is the simulated time for one spin and
    ``orbit_period`` (Earth days) is optional.
    """

    name: str
    radius: float
    orbit_radius: float
    rotation_period: float
    color: Color
    orbit_period: float | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Body name must not be empty")
        if not self.radius > 0.0:
            raise ValueError(f"{self.name}: radius must be positive")
        if not self.orbit_radius >= 0.0:
            raise ValueError(f"{self.name}: orbit radius must not be negative")
        if not self.rotation_period > 0.0:
            raise ValueError(f"{self.name}: rotation period must be positive")
        if self.orbit_period is not None and not self.orbit_period > 0.0:
            raise ValueError(f"{self.name}: orbit period must be positive")

    @property
    def is_central(self) -> bool:
        return self.orbit_radius == 0.0


def parse_color(value: object) -> Color:
    """Convert ``0xRRGGBB``, ``"#RRGGBB"`` or an RGB sequence to a tuple."""

    if isinstance(value, bool):
        raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Color out of range: {value:#x}")
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        if len(text) != 6:
            raise ValueError(f"Invalid color string: {value!r}")
        try:
            return parse_color(int(text, 16))
        except ValueError:
            raise ValueError(f"Invalid color string: {value!r}") from None
    if isinstance(value, Sequence) and len(value) == 3:
        if any(isinstance(c, bool) for c in value):
            raise ValueError(f"Invalid color: {value!r}")
        try:
            channels = tuple(int(c) for c in value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid color: {value!r}") from None
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"Color channel out of range: {value!r}")
        return channels  # type: ignore[return-value]
    raise ValueError(f"Invalid color: {value!r}")


SUN = CelestialBodyConfig(
    name="Sun",
    radius=30.0,
    orbit_radius=0.0,
    rotation_period=25.4,
    color=parse_color(0xFFFF00),
)

# Radii are relative to Jupiter and scaled by 10.
PLANET_DEFINITIONS: tuple[CelestialBodyConfig, ...] = (
    CelestialBodyConfig("Mercury", 0.0353 * 10, 80.0, 58.6, parse_color(0xFFD700), 88.0),
    CelestialBodyConfig("Venus", 0.0868 * 10, 120.0, 243.0, parse_color(0xFFA500), 224.7),
    CelestialBodyConfig("Earth", 0.0916 * 10, 160.0, 1.0, parse_color(0x00BFFF), 365.2),
    CelestialBodyConfig("Mars", 0.0488 * 10, 200.0, 1.03, parse_color(0xFF4500), 687.0),
    CelestialBodyConfig("Jupiter", 1.0004 * 10, 280.0, 0.41, parse_color(0xFFA07A), 4331.0),
    CelestialBodyConfig("Saturn", 0.8145 * 10, 360.0, 0.44, parse_color(0xFFE4B5), 10747.0),
    CelestialBodyConfig("Uranus", 0.3560 * 10, 440.0, 0.72, parse_color(0x00CED1), 30589.0),
    CelestialBodyConfig("Neptune", 0.3460 * 10, 520.0, 0.67, parse_color(0x1E90FF), 59800.0),
)

DEFAULT_BODIES: tuple[CelestialBodyConfig, ...] = (SUN, *PLANET_DEFINITIONS)
BODY_NAMES: list[str] = [body.name for body in DEFAULT_BODIES]


def _number(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)  # type: ignore[arg-type]


def _optional_float(entry: dict, key: str) -> float | None:
    value = entry.get(key)
    if value is None:
        return None
    return _number(value)


def body_from_dict(entry: dict) -> CelestialBodyConfig:
    if not isinstance(entry, dict):
        raise ValueError(f"Catalog entry must be an object, got {type(entry).__name__}")
    missing = [key for key in ("name", "radius", "color") if key not in entry]
    if missing:
        raise ValueError(f"Catalog entry is missing {', '.join(missing)}")
    name = entry["name"]
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Catalog entry name must be a non-empty string, got {name!r}")
    try:
        radius = _number(entry["radius"])
        orbit_radius = _number(entry.get("orbit_radius", entry.get("orbitRadius", 0.0)))
        rotation_period = _number(
            entry.get("rotation_period", entry.get("rotationPeriod", 1.0))
        )
        orbit_period = _optional_float(entry, "orbit_period")
        if orbit_period is None:
            orbit_period = _optional_float(entry, "orbitPeriod")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid number in catalog entry {entry.get('name')!r}: {exc}") from exc
    for label, value in (("radius", radius), ("orbit radius", orbit_radius)):
        if not math.isfinite(value):
            raise ValueError(f"{entry['name']}: {label} must be finite")
    return CelestialBodyConfig(
        name=name,
        radius=radius,
        orbit_radius=orbit_radius,
        rotation_period=rotation_period,
        color=parse_color(entry["color"]),
        orbit_period=orbit_period,
    )


def check_unique_names(bodies: Iterable[CelestialBodyConfig]) -> None:
    seen: set[str] = set()
    for body in bodies:
        if body.name in seen:
            raise ValueError(f"Duplicate body name: {body.name}")
        seen.add(body.name)


def load_catalog(path: str | Path) -> tuple[CelestialBodyConfig, ...]:
    """Load body definitions from a JSON file.

    The file holds either a list of body objects or ``{"bodies": [...]}``.
    Keys follow the dataclass field names; camelCase variants
    (``orbitRadius``, ``rotationPeriod``, ``orbitPeriod``) are accepted too.
    """

    with Path(path).open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    entries = raw.get("bodies") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError("Catalog must be a list of bodies or contain a 'bodies' list")
    if not entries:
        raise ValueError("Catalog does not define any bodies")
    bodies = tuple(body_from_dict(entry) for entry in entries)
    check_unique_names(bodies)
    return bodies


__all__ = [
    "BODY_NAMES",
    "CelestialBodyConfig",
    "Color",
    "DEFAULT_BODIES",
    "PLANET_DEFINITIONS",
    "SUN",
    "body_from_dict",
    "check_unique_names",
    "load_catalog",
    "parse_color",
]
