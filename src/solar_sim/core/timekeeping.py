"""Frame timing and simulated time."""
from __future__ import annotations

import time
from dataclasses import dataclass, field

from .config import SCENE_CFG


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class SimulationClock:
    """Accumulates simulated seconds from real frame deltas."""

    time_scale: float = SCENE_CFG.time_scale
    min_scale: float = SCENE_CFG.min_time_scale
    max_scale: float = SCENE_CFG.max_time_scale
    step_factor: float = SCENE_CFG.time_scale_step
    elapsed: float = 0.0
    paused: bool = False

    def __post_init__(self) -> None:
        self.time_scale = self._clamp(self.time_scale)

    def _clamp(self, value: float) -> float:
        return max(self.min_scale, min(self.max_scale, value))

    def advance(self, real_dt: float) -> float:
        """Add ``real_dt`` scaled seconds and return the simulated delta."""

        if self.paused or real_dt <= 0.0:
            return 0.0
        sim_dt = real_dt * self.time_scale
        self.elapsed += sim_dt
        return sim_dt

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def set_time_scale(self, value: float) -> float:
        self.time_scale = self._clamp(value)
        return self.time_scale

    def speed_up(self) -> float:
        return self.set_time_scale(self.time_scale * self.step_factor)

    def slow_down(self) -> float:
        return self.set_time_scale(self.time_scale / self.step_factor)


__all__ = ["FrameTimer", "SimulationClock"]
