"""Logging helpers scoped to the orrery package."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .model import CelestialBodyRuntime


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
LAST_RUN_FILENAME = "last_run.txt"


class RunLogger:
    """Buffered logger that stores body positions and events to CSV files.

    Parameters
    ----------
    root_dir:
        Root directory where run folders should be created.
    run_id:
        Optional custom run identifier. If omitted a timestamp based
        identifier in the form ``YYYYmmdd_HHMMSS_run`` is used.
    sample_every_frames:
        Only every n-th call to :meth:`log_frame` is written.
    """

    TIMESERIES_HEADER = ["t", "body", "x", "y", "z", "orbit_angle", "rotation"]
    EVENTS_HEADER = ["t", "type", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        sample_every_frames: int = 10,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 20,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        base = run_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_run"
        if base == ".." or Path(base).name != base:
            raise ValueError(f"run_id must be a plain folder name, got {base!r}")
        self.run_id = self._unique_run_id(base)
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / TIMESERIES_FILENAME
        self.events_path = self.run_dir / EVENTS_FILENAME
        self.meta_path = self.run_dir / META_FILENAME

        self._ts_file = self.timeseries_path.open("w", newline="")
        self._ts_file.write(",".join(self.TIMESERIES_HEADER) + "\n")
        self._ev_file = self.events_path.open("w", newline="")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")

        self._ts_buffer: list[str] = []
        self._ev_buffer: list[str] = []
        self._ts_threshold = max(1, timeseries_flush_threshold)
        self._ev_threshold = max(1, events_flush_threshold)
        self._sample_every = max(1, sample_every_frames)
        self._frame_counter = 0
        self._closed = False

        last_run_marker = self.root_dir / LAST_RUN_FILENAME
        last_run_marker.write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_frame(self, t: float, bodies: Iterable[CelestialBodyRuntime]) -> bool:
        """Record every body's state if this frame is sampled."""

        sampled = self._frame_counter % self._sample_every == 0
        self._frame_counter += 1
        if not sampled:
            return False
        for body in bodies:
            x, y, z = body.position
            self.log_ts([t, body.name, x, y, z, body.orbit_angle, body.rotation])
        return True

    def log_ts(self, values: Sequence[object]) -> None:
        self._ts_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ts_buffer) >= self._ts_threshold:
            self._flush_timeseries()

    def log_event(self, t: float, event_type: str, details: object = "") -> None:
        if isinstance(details, dict):
            details = json.dumps(details, sort_keys=True)
        values = [t, event_type, details]
        self._ev_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    def close(self) -> None:
        if self._closed:
            return
        self._flush_timeseries()
        self._flush_events()
        self._ts_file.close()
        self._ev_file.close()
        self._closed = True

    def _unique_run_id(self, base: str) -> str:
        """Return ``base`` or the first free ``base_NN`` under the root."""

        candidate = base
        suffix = 1
        while (self.root_dir / candidate).exists():
            candidate = f"{base}_{suffix:02d}"
            suffix += 1
        return candidate

    def _flush_timeseries(self) -> None:
        if self._ts_buffer:
            self._ts_file.write("\n".join(self._ts_buffer) + "\n")
            self._ts_file.flush()
            self._ts_buffer.clear()

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    @staticmethod
    def _format_value(value: object) -> str:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:.10g}"
        text = str(value)
        if any(ch in text for ch in ',"\n'):
            return '"' + text.replace('"', '""') + '"'
        return text

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


def resolve_last_run(root_dir: str | Path = "data/runs") -> Path | None:
    marker = Path(root_dir) / LAST_RUN_FILENAME
    if not marker.exists():
        return None
    run_id = marker.read_text(encoding="utf-8").strip()
    if not run_id:
        return None
    return Path(root_dir) / run_id


__all__ = [
    "EVENTS_FILENAME",
    "META_FILENAME",
    "RunLogger",
    "TIMESERIES_FILENAME",
    "resolve_last_run",
]
