"""Analyze a recorded orrery run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from solar_sim.core.logging_utils import (
    EVENTS_FILENAME,
    META_FILENAME,
    TIMESERIES_FILENAME,
    resolve_last_run,
)


FIGS_SUBDIR = "figs"
RADIUS_REL_TOL = 1e-6


def load_timeseries(path: Path) -> Dict[str, Dict[str, np.ndarray]]:
    """Read ``timeseries.csv`` grouped by body name."""

    columns: Dict[str, Dict[str, List[float]]] = {}
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            body = row["body"]
            series = columns.setdefault(body, {})
            for key, value in row.items():
                if key is None or key == "body":
                    continue
                series.setdefault(key, []).append(float(value))
    return {
        body: {key: np.asarray(values) for key, values in series.items()}
        for body, series in columns.items()
    }


def load_events(path: Path) -> List[dict]:
    events: List[dict] = []
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            if not row:
                continue
            event = {"t": float(row["t"]), "type": row["type"]}
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def orbit_radius_lookup(meta: dict) -> Dict[str, float]:
    return {body["name"]: float(body["orbit_radius"]) for body in meta.get("bodies", [])}


def max_radius_error(ts: Dict[str, Dict[str, np.ndarray]], radii: Dict[str, float]) -> Dict[str, float]:
    """Largest deviation of ``sqrt(x² + z²)`` from the configured orbit radius."""

    errors: Dict[str, float] = {}
    for body, series in ts.items():
        if body not in radii or series["x"].size == 0:
            continue
        r = np.hypot(series["x"], series["z"])
        errors[body] = float(np.max(np.abs(r - radii[body])))
    return errors


def count_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {}
    for event in events:
        summary[event["type"]] = summary.get(event["type"], 0) + 1
    return summary


def plot_orbits(fig_dir: Path, ts: Dict[str, Dict[str, np.ndarray]], colors: Dict[str, str]) -> Path:
    fig, ax = plt.subplots(figsize=(7, 7))
    fig.patch.set_facecolor("black")
    ax.set_facecolor("black")
    for body, series in ts.items():
        color = colors.get(body, "#ffffff")
        if np.allclose(series["x"], 0.0) and np.allclose(series["z"], 0.0):
            ax.scatter([0.0], [0.0], color=color, s=80, label=body)
            continue
        ax.plot(series["x"], series["z"], color=color, lw=1.2, label=body)
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x", color="white")
    ax.set_ylabel("z", color="white")
    ax.tick_params(colors="white")
    ax.set_title("Orbits (x–z)", color="white")
    ax.legend(loc="upper right", fontsize=8)
    fig.tight_layout()
    out = fig_dir / "orbits_xz.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def plot_radius_check(
    fig_dir: Path,
    ts: Dict[str, Dict[str, np.ndarray]],
    radii: Dict[str, float],
    colors: Dict[str, str],
) -> Path:
    fig, ax = plt.subplots(figsize=(8, 4))
    for body, series in ts.items():
        if body not in radii:
            continue
        r = np.hypot(series["x"], series["z"])
        ax.plot(series["t"], r - radii[body], color=colors.get(body, "#333333"), label=body)
    ax.set_xlabel("t [s]")
    ax.set_ylabel("r - orbit radius")
    ax.set_title("Distance from orbit circle")
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=8)
    fig.tight_layout()
    out = fig_dir / "radius_check.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def body_colors(meta: dict) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    for body in meta.get("bodies", []):
        rgb = body.get("color")
        if rgb and len(rgb) == 3:
            colors[body["name"]] = "#{:02x}{:02x}{:02x}".format(*rgb)
    return colors


def print_summary(
    run_path: Path,
    meta: dict,
    errors: Dict[str, float],
    radii: Dict[str, float],
    events: Dict[str, int],
) -> None:
    print(f"Run: {run_path}")
    print(f"Version: {meta.get('code_version', 'unknown')}")
    print(f"Bodies: {len(meta.get('bodies', []))}")
    for body, error in errors.items():
        status = "ok" if error <= RADIUS_REL_TOL * max(1.0, radii[body]) else "OFF ORBIT"
        print(f"  {body:<10} max |r - R| = {error:.3e}  {status}")
    if events:
        print("Events: " + ", ".join(f"{key}={value}" for key, value in sorted(events.items())))


def analyze(run_path: Path) -> Dict[str, float]:
    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME
    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        raise FileNotFoundError(f"Run folder {run_path} is missing meta/timeseries/events files")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)
    ts = load_timeseries(ts_path)
    if not ts:
        raise ValueError("timeseries.csv is empty")
    events = load_events(ev_path)

    radii = orbit_radius_lookup(meta)
    colors = body_colors(meta)
    fig_dir = ensure_fig_dir(run_path)
    plot_orbits(fig_dir, ts, colors)
    plot_radius_check(fig_dir, ts, radii, colors)

    errors = max_radius_error(ts, radii)
    print_summary(run_path, meta, errors, radii, count_events(events))
    return errors


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Plot a recorded orrery run.")
    parser.add_argument("run_dir", nargs="?", type=Path, help="Run folder (defaults to the last run).")
    parser.add_argument("--runs-root", type=Path, default=Path("data/runs"))
    args = parser.parse_args(argv)

    run_path = args.run_dir or resolve_last_run(args.runs_root)
    if run_path is None:
        parser.error(f"No run given and no last run recorded under {args.runs_root}")
    if not run_path.is_dir():
        parser.error(f"Run folder not found: {run_path}")
    try:
        analyze(run_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":
    main()
