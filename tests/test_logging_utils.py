import csv
import json
from datetime import datetime

import pytest

from solar_sim.core import logging_utils
from solar_sim.core.logging_utils import RunLogger, resolve_last_run
from solar_sim.core.model import build_runtime
from solar_sim.core.orbits import update_bodies
from solar_sim.data.bodies import DEFAULT_BODIES


def test_run_logger_samples_frames(tmp_path):
    bodies = build_runtime(DEFAULT_BODIES)
    with RunLogger(tmp_path, run_id="demo", sample_every_frames=2) as logger:
        logger.write_meta({"bodies": len(bodies)})
        sampled = []
        for frame in range(3):
            update_bodies(bodies, elapsed=frame * 0.5, dt=0.5)
            sampled.append(logger.log_frame(frame * 0.5, bodies))
    assert sampled == [True, False, True]

    with logger.timeseries_path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 2 * len(bodies)
    assert list(rows[0].keys()) == RunLogger.TIMESERIES_HEADER
    assert [row["body"] for row in rows[: len(bodies)]] == [body.name for body in DEFAULT_BODIES]
    assert json.loads(logger.meta_path.read_text(encoding="utf-8")) == {"bodies": 9}


def test_events_keep_json_details_intact(tmp_path):
    with RunLogger(tmp_path, run_id="events") as logger:
        logger.log_event(1.5, "resize", {"width": 640, "height": 480})
        logger.log_event(2.0, "pause")
    with logger.events_path.open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[0]["type"] == "resize"
    assert json.loads(rows[0]["details"]) == {"height": 480, "width": 640}
    assert rows[1]["details"] == ""


def test_run_ids_do_not_collide(tmp_path):
    first = RunLogger(tmp_path, run_id="same")
    second = RunLogger(tmp_path, run_id="same")
    first.close()
    second.close()
    second.close()
    assert first.run_dir != second.run_dir
    assert second.run_id == "same_01"
    assert resolve_last_run(tmp_path) == tmp_path / "same_01"


def test_timestamped_run_ids_get_numbered_suffixes(tmp_path, monkeypatch):
    class FrozenDatetime:
        @staticmethod
        def now():
            return datetime(2024, 5, 1, 12, 30, 0)

    monkeypatch.setattr(logging_utils, "datetime", FrozenDatetime)
    ids = []
    for _ in range(3):
        with RunLogger(tmp_path) as logger:
            ids.append(logger.run_id)
    assert ids == ["20240501_123000_run", "20240501_123000_run_01", "20240501_123000_run_02"]


@pytest.mark.parametrize("run_id", ["../escape", "nested/run", ".."])
def test_run_id_must_be_a_folder_name(tmp_path, run_id):
    with pytest.raises(ValueError):
        RunLogger(tmp_path / "runs", run_id=run_id)
    assert not (tmp_path / "escape").exists()


def test_resolve_last_run_without_marker(tmp_path):
    assert resolve_last_run(tmp_path / "missing") is None
