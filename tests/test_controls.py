import math

import numpy as np
import pytest

from solar_sim.core.config import ControlsCfg
from solar_sim.render.camera import OrbitControls, PerspectiveCamera, Spherical


def make_controls(**overrides):
    camera = PerspectiveCamera(aspect=800 / 600)
    camera.position[:] = (600.0, 400.0, 600.0)
    camera.look_at((0.0, 0.0, 0.0))
    return OrbitControls(camera, ControlsCfg(**overrides))


def test_update_without_input_keeps_camera_still():
    controls = make_controls()
    before = controls.camera.position.copy()
    controls.update()
    assert np.allclose(controls.camera.position, before)


def test_spherical_round_trip():
    offset = np.array([600.0, 400.0, 600.0])
    assert np.allclose(Spherical.from_offset(offset).to_offset(), offset)


def test_zoom_is_clamped_to_distance_limits():
    controls = make_controls()
    controls.zoom(500)
    controls.update()
    assert controls.distance == pytest.approx(100.0)
    controls.zoom(-500)
    controls.update()
    assert controls.distance == pytest.approx(2000.0)


def test_single_wheel_step_dollies_in():
    controls = make_controls()
    start = controls.distance
    controls.zoom(1)
    controls.update()
    assert controls.distance == pytest.approx(start * 0.95)


def test_rotation_is_damped_and_keeps_distance():
    controls = make_controls()
    start_distance = controls.distance
    start_theta = Spherical.from_offset(controls.camera.position).theta
    controls.rotate(80.0, 0.0, 600)
    controls.update()
    first = Spherical.from_offset(controls.camera.position).theta
    expected_first = start_theta - 2 * math.pi * 80.0 / 600 * 0.05
    assert first == pytest.approx(expected_first)
    for _ in range(200):
        controls.update()
    assert controls.distance == pytest.approx(start_distance)
    moved = Spherical.from_offset(controls.camera.position).theta - start_theta
    assert abs(moved) > abs(first - start_theta)


def test_without_damping_rotation_applies_at_once():
    controls = make_controls(enable_damping=False)
    start = Spherical.from_offset(controls.camera.position).theta
    controls.rotate(60.0, 0.0, 600)
    controls.update()
    after = Spherical.from_offset(controls.camera.position).theta
    assert after - start == pytest.approx(-2 * math.pi * 60.0 / 600)
    controls.update()
    assert Spherical.from_offset(controls.camera.position).theta == pytest.approx(after)


def test_polar_angle_never_reaches_the_pole():
    controls = make_controls(enable_damping=False)
    controls.rotate(0.0, 100000.0, 600)
    controls.update()
    phi = Spherical.from_offset(controls.camera.position).phi
    assert 0.0 < phi < math.pi
    assert np.all(np.isfinite(controls.camera.view_matrix()))


def test_drag_rotates_and_stops_after_release():
    controls = make_controls(enable_damping=False)
    start = controls.camera.position.copy()
    controls.begin_drag((100, 100))
    assert controls.is_dragging
    controls.drag((140, 100), 600)
    controls.end_drag()
    controls.drag((400, 100), 600)
    controls.update()
    assert not controls.is_dragging
    assert not np.allclose(controls.camera.position, start)
    assert controls.distance == pytest.approx(np.linalg.norm(start))


def test_pan_moves_target_in_ground_plane():
    controls = make_controls(enable_damping=False)
    controls.begin_drag((0, 0), "pan")
    controls.drag((50, 30), 600)
    controls.update()
    assert controls.camera.target[1] == pytest.approx(0.0, abs=1e-9)
    assert not np.allclose(controls.camera.target, 0.0)


def test_reset_restores_home_view():
    controls = make_controls(enable_damping=False)
    controls.rotate(100.0, 50.0, 600)
    controls.zoom(5)
    controls.update()
    controls.reset()
    assert list(controls.camera.position) == [600.0, 400.0, 600.0]
    assert list(controls.camera.target) == [0.0, 0.0, 0.0]
