import pytest

from solar_sim.core.model import build_labels, build_runtime
from solar_sim.core.scene import build_scene
from solar_sim.data.bodies import DEFAULT_BODIES, PLANET_DEFINITIONS, SUN


def test_one_runtime_record_and_one_label_per_body():
    state = build_scene(DEFAULT_BODIES)
    names = [body.name for body in DEFAULT_BODIES]
    assert [body.name for body in state.bodies] == names
    assert [label.text for label in state.labels] == names
    assert [label.body_name for label in state.labels] == names
    assert len(set(names)) == len(state.bodies) == len(state.labels)


def test_runtime_derivation():
    bodies = build_runtime(DEFAULT_BODIES)
    jupiter = next(body for body in bodies if body.name == "Jupiter")
    assert jupiter.orbit_radius == 280.0
    assert jupiter.rotation_speed == pytest.approx(1 / 0.41)
    assert jupiter.orbit_speed == pytest.approx(280.0 ** -0.5)
    assert list(jupiter.position) == [280.0, 0.0, 0.0]
    assert jupiter.rotation == 0.0


def test_duplicate_bodies_are_rejected():
    with pytest.raises(ValueError):
        build_runtime([SUN, SUN])


def test_rings_and_lights():
    state = build_scene(DEFAULT_BODIES)
    assert [ring.radius for ring in state.rings] == [p.orbit_radius for p in PLANET_DEFINITIONS]
    assert all(ring.points.shape == (128, 3) for ring in state.rings)
    ambient = state.ambient_light()
    point = state.point_light()
    assert ambient is not None and ambient.color == (0x40, 0x40, 0x40)
    assert point is not None and point.intensity == 2.0
    assert point.position == (0.0, 0.0, 0.0)


def test_lookup_by_name():
    state = build_scene(DEFAULT_BODIES)
    assert state.body("Earth").orbit_radius == 160.0
    with pytest.raises(KeyError):
        state.body("Pluto")


def test_empty_scene_is_rejected():
    with pytest.raises(ValueError):
        build_scene([])


def test_labels_follow_body_order():
    bodies = build_runtime(PLANET_DEFINITIONS)
    labels = build_labels(bodies)
    assert [label.text for label in labels] == [body.name for body in bodies]
