import numpy as np
import pygame
import pytest

from solar_sim.core.config import RENDER_CFG
from solar_sim.core.model import Label
from solar_sim.core.orbits import update_bodies
from solar_sim.core.scene import build_scene
from solar_sim.data.bodies import DEFAULT_BODIES
from solar_sim.render.camera import PerspectiveCamera, ndc_to_screen
from solar_sim.render.labels import LabelRenderer, update_label_positions
from solar_sim.render.ui import build_label_panel


def make_camera(size):
    camera = PerspectiveCamera(aspect=size[0] / size[1])
    camera.position[:] = (600.0, 400.0, 600.0)
    camera.look_at((0.0, 0.0, 0.0))
    return camera


def test_sun_label_sits_at_viewport_centre():
    size = (800, 600)
    state = build_scene(DEFAULT_BODIES)
    update_label_positions(state.labels, state.bodies, make_camera(size), size)
    sun_label = state.labels[0]
    assert sun_label.text == "Sun"
    assert sun_label.position == pytest.approx((400.0, 300.0))


def test_labels_track_projected_body_positions():
    size = (1024, 768)
    camera = make_camera(size)
    state = build_scene(DEFAULT_BODIES)
    update_bodies(state.bodies, elapsed=12.5, dt=0.1)
    update_label_positions(state.labels, state.bodies, camera, size)
    for label, body in zip(state.labels, state.bodies):
        expected = ndc_to_screen(camera.project(body.position), *size)
        assert label.position == pytest.approx(expected)
        assert label.visible


def test_label_count_must_match_bodies():
    state = build_scene(DEFAULT_BODIES)
    with pytest.raises(ValueError):
        update_label_positions(state.labels[:-1], state.bodies, make_camera((10, 10)), (10, 10))


@pytest.fixture
def font():
    pygame.font.init()
    yield pygame.font.Font(None, RENDER_CFG.label_font_size)


def test_label_renderer_builds_each_panel_once(font):
    renderer = LabelRenderer(font, RENDER_CFG)
    first = renderer.panel_for("Earth")
    assert renderer.panel_for("Earth") is first
    assert first.get_width() > 2 * RENDER_CFG.label_padding[0]


def test_label_renderer_centres_panels(font):
    surface = pygame.Surface((200, 100), pygame.SRCALPHA)
    renderer = LabelRenderer(font, RENDER_CFG)
    labels = [Label("Mars", "Mars", (100.0, 50.0)), Label("Hidden", "Hidden", (10.0, 10.0), visible=False)]
    assert renderer.draw(surface, labels) == 1
    # Label background is opaque black at 85 %.
    assert surface.get_at((100, 50)).a > 0
    assert surface.get_at((2, 98)).a == 0


def test_label_panel_wraps_text_with_padding(font):
    text_w, text_h = font.size("Jupiter")
    panel = build_label_panel(
        font, "Jupiter", (255, 255, 255), background_color=(0, 0, 0, 217), padding=(12, 6), border_radius=4
    )
    assert panel.get_size() == (text_w + 24, text_h + 12)
    # Rounded corner stays transparent, the edge midpoint is filled.
    assert panel.get_at((0, 0)).a == 0
    assert panel.get_at((1, panel.get_height() // 2)).a == 217


def test_label_panel_rejects_empty_text(font):
    with pytest.raises(ValueError):
        build_label_panel(font, "", (255, 255, 255), background_color=(0, 0, 0, 217))
