"""Screen-space name labels that follow the bodies."""
from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import pygame

from .camera import PerspectiveCamera, ndc_to_screen
from .ui import build_label_panel

if TYPE_CHECKING:  # pragma: no cover
    from solar_sim.core.config import RenderCfg
    from solar_sim.core.model import CelestialBodyRuntime, Label


def update_label_positions(
    labels: Sequence[Label],
    bodies: Sequence[CelestialBodyRuntime],
    camera: PerspectiveCamera,
    size: tuple[int, int],
) -> None:
    """Move each label to its body's projected pixel position.

    Labels are never hidden by depth, a body behind the camera keeps a
    (mirrored) label on screen.
    """

    if len(labels) != len(bodies):
        raise ValueError("Every body needs exactly one label")
    width, height = size
    for label, body in zip(labels, bodies):
        label.position = ndc_to_screen(camera.project(body.position), width, height)
        label.visible = True


class LabelRenderer:
    """Renders each label text once and blits it centred every frame."""

    def __init__(self, font: pygame.font.Font, render_cfg: RenderCfg) -> None:
        self._font = font
        self._cfg = render_cfg
        self._panels: dict[str, pygame.Surface] = {}

    def panel_for(self, text: str) -> pygame.Surface:
        panel = self._panels.get(text)
        if panel is None:
            panel = build_label_panel(
                self._font,
                text,
                self._cfg.label_text_color,
                background_color=self._cfg.label_background_color,
                padding=self._cfg.label_padding,
                border_radius=self._cfg.label_radius,
            )
            self._panels[text] = panel
        return panel

    def draw(self, surface: pygame.Surface, labels: Sequence[Label]) -> int:
        drawn = 0
        for label in labels:
            if not label.visible:
                continue
            panel = self.panel_for(label.text)
            x, y = label.position
            surface.blit(panel, panel.get_rect(center=(int(x), int(y))))
            drawn += 1
        return drawn
