from __future__ import annotations

import pygame

from .assets import Color, get_text_surface


def build_label_panel(
    font: pygame.font.Font,
    text: str,
    color: Color,
    *,
    background_color: Color,
    padding: tuple[int, int] = (6, 3),
    border_radius: int = 4,
) -> pygame.Surface:
    """One line of text on a rounded, translucent box."""

    if not text:
        raise ValueError("Label text must not be empty")
    padding_x, padding_y = padding
    text_surf = get_text_surface(font, text, color)
    panel_surface = pygame.Surface(
        (text_surf.get_width() + padding_x * 2, text_surf.get_height() + padding_y * 2),
        pygame.SRCALPHA,
    )
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=border_radius,
    )
    panel_surface.blit(text_surf, (padding_x, padding_y))
    return panel_surface


def format_hud(fps: float, time_scale: float, elapsed: float, paused: bool) -> str:
    state = "paused" if paused else f"x{time_scale:g}"
    return f"FPS {fps:4.0f} | t = {elapsed:8.1f} s | speed {state}"


def draw_hud(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    *,
    color: tuple[int, int, int],
    alpha: int,
    margin: int,
) -> None:
    text_surf = get_text_surface(font, text, color)
    if alpha < 255:
        text_surf = text_surf.copy()
        text_surf.set_alpha(alpha)
    surface.blit(text_surf, (margin, margin))
