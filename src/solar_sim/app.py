# src/solar_sim/app.py
"""
Solar System Orrery
===================

Animated 3D model of the sun and the eight planets. Planets spin and
revolve on circular orbits, names float next to each body and the
camera orbits the sun with the mouse.

Controls: left drag orbit, right drag pan, wheel zoom, space pause,
+/- simulation speed, r reset camera, l labels, h HUD, esc quit.
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

import pygame
from pygame.locals import DOUBLEBUF, RESIZABLE

from solar_sim.core.config import (
    CAMERA_CFG,
    CONTROLS_CFG,
    RENDER_CFG,
    SCENE_CFG,
    CameraCfg,
    ControlsCfg,
    RenderCfg,
    SceneCfg,
)
from solar_sim.core.logging_utils import RunLogger
from solar_sim.core.orbits import update_bodies
from solar_sim.core.scene import build_scene
from solar_sim.core.timekeeping import FrameTimer, SimulationClock
from solar_sim.data.bodies import DEFAULT_BODIES, CelestialBodyConfig, load_catalog
from solar_sim.render import (
    LabelRenderer,
    OrbitControls,
    PerspectiveCamera,
    SphereSpriteCache,
    depth_sorted,
    draw_body,
    draw_hud,
    draw_orbit_ring,
    format_hud,
    load_font,
    update_label_positions,
)

APP_VERSION = "solar-sim 1.0"


class SolarSystemApp:
    """Owns the scene, camera and window; runs the frame loop."""

    def __init__(
        self,
        bodies: Sequence[CelestialBodyConfig] = DEFAULT_BODIES,
        *,
        scene_cfg: SceneCfg = SCENE_CFG,
        render_cfg: RenderCfg = RENDER_CFG,
        camera_cfg: CameraCfg = CAMERA_CFG,
        controls_cfg: ControlsCfg = CONTROLS_CFG,
        logger: RunLogger | None = None,
    ) -> None:
        self.scene_cfg = scene_cfg
        self.render_cfg = render_cfg
        self.state = build_scene(bodies, scene_cfg)
        self.size = (render_cfg.width, render_cfg.height)
        self.camera = PerspectiveCamera.from_config(self.size, camera_cfg)
        self.controls = OrbitControls(self.camera, controls_cfg)
        self.clock = SimulationClock(time_scale=scene_cfg.time_scale)
        self.state.time_scale = self.clock.time_scale
        self.logger = logger
        self.sprites = SphereSpriteCache()
        self.show_labels = True
        self.show_hud = True
        self.running = False
        self.frame_count = 0
        self._screen: pygame.Surface | None = None
        self._ring_layer: pygame.Surface | None = None
        self._label_renderer: LabelRenderer | None = None
        self._hud_font: pygame.font.Font | None = None
        self._pg_clock: pygame.time.Clock | None = None

    # ------------------------------------------------------------------
    # Setup

    def setup(self) -> None:
        pygame.init()
        pygame.display.set_caption("Solar System")
        self._screen = pygame.display.set_mode(self.size, RESIZABLE | DOUBLEBUF)
        self.size = self._screen.get_size()
        self.camera.resize(*self.size)
        self._ring_layer = pygame.Surface(self.size, pygame.SRCALPHA)
        label_font = load_font(
            self.render_cfg.label_font_names, self.render_cfg.label_font_size, bold=True
        )
        self._label_renderer = LabelRenderer(label_font, self.render_cfg)
        self._hud_font = load_font(self.render_cfg.hud_font_names, self.render_cfg.hud_font_size)
        self._pg_clock = pygame.time.Clock()
        self.controls.update()
        if self.logger is not None:
            self.logger.write_meta(self.describe())
            self.logger.log_event(0.0, "start", {"bodies": len(self.state.bodies)})

    def describe(self) -> dict:
        return {
            "code_version": APP_VERSION,
            "window": list(self.size),
            "time_scale": self.clock.time_scale,
            "spin_rate": self.scene_cfg.spin_rate,
            "use_orbit_periods": self.scene_cfg.use_orbit_periods,
            "bodies": [
                {
                    "name": body.name,
                    "radius": body.config.radius,
                    "orbit_radius": body.orbit_radius,
                    "color": list(body.color),
                    "rotation_period": body.config.rotation_period,
                    "orbit_period": body.config.orbit_period,
                    "rotation_speed": body.rotation_speed,
                    "orbit_speed": body.orbit_speed,
                }
                for body in self.state.bodies
            ],
        }

    # ------------------------------------------------------------------
    # Events

    def handle_resize(self, width: int, height: int) -> None:
        width = max(1, int(width))
        height = max(1, int(height))
        self.size = (width, height)
        self.camera.resize(width, height)
        if self._screen is not None:
            self._screen = pygame.display.set_mode(self.size, RESIZABLE | DOUBLEBUF)
            self._ring_layer = pygame.Surface(self.size, pygame.SRCALPHA)
        if self.logger is not None:
            self.logger.log_event(self.clock.elapsed, "resize", {"width": width, "height": height})

    def toggle_pause(self) -> None:
        paused = self.clock.toggle_pause()
        self.state.paused = paused
        if self.logger is not None:
            self.logger.log_event(self.clock.elapsed, "pause", {"paused": paused})

    def change_speed(self, faster: bool) -> None:
        scale = self.clock.speed_up() if faster else self.clock.slow_down()
        self.state.time_scale = scale
        if self.logger is not None:
            self.logger.log_event(self.clock.elapsed, "time_scale", {"value": scale})

    def handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.toggle_pause()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.change_speed(True)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.change_speed(False)
        elif key == pygame.K_r:
            self.controls.reset()
        elif key == pygame.K_l:
            self.show_labels = not self.show_labels
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
            # SDL2 reports one drag as both events; only act on a real change.
            if event.type == pygame.VIDEORESIZE:
                new_size = (event.w, event.h)
            else:
                new_size = (event.x, event.y)
            if new_size != self.size:
                self.handle_resize(*new_size)
        elif event.type == pygame.KEYDOWN:
            self.handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                self.controls.begin_drag(event.pos, "rotate")
            elif event.button == 3:
                self.controls.begin_drag(event.pos, "pan")
        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button in (1, 3):
                self.controls.end_drag()
        elif event.type == pygame.MOUSEMOTION:
            self.controls.drag(event.pos, self.size[1])
        elif event.type == pygame.MOUSEWHEEL:
            self.controls.zoom(event.y)

    # ------------------------------------------------------------------
    # Frame

    def step(self, real_dt: float) -> None:
        """Advance one frame: controls, bodies, then labels."""

        self.controls.update()
        sim_dt = self.clock.advance(real_dt)
        self.state.elapsed = self.clock.elapsed
        update_bodies(self.state.bodies, self.clock.elapsed, sim_dt, self.scene_cfg)
        update_label_positions(self.state.labels, self.state.bodies, self.camera, self.size)
        if self.logger is not None:
            self.logger.log_frame(self.clock.elapsed, self.state.bodies)
        self.frame_count += 1

    def render(self) -> None:
        screen = self._screen
        if screen is None:
            raise RuntimeError("setup() must be called before render()")
        screen.fill(self.render_cfg.background_color)

        ring_layer = self._ring_layer
        assert ring_layer is not None
        ring_layer.fill((0, 0, 0, 0))
        ring_color = (*self.scene_cfg.ring_color, int(255 * self.scene_cfg.ring_opacity))
        for ring in self.state.rings:
            draw_orbit_ring(
                ring_layer,
                ring,
                self.camera,
                color=ring_color,
                width=self.render_cfg.ring_line_width,
            )
        screen.blit(ring_layer, (0, 0))

        ambient = self.state.ambient_light()
        point_light = self.state.point_light()
        for body in depth_sorted(self.state.bodies, self.camera):
            draw_body(
                screen,
                body,
                self.camera,
                self.sprites,
                scene_cfg=self.scene_cfg,
                render_cfg=self.render_cfg,
                ambient=ambient,
                point_light=point_light,
            )

        if self.show_labels and self._label_renderer is not None:
            self._label_renderer.draw(screen, self.state.labels)

        if self.show_hud and self._hud_font is not None and self._pg_clock is not None:
            text = format_hud(
                self._pg_clock.get_fps(),
                self.clock.time_scale,
                self.clock.elapsed,
                self.clock.paused,
            )
            draw_hud(
                screen,
                self._hud_font,
                text,
                color=self.render_cfg.hud_text_color,
                alpha=self.render_cfg.hud_alpha,
                margin=self.render_cfg.hud_margin,
            )
        pygame.display.flip()

    def run(self, max_frames: int | None = None) -> int:
        if self._screen is None:
            self.setup()
        assert self._pg_clock is not None
        timer = FrameTimer()
        self.running = True
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            if not self.running:
                break
            self.step(timer.tick())
            self.render()
            self._pg_clock.tick(self.render_cfg.target_fps)
            if max_frames is not None and self.frame_count >= max_frames:
                self.running = False
        if self.logger is not None:
            self.logger.log_event(self.clock.elapsed, "quit", {"frames": self.frame_count})
        return self.frame_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animated 3D solar system.")
    parser.add_argument("--width", type=int, default=RENDER_CFG.width, help="Window width in pixels.")
    parser.add_argument("--height", type=int, default=RENDER_CFG.height, help="Window height in pixels.")
    parser.add_argument("--fps", type=int, default=RENDER_CFG.target_fps, help="Frame rate cap.")
    parser.add_argument(
        "--time-scale",
        type=float,
        default=SCENE_CFG.time_scale,
        help="Simulated seconds per real second.",
    )
    parser.add_argument(
        "--real-periods",
        action="store_true",
        help="Use catalog orbit periods instead of 1/sqrt(orbit radius).",
    )
    parser.add_argument("--catalog", type=Path, help="JSON file with body definitions.")
    parser.add_argument("--log", action="store_true", help="Record body positions to a run folder.")
    parser.add_argument("--log-dir", type=Path, default=Path("data/runs"), help="Root folder for runs.")
    parser.add_argument(
        "--log-every",
        type=int,
        default=10,
        help="Record every n-th frame when logging.",
    )
    parser.add_argument("--frames", type=int, help="Quit after this many frames.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width <= 0 or args.height <= 0:
        parser.error("Window size must be positive")
    if args.fps <= 0:
        parser.error("--fps must be positive")
    if args.frames is not None and args.frames <= 0:
        parser.error("--frames must be positive")

    bodies: Sequence[CelestialBodyConfig] = DEFAULT_BODIES
    if args.catalog is not None:
        try:
            bodies = load_catalog(args.catalog)
        except (OSError, ValueError) as exc:
            parser.error(f"Could not load catalog {args.catalog}: {exc}")

    scene_cfg = replace(SCENE_CFG, time_scale=args.time_scale, use_orbit_periods=args.real_periods)
    render_cfg = replace(RENDER_CFG, width=args.width, height=args.height, target_fps=args.fps)

    logger = RunLogger(args.log_dir, sample_every_frames=args.log_every) if args.log else None
    try:
        app = SolarSystemApp(bodies, scene_cfg=scene_cfg, render_cfg=render_cfg, logger=logger)
        print(f"Solar system started with {len(app.state.bodies)} bodies")
        if logger is not None:
            print(f"Logging run to {logger.run_dir}")
        frames = app.run(args.frames)
    finally:
        if logger is not None:
            logger.close()
        pygame.quit()
    print(f"Closed after {frames} frames")
    return 0


if __name__ == "__main__":
    sys.exit(main())
