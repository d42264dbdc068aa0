from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from solar_sim.core.config import CAMERA_CFG, CONTROLS_CFG, CameraCfg, ControlsCfg


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length <= 1e-12:
        return np.zeros_like(vector)
    return vector / length


class PerspectiveCamera:
    """Pinhole camera with a look-at view and an OpenGL style projection."""

    def __init__(
        self,
        fov: float = CAMERA_CFG.fov,
        aspect: float = 1.0,
        near: float = CAMERA_CFG.near,
        far: float = CAMERA_CFG.far,
    ) -> None:
        if near <= 0.0 or far <= near:
            raise ValueError("Camera planes must satisfy 0 < near < far")
        self.fov = fov
        self.aspect = aspect
        self.near = near
        self.far = far
        self.position = np.array([0.0, 0.0, 1.0], dtype=float)
        self.target = np.zeros(3, dtype=float)
        self.up = np.array([0.0, 1.0, 0.0], dtype=float)
        self._projection = np.eye(4)
        self.update_projection_matrix()

    @classmethod
    def from_config(cls, size: tuple[int, int], cfg: CameraCfg = CAMERA_CFG) -> "PerspectiveCamera":
        width, height = size
        camera = cls(cfg.fov, width / height, cfg.near, cfg.far)
        camera.position[:] = cfg.position
        camera.target[:] = cfg.target
        return camera

    def look_at(self, target: tuple[float, float, float] | np.ndarray) -> None:
        self.target[:] = target

    def update_projection_matrix(self) -> None:
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        near, far = self.near, self.far
        self._projection = np.array(
            [
                [f / self.aspect, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (far + near) / (near - far), 2.0 * far * near / (near - far)],
                [0.0, 0.0, -1.0, 0.0],
            ],
            dtype=float,
        )

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Viewport size must be positive")
        self.aspect = width / height
        self.update_projection_matrix()

    def projection_matrix(self) -> np.ndarray:
        return self._projection

    def view_matrix(self) -> np.ndarray:
        z_axis = _normalize(self.position - self.target)
        x_axis = _normalize(np.cross(self.up, z_axis))
        if not x_axis.any():
            # Looking straight along the up vector.
            x_axis = np.array([1.0, 0.0, 0.0])
        y_axis = np.cross(z_axis, x_axis)
        view = np.eye(4)
        view[0, :3] = x_axis
        view[1, :3] = y_axis
        view[2, :3] = z_axis
        view[:3, 3] = -view[:3, :3] @ self.position
        return view

    def to_view(self, point: np.ndarray) -> np.ndarray:
        """Camera-space coordinates; visible points have negative z."""

        homogeneous = np.append(np.asarray(point, dtype=float), 1.0)
        return (self.view_matrix() @ homogeneous)[:3]

    def project_many(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Project ``(n, 3)`` world points to NDC.

        Returns the NDC array and the clip ``w`` per point; ``w <= 0`` means
        the point lies behind the camera.
        """

        points = np.atleast_2d(np.asarray(points, dtype=float))
        homogeneous = np.hstack([points, np.ones((points.shape[0], 1))])
        clip = homogeneous @ (self._projection @ self.view_matrix()).T
        w = clip[:, 3]
        safe_w = np.where(np.abs(w) < 1e-12, 1e-12, w)
        return clip[:, :3] / safe_w[:, None], w

    def project(self, point: np.ndarray) -> np.ndarray:
        ndc, _ = self.project_many(np.asarray(point, dtype=float)[None, :])
        return ndc[0]

    def focal_length_pixels(self, height: int) -> float:
        return (height / 2.0) / math.tan(math.radians(self.fov) / 2.0)


def ndc_to_screen(ndc: np.ndarray | tuple[float, float], width: int, height: int) -> tuple[float, float]:
    """Map normalized device coordinates to pixel coordinates."""

    x = (ndc[0] * 0.5 + 0.5) * width
    y = (-ndc[1] * 0.5 + 0.5) * height
    return float(x), float(y)


def pixel_radius(camera: PerspectiveCamera, point: np.ndarray, radius: float, height: int) -> float:
    """Approximate on-screen radius of a sphere; ``0`` when behind the camera."""

    depth = -float(camera.to_view(point)[2])
    if depth <= camera.near:
        return 0.0
    return radius * camera.focal_length_pixels(height) / depth


@dataclass
class Spherical:
    radius: float
    phi: float
    theta: float

    @classmethod
    def from_offset(cls, offset: np.ndarray) -> "Spherical":
        radius = float(np.linalg.norm(offset))
        if radius == 0.0:
            return cls(0.0, 0.0, 0.0)
        theta = math.atan2(offset[0], offset[2])
        phi = math.acos(_clamp(offset[1] / radius, -1.0, 1.0))
        return cls(radius, phi, theta)

    def to_offset(self) -> np.ndarray:
        sin_phi = math.sin(self.phi)
        return np.array(
            [
                self.radius * sin_phi * math.sin(self.theta),
                self.radius * math.cos(self.phi),
                self.radius * sin_phi * math.cos(self.theta),
            ],
            dtype=float,
        )


class OrbitControls:
    """Orbit, dolly and pan a camera around its target with damping."""

    def __init__(self, camera: PerspectiveCamera, cfg: ControlsCfg = CONTROLS_CFG) -> None:
        self.camera = camera
        self.cfg = cfg
        self.enable_damping = cfg.enable_damping
        self.damping_factor = cfg.damping_factor
        self.min_distance = cfg.min_distance
        self.max_distance = cfg.max_distance
        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0
        self._pan_offset = np.zeros(3, dtype=float)
        self._drag_anchor: tuple[int, int] | None = None
        self._drag_mode: str | None = None
        self._home_position = camera.position.copy()
        self._home_target = camera.target.copy()

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.camera.position - self.camera.target))

    @property
    def is_dragging(self) -> bool:
        return self._drag_anchor is not None

    def rotate(self, dx: float, dy: float, viewport_height: int) -> None:
        """Queue a rotation for a pointer move of ``(dx, dy)`` pixels."""

        height = max(1, viewport_height)
        self._delta_theta -= 2.0 * math.pi * dx / height * self.cfg.rotate_speed
        self._delta_phi -= 2.0 * math.pi * dy / height * self.cfg.rotate_speed

    def zoom(self, steps: float) -> None:
        """Positive steps move the camera closer to the target."""

        if steps == 0:
            return
        dolly = 0.95 ** self.cfg.zoom_speed
        self._scale *= dolly ** steps

    def pan(self, dx: float, dy: float, viewport_height: int) -> None:
        camera = self.camera
        offset = camera.position - camera.target
        target_distance = float(np.linalg.norm(offset)) * math.tan(math.radians(camera.fov) / 2.0)
        height = max(1, viewport_height)
        view = camera.view_matrix()
        right = view[0, :3]
        if self.cfg.screen_space_panning:
            forward_up = view[1, :3]
        else:
            forward_up = np.cross(camera.up, right)
        scale = 2.0 * target_distance / height * self.cfg.pan_speed
        self._pan_offset += -dx * scale * right + dy * scale * forward_up

    def begin_drag(self, position: tuple[int, int], mode: str = "rotate") -> None:
        self._drag_anchor = position
        self._drag_mode = mode

    def drag(self, position: tuple[int, int], viewport_height: int) -> None:
        if self._drag_anchor is None:
            return
        dx = position[0] - self._drag_anchor[0]
        dy = position[1] - self._drag_anchor[1]
        if dx == 0 and dy == 0:
            return
        if self._drag_mode == "pan":
            self.pan(dx, dy, viewport_height)
        else:
            self.rotate(dx, dy, viewport_height)
        self._drag_anchor = position

    def end_drag(self) -> None:
        self._drag_anchor = None
        self._drag_mode = None

    def reset(self) -> None:
        self.camera.position[:] = self._home_position
        self.camera.target[:] = self._home_target
        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0
        self._pan_offset[:] = 0.0

    def update(self) -> None:
        camera = self.camera
        spherical = Spherical.from_offset(camera.position - camera.target)

        factor = self.damping_factor if self.enable_damping else 1.0
        spherical.theta += self._delta_theta * factor
        spherical.phi += self._delta_phi * factor
        eps = self.cfg.min_polar_angle
        spherical.phi = _clamp(spherical.phi, eps, math.pi - eps)
        spherical.radius = _clamp(spherical.radius * self._scale, self.min_distance, self.max_distance)

        camera.target += self._pan_offset * factor
        camera.position[:] = camera.target + spherical.to_offset()

        if self.enable_damping:
            self._delta_theta *= 1.0 - self.damping_factor
            self._delta_phi *= 1.0 - self.damping_factor
            self._pan_offset *= 1.0 - self.damping_factor
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
            self._pan_offset[:] = 0.0
        self._scale = 1.0
