"""An orbiting camera parameterised by azimuth, elevation and distance from a focus point."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

CURSOR_SENSITIVITY = 0.5
MIN_RADIUS = 0.05
ZOOM_RATE = 0.2


class UpDirection(enum.Enum):
    """World axis that points up for the camera."""

    X = "x"
    Y = "y"
    Z = "z"


def _rot_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rot_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def _rot_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def az_el_rotation(azimuth: float, elevation: float, up_direction: UpDirection) -> np.ndarray:
    """Camera orientation (3x3 rotation matrix) for the given azimuth and elevation."""
    if up_direction is UpDirection.X:
        return _rot_x(azimuth + math.pi) @ _rot_y(elevation) @ _rot_z(-math.pi / 2.0)
    if up_direction is UpDirection.Y:
        return _rot_y(azimuth) @ _rot_z(-elevation) @ _rot_y(-math.pi / 2.0)
    if up_direction is UpDirection.Z:
        return _rot_z(azimuth) @ _rot_x(math.pi / 2.0 - elevation)
    raise ValueError(f"unknown up direction: {up_direction!r}")


def az_el_translation(focus, rotation, radius: float) -> np.ndarray:
    """Camera position: ``radius`` behind the focus along the camera's local +Z axis."""
    return np.asarray(focus, dtype=float) + np.asarray(rotation, dtype=float) @ np.array(
        [0.0, 0.0, float(radius)]
    )


def _window(window_size: Sequence[float]) -> np.ndarray:
    size = np.array(window_size, dtype=float).reshape(2)
    if np.any(size <= 0.0):
        raise ValueError("window size must be positive")
    return size


@dataclass
class AzElCamera:
    """State of an azimuth/elevation orbit camera."""

    focus: np.ndarray = field(default_factory=lambda: np.zeros(3))
    radius: float = 10.0
    up_direction: UpDirection = UpDirection.Y
    azimuth: float = 0.0
    elevation: float = 0.0

    def __post_init__(self) -> None:
        self.focus = np.array(self.focus, dtype=float).reshape(3)

    def rotation(self) -> np.ndarray:
        return az_el_rotation(self.azimuth, self.elevation, self.up_direction)

    def translation(self) -> np.ndarray:
        return az_el_translation(self.focus, self.rotation(), self.radius)

    def orbit(self, delta, window_size) -> bool:
        """Rotate by a cursor movement in pixels; returns whether anything changed."""
        move = np.array(delta, dtype=float).reshape(2) * CURSOR_SENSITIVITY
        if float(move @ move) <= 0.0:
            return False
        window = _window(window_size)
        self.azimuth -= move[0] / window[0] * math.pi * 2.0
        self.elevation += move[1] / window[1] * math.pi
        self.elevation = min(max(self.elevation, -math.pi / 2.0), math.pi / 2.0)
        return True

    def pan(
        self,
        delta,
        window_size,
        rotation=None,
        fov: Optional[float] = None,
        aspect_ratio: float = 1.0,
    ) -> bool:
        """Move the focus sideways by a cursor movement; returns whether anything changed.

        With a perspective ``fov`` the movement is scaled so that panning is
        independent of resolution and field of view.
        """
        pan = np.array(delta, dtype=float).reshape(2) * CURSOR_SENSITIVITY
        if float(pan @ pan) <= 0.0:
            return False
        if fov is not None:
            window = _window(window_size)
            pan = pan * np.array([fov * aspect_ratio, fov]) / window
        mat = self.rotation() if rotation is None else np.asarray(rotation, dtype=float)
        left = -mat[:, 0] * pan[0]
        up = mat[:, 1] * pan[1]
        self.focus = self.focus + (left + up) * self.radius
        return True

    def zoom(self, scroll: float) -> bool:
        """Zoom by a scroll amount; returns whether anything changed."""
        if abs(scroll) <= 0.0:
            return False
        self.radius -= scroll * self.radius * ZOOM_RATE
        self.radius = max(self.radius, MIN_RADIUS)
        return True