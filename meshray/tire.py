"""Point-contact tire model: sample points on the tread used to probe the terrain."""

from __future__ import annotations

import math
from typing import Hashable, Sequence

import numpy as np


class PointTire:
    """A tire described by probe points on its tread plus its contact parameters.

    The probe points lie on a circle of ``radius`` in the wheel's x-z plane,
    spread over ``width`` along the wheel's y axis. ``num_points_radius`` rings
    are placed around the circumference, each holding ``num_points_width``
    points that are staggered by a fraction of the angular step.
    """

    def __init__(
        self,
        joint_entity: Hashable,
        joint_parent: Hashable,
        stiffness: Sequence[float],
        damping: float,
        coefficient_of_friction: float,
        normalized_slip_stiffness: float,
        rolling_radius: float,
        low_speed: float,
        radius: float,
        width: float,
        filter_time: float,
        num_points_width: int,
        num_points_radius: int,
        activation_length: float,
    ) -> None:
        if num_points_width < 1:
            raise ValueError("num_points_width must be at least 1")
        if num_points_radius < 0:
            raise ValueError("num_points_radius must not be negative")
        stiffness_pair = tuple(float(s) for s in stiffness)
        if len(stiffness_pair) != 2:
            raise ValueError(
                f"stiffness needs linear and quadratic terms, got {len(stiffness_pair)}"
            )

        self.joint_entity = joint_entity
        self.joint_parent = joint_parent
        self.stiffness = stiffness_pair
        self.damping = float(damping)
        self.coefficient_of_friction = float(coefficient_of_friction)
        self.normalized_slip_stiffness = float(normalized_slip_stiffness)
        self.rolling_radius = float(rolling_radius)
        self.low_speed = float(low_speed)
        self.filter_time = float(filter_time)
        self.my_filtered = 0.0
        self.activation_length = float(activation_length)
        self.points = self._tread_points(
            float(radius), float(width), num_points_width, num_points_radius
        )

    @staticmethod
    def _tread_points(
        radius: float, width: float, num_width: int, num_radius: int
    ) -> np.ndarray:
        if num_radius == 0:
            return np.zeros((0, 3))
        d_theta = 2.0 * math.pi / num_radius
        if num_width == 1:
            half_width = 0.0
            y_step = 0.0
        else:
            y_step = width / (num_width - 1)
            half_width = width / 2.0

        points = []
        for ring in range(num_radius):
            theta = ring * d_theta
            for width_ind in range(num_width):
                theta_point = theta + (width_ind / num_width) * d_theta
                y_pos = -half_width + width_ind * y_step
                points.append(
                    [
                        radius * math.sin(theta_point),
                        y_pos,
                        -(radius * math.cos(theta_point)),
                    ]
                )
        return np.array(points, dtype=float)

    def __repr__(self) -> str:
        return (
            f"PointTire(joint_entity={self.joint_entity!r}, "
            f"joint_parent={self.joint_parent!r}, points={len(self.points)})"
        )