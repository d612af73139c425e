"""Suspension, steering, drive and brake laws that turn controls into joint torques."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Sequence

from .interpolate import Interpolator1D


@dataclass
class SuspensionComponent:
    """A linear spring-damper with preload acting on a prismatic joint."""

    stiffness: float
    damping: float
    preload: float

    def force(self, q: float, qd: float) -> float:
        """Generalized force added to the joint at position ``q`` and speed ``qd``."""
        return -(self.stiffness * q + self.damping * qd + self.preload)


@dataclass
class Steering:
    """Steering that maps the steering command linearly to a wheel angle."""

    max_angle: float

    def angle(self, steering: float) -> float:
        return steering * self.max_angle


@dataclass
class SteeringCurvature:
    """Steering that targets a vehicle path curvature (Ackermann-like geometry)."""

    x: float
    y: float
    max_curvature: float

    def angle(self, steering: float) -> float:
        """Wheel angle for a steering command in [-1, 1]."""
        vehicle_curvature = self.max_curvature * steering
        wheel_curvature = vehicle_curvature / (1.0 - vehicle_curvature * self.y)
        return math.atan(wheel_curvature * self.x)


@dataclass
class DrivenWheel:
    """A drive limited by torque, speed and power."""

    max_torque: float
    max_speed: float
    max_power: float

    def torque(self, speed: float, throttle: float) -> float:
        """Drive torque at wheel ``speed`` for a throttle in [0, 1]."""
        if abs(speed) >= self.max_speed:
            return 0.0
        power_limited = math.inf if speed == 0 else abs(self.max_power / speed)
        return throttle * min(self.max_torque, power_limited)


@dataclass
class DrivenWheelLookup:
    """A drive whose torque limit comes from a speed/torque table."""

    name: str
    torque_lookup: Interpolator1D
    max_speed: float
    max_speed_power: float
    outputs: Dict[str, float] = field(default_factory=dict)

    def __init__(self, name: str, speeds: Sequence[float], torques: Sequence[float]) -> None:
        speeds = [float(s) for s in speeds]
        torques = [float(t) for t in torques]
        if not speeds or not torques:
            raise ValueError("speed and torque tables must not be empty")
        self.name = name
        self.max_speed = speeds[-1]
        self.max_speed_power = torques[-1] * self.max_speed
        self.torque_lookup = Interpolator1D(speeds, torques)
        self.outputs = {}

    def limit_torque(self, speed: float) -> float:
        """Signed torque limit at ``speed``; zero above the top speed."""
        sign = math.copysign(1.0, speed) if speed != 0 else 1.0
        abs_speed = abs(speed)
        if abs_speed > self.max_speed:
            return 0.0
        if abs_speed < self.max_speed:
            return sign * self.torque_lookup.interpolate(abs_speed)
        return sign * self.max_speed_power / abs_speed

    def torque(self, speed: float, throttle: float) -> float:
        """Commanded torque; also records ``torque`` and ``torque_limit`` in ``outputs``."""
        torque_limit = abs(self.limit_torque(speed))
        commanded = throttle * torque_limit
        self.outputs["torque"] = commanded
        self.outputs["torque_limit"] = torque_limit
        return commanded


@dataclass
class BrakeWheel:
    """A brake whose torque opposes wheel speed, fading out near standstill."""

    max_torque: float

    def torque(self, speed: float, brake: float) -> float:
        return -brake * self.max_torque * max(min(speed, 1.0), -1.0)