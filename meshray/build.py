"""Parameters of the demo car: chassis, suspension corners, wheels, drives and brakes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .physics import DrivenWheel, DrivenWheelLookup, Steering, SteeringCurvature

CHASSIS_MASS = 1000.0
SUSPENSION_MASS = 20.0
GRAVITY = 9.81

Vec3 = Tuple[float, float, float]
SteeringType = Optional[Union[SteeringCurvature, Steering]]
DriveType = Optional[Union[DrivenWheel, DrivenWheelLookup]]

CORNER_NAMES = ("fl", "fr", "rl", "rr")
CORNER_LOCATIONS: Tuple[Vec3, ...] = (
    (1.25, 0.75, -0.2),
    (1.25, -0.75, -0.2),
    (-1.25, 0.75, -0.2),
    (-1.25, -0.75, -0.2),
)
DRIVE_SPEEDS = (0.0, 25.0, 50.0, 75.0)
DRIVE_TORQUES = (1000.0, 1000.0, 600.0, 250.0)


@dataclass
class Chassis:
    """The car body: mass properties, size and starting pose."""

    mass: float
    cg_position: Vec3
    moi: Vec3
    dimensions: Vec3
    position: Vec3
    initial_position: Vec3
    initial_orientation: Vec3
    mesh_file: Optional[str] = None


@dataclass
class Suspension:
    """One suspension corner: spring-damper, optional steering and mount location."""

    name: str
    mass: float
    steering: SteeringType
    stiffness: float
    damping: float
    preload: float
    moi: float
    location: Vec3


@dataclass
class Wheel:
    """Wheel inertia and the parameters of its tire contact model."""

    mass: float
    radius: float
    width: float
    moi_y: float
    moi_xz: float
    stiffness: Tuple[float, float]
    damping: float
    coefficient_of_friction: float
    rolling_radius: float
    low_speed: float
    normalized_slip_stiffness: float
    filter_time: float


@dataclass
class Brake:
    """Maximum brake torque on the front and rear wheels."""

    front_torque: float
    rear_torque: float


@dataclass
class CarDefinition:
    """Everything needed to assemble the car; corners are ordered fl, fr, rl, rr."""

    chassis: Chassis
    suspension: List[Suspension]
    wheel: Wheel
    drives: List[DriveType] = field(default_factory=list)
    brake: Brake = field(default_factory=lambda: Brake(0.0, 0.0))


def build_wheel() -> Wheel:
    """The wheel and tire parameters shared by all four corners."""
    wheel_mass = 20.0
    wheel_radius = 0.325
    moi_y = wheel_mass * wheel_radius**2
    moi_xz = 1.0 / 12.0 * 10.0 * (3.0 * wheel_radius**2)
    corner_mass = CHASSIS_MASS / 4.0 + SUSPENSION_MASS + wheel_mass
    stiffness = corner_mass * GRAVITY / 0.005
    damping = 0.01 * 2.0 * math.sqrt(stiffness * wheel_mass)
    return Wheel(
        mass=wheel_mass,
        radius=wheel_radius,
        width=0.2,
        moi_y=moi_y,
        moi_xz=moi_xz,
        stiffness=(stiffness, 0.0),
        damping=damping,
        coefficient_of_friction=0.8,
        rolling_radius=0.315,
        low_speed=1.0,
        normalized_slip_stiffness=20.0,
        filter_time=0.005,
    )


def _rear_drive() -> DrivenWheelLookup:
    return DrivenWheelLookup("fl", list(DRIVE_SPEEDS), list(DRIVE_TORQUES))


def build_car() -> CarDefinition:
    """The demo car: rear-wheel drive with curvature steering on the front axle."""
    mass = CHASSIS_MASS
    dimensions = (3.0, 1.2, 0.4)
    length, width, height = dimensions
    moi = tuple(
        mass * (1.0 / 12.0) * value
        for value in (
            width**2 + height**2,
            height**2 + length**2,
            length**2 + width**2,
        )
    )
    chassis = Chassis(
        mass=mass,
        cg_position=(0.0, 0.0, 0.0),
        moi=moi,
        dimensions=dimensions,
        position=(0.0, 0.0, 0.0),
        initial_position=(-5.0, 20.0, 0.3 + 0.25),
        initial_orientation=(0.0, 0.0, 0.0),
        mesh_file=None,
    )

    suspension_size = 0.025
    stiffness = mass * (GRAVITY / 4.0) / 0.1
    damping = 0.25 * 2.0 * math.sqrt(stiffness * (1000.0 / 4.0))
    preload = mass * (GRAVITY / 4.0)
    suspension_moi = (2.0 / 3.0) * SUSPENSION_MASS * suspension_size**2

    suspension = []
    for index, (name, location) in enumerate(zip(CORNER_NAMES, CORNER_LOCATIONS)):
        steering: SteeringType = None
        if index < 2:
            rear = CORNER_LOCATIONS[index + 2]
            steering = SteeringCurvature(
                x=location[0] - rear[0],
                y=location[1],
                max_curvature=1.0 / 5.0,
            )
        suspension.append(
            Suspension(
                name=name,
                mass=SUSPENSION_MASS,
                steering=steering,
                stiffness=stiffness,
                damping=damping,
                preload=preload,
                moi=suspension_moi,
                location=location,
            )
        )

    drives: List[DriveType] = [None, None, _rear_drive(), _rear_drive()]

    return CarDefinition(
        chassis=chassis,
        suspension=suspension,
        wheel=build_wheel(),
        drives=drives,
        brake=Brake(front_torque=800.0, rear_torque=400.0),
    )