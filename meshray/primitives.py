"""Rays, bounding boxes, planes and intersection records used for raycasting.

Vectors are 3-element numpy arrays and transforms are 4x4 numpy matrices
acting on column vectors (``world = M @ [x, y, z, 1]``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

F32_EPSILON = float(np.finfo(np.float32).eps)
_ARC_TOLERANCE = 1e-6


def _vec3(values) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {arr.shape}")
    return arr


def _mat4(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {arr.shape}")
    return arr


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if not np.isfinite(length) or length == 0.0:
        raise ValueError("cannot normalize a zero-length or non-finite vector")
    return vector / length


def transform_point(matrix, point) -> np.ndarray:
    """Apply an affine 4x4 transform to a point (translation included)."""
    m = _mat4(matrix)
    return m[:3, :3] @ _vec3(point) + m[:3, 3]


def transform_vector(matrix, vector) -> np.ndarray:
    """Apply the linear part of a 4x4 transform to a direction vector."""
    m = _mat4(matrix)
    return m[:3, :3] @ _vec3(vector)


def _project_point(matrix: np.ndarray, point: np.ndarray) -> np.ndarray:
    homogeneous = matrix @ np.append(point, 1.0)
    return homogeneous[:3] / homogeneous[3]


def _any_orthonormal(vector: np.ndarray) -> np.ndarray:
    x, y, z = vector
    sign = 1.0 if z >= 0.0 else -1.0
    a = -1.0 / (sign + z)
    b = x * y * a
    return np.array([b, sign + y * y * a, -y])


def rotation_arc(from_dir, to_dir) -> np.ndarray:
    """Return the 3x3 rotation matrix taking ``from_dir`` onto ``to_dir`` by the shortest arc."""
    a = _normalize(_vec3(from_dir))
    b = _normalize(_vec3(to_dir))
    d = float(a @ b)
    if d > 1.0 - _ARC_TOLERANCE:
        return np.eye(3)
    if d < -1.0 + _ARC_TOLERANCE:
        axis = _any_orthonormal(a)
        return 2.0 * np.outer(axis, axis) - np.eye(3)
    c = np.cross(a, b)
    skew = np.array(
        [
            [0.0, -c[2], c[1]],
            [c[2], 0.0, -c[0]],
            [-c[1], c[0], 0.0],
        ]
    )
    return np.eye(3) + skew + skew @ skew / (1.0 + d)


@dataclass(eq=False)
class Aabb:
    """Axis-aligned bounding box in model space."""

    center: np.ndarray
    half_extents: np.ndarray

    def __post_init__(self) -> None:
        self.center = _vec3(self.center)
        self.half_extents = _vec3(self.half_extents)

    @classmethod
    def from_min_max(cls, minimum, maximum) -> "Aabb":
        lo = _vec3(minimum)
        hi = _vec3(maximum)
        return cls(center=(lo + hi) / 2.0, half_extents=(hi - lo) / 2.0)

    @property
    def min(self) -> np.ndarray:
        return self.center - self.half_extents

    @property
    def max(self) -> np.ndarray:
        return self.center + self.half_extents


@dataclass(eq=False)
class Plane:
    """An infinite plane through ``point`` with unit ``normal``."""

    point: np.ndarray
    normal: np.ndarray

    def __post_init__(self) -> None:
        self.point = _vec3(self.point)
        self.normal = _vec3(self.normal)


@dataclass(eq=False)
class PrimitiveIntersection:
    """Where a ray meets a primitive shape."""

    position: np.ndarray
    normal: np.ndarray
    distance: float


class Triangle:
    """Three vertices of a triangle."""

    __slots__ = ("v0", "v1", "v2")

    def __init__(self, v0, v1, v2) -> None:
        self.v0 = _vec3(v0)
        self.v1 = _vec3(v1)
        self.v2 = _vec3(v2)

    @classmethod
    def from_vertices(cls, vertices: Iterable) -> "Triangle":
        """Build a triangle from the first three vertices of a sequence."""
        points = list(vertices)
        if len(points) < 3:
            raise ValueError(f"a triangle needs 3 vertices, got {len(points)}")
        return cls(points[0], points[1], points[2])

    def __iter__(self):
        return iter((self.v0, self.v1, self.v2))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return all(np.array_equal(a, b) for a, b in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Triangle(v0={self.v0.tolist()}, v1={self.v1.tolist()}, v2={self.v2.tolist()})"


@dataclass(eq=False)
class IntersectionData:
    """A ray hit: world position, surface normal, distance and the triangle hit."""

    position: np.ndarray
    normal: np.ndarray
    distance: float
    triangle: Optional[Triangle] = None

    @classmethod
    def from_primitive(cls, data: PrimitiveIntersection) -> "IntersectionData":
        return cls(
            position=np.array(data.position, dtype=float),
            normal=np.array(data.normal, dtype=float),
            distance=float(data.distance),
            triangle=None,
        )


class Ray3d:
    """A 3D ray with an origin and a direction that is always normalized."""

    __slots__ = ("_origin", "_direction")

    def __init__(self, origin, direction) -> None:
        self._origin = _vec3(origin)
        self._direction = _normalize(_vec3(direction))

    @property
    def origin(self) -> np.ndarray:
        return self._origin.copy()

    @origin.setter
    def origin(self, value) -> None:
        self._origin = _vec3(value)

    @property
    def direction(self) -> np.ndarray:
        return self._direction.copy()

    @direction.setter
    def direction(self, value) -> None:
        self._direction = _normalize(_vec3(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray3d):
            return NotImplemented
        return np.array_equal(self._origin, other._origin) and np.array_equal(
            self._direction, other._direction
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ray3d(origin={self._origin.tolist()}, direction={self._direction.tolist()})"

    def position(self, distance: float) -> np.ndarray:
        """The point ``distance`` units along the ray."""
        return self._origin + self._direction * distance

    def to_transform(self) -> np.ndarray:
        """A transform at the ray origin whose +Y axis follows the ray."""
        return self.to_aligned_transform((0.0, 1.0, 0.0))

    def to_aligned_transform(self, up) -> np.ndarray:
        """A transform at the ray origin whose ``up`` axis follows the ray."""
        matrix = np.eye(4)
        matrix[:3, :3] = rotation_arc(up, self._direction)
        matrix[:3, 3] = self._origin
        return matrix

    @classmethod
    def from_transform(cls, transform) -> "Ray3d":
        """A ray from the transform's translation along its local -Z axis."""
        m = _mat4(transform)
        pick_position = _project_point(m, np.array([0.0, 0.0, -1.0]))
        source_origin = m[:3, 3].copy()
        return cls(source_origin, pick_position - source_origin)

    def intersects_aabb(self, aabb: Aabb, model_to_world) -> Optional[Tuple[float, float]]:
        """Return ``(near, far)`` distances if the ray crosses the box, else ``None``."""
        world_to_model = np.linalg.inv(_mat4(model_to_world))
        ray_dir = transform_vector(world_to_model, self._direction)
        ray_origin = transform_point(world_to_model, self._origin)

        with np.errstate(divide="ignore", invalid="ignore"):
            t_0 = (aabb.min - ray_origin) / ray_dir
            t_1 = (aabb.max - ray_origin) / ray_dir
        t_min = np.minimum(t_0, t_1)
        t_max = np.maximum(t_0, t_1)

        hit_near = float(t_min[0])
        hit_far = float(t_max[0])

        if hit_near > t_max[1] or t_min[1] > hit_far:
            return None
        hit_near = max(hit_near, float(t_min[1]))
        hit_far = min(hit_far, float(t_max[1]))

        if hit_near > t_max[2] or t_min[2] > hit_far:
            return None
        hit_near = max(hit_near, float(t_min[2]))
        hit_far = min(hit_far, float(t_max[2]))
        return hit_near, hit_far

    def intersects_primitive(self, shape) -> Optional[PrimitiveIntersection]:
        """Intersect the ray with a primitive shape; ``None`` if there is no hit."""
        if not isinstance(shape, Plane):
            raise TypeError(f"unsupported primitive: {type(shape).__name__}")
        denominator = float(self._direction @ shape.normal)
        if abs(denominator) <= F32_EPSILON:
            return None
        distance = float(shape.normal @ (shape.point - self._origin)) / denominator
        return PrimitiveIntersection(
            position=self._direction * distance + self._origin,
            normal=shape.normal.copy(),
            distance=distance,
        )