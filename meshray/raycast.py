"""Ray intersection against triangle meshes (Möller-Trumbore)."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from .primitives import (
    F32_EPSILON,
    IntersectionData,
    Ray3d,
    Triangle,
    transform_point,
    transform_vector,
)

logger = logging.getLogger(__name__)

F32_MAX = float(np.finfo(np.float32).max)


class Backfaces(enum.Enum):
    """Whether triangles facing away from the ray can be hit."""

    CULL = "cull"
    INCLUDE = "include"


class PrimitiveTopology(enum.Enum):
    """How the vertices of a mesh are assembled into primitives."""

    POINT_LIST = "point_list"
    LINE_LIST = "line_list"
    LINE_STRIP = "line_strip"
    TRIANGLE_LIST = "triangle_list"
    TRIANGLE_STRIP = "triangle_strip"


@dataclass
class Mesh:
    """Vertex data of a mesh; ``indices`` of ``None`` means an unindexed triangle list."""

    positions: Optional[np.ndarray] = None
    normals: Optional[np.ndarray] = None
    uvs: Optional[np.ndarray] = None
    indices: Optional[Sequence[int]] = None
    topology: PrimitiveTopology = PrimitiveTopology.TRIANGLE_LIST


@dataclass(frozen=True)
class RayHit:
    """Distance along the ray and barycentric ``(u, v)`` of a triangle hit."""

    distance: float = 0.0
    uv_coords: Tuple[float, float] = (0.0, 0.0)


def _as_triangle(triangle) -> Triangle:
    if isinstance(triangle, Triangle):
        return triangle
    return Triangle.from_vertices(triangle)


def raycast_moller_trumbore(
    ray: Ray3d, triangle, backface_culling: Backfaces = Backfaces.CULL
) -> Optional[RayHit]:
    """Möller-Trumbore ray/triangle test; ``None`` when the ray misses."""
    tri = _as_triangle(triangle)
    direction = ray.direction
    origin = ray.origin

    edge1 = tri.v1 - tri.v0
    edge2 = tri.v2 - tri.v0
    p_vec = np.cross(direction, edge2)
    determinant = float(edge1 @ p_vec)

    if backface_culling is Backfaces.CULL:
        # Negative means back-facing, near zero means parallel.
        if determinant < F32_EPSILON:
            return None
    elif abs(determinant) < F32_EPSILON:
        return None

    inverse = 1.0 / determinant
    t_vec = origin - tri.v0
    u = float(t_vec @ p_vec) * inverse
    if not 0.0 <= u <= 1.0:
        return None

    q_vec = np.cross(t_vec, edge1)
    v = float(direction @ q_vec) * inverse
    if v < 0.0 or u + v > 1.0:
        return None

    t = float(edge2 @ q_vec) * inverse
    return RayHit(distance=t, uv_coords=(u, v))


def ray_triangle_intersection(
    ray: Ray3d, triangle, backface_culling: Backfaces = Backfaces.CULL
) -> Optional[RayHit]:
    """Intersect a ray with a single triangle."""
    return raycast_moller_trumbore(ray, triangle, backface_culling)


def _triangle_intersection(
    vertices: np.ndarray,
    normals: Optional[np.ndarray],
    max_distance: float,
    ray: Ray3d,
    backface_culling: Backfaces,
) -> Optional[IntersectionData]:
    origin = ray.origin
    if not np.any(np.sum((vertices - origin) ** 2, axis=1) < max_distance**2):
        return None

    triangle = Triangle(vertices[0], vertices[1], vertices[2])
    hit = raycast_moller_trumbore(ray, triangle, backface_culling)
    if hit is None or not 0.0 < hit.distance < max_distance:
        return None

    if normals is not None:
        u, v = hit.uv_coords
        w = 1.0 - u - v
        normal = normals[1] * u + normals[2] * v + normals[0] * w
    else:
        cross = np.cross(vertices[1] - vertices[0], vertices[2] - vertices[0])
        normal = cross / np.linalg.norm(cross)

    return IntersectionData(
        position=ray.position(hit.distance),
        normal=np.asarray(normal, dtype=float),
        distance=hit.distance,
        triangle=triangle,
    )


def _triangle_indices(
    vertex_count: int, indices: Optional[Iterable[int]]
) -> Optional[Iterator[Tuple[int, ...]]]:
    if indices is None:
        return ((i, i + 1, i + 2) for i in range(0, vertex_count, 3))
    index_list = [int(i) for i in indices]
    if len(index_list) % 3 != 0:
        logger.warning("Index list not a multiple of 3")
        return None
    return zip(*[iter(index_list)] * 3)


def ray_mesh_intersection(
    mesh_transform,
    vertex_positions,
    vertex_normals,
    ray: Ray3d,
    indices,
    backface_culling: Backfaces = Backfaces.CULL,
) -> Optional[IntersectionData]:
    """Nearest hit of ``ray`` (world space) on a mesh placed by ``mesh_transform``."""
    transform = np.array(mesh_transform, dtype=float)
    world_to_mesh = np.linalg.inv(transform)
    mesh_space_ray = Ray3d(
        transform_point(world_to_mesh, ray.origin),
        transform_vector(world_to_mesh, ray.direction),
    )

    positions = np.asarray(vertex_positions, dtype=float).reshape(-1, 3)
    normals = (
        None
        if vertex_normals is None
        else np.asarray(vertex_normals, dtype=float).reshape(-1, 3)
    )

    triangles = _triangle_indices(len(positions), indices)
    if triangles is None:
        return None

    min_distance = F32_MAX
    nearest: Optional[IntersectionData] = None
    for corner_indices in triangles:
        corners = list(corner_indices)
        hit = _triangle_intersection(
            positions[corners],
            None if normals is None else normals[corners],
            min_distance,
            mesh_space_ray,
            backface_culling,
        )
        if hit is None:
            continue
        world_distance = float(
            np.linalg.norm(
                transform_vector(transform, mesh_space_ray.direction * hit.distance)
            )
        )
        world_triangle = None
        if hit.triangle is not None:
            world_triangle = Triangle(*(transform_point(transform, v) for v in hit.triangle))
        nearest = IntersectionData(
            position=transform_point(transform, hit.position),
            normal=transform_vector(transform, hit.normal),
            distance=world_distance,
            triangle=world_triangle,
        )
        min_distance = hit.distance
    return nearest


def ray_intersection_over_mesh(
    mesh: Mesh,
    mesh_transform,
    ray: Ray3d,
    backface_culling: Backfaces = Backfaces.CULL,
) -> Optional[IntersectionData]:
    """Cast a ray on a mesh and return the nearest intersection, if any."""
    if mesh.topology is not PrimitiveTopology.TRIANGLE_LIST:
        logger.error(
            "Invalid intersection check: TRIANGLE_LIST is the only supported topology"
        )
        return None
    if mesh.positions is None:
        raise ValueError("Mesh does not contain vertex positions")
    return ray_mesh_intersection(
        mesh_transform,
        mesh.positions,
        mesh.normals,
        ray,
        mesh.indices,
        backface_culling,
    )