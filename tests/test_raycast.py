import numpy as np
import pytest

from meshray.primitives import F32_EPSILON, Ray3d, Triangle
from meshray.raycast import (
    Backfaces,
    Mesh,
    PrimitiveTopology,
    RayHit,
    ray_intersection_over_mesh,
    ray_mesh_intersection,
    ray_triangle_intersection,
    raycast_moller_trumbore,
)

V0 = [1.0, -1.0, 2.0]
V1 = [1.0, 2.0, -1.0]
V2 = [1.0, -1.0, -1.0]

UP_TRIANGLE = [[-1.0, 0.0, -1.0], [-1.0, 0.0, 2.0], [2.0, 0.0, -1.0]]


def _grid_mesh(vertices_per_side):
    positions = []
    normals = []
    for p in range(vertices_per_side**2):
        i, j = divmod(p, vertices_per_side)
        positions.append([i / vertices_per_side - 0.5, 0.0, j / vertices_per_side - 0.5])
        normals.append([0.0, 1.0, 0.0])
    indices = []
    n = vertices_per_side
    for p in range(n**2):
        if p % n != n - 1 and p // n != n - 1:
            indices.extend([p, p + 1, p + n])
            indices.extend([p + n, p + 1, p + n + 1])
    return positions, normals, indices


def test_raycast_triangle_mt():
    triangle = Triangle.from_vertices([V0, V1, V2])
    ray = Ray3d([0.0, 0.0, 0.0], [1.0, 0.0, 0.0])
    result = ray_triangle_intersection(ray, triangle, Backfaces.INCLUDE)
    assert result.distance - 1.0 <= F32_EPSILON
    assert result.distance == pytest.approx(1.0)


def test_raycast_triangle_mt_culling():
    triangle = Triangle.from_vertices([V2, V1, V0])
    ray = Ray3d([0.0, 0.0, 0.0], [1.0, 0.0, 0.0])
    assert ray_triangle_intersection(ray, triangle, Backfaces.CULL) is None


def test_reversed_triangle_hit_when_backfaces_included():
    ray = Ray3d([0.0, 0.0, 0.0], [1.0, 0.0, 0.0])
    hit = raycast_moller_trumbore(ray, [V2, V1, V0], Backfaces.INCLUDE)
    assert hit.distance == pytest.approx(1.0)


def test_barycentric_coordinates_within_triangle():
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    hit = raycast_moller_trumbore(ray, UP_TRIANGLE, Backfaces.CULL)
    u, v = hit.uv_coords
    assert 0.0 <= u <= 1.0
    assert 0.0 <= v <= 1.0
    assert u + v <= 1.0
    assert isinstance(hit, RayHit)


def test_parallel_ray_misses_triangle():
    ray = Ray3d([0.0, 1.0, 0.0], [1.0, 0.0, 0.0])
    assert raycast_moller_trumbore(ray, UP_TRIANGLE, Backfaces.INCLUDE) is None


@pytest.mark.parametrize("vertices_per_side", [10, 30])
def test_ray_mesh_intersection_grid(vertices_per_side):
    positions, normals, indices = _grid_mesh(vertices_per_side)
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    hit = ray_mesh_intersection(np.eye(4), positions, normals, ray, indices, Backfaces.CULL)
    assert hit is not None
    assert hit.distance == pytest.approx(1.0)
    np.testing.assert_allclose(hit.position, [0.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(hit.normal, [0.0, 1.0, 0.0], atol=1e-9)


@pytest.mark.parametrize("vertices_per_side", [10, 30])
def test_ray_mesh_intersection_no_intersection(vertices_per_side):
    positions, normals, indices = _grid_mesh(vertices_per_side)
    ray = Ray3d([0.0, 1.0, 0.0], [1.0, 0.0, 0.0])
    assert (
        ray_mesh_intersection(np.eye(4), positions, normals, ray, indices, Backfaces.CULL)
        is None
    )


def test_grid_hit_off_vertex():
    positions, normals, indices = _grid_mesh(10)
    ray = Ray3d([0.03, 2.0, 0.07], [0.0, -1.0, 0.0])
    hit = ray_mesh_intersection(np.eye(4), positions, normals, ray, indices)
    assert hit.distance == pytest.approx(2.0)
    np.testing.assert_allclose(hit.position, [0.03, 0.0, 0.07], atol=1e-9)


def test_unindexed_mesh_without_normals():
    ray = Ray3d([0.0, 3.0, 0.0], [0.0, -1.0, 0.0])
    hit = ray_mesh_intersection(np.eye(4), UP_TRIANGLE, None, ray, None)
    assert hit.distance == pytest.approx(3.0)
    np.testing.assert_allclose(hit.normal, [0.0, 1.0, 0.0], atol=1e-12)
    assert hit.triangle == Triangle.from_vertices(UP_TRIANGLE)


def test_back_face_culled_but_hit_when_included():
    ray = Ray3d([0.0, -1.0, 0.0], [0.0, 1.0, 0.0])
    assert ray_mesh_intersection(np.eye(4), UP_TRIANGLE, None, ray, None, Backfaces.CULL) is None
    hit = ray_mesh_intersection(np.eye(4), UP_TRIANGLE, None, ray, None, Backfaces.INCLUDE)
    assert hit.distance == pytest.approx(1.0)


def test_nearest_of_stacked_triangles_wins():
    lower = [[x, -1.0, z] for x, _, z in UP_TRIANGLE]
    positions = lower + UP_TRIANGLE
    ray = Ray3d([0.0, 2.0, 0.0], [0.0, -1.0, 0.0])
    hit = ray_mesh_intersection(np.eye(4), positions, None, ray, None)
    assert hit.distance == pytest.approx(2.0)
    assert hit.position[1] == pytest.approx(0.0)


def test_transformed_mesh_reports_world_distance():
    transform = np.diag([2.0, 2.0, 2.0, 1.0])
    transform[:3, 3] = [0.0, -2.0, 0.0]
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    hit = ray_mesh_intersection(transform, UP_TRIANGLE, None, ray, [0, 1, 2])
    assert hit.distance == pytest.approx(3.0)
    np.testing.assert_allclose(hit.position, [0.0, -2.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(hit.triangle.v0, [-2.0, -2.0, -2.0])


def test_index_list_not_multiple_of_three():
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    assert ray_mesh_intersection(np.eye(4), UP_TRIANGLE, None, ray, [0, 1]) is None


def test_out_of_range_index_raises():
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    with pytest.raises(IndexError):
        ray_mesh_intersection(np.eye(4), UP_TRIANGLE, None, ray, [0, 1, 7])


def test_ray_intersection_over_mesh():
    mesh = Mesh(positions=np.array(UP_TRIANGLE), indices=[0, 1, 2])
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    hit = ray_intersection_over_mesh(mesh, np.eye(4), ray, Backfaces.CULL)
    assert hit.distance == pytest.approx(1.0)


def test_non_triangle_list_topology_returns_none():
    mesh = Mesh(positions=np.array(UP_TRIANGLE), topology=PrimitiveTopology.LINE_LIST)
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    assert ray_intersection_over_mesh(mesh, np.eye(4), ray, Backfaces.CULL) is None


def test_mesh_without_positions_raises():
    ray = Ray3d([0.0, 1.0, 0.0], [0.0, -1.0, 0.0])
    with pytest.raises(ValueError):
        ray_intersection_over_mesh(Mesh(), np.eye(4), ray, Backfaces.CULL)