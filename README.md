# meshray

meshray casts rays against triangle meshes in plain Python and NumPy. It also
holds the parameter models of a small vehicle: suspension, steering, drive and
brake laws, tire probe points, and an orbit camera.

## Installation

```
pip install meshray
```

To run the test suite as well:

```
pip install "meshray[test]"
pytest
```

## Conventions

Vectors are 3-element NumPy arrays. Transforms are 4×4 matrices that act on
column vectors. `meshray.primitives.transform_point` and `transform_vector`
apply a transform to a point or to a direction. `rotation_arc` returns the
3×3 rotation along the shortest arc from one direction to another.

## Rays and primitives

`Ray3d(origin, direction)` always stores a normalised direction. A
zero-length direction raises `ValueError`. The ray offers the following:

- `position(distance)` gives the point that lies `distance` along the ray.
- `to_transform()` and `to_aligned_transform(up)` build a transform at the ray
  origin whose +Y axis (or the given `up` axis) follows the ray.
- `Ray3d.from_transform(matrix)` casts from the matrix's translation along its
  local −Z axis.
- `intersects_aabb(aabb, model_to_world)` returns `(near, far)` for an `Aabb`
  placed by the given transform, or `None` when the ray misses the box.
- `intersects_primitive(Plane(point, normal))` returns a
  `PrimitiveIntersection`, or `None` when the ray is parallel to the plane.

`IntersectionData` holds a hit's position, normal, distance and optionally the
`Triangle` that was hit. `IntersectionData.from_primitive` converts a
`PrimitiveIntersection` into one.

## Casting a ray against a triangle

```python
from meshray.primitives import Ray3d, Triangle
from meshray.raycast import Backfaces, ray_triangle_intersection

triangle = Triangle.from_vertices([(1, -1, 2), (1, 2, -1), (1, -1, -1)])
ray = Ray3d((0, 0, 0), (1, 0, 0))
hit = ray_triangle_intersection(ray, triangle, Backfaces.INCLUDE)
# hit.distance == 1.0, hit.uv_coords holds the barycentric (u, v)
```

This is the Möller–Trumbore test. It returns a `RayHit`, or `None` on a
miss. With `Backfaces.CULL`, the default, a triangle that faces away from the
ray is never hit.

## Casting a ray against a mesh

`ray_mesh_intersection(mesh_transform, vertex_positions, vertex_normals, ray,
indices, backface_culling)` returns the nearest `IntersectionData` in world
space, or `None` when nothing is hit. The arguments work as follows:

- `vertex_normals` is optional. With normals, the hit normal is interpolated
  from them. Without normals, the face normal is used.
- `indices` of `None` means that every three consecutive positions form a
  triangle.
- An index list whose length is not a multiple of 3 logs a warning and
  returns `None`.

`ray_intersection_over_mesh(mesh, mesh_transform, ray, backface_culling)` does
the same for a `Mesh` dataclass. It only handles
`PrimitiveTopology.TRIANGLE_LIST`; any other topology logs an error and
returns `None`. A mesh without positions raises `ValueError`.

## Casting a ray into a scene

`meshray.immediate.Raycast` holds a list of `SceneEntity` objects. Each
entity has the following fields:

- an identifier;
- a `Mesh`;
- a transform;
- an `Aabb`, which is computed from the mesh when it is not given;
- visibility flags;
- an optional `SimplifiedMesh`, which is cast against instead of the mesh;
- `no_backface_culling`.

```python
from meshray.immediate import Raycast, RaycastSettings, RaycastVisibility

raycast = Raycast(entities)
settings = (
    RaycastSettings()
    .with_filter(lambda entity: entity != "ignored")
    .with_visibility(RaycastVisibility.IGNORE)
    .never_early_exit()
)
hits = raycast.cast_ray(ray, settings)   # [(entity, IntersectionData), ...], nearest first
```

`cast_ray` works in three steps:

1. It culls entities by visibility and by their bounding boxes.
2. It tests the meshes in order of box distance.
3. It drops every hit that lies beyond the nearest hit on an entity that
   passes the early-exit test.

By default, only the nearest hit is kept.

## Deferred raycasting

`meshray.deferred` declares ray casts instead of making them directly.

A `RaycastSource` builds its ray according to its `RaycastMethod`:

- `CURSOR` takes a ray supplied by the caller.
- `SCREENSPACE` projects the source's screen position through a callback
  supplied by the caller.
- `TRANSFORM` casts along the source transform's −Z axis.

A `RaycastMesh` marks an entity as a target.

`DeferredRaycasting.run(raycast, sources, meshes, cursor_ray, screen_to_ray)`
performs one frame:

1. It rebuilds the rays.
2. It casts each ray against the target entities and stores the hits on the
   source.
3. It copies the hits onto the target meshes and clears the previous frame's
   hits.

`RaycastPluginState` switches the ray-building and casting stages on and off.

## Vehicle model

| Module | Contents |
| --- | --- |
| `meshray.build` | `build_car()` returns a `CarDefinition`: the chassis, four `Suspension` corners (`fl`, `fr`, `rl`, `rr`) with curvature steering at the front, the wheel, rear-wheel drives and the `Brake`. `build_wheel()` returns the shared `Wheel` and tire parameters. |
| `meshray.physics` | `SuspensionComponent.force`, `Steering.angle`, `SteeringCurvature.angle`, `DrivenWheel.torque`, `DrivenWheelLookup.limit_torque` / `torque`, `BrakeWheel.torque`. |
| `meshray.tire` | `PointTire`, which holds the tire's contact parameters and its tread probe points (`points`, an N×3 array). |
| `meshray.interpolate` | `Interpolator1D`, a linear lookup table that clamps at both ends. |
| `meshray.camera` | `AzElCamera` with `orbit`, `pan` and `zoom`, and the functions `az_el_rotation` and `az_el_translation` for the `X`, `Y` and `Z` up directions. |
| `meshray.camera_control` | `CameraParentList`, which steps through follow targets with `cycle()` and returns the current one from `active_parent()`. |

## What meshray does not do

meshray is a library. It has no command-line program, no window and no
rendering.

It does not do the following:

- read keyboard, mouse or gamepad input;
- integrate rigid-body dynamics;
- build or load terrain or other meshes. You supply the vertex data yourself.

`PointTire` only provides the probe points and parameters. Computing the
contact forces from ray hits is left to the caller. The physics laws return
forces and torques for the caller to apply.