"""Immediate-mode raycasting against a collection of scene entities."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import Callable, Hashable, Iterable, List, Optional, Tuple

import numpy as np

from .primitives import Aabb, IntersectionData, Ray3d
from .raycast import Backfaces, Mesh, ray_intersection_over_mesh

EntityPredicate = Callable[[Hashable], bool]


def _always(_entity: Hashable) -> bool:
    return True


def _never(_entity: Hashable) -> bool:
    return False


class RaycastVisibility(enum.Enum):
    """How a raycast treats entity visibility."""

    IGNORE = "ignore"
    MUST_BE_VISIBLE = "must_be_visible"
    MUST_BE_VISIBLE_AND_IN_VIEW = "must_be_visible_and_in_view"


@dataclass(frozen=True)
class RaycastSettings:
    """Filtering, early-exit and visibility options for a raycast."""

    visibility: RaycastVisibility = RaycastVisibility.MUST_BE_VISIBLE_AND_IN_VIEW
    filter: EntityPredicate = _always
    early_exit_test: EntityPredicate = _always

    def with_filter(self, filter: EntityPredicate) -> "RaycastSettings":
        """Only entities for which ``filter`` returns true are considered."""
        return replace(self, filter=filter)

    def with_early_exit_test(self, early_exit_test: EntityPredicate) -> "RaycastSettings":
        """A hit on an entity for which this returns true blocks farther hits."""
        return replace(self, early_exit_test=early_exit_test)

    def with_visibility(self, visibility: RaycastVisibility) -> "RaycastSettings":
        return replace(self, visibility=visibility)

    def always_early_exit(self) -> "RaycastSettings":
        """Stop at the nearest hit."""
        return self.with_early_exit_test(_always)

    def never_early_exit(self) -> "RaycastSettings":
        """Return every hit of every entity whose bounding box the ray crosses."""
        return self.with_early_exit_test(_never)


@dataclass
class SimplifiedMesh:
    """A cheaper stand-in mesh used for raycasting instead of the rendered one."""

    mesh: Mesh


def _mesh_aabb(mesh: Optional[Mesh]) -> Optional[Aabb]:
    if mesh is None or mesh.positions is None:
        return None
    positions = np.asarray(mesh.positions, dtype=float).reshape(-1, 3)
    if len(positions) == 0:
        return None
    return Aabb.from_min_max(positions.min(axis=0), positions.max(axis=0))


@dataclass(eq=False)
class SceneEntity:
    """An entity that can be hit: its mesh, placement, bounds and visibility."""

    entity: Hashable
    mesh: Optional[Mesh]
    transform: np.ndarray = field(default_factory=lambda: np.eye(4))
    aabb: Optional[Aabb] = None
    visible_in_hierarchy: bool = True
    visible_in_view: bool = True
    simplified_mesh: Optional[SimplifiedMesh] = None
    no_backface_culling: bool = False

    def __post_init__(self) -> None:
        self.transform = np.array(self.transform, dtype=float)
        if self.transform.shape != (4, 4):
            raise ValueError(f"expected a 4x4 transform, got shape {self.transform.shape}")
        if self.aabb is None:
            self.aabb = _mesh_aabb(self.mesh)

    def passes(self, visibility: RaycastVisibility) -> bool:
        """Whether this entity may be raycast under ``visibility``."""
        if visibility is RaycastVisibility.IGNORE:
            return True
        if visibility is RaycastVisibility.MUST_BE_VISIBLE:
            return self.visible_in_hierarchy
        return self.visible_in_view


class Raycast:
    """Casts rays into a set of scene entities and returns sorted hits."""

    def __init__(self, entities: Iterable[SceneEntity] = ()) -> None:
        self.entities: List[SceneEntity] = list(entities)

    def _cull(self, ray: Ray3d, visibility: RaycastVisibility) -> List[Tuple[float, SceneEntity]]:
        culled = []
        for scene_entity in self.entities:
            if scene_entity.mesh is None or scene_entity.aabb is None:
                continue
            if not scene_entity.passes(visibility):
                continue
            span = ray.intersects_aabb(scene_entity.aabb, scene_entity.transform)
            if span is None:
                continue
            near, far = span
            if far >= 0.0:
                culled.append((near, scene_entity))
        culled.sort(key=lambda item: item[0])
        return culled

    def cast_ray(
        self, ray: Ray3d, settings: Optional[RaycastSettings] = None
    ) -> List[Tuple[Hashable, IntersectionData]]:
        """Cast ``ray`` and return ``(entity, hit)`` pairs, nearest first."""
        settings = settings or RaycastSettings()
        nearest_blocking_hit = math.inf
        hits: List[Tuple[float, Hashable, IntersectionData]] = []

        for aabb_near, scene_entity in self._cull(ray, settings.visibility):
            entity = scene_entity.entity
            if not settings.filter(entity):
                continue
            # The box starts beyond the best blocking hit: nothing nearer can be inside.
            if aabb_near > nearest_blocking_hit:
                continue
            mesh = (
                scene_entity.simplified_mesh.mesh
                if scene_entity.simplified_mesh is not None
                else scene_entity.mesh
            )
            if mesh is None:
                continue
            backfaces = (
                Backfaces.INCLUDE if scene_entity.no_backface_culling else Backfaces.CULL
            )
            intersection = ray_intersection_over_mesh(
                mesh, scene_entity.transform, ray, backfaces
            )
            if intersection is None:
                continue
            distance = float(intersection.distance)
            if settings.early_exit_test(entity) and distance < nearest_blocking_hit:
                nearest_blocking_hit = distance
            hits.append((distance, entity, intersection))

        kept = [hit for hit in hits if hit[0] <= nearest_blocking_hit]
        kept.sort(key=lambda hit: hit[0])
        return [(entity, intersection) for _, entity, intersection in kept]