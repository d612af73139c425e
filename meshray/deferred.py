"""Deferred raycasting: sources and target meshes are declared, rays are cast once per frame."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import (
    Callable,
    Container,
    Hashable,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
)

import numpy as np

from .immediate import Raycast, RaycastSettings, RaycastVisibility
from .primitives import IntersectionData, Ray3d

logger = logging.getLogger(__name__)

Hit = Tuple[Hashable, IntersectionData]
ScreenToRay = Callable[[Hashable, np.ndarray], Optional[Ray3d]]


@dataclass
class RaycastPluginState:
    """Switches that enable or disable the stages of deferred raycasting."""

    build_rays: bool = True
    update_raycast: bool = True
    update_debug_cursor: bool = False

    def with_debug_cursor(self) -> "RaycastPluginState":
        """A copy of this state with the debug cursor turned on."""
        return replace(self, update_debug_cursor=True)


class RaycastMethod(enum.Enum):
    """How a raycast source builds its ray."""

    CURSOR = "cursor"
    SCREENSPACE = "screenspace"
    TRANSFORM = "transform"


@dataclass
class RaycastMesh:
    """Marks an entity as a raycast target; holds ``(source entity, hit)`` pairs."""

    intersections: List[Hit] = field(default_factory=list)


@dataclass
class RaycastSource:
    """An entity that casts a ray each frame, built according to ``cast_method``."""

    cast_method: RaycastMethod = RaycastMethod.SCREENSPACE
    should_early_exit: bool = True
    visibility: RaycastVisibility = RaycastVisibility.MUST_BE_VISIBLE_AND_IN_VIEW
    ray: Optional[Ray3d] = None
    screen_position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    transform: Optional[np.ndarray] = None
    intersections: List[Hit] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.screen_position = np.array(self.screen_position, dtype=float).reshape(2)
        if self.transform is not None:
            self.transform = np.array(self.transform, dtype=float)
            if self.transform.shape != (4, 4):
                raise ValueError(
                    f"expected a 4x4 transform, got shape {self.transform.shape}"
                )

    def _copy_with(self, **changes) -> "RaycastSource":
        changes.setdefault("intersections", list(self.intersections))
        return replace(self, **changes)

    @classmethod
    def new_cursor(cls) -> "RaycastSource":
        """A source whose ray follows the mouse cursor."""
        return cls(cast_method=RaycastMethod.CURSOR)

    @classmethod
    def new_transform(cls, transform) -> "RaycastSource":
        """A source with a ray already built from ``transform``."""
        return cls().with_ray_transform(transform)

    @classmethod
    def new_transform_empty(cls) -> "RaycastSource":
        """A transform source with no ray until a transform is given and rays are built."""
        return cls(cast_method=RaycastMethod.TRANSFORM)

    def with_ray_transform(self, transform) -> "RaycastSource":
        """A copy that casts from ``transform`` along its local -Z axis."""
        matrix = np.array(transform, dtype=float)
        return self._copy_with(
            cast_method=RaycastMethod.TRANSFORM,
            transform=matrix,
            ray=Ray3d.from_transform(matrix),
        )

    def with_early_exit(self, should_early_exit: bool) -> "RaycastSource":
        return self._copy_with(should_early_exit=should_early_exit)

    def with_visibility(self, visibility: RaycastVisibility) -> "RaycastSource":
        return self._copy_with(visibility=visibility)

    def nearest_intersection(self) -> Optional[Hit]:
        """The nearest ``(entity, hit)`` pair, or ``None`` when nothing was hit."""
        return self.intersections[0] if self.intersections else None

    def intersect_primitive(self, shape) -> Optional[IntersectionData]:
        """Intersect this source's ray with a primitive shape."""
        if self.ray is None:
            return None
        hit = self.ray.intersects_primitive(shape)
        if hit is None:
            return None
        return IntersectionData.from_primitive(hit)

    def is_screenspace(self) -> bool:
        return self.cast_method is RaycastMethod.SCREENSPACE


def _screen_ray(
    entity: Hashable, position, screen_to_ray: Optional[ScreenToRay]
) -> Optional[Ray3d]:
    if screen_to_ray is None:
        logger.error("The raycast source has no camera to project a screen position")
        return None
    return screen_to_ray(entity, np.array(position, dtype=float))


def build_rays(
    sources: Mapping[Hashable, RaycastSource],
    cursor_ray: Optional[Ray3d] = None,
    screen_to_ray: Optional[ScreenToRay] = None,
) -> None:
    """Rebuild the ray of every source from its cast method.

    ``cursor_ray`` is the ray under the mouse cursor, if any; ``screen_to_ray``
    projects a screen position through the camera of the given source entity.
    """
    for entity, source in sources.items():
        if source.cast_method is RaycastMethod.CURSOR:
            source.ray = cursor_ray
        elif source.cast_method is RaycastMethod.SCREENSPACE:
            source.ray = _screen_ray(entity, source.screen_position, screen_to_ray)
        elif source.transform is None:
            source.ray = None
        else:
            source.ray = Ray3d.from_transform(source.transform)


def update_raycast(
    raycast: Raycast,
    sources: Mapping[Hashable, RaycastSource],
    meshes: Container[Hashable],
) -> None:
    """Cast each source's ray against the entities in ``meshes`` and store the hits."""
    for source in sources.values():
        if source.ray is None:
            continue
        early_exit = source.should_early_exit
        settings = (
            RaycastSettings()
            .with_filter(lambda entity: entity in meshes)
            .with_early_exit_test(lambda _entity, flag=early_exit: flag)
            .with_visibility(source.visibility)
        )
        source.intersections = raycast.cast_ray(source.ray, settings)


class DeferredRaycasting:
    """Runs the deferred raycasting stages for one set of sources and meshes."""

    def __init__(self, state: Optional[RaycastPluginState] = None) -> None:
        self.state = state if state is not None else RaycastPluginState()
        self._previously_updated: List[Hashable] = []

    def update_target_intersections(
        self,
        sources: Mapping[Hashable, RaycastSource],
        meshes: MutableMapping[Hashable, RaycastMesh],
    ) -> None:
        """Copy source hits onto the meshes that were hit, clearing last frame's."""
        for entity in self._previously_updated:
            mesh = meshes.get(entity)
            if mesh is not None:
                mesh.intersections.clear()
        self._previously_updated = []

        for source_entity, source in sources.items():
            for mesh_entity, intersection in source.intersections:
                mesh = meshes.get(mesh_entity)
                if mesh is None:
                    continue
                mesh.intersections.append((source_entity, intersection))
                self._previously_updated.append(mesh_entity)

    def run(
        self,
        raycast: Raycast,
        sources: Mapping[Hashable, RaycastSource],
        meshes: MutableMapping[Hashable, RaycastMesh],
        cursor_ray: Optional[Ray3d] = None,
        screen_to_ray: Optional[ScreenToRay] = None,
    ) -> None:
        """One frame: build rays, cast them, and distribute hits to meshes."""
        if self.state.build_rays:
            build_rays(sources, cursor_ray, screen_to_ray)
        if self.state.update_raycast:
            update_raycast(raycast, sources, meshes)
            self.update_target_intersections(sources, meshes)