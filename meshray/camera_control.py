"""Choice of which entity the camera follows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, List, Optional


@dataclass
class CameraParentList:
    """Candidate parents for the camera and the index of the active one."""

    parents: List[Hashable] = field(default_factory=list)
    active: int = 0

    def __post_init__(self) -> None:
        self.parents = [*self.parents]
        if self.parents and not 0 <= self.active < len(self.parents):
            raise ValueError(
                f"active index {self.active} out of range for {len(self.parents)} parents"
            )

    def cycle(self) -> None:
        """Switch to the next parent, wrapping around; no-op when there are none."""
        if not self.parents:
            return
        self.active = (self.active + 1) % len(self.parents)

    def active_parent(self) -> Optional[Hashable]:
        """The entity the camera should follow, or ``None`` if there is none."""
        if not self.parents:
            return None
        return self.parents[self.active]