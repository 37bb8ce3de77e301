"""Layout value objects shared by every part of the placement core."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Size:
    """Footprint of a rectangle in inches."""

    width: float
    length: float

    @property
    def area(self) -> float:
        return self.width * self.length


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Placement:
    """One bin positioned inside the drawer.

    ``width``/``length`` are optional overrides; when absent the size of the
    referenced catalog entry applies.
    """

    id: str
    bin_id: str
    x: float
    y: float
    width: Optional[float] = None
    length: Optional[float] = None
    color: Optional[str] = None
    label: Optional[str] = None

    def moved_to(self, x: float, y: float) -> Placement:
        return replace(self, x=x, y=y)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "binId": self.bin_id,
            "x": self.x,
            "y": self.y,
        }
        if self.width is not None:
            data["width"] = self.width
        if self.length is not None:
            data["length"] = self.length
        if self.color is not None:
            data["color"] = self.color
        if self.label is not None:
            data["label"] = self.label
        return data


@dataclass(frozen=True)
class LayoutState:
    """Snapshot of the whole layout: title, drawer size and placements.

    Instances are never mutated; every edit builds a new snapshot.
    """

    drawer_width: float
    drawer_length: float
    placements: Tuple[Placement, ...] = ()
    layout_title: str = ""

    def with_placements(self, placements: List[Placement] | Tuple[Placement, ...]) -> LayoutState:
        return replace(self, placements=tuple(placements))

    def find(self, placement_id: str) -> Optional[Placement]:
        for placement in self.placements:
            if placement.id == placement_id:
                return placement
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted/shared JSON shape."""

        return {
            "layoutTitle": self.layout_title,
            "drawerWidth": self.drawer_width,
            "drawerLength": self.drawer_length,
            "placements": [p.to_dict() for p in self.placements],
        }


class PlacementStatus(str, Enum):
    PLACED = "placed"
    AUTOFIT = "autofit"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class PlacementResult:
    status: PlacementStatus
    position: Optional[Point] = None

    @classmethod
    def blocked(cls) -> PlacementResult:
        return cls(PlacementStatus.BLOCKED)

    @property
    def ok(self) -> bool:
        return self.status is not PlacementStatus.BLOCKED


class SuggestStatus(str, Enum):
    APPLIED = "applied"
    BLOCKED = "blocked"


class SuggestMode(str, Enum):
    PACK = "pack"
    RANDOM = "random"


@dataclass(frozen=True)
class SuggestResult:
    """Outcome of a packer run.

    ``placements`` is only meaningful when ``status`` is ``applied``; for a
    blocked run ``moved`` is informational and nothing must be committed.
    """

    status: SuggestStatus
    moved: int
    placements: Tuple[Placement, ...] = field(default=())
