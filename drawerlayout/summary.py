"""Read-only views over a layout used by the UI side panels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from drawerlayout.catalog import CatalogIndex
from drawerlayout.geometry import placement_rect, placement_size, rects_overlap, within_drawer
from drawerlayout.state import LayoutState
from drawerlayout.utils.colors import sanitize_color


@dataclass(frozen=True)
class PlacementGroup:
    width: float
    length: float
    color: str
    placement_ids: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.placement_ids)

    @property
    def label(self) -> str:
        return f"{_fmt(self.width)}x{_fmt(self.length)} Bin"


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def placement_groups(state: LayoutState, catalog: CatalogIndex) -> List[PlacementGroup]:
    """Group placements sharing effective size and color, most common first."""

    buckets: Dict[Tuple[float, float, str], List[str]] = {}
    for placement in state.placements:
        size = placement_size(placement, catalog)
        if size is None:
            continue
        key = (size.width, size.length, sanitize_color(placement.color))
        buckets.setdefault(key, []).append(placement.id)

    groups = [PlacementGroup(w, l, color, tuple(ids)) for (w, l, color), ids in buckets.items()]
    groups.sort(key=lambda g: g.count, reverse=True)
    return groups


def invalid_placement_ids(state: LayoutState, catalog: CatalogIndex) -> Set[str]:
    """Ids of placements that leave the drawer or overlap another placement."""

    invalid: Set[str] = set()
    sized = []
    for placement in state.placements:
        rect = placement_rect(placement, catalog)
        if rect is None:
            continue
        if not within_drawer(rect, state.drawer_width, state.drawer_length):
            invalid.add(placement.id)
        sized.append((placement.id, rect))

    for i, (id_a, rect_a) in enumerate(sized):
        for id_b, rect_b in sized[i + 1:]:
            if rects_overlap(rect_a, rect_b):
                invalid.add(id_a)
                invalid.add(id_b)
    return invalid


def space_used_percent(state: LayoutState, catalog: CatalogIndex) -> float:
    drawer_area = state.drawer_width * state.drawer_length
    if drawer_area <= 0:
        return 0.0
    used = 0.0
    for placement in state.placements:
        size = placement_size(placement, catalog)
        if size is not None:
            used += size.area
    return min(100.0, used / drawer_area * 100)
