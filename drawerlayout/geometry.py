"""Axis-aligned rectangle helpers for placements inside the drawer.

All rectangles are ``(x, y, width, length)`` in inches with the origin at
the drawer's top-left corner. Overlap uses open intervals, so rectangles
that only share an edge do not collide.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from drawerlayout.catalog import CatalogIndex
from drawerlayout.state import LayoutState, Placement, Point, Size

Rect = Tuple[float, float, float, float]


def placement_size(placement: Placement, catalog: CatalogIndex) -> Optional[Size]:
    """Effective size of ``placement``: override if present, else catalog size.

    Returns None when ``bin_id`` is not in the catalog, whatever the
    overrides say; such placements are invalid and skipped everywhere.
    """
    spec = catalog.get(placement.bin_id)
    if spec is None:
        return None
    width = placement.width if placement.width is not None else spec.width
    length = placement.length if placement.length is not None else spec.length
    return Size(width, length)


def placement_rect(placement: Placement, catalog: CatalogIndex) -> Optional[Rect]:
    size = placement_size(placement, catalog)
    if size is None:
        return None
    return (placement.x, placement.y, size.width, size.length)


def effective_rects(
    placements: Iterable[Placement],
    catalog: CatalogIndex,
    ignore_id: Optional[str] = None,
) -> List[Rect]:
    """Rectangles of every resolvable placement except ``ignore_id``."""

    rects: List[Rect] = []
    for placement in placements:
        if ignore_id is not None and placement.id == ignore_id:
            continue
        rect = placement_rect(placement, catalog)
        if rect is not None:
            rects.append(rect)
    return rects


def rects_overlap(a: Rect, b: Rect) -> bool:
    ax, ay, aw, al = a
    bx, by, bw, bl = b
    return ax < bx + bw and ax + aw > bx and ay < by + bl and ay + al > by


def clamp_position(
    x: float,
    y: float,
    size: Size,
    drawer_width: float,
    drawer_length: float,
) -> Point:
    """Clamp an origin so ``size`` stays inside the drawer.

    If ``size`` is larger than the drawer the clamp range is inverted and the
    result is pinned to 0; use :func:`fits_drawer` first.
    """
    clamped_x = max(0.0, min(x, drawer_width - size.width))
    clamped_y = max(0.0, min(y, drawer_length - size.length))
    return Point(clamped_x, clamped_y)


def fits_drawer(size: Size, drawer_width: float, drawer_length: float) -> bool:
    return size.width <= drawer_width and size.length <= drawer_length


def within_drawer(rect: Rect, drawer_width: float, drawer_length: float) -> bool:
    x, y, w, l = rect
    return x >= 0 and y >= 0 and x + w <= drawer_width and y + l <= drawer_length


def has_collision(
    size: Size,
    x: float,
    y: float,
    placements: Sequence[Placement],
    catalog: CatalogIndex,
    ignore_id: Optional[str] = None,
) -> bool:
    """True if ``(x, y, size)`` overlaps any resolvable placement but ``ignore_id``."""

    candidate = (x, y, size.width, size.length)
    for placement in placements:
        if ignore_id is not None and placement.id == ignore_id:
            continue
        rect = placement_rect(placement, catalog)
        if rect is None:
            continue
        if rects_overlap(candidate, rect):
            return True
    return False


def would_clip(state: LayoutState, catalog: CatalogIndex, drawer_width: float, drawer_length: float) -> bool:
    """True if shrinking the drawer to the given size would cut off a placement."""

    for placement in state.placements:
        size = placement_size(placement, catalog)
        if size is None:
            continue
        if placement.x + size.width > drawer_width or placement.y + size.length > drawer_length:
            return True
    return False


def find_violations(state: LayoutState, catalog: CatalogIndex) -> List[str]:
    """Human readable bounds/overlap problems in ``state``; empty when valid."""

    problems: List[str] = []
    sized = []
    for placement in state.placements:
        rect = placement_rect(placement, catalog)
        if rect is None:
            continue
        if not within_drawer(rect, state.drawer_width, state.drawer_length):
            problems.append(f"Placement {placement.id} out of bounds")
        sized.append((placement.id, rect))

    for i, (id_a, rect_a) in enumerate(sized):
        for id_b, rect_b in sized[i + 1:]:
            if rects_overlap(rect_a, rect_b):
                problems.append(f"Placement {id_a} overlaps {id_b}")
    return problems
