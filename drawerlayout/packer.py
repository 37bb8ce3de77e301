"""Shelf packer behind "suggest layout".

Placements are laid out left to right in rows starting at the drawer origin;
a placement that does not fit the current row wraps to a new one below the
tallest item of the previous row. The run is all or nothing: if any row would
spill past the drawer's far edge the result is ``blocked`` and the caller must
not commit anything.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple, Union

from drawerlayout.catalog import CatalogIndex
from drawerlayout.geometry import placement_size
from drawerlayout.state import Placement, SuggestMode, SuggestResult, SuggestStatus

logger = logging.getLogger(__name__)


def order_by_area(placements: Sequence[Placement], catalog: CatalogIndex) -> List[Placement]:
    """Largest effective area first; ``sorted`` is stable so ties keep input order."""

    def area(placement: Placement) -> float:
        size = placement_size(placement, catalog)
        return size.area if size else 0.0

    return sorted(placements, key=area, reverse=True)


def shelf_pack(
    ordered: Sequence[Placement],
    catalog: CatalogIndex,
    drawer_width: float,
    drawer_length: float,
) -> SuggestResult:
    """Pack ``ordered`` row by row.

    The output keeps packing order. Placements whose size cannot be resolved
    are skipped and keep their position. Targets are tracked by list position,
    so duplicate ids still get distinct cells.
    """
    targets: List[Optional[Tuple[float, float]]] = [None] * len(ordered)

    cursor_x = 0.0
    cursor_y = 0.0
    row_height = 0.0
    moved = 0

    for index, placement in enumerate(ordered):
        size = placement_size(placement, catalog)
        if size is None:
            continue
        if size.width > drawer_width or size.length > drawer_length:
            return SuggestResult(SuggestStatus.BLOCKED, moved)

        if cursor_x + size.width > drawer_width:
            cursor_x = 0.0
            cursor_y += row_height
            row_height = 0.0

        if cursor_y + size.length > drawer_length:
            return SuggestResult(SuggestStatus.BLOCKED, moved)

        target = (cursor_x, cursor_y)
        cursor_x += size.width
        row_height = max(row_height, size.length)

        if (placement.x, placement.y) != target:
            moved += 1
        targets[index] = target

    packed = tuple(
        placement if target is None else placement.moved_to(*target)
        for placement, target in zip(ordered, targets)
    )
    return SuggestResult(SuggestStatus.APPLIED, moved, packed)


def suggest_layout(
    placements: Sequence[Placement],
    catalog: CatalogIndex,
    drawer_width: float,
    drawer_length: float,
    mode: Union[SuggestMode, str] = SuggestMode.PACK,
    rng: Optional[random.Random] = None,
) -> SuggestResult:
    """Recompute non-overlapping positions for ``placements``.

    ``pack`` orders by area (largest first); ``random`` shuffles with ``rng``
    (a fresh ``random.Random`` when omitted) and then runs the same packer.
    """
    mode = SuggestMode(mode)
    if not placements:
        return SuggestResult(SuggestStatus.APPLIED, 0, ())

    if mode is SuggestMode.PACK:
        ordered = order_by_area(placements, catalog)
    else:
        ordered = list(placements)
        (rng or random.Random()).shuffle(ordered)

    result = shelf_pack(ordered, catalog, drawer_width, drawer_length)
    logger.debug("suggest_layout(%s): %s, moved=%d", mode.value, result.status.value, result.moved)
    return result

