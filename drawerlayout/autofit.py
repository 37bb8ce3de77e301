"""Nearest free cell search used for click-to-place and drag-to-move.

The search enumerates every grid-aligned origin where the rectangle fits,
orders them by squared distance to the requested point and returns the first
one that does not collide. Ties keep sweep order (rows top to bottom, then
columns left to right), so the result is fully deterministic.

Grid granularity is 1" unless the start point or an existing placement sits
off the integer grid, in which case 0.5" is used. This is a heuristic: a gap
that only a fractional offset of the *new* bin could use is missed when
everything else is integer-aligned.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from drawerlayout.catalog import CatalogIndex
from drawerlayout.geometry import effective_rects
from drawerlayout.state import Placement, Point, Size

logger = logging.getLogger(__name__)

# Tolerance for the upper bound of the candidate range.
_EPS = 1e-6
_CHUNK = 4096


def has_fractional_placements(placements: Sequence[Placement], start_x: float, start_y: float) -> bool:
    if start_x % 1 != 0 or start_y % 1 != 0:
        return True
    return any(p.x % 1 != 0 or p.y % 1 != 0 for p in placements)


def search_step(placements: Sequence[Placement], start_x: float, start_y: float) -> float:
    return 0.5 if has_fractional_placements(placements, start_x, start_y) else 1.0


def find_first_fit(
    size: Size,
    start_x: float,
    start_y: float,
    placements: Sequence[Placement],
    catalog: CatalogIndex,
    drawer_width: float,
    drawer_length: float,
) -> Optional[Point]:
    """Return the nearest non-colliding grid origin for ``size``, or None.

    Pure function: the same inputs always produce the same output.
    """
    max_x = drawer_width - size.width
    max_y = drawer_length - size.length
    if max_x < -_EPS or max_y < -_EPS:
        return None

    step = search_step(placements, start_x, start_y)
    xs = np.arange(0.0, max_x + _EPS, step)
    ys = np.arange(0.0, max_y + _EPS, step)
    if xs.size == 0 or ys.size == 0:
        return None

    # Row-major ravel gives y as the outer loop and x as the inner loop.
    grid_x, grid_y = np.meshgrid(xs, ys)
    cand_x = grid_x.ravel()
    cand_y = grid_y.ravel()

    d2 = (cand_x - start_x) ** 2 + (cand_y - start_y) ** 2
    order = np.argsort(d2, kind="stable")
    cand_x = cand_x[order]
    cand_y = cand_y[order]

    rects = effective_rects(placements, catalog)
    if not rects:
        return Point(float(cand_x[0]), float(cand_y[0]))

    others = np.asarray(rects, dtype=float)
    ox = others[:, 0][None, :]
    oy = others[:, 1][None, :]
    ox2 = (others[:, 0] + others[:, 2])[None, :]
    oy2 = (others[:, 1] + others[:, 3])[None, :]

    # Chunked so large drawers with many placements stay bounded in memory.
    for start in range(0, cand_x.shape[0], _CHUNK):
        cx = cand_x[start:start + _CHUNK, None]
        cy = cand_y[start:start + _CHUNK, None]
        overlap = (cx < ox2) & (cx + size.width > ox) & (cy < oy2) & (cy + size.length > oy)
        hits = np.flatnonzero(~overlap.any(axis=1))
        if hits.size:
            first = start + hits[0]
            return Point(float(cand_x[first]), float(cand_y[first]))

    logger.debug("No free %sx%s cell in %sx%s drawer", size.width, size.length, drawer_width, drawer_length)
    return None
