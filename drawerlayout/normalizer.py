"""Validation for layouts that arrive from outside the process.

Local storage, share links and uploaded files all pass through
:func:`normalize_text` (raw text) or :func:`normalize_payload` (already
decoded JSON) before they can become the present layout. The result is
either ``Ok(state)`` with a fully valid, freshly built ``LayoutState`` or
``Rejected(reason)``. Nothing here raises for bad input and nothing is ever
partially applied: one bad placement voids the whole payload.

Rules applied to every payload:

- serialized size within the ceiling for its source
- drawer dimensions finite, rounded to 1/4", within the drawer range
- at most ``max_placements`` placements, each with a unique non-empty id,
  a ``binId`` present in the catalog and finite 1/4"-rounded coordinates
- size overrides, when present, within the bin range (or up to the bin's own
  catalog size for stock bins longer than that range)
- invalid colors fall back to the default color, labels are truncated
- every placement fits inside the drawer and no two placements overlap
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

from drawerlayout.catalog import CatalogIndex, override_ceiling
from drawerlayout.config import DEFAULT_LIMITS, LayoutLimits
from drawerlayout.geometry import find_violations
from drawerlayout.state import LayoutState, Placement
from drawerlayout.utils.colors import sanitize_color
from drawerlayout.utils.json import parse_json_text
from drawerlayout.utils.labels import clip_text, normalize_title

logger = logging.getLogger(__name__)


class PayloadSource(str, Enum):
    STORAGE = "storage"
    FILE = "file"
    SHARE_LINK = "share_link"


@dataclass(frozen=True)
class Ok:
    state: LayoutState

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: str

    def __bool__(self) -> bool:
        return False


NormalizeResult = Union[Ok, Rejected]


class _Invalid(Exception):
    """Internal short-circuit; never escapes this module."""


def round_quarter(value: float) -> float:
    """Round half up to the nearest 0.25"."""
    return math.floor(value * 4 + 0.5) / 4


def char_ceiling(source: PayloadSource, limits: LayoutLimits = DEFAULT_LIMITS) -> int:
    if source is PayloadSource.SHARE_LINK:
        return limits.max_share_param_chars
    return limits.max_stored_chars


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _quarter(value: Any, field: str, low: float, high: float) -> float:
    if not _is_number(value):
        raise _Invalid(f"{field} must be a number")
    try:
        number = float(value)
    except OverflowError:
        raise _Invalid(f"{field} is out of range") from None
    if not math.isfinite(number):
        raise _Invalid(f"{field} must be finite")
    rounded = round_quarter(number)
    if rounded < low or rounded > high:
        raise _Invalid(f"{field}={rounded} outside [{low}, {high}]")
    return rounded


def _placement(raw: Any, index: int, catalog: CatalogIndex, limits: LayoutLimits) -> Placement:
    if not isinstance(raw, dict):
        raise _Invalid(f"placements[{index}] is not an object")

    placement_id = raw.get("id")
    if not isinstance(placement_id, str) or not placement_id:
        raise _Invalid(f"placements[{index}] has no id")

    bin_id = raw.get("binId")
    if not isinstance(bin_id, str) or bin_id not in catalog:
        raise _Invalid(f"placement {placement_id} references unknown bin {bin_id!r}")

    x = _quarter(raw.get("x"), f"{placement_id}.x", 0.0, limits.max_drawer_dim)
    y = _quarter(raw.get("y"), f"{placement_id}.y", 0.0, limits.max_drawer_dim)

    ceiling = override_ceiling(catalog.require(bin_id), limits.max_bin_dim)
    width: Optional[float] = None
    length: Optional[float] = None
    if raw.get("width") is not None:
        width = _quarter(raw["width"], f"{placement_id}.width", limits.min_bin_dim, ceiling.width)
    if raw.get("length") is not None:
        length = _quarter(raw["length"], f"{placement_id}.length", limits.min_bin_dim, ceiling.length)

    label = raw.get("label")
    return Placement(
        id=placement_id,
        bin_id=bin_id,
        x=x,
        y=y,
        width=width,
        length=length,
        color=sanitize_color(raw.get("color")),
        label=clip_text(label, limits.max_label_length) if isinstance(label, str) and label else None,
    )


def _build_state(payload: Any, catalog: CatalogIndex, limits: LayoutLimits) -> LayoutState:
    if not isinstance(payload, dict):
        raise _Invalid("payload is not an object")

    drawer_width = _quarter(payload.get("drawerWidth"), "drawerWidth", limits.min_drawer_dim, limits.max_drawer_dim)
    drawer_length = _quarter(payload.get("drawerLength"), "drawerLength", limits.min_drawer_dim, limits.max_drawer_dim)

    raw_placements = payload.get("placements")
    if not isinstance(raw_placements, list):
        raise _Invalid("placements must be a list")
    if len(raw_placements) > limits.max_placements:
        raise _Invalid(f"{len(raw_placements)} placements exceeds {limits.max_placements}")

    placements: List[Placement] = []
    seen = set()
    for index, raw in enumerate(raw_placements):
        placement = _placement(raw, index, catalog, limits)
        if placement.id in seen:
            raise _Invalid(f"duplicate placement id {placement.id}")
        seen.add(placement.id)
        placements.append(placement)

    state = LayoutState(
        drawer_width=drawer_width,
        drawer_length=drawer_length,
        placements=tuple(placements),
        layout_title=normalize_title(payload.get("layoutTitle"), limits.max_title_length),
    )
    problems = find_violations(state, catalog)
    if problems:
        raise _Invalid(problems[0])
    return state


def normalize_payload(
    payload: Any,
    catalog: CatalogIndex,
    source: PayloadSource = PayloadSource.FILE,
    limits: LayoutLimits = DEFAULT_LIMITS,
) -> NormalizeResult:
    """Validate an already-decoded payload (dict from JSON or from code)."""

    try:
        serialized = json.dumps(payload, allow_nan=True)
    except (TypeError, ValueError, RecursionError):
        return _reject(source, "payload is not JSON serializable")
    if len(serialized) > char_ceiling(source, limits):
        return _reject(source, f"payload of {len(serialized)} chars exceeds ceiling")
    return _validate(payload, catalog, source, limits)


def normalize_text(
    raw: Optional[str],
    catalog: CatalogIndex,
    source: PayloadSource = PayloadSource.STORAGE,
    limits: LayoutLimits = DEFAULT_LIMITS,
) -> NormalizeResult:
    """Validate raw JSON text from storage, a file or a decoded share link."""

    if raw is None:
        return Rejected("nothing to load")
    ceiling = char_ceiling(source, limits)
    if len(raw) > ceiling:
        return _reject(source, f"payload of {len(raw)} chars exceeds ceiling {ceiling}")
    payload = parse_json_text(raw, ceiling)
    if payload is None:
        return _reject(source, "payload is not valid JSON")
    return _validate(payload, catalog, source, limits)


def _validate(payload: Any, catalog: CatalogIndex, source: PayloadSource, limits: LayoutLimits) -> NormalizeResult:
    try:
        state = _build_state(payload, catalog, limits)
    except _Invalid as exc:
        return _reject(source, str(exc))
    return Ok(state)


def _reject(source: PayloadSource, reason: str) -> Rejected:
    logger.warning("Discarding %s layout: %s", source.value, reason)
    return Rejected(reason)

