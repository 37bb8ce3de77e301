"""Editing session: every user-facing layout operation in one place.

``LayoutSession`` composes the catalog, the history store and the placement
algorithms. Each operation computes a complete candidate snapshot first and
commits it with a single ``push_state``; operations that cannot succeed
return a ``blocked`` result and leave history untouched.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Optional, Union

from drawerlayout.autofit import find_first_fit
from drawerlayout.catalog import CatalogIndex, override_ceiling
from drawerlayout.config import DEFAULT_DRAWER_LENGTH, DEFAULT_DRAWER_WIDTH, DEFAULT_LIMITS, LayoutLimits
from drawerlayout.geometry import clamp_position, find_violations, fits_drawer, has_collision, placement_size, would_clip
from drawerlayout.history import HistoryStore
from drawerlayout.normalizer import NormalizeResult, Ok, PayloadSource, normalize_payload, normalize_text, round_quarter
from drawerlayout.packer import suggest_layout
from drawerlayout.state import (
    LayoutState,
    Placement,
    PlacementResult,
    PlacementStatus,
    Point,
    Size,
    SuggestMode,
    SuggestResult,
    SuggestStatus,
)
from drawerlayout.utils.colors import DEFAULT_BIN_COLOR, is_valid_hex_color, normalize_hex_color
from drawerlayout.utils.labels import clip_text

logger = logging.getLogger(__name__)


def default_layout() -> LayoutState:
    return LayoutState(drawer_width=DEFAULT_DRAWER_WIDTH, drawer_length=DEFAULT_DRAWER_LENGTH)


def _new_placement_id() -> str:
    return f"placement-{uuid.uuid4().hex}"


def placement_edits(
    placement: Placement,
    current: Size,
    *,
    width: Optional[float] = None,
    length: Optional[float] = None,
    color: Optional[str] = None,
    label: Optional[str] = None,
) -> Dict[str, Any]:
    """Keyword arguments for ``update_placement`` holding only real changes.

    Editors submit every field at once; unchanged ones are dropped so a
    relabel never resizes or recolors the bin as a side effect.
    """
    edits: Dict[str, Any] = {}
    if width is not None and width != current.width:
        edits["width"] = width
    if length is not None and length != current.length:
        edits["length"] = length
    if color is not None:
        before = normalize_hex_color(placement.color or DEFAULT_BIN_COLOR)
        if not is_valid_hex_color(color) or normalize_hex_color(color) != before:
            edits["color"] = color
    if label is not None and label != (placement.label or ""):
        edits["label"] = label
    return edits


class LayoutSession:
    """Owns the layout history for one drawer and exposes the edit operations.

    Args:
        catalog: Bin catalog used to resolve placement sizes.
        initial: Starting snapshot; defaults to an empty drawer.
        limits: Validation limits for resize and import.
        id_factory: Generates ids for new placements.
        rng: Random source for the ``random`` suggest mode.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        initial: Optional[LayoutState] = None,
        *,
        limits: LayoutLimits = DEFAULT_LIMITS,
        id_factory: Callable[[], str] = _new_placement_id,
        rng: Optional[random.Random] = None,
    ) -> None:
        if catalog is None:
            raise ValueError("LayoutSession requires a catalog")
        self.catalog = catalog
        self.limits = limits
        self.history = HistoryStore(initial or default_layout(), capacity=limits.max_history)
        self._id_factory = id_factory
        self._rng = rng or random.Random()

    # State access -----------------------------------------------------------

    @property
    def state(self) -> LayoutState:
        return self.history.present

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def size_of(self, placement: Placement) -> Optional[Size]:
        return placement_size(placement, self.catalog)

    def _commit(self, next_state: LayoutState, action: str) -> None:
        self.history.push_state(next_state)
        logger.debug("%s -> %d placements", action, len(next_state.placements))
        problems = find_violations(next_state, self.catalog)
        if problems:
            logger.warning("Layout invariant violations after %s: %s", action, problems)

    # Placement operations -------------------------------------------------

    def add_placement(self, bin_id: str, x: float = 0, y: float = 0) -> PlacementResult:
        state = self.state
        spec = self.catalog.get(bin_id)
        if spec is None:
            return PlacementResult.blocked()
        size = spec.size
        if not fits_drawer(size, state.drawer_width, state.drawer_length):
            return PlacementResult.blocked()

        target, status = self._resolve_target(size, x, y, state.placements)
        if target is None:
            return PlacementResult.blocked()

        placement = Placement(
            id=self._id_factory(),
            bin_id=bin_id,
            x=target.x,
            y=target.y,
            color=DEFAULT_BIN_COLOR,
        )
        self._commit(state.with_placements(state.placements + (placement,)), "add")
        return PlacementResult(status, target)

    def move_placement(self, placement_id: str, x: float, y: float) -> PlacementResult:
        state = self.state
        placement = state.find(placement_id)
        if placement is None:
            return PlacementResult.blocked()
        size = self.size_of(placement)
        if size is None or not fits_drawer(size, state.drawer_width, state.drawer_length):
            return PlacementResult.blocked()

        others = tuple(p for p in state.placements if p.id != placement_id)
        target, status = self._resolve_target(size, x, y, others)
        if target is None:
            return PlacementResult.blocked()

        moved = tuple(p.moved_to(target.x, target.y) if p.id == placement_id else p for p in state.placements)
        self._commit(state.with_placements(moved), "move")
        return PlacementResult(status, target)

    def _resolve_target(self, size: Size, x: float, y: float, others) -> tuple:
        state = self.state
        safe = clamp_position(x, y, size, state.drawer_width, state.drawer_length)
        if not has_collision(size, safe.x, safe.y, others, self.catalog):
            return safe, PlacementStatus.PLACED
        suggestion = find_first_fit(
            size, safe.x, safe.y, others, self.catalog, state.drawer_width, state.drawer_length
        )
        if suggestion is None:
            return None, PlacementStatus.BLOCKED
        return suggestion, PlacementStatus.AUTOFIT

    def update_placement(
        self,
        placement_id: str,
        *,
        width: Optional[float] = None,
        length: Optional[float] = None,
        color: Optional[str] = None,
        label: Optional[str] = None,
    ) -> PlacementResult:
        """Resize, recolor or relabel a placement in place.

        Resizing never moves or shrinks anything: a size outside the bin
        range (a stock bin may keep its own longer side), past the drawer
        edge or over a sibling is ``blocked``.
        """
        state = self.state
        placement = state.find(placement_id)
        if placement is None:
            return PlacementResult.blocked()
        current = self.size_of(placement)
        if current is None:
            return PlacementResult.blocked()

        limits = self.limits
        changes: Dict[str, Any] = {}
        if width is not None or length is not None:
            size = Size(
                width if width is not None else current.width,
                length if length is not None else current.length,
            )
            ceiling = override_ceiling(self.catalog.require(placement.bin_id), limits.max_bin_dim)
            if not (limits.min_bin_dim <= size.width <= ceiling.width):
                return PlacementResult.blocked()
            if not (limits.min_bin_dim <= size.length <= ceiling.length):
                return PlacementResult.blocked()
            if placement.x + size.width > state.drawer_width or placement.y + size.length > state.drawer_length:
                return PlacementResult.blocked()
            if has_collision(size, placement.x, placement.y, state.placements, self.catalog, placement_id):
                return PlacementResult.blocked()
            changes["width"] = size.width
            changes["length"] = size.length

        if color is not None:
            if not is_valid_hex_color(color):
                return PlacementResult.blocked()
            changes["color"] = normalize_hex_color(color)

        if label is not None:
            changes["label"] = clip_text(label, limits.max_label_length) or None

        position = Point(placement.x, placement.y)
        if not changes:
            return PlacementResult(PlacementStatus.PLACED, position)

        updated = replace(placement, **changes)
        placements = tuple(updated if p.id == placement_id else p for p in state.placements)
        self._commit(state.with_placements(placements), "update")
        return PlacementResult(PlacementStatus.PLACED, position)

    def remove_placement(self, placement_id: str) -> bool:
        return self.remove_placements([placement_id]) > 0

    def remove_placements(self, placement_ids: Iterable[str]) -> int:
        doomed = set(placement_ids)
        state = self.state
        kept = tuple(p for p in state.placements if p.id not in doomed)
        removed = len(state.placements) - len(kept)
        if removed:
            self._commit(state.with_placements(kept), "remove")
        return removed

    def clear_placements(self) -> int:
        return self.remove_placements([p.id for p in self.state.placements])

    # Drawer operations ----------------------------------------------------

    def set_drawer_size(self, width: float, length: float) -> PlacementResult:
        limits = self.limits
        try:
            width = round_quarter(float(width))
            length = round_quarter(float(length))
        except (TypeError, ValueError, OverflowError):
            return PlacementResult.blocked()
        for dim in (width, length):
            if not (limits.min_drawer_dim <= dim <= limits.max_drawer_dim):
                return PlacementResult.blocked()

        state = self.state
        if would_clip(state, self.catalog, width, length):
            logger.info("Drawer resize to %sx%s would clip bins", width, length)
            return PlacementResult.blocked()
        if (width, length) != (state.drawer_width, state.drawer_length):
            self._commit(replace(state, drawer_width=width, drawer_length=length), "drawer")
        return PlacementResult(PlacementStatus.PLACED)

    def set_layout_title(self, title: str) -> str:
        title = clip_text(title, self.limits.max_title_length)
        state = self.state
        if title != state.layout_title:
            self._commit(replace(state, layout_title=title), "title")
        return title

    def suggest_layout(self, mode: Union[SuggestMode, str] = SuggestMode.PACK) -> SuggestResult:
        state = self.state
        result = suggest_layout(
            state.placements, self.catalog, state.drawer_width, state.drawer_length, mode, rng=self._rng
        )
        if result.status is SuggestStatus.APPLIED and result.moved > 0:
            self._commit(state.with_placements(result.placements), f"suggest:{SuggestMode(mode).value}")
        return result

    # History ----------------------------------------------------------------

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def reset(self, state: Optional[LayoutState] = None) -> None:
        self.history.reset(state or default_layout())

    # Import / export --------------------------------------------------------

    def import_state(self, payload: Any, source: PayloadSource = PayloadSource.FILE) -> NormalizeResult:
        """Replace the layout with a validated payload (raw JSON text or decoded dict)."""
        if isinstance(payload, str):
            result = normalize_text(payload, self.catalog, source, self.limits)
        else:
            result = normalize_payload(payload, self.catalog, source, self.limits)
        if isinstance(result, Ok):
            self._commit(result.state, "import")
        return result

    def export_state(self) -> Dict[str, Any]:
        return self.state.to_dict()
