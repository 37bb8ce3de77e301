"""Bounded undo/redo history over immutable layout snapshots."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Tuple

from drawerlayout.config import MAX_HISTORY
from drawerlayout.state import LayoutState

logger = logging.getLogger(__name__)


class HistoryStore:
    """Owns the present ``LayoutState`` plus past/future snapshots.

    ``past`` is oldest first and holds at most ``capacity`` entries; pushing
    beyond that evicts from the front. ``future`` is nearest first. Because
    snapshots are frozen, storing them by reference is safe.
    """

    def __init__(self, present: LayoutState, capacity: int = MAX_HISTORY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._present = present
        self._past: Deque[LayoutState] = deque(maxlen=capacity)
        self._future: Deque[LayoutState] = deque(maxlen=capacity)

    @property
    def present(self) -> LayoutState:
        return self._present

    @property
    def past(self) -> Tuple[LayoutState, ...]:
        return tuple(self._past)

    @property
    def future(self) -> Tuple[LayoutState, ...]:
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    def push_state(self, next_state: LayoutState) -> None:
        """Commit ``next_state`` as present and drop any redo entries."""

        self._past.append(self._present)
        self._present = next_state
        self._future.clear()

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.appendleft(self._present)
        self._present = self._past.pop()
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._present)
        self._present = self._future.popleft()
        return True

    def reset(self, present: LayoutState) -> None:
        self._past.clear()
        self._future.clear()
        self._present = present
        logger.debug("History reset")
