"""
Configuration & Limits
======================
Central registry for the layout limits, defaults and storage locations.

Every numeric limit used by the validator and the editing session lives
here so the UI, the normalizer and the tests agree on one set of numbers.
A few values can be overridden through environment variables.

Exports:
    LayoutLimits: Frozen bundle of validation limits.
    DEFAULT_LIMITS: The limits used when none are injected.
    STATE_PATH: File backing the local layout store.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Drawer created at startup when nothing valid is stored.
DEFAULT_DRAWER_WIDTH = float(os.getenv("DRAWERLAYOUT_DEFAULT_WIDTH", "24"))
DEFAULT_DRAWER_LENGTH = float(os.getenv("DRAWERLAYOUT_DEFAULT_LENGTH", "18"))

MAX_HISTORY = 100

# Inches
MIN_DRAWER_DIM = 0.25
MAX_DRAWER_DIM = 200.0
MIN_BIN_DIM = 2.0
MAX_BIN_DIM = 8.0

MAX_PLACEMENTS = 1000
MAX_TITLE_LENGTH = 80
MAX_LABEL_LENGTH = 60

# Character ceilings applied before any JSON parsing.
MAX_STORED_CHARS = 250_000
MAX_SHARE_PARAM_CHARS = 400_000

SHARE_PARAM = "layout"
STORAGE_KEY = "bin-layout-state"

STATE_PATH = Path(
    os.getenv(
        "DRAWERLAYOUT_STATE_PATH",
        str(Path.home() / ".drawerlayout" / f"{STORAGE_KEY}.json"),
    )
)
LOG_LEVEL = os.getenv("DRAWERLAYOUT_LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class LayoutLimits:
    min_drawer_dim: float = MIN_DRAWER_DIM
    max_drawer_dim: float = MAX_DRAWER_DIM
    min_bin_dim: float = MIN_BIN_DIM
    max_bin_dim: float = MAX_BIN_DIM
    max_placements: int = MAX_PLACEMENTS
    max_title_length: int = MAX_TITLE_LENGTH
    max_label_length: int = MAX_LABEL_LENGTH
    max_stored_chars: int = MAX_STORED_CHARS
    max_share_param_chars: int = MAX_SHARE_PARAM_CHARS
    max_history: int = MAX_HISTORY


DEFAULT_LIMITS = LayoutLimits()
