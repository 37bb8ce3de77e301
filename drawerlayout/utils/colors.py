"""Hex color helpers for bin fills."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

DEFAULT_BIN_COLOR = "#ffffff"

PRESET_COLORS: List[Tuple[str, str]] = [
    ("White", "#ffffff"),
    ("Black", "#000000"),
    ("Gray", "#808080"),
    ("Dark Green", "#14532d"),
    ("Blue", "#2563eb"),
    ("Red", "#dc2626"),
    ("Pink", "#ec4899"),
]

_HEX_RE = re.compile(r"^#?(?:[0-9a-f]{3}|[0-9a-f]{6})$")


def normalize_hex_color(color: str) -> str:
    """Lowercase, trimmed, always ``#``-prefixed. Does not validate."""
    normalized = color.strip().lower()
    if normalized.startswith("#"):
        return normalized
    return f"#{normalized}"


def is_valid_hex_color(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _HEX_RE.match(value.strip().lower()) is not None


def sanitize_color(value: object, fallback: str = DEFAULT_BIN_COLOR) -> str:
    """Normalized color, or ``fallback`` when ``value`` is not 3/6 digit hex."""
    if is_valid_hex_color(value):
        return normalize_hex_color(value)  # type: ignore[arg-type]
    return fallback


def expand_hex(color: str) -> str:
    """``#abc`` -> ``#aabbcc``; six digit values pass through."""
    digits = normalize_hex_color(color)[1:]
    if len(digits) == 3:
        digits = "".join(c + c for c in digits)
    return f"#{digits}"


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    digits = expand_hex(color)[1:]
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def color_label(color: Optional[str]) -> str:
    if not color:
        return "White"
    normalized = normalize_hex_color(color)
    for label, value in PRESET_COLORS:
        if value == normalized:
            return label
    return "Custom"


def contrast_text(color: str) -> str:
    """Dark or light text color readable on top of ``color``."""
    r, g, b = hex_to_rgb(color)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#f8fafc" if luminance < 0.5 else "#0f172a"
