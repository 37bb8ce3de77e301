"""Utility helpers for the layout core."""

from .colors import DEFAULT_BIN_COLOR, is_valid_hex_color, normalize_hex_color
from .json import parse_json_text
from .labels import clip_text, normalize_title

__all__ = [
    "DEFAULT_BIN_COLOR",
    "clip_text",
    "is_valid_hex_color",
    "normalize_hex_color",
    "normalize_title",
    "parse_json_text",
]
