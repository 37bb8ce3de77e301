from __future__ import annotations

from typing import Optional


def clip_text(value: Optional[str], max_length: int) -> str:
    """Truncate ``value`` to ``max_length`` characters; None becomes ''."""
    if not value:
        return ""
    return value[:max_length]


def normalize_title(value: object, max_length: int) -> str:
    """Layout titles default to empty for anything that is not a string."""
    if not isinstance(value, str):
        return ""
    return clip_text(value, max_length)
