"""Helpers for parsing JSON that arrives from outside the process."""

from __future__ import annotations

import json
from typing import Any, Optional


def parse_json_text(raw: str, max_chars: int) -> Optional[Any]:
    """Parse ``raw`` as JSON if it is within ``max_chars`` characters.

    Returns None for oversized or malformed input instead of raising; the
    ceiling is checked before parsing so hostile input is never decoded.
    """
    if not isinstance(raw, str) or len(raw) > max_chars:
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None
