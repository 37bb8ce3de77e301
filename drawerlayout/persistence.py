"""
Layout Persistence
==================
Where layouts come from and go to outside the running session.

Channels:
    - local store: one JSON file, written after every change, read once at
      startup. Last write wins.
    - share link: ``quote(base64(JSON))`` carried in the ``layout`` query
      parameter.
    - layout files: explicit import/export by the user.

Everything read here is handed to the normalizer before it can become the
present layout. Read failures are logged and treated as "nothing to load";
none of the loaders raise for bad input.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote, unquote

from drawerlayout.catalog import CatalogIndex
from drawerlayout.config import DEFAULT_LIMITS, STATE_PATH, LayoutLimits
from drawerlayout.normalizer import NormalizeResult, Ok, PayloadSource, Rejected, normalize_text
from drawerlayout.session import LayoutSession, default_layout
from drawerlayout.state import LayoutState

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _dump(state: LayoutState, indent: Optional[int] = None) -> str:
    return json.dumps(state.to_dict(), indent=indent)


class LocalLayoutStore:
    """Single-file stand-in for browser local storage."""

    def __init__(self, path: PathLike = STATE_PATH) -> None:
        self.path = Path(path)

    def read_text(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read stored layout %s: %s", self.path, exc)
            return None

    def save(self, state: LayoutState) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(_dump(state), encoding="utf-8")
        except OSError as exc:
            logger.error("Could not save layout to %s: %s", self.path, exc)
            return False
        return True


def encode_share_param(state: LayoutState) -> str:
    encoded = base64.b64encode(_dump(state).encode("utf-8")).decode("ascii")
    return quote(encoded, safe="")


def decode_share_param(param: Optional[str], limits: LayoutLimits = DEFAULT_LIMITS) -> Optional[str]:
    """Return the JSON text carried by a share parameter, or None."""

    if not param:
        return None
    if len(param) > limits.max_share_param_chars:
        logger.warning("Share link of %d chars exceeds ceiling", len(param))
        return None
    try:
        raw = base64.b64decode(unquote(param), validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        logger.warning("Share link is not valid base64 JSON: %s", exc)
        return None


def read_layout_file(
    path: PathLike,
    catalog: CatalogIndex,
    limits: LayoutLimits = DEFAULT_LIMITS,
) -> NormalizeResult:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read layout file %s: %s", path, exc)
        return Rejected(f"could not read {path.name}")
    return normalize_text(raw, catalog, PayloadSource.FILE, limits)


def write_layout_file(path: PathLike, state: LayoutState) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_dump(state, indent=2), encoding="utf-8")
    logger.info("Exported layout to %s", path)
    return path


def import_upload(session: LayoutSession, data: bytes) -> NormalizeResult:
    """Import an uploaded layout file into ``session``; every upload is applied."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Uploaded layout is not UTF-8")
        return Rejected("file is not UTF-8 text")
    return session.import_state(text, PayloadSource.FILE)


def load_initial_state(
    catalog: CatalogIndex,
    store: Optional[LocalLayoutStore] = None,
    share_param: Optional[str] = None,
    limits: LayoutLimits = DEFAULT_LIMITS,
) -> LayoutState:
    """Pick the startup layout: valid share link, else valid stored layout, else default."""

    if share_param:
        shared = normalize_text(decode_share_param(share_param, limits), catalog, PayloadSource.SHARE_LINK, limits)
        if isinstance(shared, Ok):
            logger.info("Loaded layout from share link")
            return shared.state

    if store is not None:
        stored = normalize_text(store.read_text(), catalog, PayloadSource.STORAGE, limits)
        if isinstance(stored, Ok):
            logger.info("Loaded layout from %s", store.path)
            return stored.state

    return default_layout()
