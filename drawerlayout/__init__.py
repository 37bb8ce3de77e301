"""Drawer bin layout core.

This package holds the placement engine behind the drawer planner. The
code is organized around:

- layout value objects (`state.py`) and the bin catalog (`catalog.py`)
- rectangle math (`geometry.py`) and the nearest-free-cell search (`autofit.py`)
- the shelf packer behind "suggest layout" (`packer.py`)
- the bounded undo/redo stack (`history.py`)
- validation of untrusted snapshots (`normalizer.py`)
- the composed editing session (`session.py`) and its storage channels
  (`persistence.py`)

The Streamlit page in the repository root (`app.py`) is the only UI and
talks to this package through `LayoutSession`.
"""

__all__ = [
    "autofit",
    "catalog",
    "geometry",
    "history",
    "normalizer",
    "packer",
    "persistence",
    "session",
    "state",
    "summary",
]
