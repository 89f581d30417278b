"""Batch, classify, place and move the files of one directory."""

from __future__ import annotations

from foldertidy.tools.organize.batching import make_batches
from foldertidy.tools.organize.mover import MoveRecord, apply_placement
from foldertidy.tools.organize.organizer_tool import Organizer, OrganizeReport
from foldertidy.tools.organize.placement import (
    UNCLASSIFIED_DIR,
    Placement,
    resolve_placement,
)

__all__ = [
    "UNCLASSIFIED_DIR",
    "MoveRecord",
    "OrganizeReport",
    "Organizer",
    "Placement",
    "apply_placement",
    "make_batches",
    "resolve_placement",
]
