"""Labeled example seeds sent with every classify request."""

from __future__ import annotations

from foldertidy.seeds.loader import (
    DEFAULT_EXAMPLES_PATH,
    LabeledExample,
    count_by_label,
    load_labeled_examples,
)

__all__ = [
    "DEFAULT_EXAMPLES_PATH",
    "LabeledExample",
    "count_by_label",
    "load_labeled_examples",
]
