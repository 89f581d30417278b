from __future__ import annotations

from collections.abc import Sequence


def make_batches(items: Sequence[str], batch_size: int) -> list[list[str]]:
    """Split items into consecutive batches of at most batch_size, order kept."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [
        list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)
    ]
