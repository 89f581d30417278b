from __future__ import annotations

import math

import pytest

from foldertidy.tools.organize.batching import make_batches


def test_empty_input_yields_no_batches() -> None:
    assert make_batches([], 90) == []


def test_200_names_in_batches_of_90() -> None:
    names = [f"file-{i:03d}.txt" for i in range(200)]

    batches = make_batches(names, 90)

    assert [len(b) for b in batches] == [90, 90, 20]
    assert batches[0][0] == "file-000.txt"
    assert batches[2][-1] == "file-199.txt"


@pytest.mark.parametrize("count", [1, 2, 89, 90, 91, 179, 180, 181, 500])
@pytest.mark.parametrize("batch_size", [1, 7, 90, 96])
def test_batches_partition_input_in_order(count: int, batch_size: int) -> None:
    names = [f"n{i}" for i in range(count)]

    batches = make_batches(names, batch_size)

    assert len(batches) == math.ceil(count / batch_size)
    assert all(0 < len(b) <= batch_size for b in batches)
    assert [name for batch in batches for name in batch] == names


def test_rejects_non_positive_batch_size() -> None:
    with pytest.raises(ValueError):
        make_batches(["a"], 0)
