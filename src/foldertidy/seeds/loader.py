from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TypedDict, cast

from yaml import YAMLError, safe_load

from foldertidy.errors import ExampleSeedError

DEFAULT_EXAMPLES_PATH = Path(__file__).with_name("labeled_examples.yaml")
# The classify endpoint rejects labels with fewer examples than this.
MIN_EXAMPLES_PER_LABEL = 2


class RawExampleRecord(TypedDict, total=False):
    text: str
    label: str


class RawExamplesDoc(TypedDict, total=False):
    examples: list[RawExampleRecord]


@dataclass(frozen=True, slots=True)
class LabeledExample:
    """A seeded (sample text, label) pair used to calibrate the classifier."""

    text: str
    label: str

    def to_payload(self) -> dict[str, str]:
        return {"text": self.text, "label": self.label}


def _load_yaml(path: Path) -> RawExamplesDoc:
    if not path.exists():
        raise ExampleSeedError(f"labeled examples yaml not found at {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded: object = safe_load(handle)
    except YAMLError as e:
        raise ExampleSeedError(f"could not parse labeled examples yaml: {e}") from e

    if not isinstance(loaded, dict):
        raise ExampleSeedError(
            "labeled examples yaml must be a mapping with an 'examples' key"
        )

    return cast(RawExamplesDoc, loaded)


def _validate_record(record: object, *, position: int) -> LabeledExample:
    if not isinstance(record, dict):
        raise ExampleSeedError(f"example at position {position} must be a mapping")

    text = record.get("text")
    label = record.get("label")
    if not isinstance(text, str) or not text.strip():
        raise ExampleSeedError(
            f"example at position {position} is missing a non-empty 'text'"
        )
    if not isinstance(label, str) or not label.strip():
        raise ExampleSeedError(
            f"example at position {position} is missing a non-empty 'label'"
        )
    return LabeledExample(text=text.strip(), label=label.strip())


def _check_label_coverage(examples: list[LabeledExample]) -> None:
    counts = Counter(example.label for example in examples)
    if len(counts) < 2:
        raise ExampleSeedError("labeled examples must cover at least two labels")

    thin = sorted(label for label, n in counts.items() if n < MIN_EXAMPLES_PER_LABEL)
    if thin:
        raise ExampleSeedError(
            f"each label needs at least {MIN_EXAMPLES_PER_LABEL} examples; "
            f"too few for: {', '.join(thin)}"
        )


def load_labeled_examples(path: Path | None = None) -> list[LabeledExample]:
    """Load and validate the labeled example set.

    Args:
        path: YAML file to read. Defaults to the packaged seed file.

    Returns:
        Examples in file order.

    Raises:
        ExampleSeedError: If the file is missing, unparsable, or fails validation.
    """
    raw = _load_yaml(path or DEFAULT_EXAMPLES_PATH)
    records = raw.get("examples")
    if not isinstance(records, list):
        raise ExampleSeedError("'examples' must be a list")

    examples = [
        _validate_record(record, position=idx) for idx, record in enumerate(records)
    ]
    _check_label_coverage(examples)
    return examples


def count_by_label(examples: Iterable[LabeledExample]) -> dict[str, int]:
    counts = Counter(example.label for example in examples)
    return {label: counts[label] for label in sorted(counts)}
