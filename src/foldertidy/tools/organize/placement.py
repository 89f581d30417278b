"""Decide where a classified file belongs.

A file is skipped when its name, read as label text, already names a known
label or the fallback folder. Otherwise it goes to the fallback folder when
the classifier is unsure, and to the predicted label's folder when it is not.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from foldertidy.core.config import DEFAULT_CONFIDENCE_THRESHOLD
from foldertidy.infra.clients.cohere import ClassificationResult

UNCLASSIFIED_DIR = "unclassified"


def filename_to_label_text(filename: str) -> str:
    """Filename space -> label space: every "-" becomes a space."""
    return filename.replace("-", " ")


def label_to_dirname(label: str) -> str:
    """Label space -> folder name: every space becomes "-"."""
    return label.replace(" ", "-")


@dataclass(frozen=True, slots=True)
class Placement:
    directory: Path
    filename: str
    subdirectory: str | None  # None: leave the file where it is

    @property
    def skipped(self) -> bool:
        return self.subdirectory is None

    @property
    def source(self) -> Path:
        return self.directory / self.filename

    @property
    def destination_dir(self) -> Path | None:
        if self.subdirectory is None:
            return None
        return self.directory / self.subdirectory

    @property
    def destination(self) -> Path | None:
        if self.subdirectory is None:
            return None
        return self.directory / self.subdirectory / self.filename


def resolve_placement(
    result: ClassificationResult,
    directory: Path,
    *,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> Placement:
    filename = result.input
    spaced = filename_to_label_text(filename)

    if spaced in result.labels or spaced == UNCLASSIFIED_DIR:
        return Placement(directory=directory, filename=filename, subdirectory=None)

    if result.confidence < confidence_threshold:
        subdirectory = UNCLASSIFIED_DIR
    else:
        subdirectory = label_to_dirname(result.prediction)

    return Placement(directory=directory, filename=filename, subdirectory=subdirectory)
