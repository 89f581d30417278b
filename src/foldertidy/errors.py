"""Exception hierarchy shared across foldertidy."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class FolderTidyError(Exception):
    """Base error for foldertidy failures."""


class ConfigError(FolderTidyError):
    """Missing or invalid configuration (credentials, settings)."""


class ExampleSeedError(ConfigError):
    """The labeled example file is missing or malformed."""


class ClassificationError(FolderTidyError):
    """A classify call failed for one batch."""

    def __init__(
        self,
        message: str,
        *,
        batch: Sequence[str],
        cause: BaseException | None = None,
    ) -> None:
        self.batch = list(batch)
        self.cause = cause
        super().__init__(f"{message} (batch of {len(self.batch)})")


class PlacementError(FolderTidyError):
    """Creating a destination folder or moving a file into it failed."""

    def __init__(
        self,
        message: str,
        *,
        filename: str,
        destination: Path,
        cause: BaseException | None = None,
    ) -> None:
        self.filename = filename
        self.destination = destination
        self.cause = cause
        super().__init__(f"{message}: {filename} -> {destination}")


class OrganizeError(FolderTidyError):
    """A run over a directory failed; carries every collected failure."""

    def __init__(
        self,
        directory: Path,
        failures: Sequence[BaseException],
        *,
        reason: str | None = None,
    ) -> None:
        self.directory = directory
        self.failures = list(failures)
        if reason is None:
            reason = str(self.failures[0]) if self.failures else "unknown error"
        if len(self.failures) > 1:
            reason += f" (and {len(self.failures) - 1} more failure(s))"
        self.reason = reason
        super().__init__(f"Failed to organize {directory}: {reason}")
