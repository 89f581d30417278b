from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Protocol

import loguru
from loguru import logger

from foldertidy.core.config import DEFAULT_BATCH_SIZE, DEFAULT_CONFIDENCE_THRESHOLD
from foldertidy.errors import OrganizeError
from foldertidy.infra.clients.cohere import ClassificationResult
from foldertidy.tools.organize.batching import make_batches
from foldertidy.tools.organize.mover import MoveRecord, apply_placement
from foldertidy.tools.organize.placement import Placement, resolve_placement


class Classifier(Protocol):
    async def classify(self, batch: Sequence[str]) -> list[ClassificationResult]: ...


@dataclass
class BatchOutcome:
    """Results from placing every file of one classified batch."""

    moved: list[MoveRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[BaseException] = field(default_factory=list)


@dataclass
class OrganizeReport:
    directory: Path
    batch_count: int
    moved: list[MoveRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Organized {self.directory}: "
            f"{len(self.moved)} moved, {len(self.skipped)} skipped"
        )


class OrganizerLogger:
    """Handles all logging for the organizer with business logic separated."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def run_start(self, directory: Path, entry_count: int, batch_count: int) -> None:
        self._logger.bind(
            directory=str(directory), entries=entry_count, batches=batch_count
        ).info(
            "Organizing {} entries of {} in {} batches",
            entry_count,
            directory,
            batch_count,
        )

    def batch_classified(self, batch_idx: int, size: int) -> None:
        self._logger.bind(batch=batch_idx, batch_size=size).debug(
            "Batch {} classified ({} files)", batch_idx, size
        )

    def file_moved(self, record: MoveRecord) -> None:
        self._logger.debug("Moved {} -> {}/", record.filename, record.subdirectory)

    def file_skipped(self, placement: Placement) -> None:
        self._logger.debug(
            "Skipped {} (already named after a label)", placement.filename
        )

    def run_complete(self, report: OrganizeReport) -> None:
        self._logger.bind(
            directory=str(report.directory),
            moved=len(report.moved),
            skipped=len(report.skipped),
        ).info(
            "Organize complete: {} moved, {} skipped",
            len(report.moved),
            len(report.skipped),
        )

    def run_failed(self, directory: Path, failures: Sequence[BaseException]) -> None:
        self._logger.bind(directory=str(directory), failures=len(failures)).error(
            "Organize of {} failed with {} error(s)", directory, len(failures)
        )
        for failure in failures:
            self._logger.error("  {}: {}", type(failure).__name__, failure)


def _list_entries(directory: Path, include_directories: bool) -> list[str]:
    names: list[str] = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.name.startswith("."):
                continue
            if not include_directories and entry.is_dir():
                continue
            names.append(entry.name)
    return sorted(names)


class Organizer:
    def __init__(
        self,
        client: Classifier,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        include_directories: bool = False,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._client = client
        self._batch_size = batch_size
        self._confidence_threshold = confidence_threshold
        self._include_directories = include_directories
        self._logger = OrganizerLogger()

    async def list_entries(self, directory: Path) -> list[str]:
        """Names directly under directory that are candidates for sorting.

        Hidden entries are never included. Subdirectories are included only
        when the organizer was built with ``include_directories=True``.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, _list_entries, directory, self._include_directories
        )

    async def organize(self, directory: Path | str) -> OrganizeReport:
        """Classify every entry of directory and move it into its folder.

        Batches are classified concurrently and each batch's files are placed
        as soon as that batch comes back. Every branch runs to completion; if
        any failed, the moves already made stay in place and an OrganizeError
        listing every failure is raised.
        """
        target = Path(directory).expanduser()
        if not target.is_dir():
            raise OrganizeError(target, [], reason="not a directory")

        try:
            entries = await self.list_entries(target)
        except OSError as e:
            raise OrganizeError(target, [e]) from e

        batches = make_batches(entries, self._batch_size)
        self._logger.run_start(target, len(entries), len(batches))

        outcomes = await asyncio.gather(
            *(
                self._process_batch(target, batch, idx)
                for idx, batch in enumerate(batches)
            ),
            return_exceptions=True,
        )

        report = OrganizeReport(directory=target, batch_count=len(batches))
        failures: list[BaseException] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                failures.append(outcome)
                continue
            report.moved.extend(outcome.moved)
            report.skipped.extend(outcome.skipped)
            failures.extend(outcome.failures)

        if failures:
            self._logger.run_failed(target, failures)
            raise OrganizeError(target, failures)

        self._logger.run_complete(report)
        return report

    async def _process_batch(
        self, directory: Path, batch: list[str], batch_idx: int
    ) -> BatchOutcome:
        results = await self._client.classify(batch)
        self._logger.batch_classified(batch_idx, len(results))

        placements = [
            resolve_placement(
                result, directory, confidence_threshold=self._confidence_threshold
            )
            for result in results
        ]
        applied = await asyncio.gather(
            *(apply_placement(placement) for placement in placements),
            return_exceptions=True,
        )

        outcome = BatchOutcome()
        for placement, result in zip(placements, applied, strict=True):
            if isinstance(result, BaseException):
                outcome.failures.append(result)
            elif result is None:
                self._logger.file_skipped(placement)
                outcome.skipped.append(placement.filename)
            else:
                self._logger.file_moved(result)
                outcome.moved.append(result)
        return outcome
