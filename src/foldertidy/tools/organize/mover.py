from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from foldertidy.errors import PlacementError
from foldertidy.tools.organize.placement import Placement


@dataclass(frozen=True, slots=True)
class MoveRecord:
    filename: str
    subdirectory: str
    destination: Path


def ensure_directory(path: Path) -> None:
    """Create path and any missing parents. Existing directories are fine."""
    path.mkdir(parents=True, exist_ok=True)


def move_file(source: Path, destination_dir: Path) -> Path:
    """Rename source into destination_dir, keeping its name.

    Raises:
        PlacementError: If the source is gone, the destination name is taken,
            or the rename fails for any other OS reason.
    """
    target = destination_dir / source.name
    if target.exists() or target.is_symlink():
        raise PlacementError(
            "Destination already exists", filename=source.name, destination=target
        )
    try:
        source.rename(target)
    except FileNotFoundError as e:
        raise PlacementError(
            "Source file is missing", filename=source.name, destination=target, cause=e
        ) from e
    except OSError as e:
        raise PlacementError(
            f"Could not move file ({e.strerror or e})",
            filename=source.name,
            destination=target,
            cause=e,
        ) from e
    return target


async def apply_placement(placement: Placement) -> MoveRecord | None:
    """Carry out one placement; returns None when the file is skipped."""
    destination_dir = placement.destination_dir
    if placement.skipped or destination_dir is None:
        return None

    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, ensure_directory, destination_dir)
    except OSError as e:
        raise PlacementError(
            f"Could not create folder ({e.strerror or e})",
            filename=placement.filename,
            destination=placement.destination or destination_dir,
            cause=e,
        ) from e

    target = await loop.run_in_executor(
        None, move_file, placement.source, destination_dir
    )
    return MoveRecord(
        filename=placement.filename,
        subdirectory=str(destination_dir.relative_to(placement.directory)),
        destination=target,
    )
