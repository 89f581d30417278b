from __future__ import annotations

import asyncio
from pathlib import Path
import sys

from dotenv import find_dotenv, load_dotenv
from loguru import logger
import typer

from foldertidy.core.config import load_config_from_env
from foldertidy.errors import FolderTidyError, OrganizeError
from foldertidy.infra.clients.cohere import CohereClassifyClient
from foldertidy.seeds.loader import count_by_label, load_labeled_examples
from foldertidy.tools.organize.organizer_tool import Organizer, OrganizeReport

app = typer.Typer(
    help="foldertidy: sort a folder's files into label-named subfolders.",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}",
        level=level.upper(),
    )


async def _tidy_impl(
    directory: Path,
    *,
    batch_size: int | None,
    threshold: float | None,
    include_dirs: bool,
    examples_path: Path | None,
) -> OrganizeReport:
    config = load_config_from_env().with_overrides(
        batch_size=batch_size,
        confidence_threshold=threshold,
        examples_path=examples_path,
    )
    examples = load_labeled_examples(config.examples_path)
    client = CohereClassifyClient.from_config(config, examples)
    organizer = Organizer(
        client,
        batch_size=config.batch_size,
        confidence_threshold=config.confidence_threshold,
        include_directories=include_dirs,
    )
    return await organizer.organize(directory)


@app.command("tidy")
def tidy(
    directory: Path = typer.Argument(  # noqa: B008
        ..., help="Folder whose files should be sorted"
    ),
    batch_size: int | None = typer.Option(
        None, "--batch-size", help="Filenames per classify request (1-96)"
    ),
    threshold: float | None = typer.Option(
        None,
        "--threshold",
        help="Confidence below which files go to 'unclassified'",
    ),
    include_dirs: bool = typer.Option(
        False,
        "--include-dirs",
        help="Also classify and move subdirectories.",
    ),
    examples: Path | None = typer.Option(  # noqa: B008
        None, "--examples", help="YAML file with labeled examples"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
) -> None:
    """Classify every file in DIRECTORY by name and move it into a folder."""
    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging(log_level)

    try:
        report = asyncio.run(
            _tidy_impl(
                directory,
                batch_size=batch_size,
                threshold=threshold,
                include_dirs=include_dirs,
                examples_path=examples,
            )
        )
    except OrganizeError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from None
    except FolderTidyError as e:
        typer.echo(f"Failed to organize {directory}: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(report.message)


@app.command("labels")
def labels(
    examples: Path | None = typer.Option(  # noqa: B008
        None, "--examples", help="YAML file with labeled examples"
    ),
) -> None:
    """List the labels files can be sorted into."""
    try:
        seeded = load_labeled_examples(examples)
    except FolderTidyError as e:
        typer.echo(f"Error loading labeled examples: {e}", err=True)
        raise typer.Exit(1) from None

    for label, count in count_by_label(seeded).items():
        typer.echo(f"{label}\t{count} examples")


if __name__ == "__main__":
    app()
