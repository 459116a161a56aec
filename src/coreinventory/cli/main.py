"""CLI commands for coreinventory."""

from __future__ import annotations

import logging
from pathlib import Path

import typer


app = typer.Typer(
    name="inventory",
    help="Incremental inventory of Analogue Pocket core repositories.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    """Route log records through rich, at DEBUG when verbose."""
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # Request lines from httpx are noise outside of debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def sync(
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Site root. Defaults to the discovered project root.",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        min=1,
        help="Number of repositories processed in parallel.",
    ),
    archives: Path | None = typer.Option(
        None,
        "--archives",
        help="Read archives from DIR/<owner>/<name>.zip instead of GitHub.",
        exists=True,
        file_okay=False,
    ),
    github_token: str | None = typer.Option(
        None,
        "--github-token",
        envvar="GITHUB_TOKEN",
        help="Token for GitHub API lookups.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log per-core decisions.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 1 when any repository failed.",
    ),
) -> None:
    """Synchronize every listed repository and rewrite the inventory."""
    from rich.console import Console

    from coreinventory import (
        FilesystemArchiveStorage,
        InventoryConfig,
        RepositoryListError,
        RichProgressReporter,
        Synchronizer,
        YamlInventoryWriter,
        parse_repositories,
    )
    from coreinventory.cli.formatting import _summary_table

    _configure_logging(verbose)

    config = InventoryConfig.from_directory(root, github_token=github_token)

    try:
        repositories = parse_repositories(config.repositories_path)
    except RepositoryListError as e:
        typer.echo(f"Error: {e}", err=True)
        if e.recovery_hint:
            typer.echo(f"Hint: {e.recovery_hint}", err=True)
        raise typer.Exit(1) from None

    archive_storage = FilesystemArchiveStorage(archives) if archives else None
    with Synchronizer.from_config(
        config, archives=archive_storage, max_workers=workers
    ) as synchronizer:
        with RichProgressReporter() as progress:
            report = synchronizer.sync(repositories, progress=progress)

    YamlInventoryWriter(config.cores_path).write(report.inventory())

    console = Console(force_terminal=True)
    console.print(_summary_table(report))
    typer.echo(f"Wrote {config.cores_path}")

    for failure in report.failures:
        typer.echo(
            f"Failed: {failure.repository.github_repository}: {failure.message}",
            err=True,
        )

    if strict and report.failures:
        raise typer.Exit(1)


@app.command()
def invalidate(
    core_ids: list[str] | None = typer.Argument(
        None, help="Core ids to drop from the version cache."
    ),
    all_cores: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Drop every cached core.",
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Site root. Defaults to the discovered project root.",
    ),
) -> None:
    """Remove cores from the cache, forcing reprocessing on next sync."""
    from coreinventory.adapters.cache import FileVersionCache
    from coreinventory.config import InventoryConfig

    if not core_ids and not all_cores:
        typer.echo("Error: Either provide core ids or use --all.")
        raise typer.Exit(1)

    if core_ids and all_cores:
        typer.echo("Error: Cannot use both core ids and --all.")
        raise typer.Exit(1)

    config = InventoryConfig.from_directory(root)
    cache = FileVersionCache(config.cache_dir)
    cached = set(cache.list_all_keys())

    targets = sorted(cached) if all_cores else list(core_ids or [])
    missing = [core_id for core_id in targets if core_id not in cached]
    if missing:
        typer.echo(f"Not cached: {', '.join(missing)}")
        typer.echo("Hint: Run 'inventory status' to see cached cores.")
        raise typer.Exit(1)

    for core_id in targets:
        cache.invalidate(core_id)

    typer.echo(f"Invalidated {len(targets)} core(s). Next sync will reprocess them.")


def main() -> None:
    """Entry point for the CLI."""
    app()
