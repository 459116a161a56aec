"""Status command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from coreinventory.cli.main import app
from coreinventory.core.exceptions import CacheCorruptError


@app.command()
def status(
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Site root. Defaults to the discovered project root.",
    ),
) -> None:
    """Show cached cores and the version each was last processed at."""
    from coreinventory.adapters.cache import FileVersionCache
    from coreinventory.config import InventoryConfig

    config = InventoryConfig.from_directory(root)
    cache = FileVersionCache(config.cache_dir)
    keys = cache.list_all_keys()

    if not keys:
        typer.echo("No cached cores. Run 'inventory sync' to populate the cache.")
        return

    table = Table()
    table.add_column("Core")
    table.add_column("Version")

    for key in keys:
        try:
            entry = cache.get(key)
        except CacheCorruptError:
            table.add_row(key, Text("corrupt", style="red"))
            continue
        if entry is not None:
            table.add_row(key, entry.version)

    console = Console(force_terminal=True)
    console.print(table)
