"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text


if TYPE_CHECKING:
    from coreinventory.core.models import SyncReport


_OUTCOME_COLORS = {
    "new": "green",
    "updated": "cyan",
    "unchanged": "",
    "skipped": "yellow",
    "failed": "red",
}


def _format_outcome(outcome: str, count: int) -> Text:
    """Format an outcome count, colored only when non-zero.

    Args:
        outcome: Outcome bucket ("new", "updated", "unchanged", ...).
        count: Number of cores in the bucket.

    Returns:
        Rich Text with the bucket's color, or plain text for zero.
    """
    color = _OUTCOME_COLORS.get(outcome, "")
    if count and color:
        return Text(str(count), style=color)
    return Text(str(count))


def _summary_table(report: SyncReport) -> Table:
    """Build the per-repository summary table printed after a sync."""
    table = Table(title="Synchronization summary")
    table.add_column("Repository")
    for outcome in _OUTCOME_COLORS:
        table.add_column(outcome.capitalize(), justify="right")

    for result in report.results:
        counts = [len(getattr(result, outcome)) for outcome in _OUTCOME_COLORS]
        table.add_row(
            result.repository.github_repository,
            *(
                _format_outcome(outcome, count)
                for outcome, count in zip(_OUTCOME_COLORS, counts, strict=True)
            ),
        )

    for failure in report.failures:
        table.add_row(
            failure.repository.github_repository,
            *(Text("-") for _ in _OUTCOME_COLORS),
            style="red",
        )

    return table
