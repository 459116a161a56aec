"""Progress reporting adapters."""

from coreinventory.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
