"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TransferSpeedColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from coreinventory.core.ports import ProgressCallback


class RichProgressReporter:
    """Progress reporter using Rich for terminal display.

    Shows one bar per repository archive download. GitHub zipballs are often
    served without a Content-Length, in which case the bar is indeterminate.

    Example:
        with RichProgressReporter() as reporter:
            report = synchronizer.sync(repositories, progress=reporter)
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the progress display."""
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
            transient=True,
        )
        self._tasks: dict[str, TaskID] = {}
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        """Start the progress display."""
        self._progress.start()
        self._started = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the progress display."""
        self._progress.stop()
        self._started = False

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a download task.

        Args:
            name: Repository being downloaded.
            total: Total bytes to download, 0 when unknown.

        Returns:
            A callback to update progress.
        """
        # Auto-start if not in context manager
        if not self._started:
            self._progress.start()
            self._started = True

        task_id = self._progress.add_task(name, total=total or None)
        self._tasks[name] = task_id

        def callback(downloaded: int, total_bytes: int) -> None:
            self._progress.update(
                task_id, completed=downloaded, total=total_bytes or None
            )

        return callback

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name.
        """
        task_id = self._tasks.pop(name, None)
        if task_id is None:
            return
        task = next(t for t in self._progress.tasks if t.id == task_id)
        self._progress.update(task_id, total=task.completed, completed=task.completed)
