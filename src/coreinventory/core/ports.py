"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The synchronizer
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    import builtins
    from concurrent.futures import Future
    from pathlib import Path

    from coreinventory.core.models import (
        CacheEntry,
        Funding,
        LatestRelease,
        NotificationPayload,
        RepositoryDescriptor,
    )

ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class ArchivePort(Protocol):
    """Source of repository archive snapshots (GitHub, local directory)."""

    def download(
        self,
        repository: RepositoryDescriptor,
        dest: Path,
        progress: ProgressCallback,
    ) -> None:
        """Write the repository's current zip archive to dest.

        Args:
            repository: The repository to download.
            dest: Local file path to write the archive to.
            progress: Callback function(bytes_downloaded, total_bytes).
        """
        ...

    def download_url(self, repository: RepositoryDescriptor) -> str:
        """Resolve the permanent public download URL for the repository."""
        ...


@runtime_checkable
class VersionCachePort(Protocol):
    """Persistent core id -> (version, serialized record) store."""

    def get(self, key: str) -> CacheEntry | None:
        """Get the cached entry for a core id, or None if not cached.

        Raises:
            CacheCorruptError: If an entry exists but cannot be trusted.
        """
        ...

    def put(self, key: str, entry: CacheEntry) -> None:
        """Store or overwrite the entry for a core id."""
        ...

    def invalidate(self, key: str) -> None:
        """Remove the entry for a core id."""
        ...

    def list_all_keys(self) -> builtins.list[str]:
        """List all cached core ids, sorted."""
        ...


@runtime_checkable
class GitHubPort(Protocol):
    """Repository metadata lookups. Absence is never an error."""

    def funding(self, repository: RepositoryDescriptor) -> Funding | None:
        """Return the repository's funding links, if it publishes any."""
        ...

    def latest_release(self, repository: RepositoryDescriptor) -> LatestRelease | None:
        """Return the newest release honoring the prerelease flag, if any."""
        ...


@runtime_checkable
class PostPort(Protocol):
    """Content-post generator for new and updated cores."""

    def create_post(self, payload: NotificationPayload) -> None:
        """Publish a notification post for the payload."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports download progress to the user.

    The synchronizer uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a download task.

        Args:
            name: Human-readable name for the task (repository name).
            total: Total bytes to download, 0 when unknown.

        Returns:
            A ProgressCallback to call with (bytes_downloaded, total_bytes).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _downloaded, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for processing independent repositories.

    Abstracts over concurrent.futures executors to allow dependency injection
    and testing. The synchronizer uses this protocol instead of directly
    importing ThreadPoolExecutor.
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution."""
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
