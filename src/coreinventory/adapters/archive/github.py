"""GitHub archive adapter for downloading repository snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from coreinventory.core.exceptions import AcquisitionError


if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from coreinventory.core.models import RepositoryDescriptor
    from coreinventory.core.ports import ProgressCallback


GITHUB_URL = "https://github.com"
USER_AGENT = "coreinventory"

# Chunk size for streaming downloads (64KB)
_CHUNK_SIZE = 64 * 1024


class GitHubArchiveStorage:
    """Archive adapter that downloads zipballs from github.com.

    Implements ArchivePort. Every request is bounded by the client timeout,
    so a stalled download fails that repository instead of the whole run.

    Example:
        >>> with GitHubArchiveStorage(timeout=30.0) as archives:
        ...     archives.download(repository, Path("archive.zip"), callback)
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
        base_url: str = GITHUB_URL,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Optional preconfigured httpx client (used in tests).
            timeout: Per-request timeout in seconds when creating a client.
            base_url: GitHub web root.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        self._base_url = base_url.rstrip("/")

    def __enter__(self) -> GitHubArchiveStorage:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this adapter created it."""
        if self._owns_client:
            self._client.close()

    def archive_url(self, repository: RepositoryDescriptor) -> str:
        """URL of the zip snapshot of the repository's default branch."""
        return f"{self._base_url}/{repository.github_repository}/archive/HEAD.zip"

    def download_url(self, repository: RepositoryDescriptor) -> str:
        """Resolve the public URL users download the core from.

        Release-tracking repositories point at their latest release page,
        others at the branch snapshot.
        """
        if repository.release:
            return f"{self._base_url}/{repository.github_repository}/releases/latest"
        return self.archive_url(repository)

    def download(
        self,
        repository: RepositoryDescriptor,
        dest: Path,
        progress: ProgressCallback,
    ) -> None:
        """Stream the repository archive to dest with progress reporting.

        Raises:
            AcquisitionError: On HTTP errors, timeouts and connection errors.
        """
        url = self.archive_url(repository)
        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("Content-Length", 0) or 0)
                bytes_downloaded = 0
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        f.write(chunk)
                        bytes_downloaded += len(chunk)
                        progress(bytes_downloaded, total_size)
        except httpx.HTTPStatusError as e:
            raise AcquisitionError(
                repository,
                f"HTTP {e.response.status_code} from {url}",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise AcquisitionError(repository, f"network error: {e}", cause=e) from e
