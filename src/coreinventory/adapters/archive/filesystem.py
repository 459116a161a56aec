"""Filesystem archive adapter for local development and testing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from coreinventory.core.exceptions import AcquisitionError


if TYPE_CHECKING:
    from coreinventory.core.models import RepositoryDescriptor
    from coreinventory.core.ports import ProgressCallback


# Chunk size for reading files (64KB)
_CHUNK_SIZE = 64 * 1024


class FilesystemArchiveStorage:
    """Archive adapter serving ``{root}/{owner}/{name}.zip`` from disk.

    Implements ArchivePort without any network access, which makes it
    suitable for mirrors, offline runs and tests.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def archive_path(self, repository: RepositoryDescriptor) -> Path:
        return self.root / repository.owner / f"{repository.name}.zip"

    def download_url(self, repository: RepositoryDescriptor) -> str:
        """Return a file:// URI for the archive."""
        return self.archive_path(repository).resolve().as_uri()

    def download(
        self,
        repository: RepositoryDescriptor,
        dest: Path,
        progress: ProgressCallback,
    ) -> None:
        """Copy the archive to dest with progress reporting.

        Raises:
            AcquisitionError: If the archive does not exist.
        """
        source_path = self.archive_path(repository)
        try:
            total_size = source_path.stat().st_size
        except FileNotFoundError as e:
            raise AcquisitionError(
                repository, f"archive not found: {source_path}", cause=e
            ) from e

        bytes_copied = 0
        with source_path.open("rb") as src, dest.open("wb") as dst:
            for chunk in iter(lambda: src.read(_CHUNK_SIZE), b""):
                dst.write(chunk)
                bytes_copied += len(chunk)
                progress(bytes_copied, total_size)
