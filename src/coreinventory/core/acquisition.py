"""Scoped acquisition of repository archives.

A repository is downloaded and extracted into a private temporary directory
that only lives for the duration of the ``with`` block. The directory is
removed on every exit path, including failures raised by the caller.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from coreinventory.core.exceptions import AcquisitionError
from coreinventory.core.ports import NullProgressReporter


if TYPE_CHECKING:
    from collections.abc import Iterator

    from coreinventory.core.models import RepositoryDescriptor
    from coreinventory.core.ports import ArchivePort, ProgressReporter

logger = logging.getLogger(__name__)

CORES_DIRECTORY = "Cores"
ARCHIVE_FILE = "archive.zip"


@contextmanager
def acquire_repository(
    storage: ArchivePort,
    repository: RepositoryDescriptor,
    progress: ProgressReporter | None = None,
) -> Iterator[Path]:
    """Download and extract a repository, yielding its package root.

    Args:
        storage: Archive source to download from.
        repository: The repository to acquire.
        progress: Optional progress reporter for download feedback.

    Yields:
        The extracted directory that contains ``Cores/``.

    Raises:
        AcquisitionError: If the download, extraction or root lookup fails.
    """
    if progress is None:
        progress = NullProgressReporter()

    work_dir = Path(
        tempfile.mkdtemp(prefix=f"coreinventory-{repository.owner}-{repository.name}-")
    )
    logger.debug("Acquiring %s into %s", repository.github_repository, work_dir)
    try:
        archive_path = work_dir / ARCHIVE_FILE
        task_name = repository.github_repository

        callback = progress.start_task(task_name, 0)
        try:
            storage.download(repository, archive_path, callback)
        except OSError as e:
            raise AcquisitionError(repository, f"download failed: {e}", cause=e) from e
        finally:
            progress.finish_task(task_name)

        extract_dir = work_dir / "extracted"
        extract_archive(repository, archive_path, extract_dir)

        yield find_package_root(repository, extract_dir)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
        logger.debug("Removed %s", work_dir)


def extract_archive(
    repository: RepositoryDescriptor, archive_path: Path, dest: Path
) -> None:
    """Extract a zip archive, refusing members that escape dest.

    Raises:
        AcquisitionError: If the archive is corrupt or unsafe.
    """
    dest.mkdir(parents=True, exist_ok=True)
    root = dest.resolve()
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for member in archive.infolist():
                target = (root / member.filename).resolve()
                if not target.is_relative_to(root):
                    raise AcquisitionError(
                        repository, f"unsafe archive member: {member.filename}"
                    )
            archive.extractall(root)
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise AcquisitionError(repository, "archive is corrupt", cause=e) from e
    except (NotImplementedError, RuntimeError) as e:
        # Unsupported compression methods and encrypted members
        raise AcquisitionError(
            repository, f"archive is unreadable: {e}", cause=e
        ) from e
    except OSError as e:
        raise AcquisitionError(repository, f"extraction failed: {e}", cause=e) from e


def find_package_root(repository: RepositoryDescriptor, extracted: Path) -> Path:
    """Locate the shallowest directory holding a ``Cores/`` folder.

    GitHub zipballs wrap the tree in a single ``name-sha/`` directory and
    release packages usually do not, so both layouts are accepted.

    Raises:
        AcquisitionError: If no ``Cores/`` directory exists in the archive.
    """
    matches = sorted(
        (path for path in extracted.rglob(CORES_DIRECTORY) if path.is_dir()),
        key=lambda path: (len(path.parts), str(path)),
    )
    if not matches:
        raise AcquisitionError(repository, f"no {CORES_DIRECTORY}/ directory found")
    return matches[0].parent
