"""Domain exceptions for coreinventory.

All library errors inherit from CoreInventoryError, allowing callers to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.

Only RepositoryListError is fatal for a run. AcquisitionError aborts a single
repository, ParseError and ImageDecodeError abort a single core, and
CacheCorruptError is treated by the synchronizer as a cache miss.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path

    from coreinventory.core.models import RepositoryDescriptor


class CoreInventoryError(Exception):
    """Base class for all coreinventory exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class RepositoryListError(CoreInventoryError):
    """Raised when the repository list cannot be loaded.

    Attributes:
        path: Path to the repository list file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Point at the file that needs fixing."""
        return f"Check {self.path.name} for syntax or missing fields"


class AcquisitionError(CoreInventoryError):
    """Raised when a repository archive cannot be downloaded or extracted.

    Attributes:
        repository: The repository that failed.
        reason: Short description of what went wrong.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        repository: RepositoryDescriptor,
        reason: str,
        cause: Exception | None = None,
    ) -> None:
        self.repository = repository
        self.reason = reason
        self.cause = cause
        super().__init__(
            f"Could not acquire {repository.github_repository}: {reason}"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the repository is reachable."""
        return (
            f"Verify https://github.com/{self.repository.github_repository} "
            "exists and is public"
        )


class ParseError(CoreInventoryError):
    """Raised when a core definition file is missing or malformed.

    Attributes:
        path: The definition file that failed to parse.
        reason: Short description of what went wrong.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        path: Path,
        reason: str,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.reason = reason
        self.cause = cause
        super().__init__(f"Failed to parse {path}: {reason}")

    @property
    def recovery_hint(self) -> str:
        """Suggest reporting the broken definition upstream."""
        return f"Fix {self.path.name} in the core repository"


class ImageDecodeError(CoreInventoryError):
    """Raised when a binary image does not match the expected layout.

    Attributes:
        path: The image file, if it came from disk.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class CacheError(CoreInventoryError):
    """Base class for cache-related errors."""

    pass


class CacheCorruptError(CacheError):
    """Raised when a cache entry is corrupt or inconsistent.

    Attributes:
        key: The cache key (core id) of the corrupt entry.
        path: The path to the corrupt file.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest deleting the corrupt cache entry."""
        return f"Run 'inventory invalidate {self.key}' to rebuild the entry"
