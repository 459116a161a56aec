"""Repository archive adapters."""

from coreinventory.adapters.archive.filesystem import FilesystemArchiveStorage
from coreinventory.adapters.archive.github import GitHubArchiveStorage


__all__ = ["FilesystemArchiveStorage", "GitHubArchiveStorage"]
