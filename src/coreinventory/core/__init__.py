"""Core domain module for coreinventory.

This module contains the domain models, port definitions and the
synchronization service. Network and UI concerns live in the adapters.
"""

from coreinventory.core.models import (
    CacheEntry,
    ChangeKind,
    Core,
    CoreDefinition,
    DataSlot,
    PlatformMetadata,
    RepositoryDescriptor,
)
from coreinventory.core.ports import (
    ArchivePort,
    GitHubPort,
    PostPort,
    ProgressCallback,
    VersionCachePort,
)


__all__ = [
    "ArchivePort",
    "CacheEntry",
    "ChangeKind",
    "Core",
    "CoreDefinition",
    "DataSlot",
    "GitHubPort",
    "PlatformMetadata",
    "PostPort",
    "ProgressCallback",
    "RepositoryDescriptor",
    "VersionCachePort",
]
