"""coreinventory - Incremental inventory of Analogue Pocket core repositories.

This library downloads core repositories, parses their openFPGA definitions,
and rebuilds an owner-grouped inventory. A persistent version cache makes
each run pay only for cores whose version changed.

Example:
    >>> from coreinventory import InventoryConfig, Synchronizer, YamlInventoryWriter
    >>> from coreinventory import parse_repositories
    >>> config = InventoryConfig.from_directory()
    >>> synchronizer = Synchronizer.from_config(config)
    >>> report = synchronizer.sync(parse_repositories(config.repositories_path))
    >>> YamlInventoryWriter(config.cores_path).write(report.inventory())
"""

from coreinventory.adapters.archive import (
    FilesystemArchiveStorage,
    GitHubArchiveStorage,
)
from coreinventory.adapters.cache import FileVersionCache
from coreinventory.adapters.github import GitHubClient
from coreinventory.adapters.output import JekyllPostWriter, YamlInventoryWriter
from coreinventory.config import InventoryConfig, find_project_root
from coreinventory.core.exceptions import (
    AcquisitionError,
    CacheCorruptError,
    CacheError,
    CoreInventoryError,
    ImageDecodeError,
    ParseError,
    RepositoryListError,
)
from coreinventory.core.models import (
    CacheEntry,
    ChangeKind,
    Core,
    CoreDefinition,
    DataSlot,
    NotificationPayload,
    PlatformMetadata,
    RepositoryDescriptor,
    SyncReport,
    classify_change,
)
from coreinventory.core.ports import (
    ArchivePort,
    GitHubPort,
    NullProgressReporter,
    PostPort,
    ProgressReporter,
    VersionCachePort,
)
from coreinventory.core.services import Synchronizer
from coreinventory.core.sponsor import AuthorSlotRule, default_sponsor_policy
from coreinventory.pocket import AssetExporter, DefinitionParser
from coreinventory.progress import RichProgressReporter
from coreinventory.repositories import parse_repositories


__version__ = "0.1.0"

__all__ = [
    "AcquisitionError",
    "ArchivePort",
    "AssetExporter",
    "AuthorSlotRule",
    "CacheCorruptError",
    "CacheEntry",
    "CacheError",
    "ChangeKind",
    "Core",
    "CoreDefinition",
    "CoreInventoryError",
    "DataSlot",
    "DefinitionParser",
    "FileVersionCache",
    "FilesystemArchiveStorage",
    "GitHubArchiveStorage",
    "GitHubClient",
    "GitHubPort",
    "ImageDecodeError",
    "InventoryConfig",
    "JekyllPostWriter",
    "NotificationPayload",
    "NullProgressReporter",
    "ParseError",
    "PlatformMetadata",
    "PostPort",
    "ProgressReporter",
    "RepositoryDescriptor",
    "RepositoryListError",
    "RichProgressReporter",
    "SyncReport",
    "Synchronizer",
    "VersionCachePort",
    "YamlInventoryWriter",
    "__version__",
    "classify_change",
    "default_sponsor_policy",
    "find_project_root",
    "parse_repositories",
]
