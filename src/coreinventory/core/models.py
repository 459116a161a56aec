"""Core domain models for coreinventory.

These models are pure Python dataclasses with no I/O dependencies.
They represent the repositories being tracked, the core definitions parsed
out of them, and the cache and report entities the synchronizer produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Generic, TypeVar


T = TypeVar("T")

# Final output unit per core; key order is significant for the YAML output.
SerializedCoreRecord = dict[str, Any]

# Bit 1 of a data slot's parameters marks a core-specific file.
CORE_SPECIFIC_FILE_FLAG = 0x02


@dataclass(frozen=True, slots=True)
class RepositoryDescriptor:
    """A source repository packaging one or more cores.

    Attributes:
        owner: GitHub account or organization publishing the repository.
        name: Repository name.
        display_name: Human-readable name used in the inventory.
        release: Whether the latest release should be tracked.
        prerelease: Whether prereleases count as the latest release.

    Example:
        >>> repo = RepositoryDescriptor(owner="agg23", name="openfpga-pong")
        >>> repo.github_repository
        'agg23/openfpga-pong'
    """

    owner: str
    name: str
    display_name: str = ""
    release: bool = False
    prerelease: bool = False

    def __post_init__(self) -> None:
        """Validate identity fields and default the display name."""
        if not self.owner:
            raise ValueError("Repository owner cannot be empty")
        if not self.name:
            raise ValueError("Repository name cannot be empty")
        if not self.display_name:
            object.__setattr__(self, "display_name", self.name)

    @property
    def github_repository(self) -> str:
        """The "owner/name" identifier used by GitHub."""
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class DataSlot:
    """A file dependency declared in a core's data-slot manifest.

    Attributes:
        name: Slot name as shown on the device.
        required: Whether the core needs the file to run.
        filename: Fixed filename, when the slot expects one.
        extensions: Accepted file extensions, when the slot declares them.
        id: Slot id from the manifest.
        parameters: Raw parameter bitmap.
    """

    name: str
    required: bool = False
    filename: str | None = None
    extensions: tuple[str, ...] | None = None
    id: int | None = None
    parameters: int = 0

    @property
    def core_specific(self) -> bool:
        """Whether the file lives in the core's own asset folder."""
        return bool(self.parameters & CORE_SPECIFIC_FILE_FLAG)


@dataclass(frozen=True, slots=True)
class CoreDefinition:
    """Metadata for one core, read from its core.json.

    The version string is the change-detection key.
    """

    id: str
    platform_id: str
    author: str
    shortname: str
    version: str
    description: str = ""
    date_release: str | None = None
    url: str | None = None
    platform_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Core:
    """A parsed core: its definition plus its data slots in source order."""

    definition: CoreDefinition
    data_slots: tuple[DataSlot, ...] = ()

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def version(self) -> str:
        return self.definition.version

    @property
    def required_slots(self) -> tuple[DataSlot, ...]:
        """Required data slots, in manifest order."""
        return tuple(slot for slot in self.data_slots if slot.required)


@dataclass(frozen=True, slots=True)
class PlatformMetadata:
    """Platform catalog entry shared by every core targeting the platform."""

    id: str
    name: str
    category: str | None = None
    manufacturer: str | None = None
    year: int | None = None


@dataclass(frozen=True, slots=True)
class PreviousCore:
    """A core this one supersedes, as listed in its updater descriptor."""

    shortname: str
    author: str
    platform_id: str | None = None


@dataclass(frozen=True, slots=True)
class CoreUpdater:
    """Optional updater descriptor shipped alongside a core."""

    previous: tuple[PreviousCore, ...] = ()
    license_filename: str | None = None


@dataclass(frozen=True, slots=True)
class Funding:
    """Sponsorship links from a repository's FUNDING.yml.

    Every field is optional; only present ones appear in the output.
    """

    community_bridge: str | None = None
    github: str | list[str] | None = None
    issuehunt: str | None = None
    ko_fi: str | None = None
    liberapay: str | None = None
    open_collective: str | None = None
    otechie: str | None = None
    patreon: str | None = None
    tidelift: str | None = None
    custom: str | list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the present platforms in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }


@dataclass(frozen=True, slots=True)
class LatestRelease:
    """The newest release of a repository."""

    tag_name: str
    prerelease: bool = False


@dataclass(frozen=True)
class Found(Generic[T]):
    """An optional resource that exists and was read."""

    value: T


@dataclass(frozen=True, slots=True)
class NotPresent:
    """An optional resource that the core does not ship."""


@dataclass(frozen=True, slots=True)
class Unreadable:
    """An optional resource that exists but could not be read."""

    reason: str


Lookup = Found[T] | NotPresent | Unreadable


class ChangeKind(Enum):
    """How a core's current version relates to the cached one."""

    NEW = "new"
    UPDATED = "update"
    UNCHANGED = "unchanged"

    @property
    def post_type(self) -> str:
        """Notification post wording key ("new" or "update")."""
        if self is ChangeKind.UNCHANGED:
            raise ValueError("Unchanged cores do not produce posts")
        return self.value


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Last processed version of a core and the record produced for it.

    The stored version must always equal the version inside the record.
    """

    version: str
    record: SerializedCoreRecord

    def __post_init__(self) -> None:
        """Reject entries whose record drifted from the stored version."""
        record_version = self.record.get("version")
        if record_version != self.version:
            raise ValueError(
                f"Cache entry version {self.version!r} does not match "
                f"record version {record_version!r}"
            )


def classify_change(entry: CacheEntry | None, version: str) -> ChangeKind:
    """Decide whether a core is new, updated or unchanged.

    Args:
        entry: The cached entry for the core, or None if there is none.
        version: The version in the core's current definition.

    Returns:
        NEW when nothing was cached, UNCHANGED when the versions match,
        UPDATED otherwise.
    """
    if entry is None:
        return ChangeKind.NEW
    if entry.version == version:
        return ChangeKind.UNCHANGED
    return ChangeKind.UPDATED


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    """Data handed to the post generator for a new or updated core."""

    core_id: str
    author: str
    shortname: str
    version: str
    kind: ChangeKind
    content: str | None = None

    @property
    def title(self) -> str:
        if self.kind is ChangeKind.NEW:
            return f"{self.author} has released {self.shortname}"
        return (
            f"{self.shortname} by {self.author} has been updated to {self.version}"
        )

    @property
    def categories(self) -> list[str]:
        return [self.author, self.shortname]

    @property
    def tags(self) -> list[str]:
        return [self.kind.post_type]


@dataclass(slots=True)
class RepositoryResult:
    """Records and per-core outcomes for one processed repository."""

    repository: RepositoryDescriptor
    records: list[SerializedCoreRecord] = field(default_factory=list)
    new: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RepositoryFailure:
    """A repository whose processing aborted."""

    repository: RepositoryDescriptor
    message: str


@dataclass(frozen=True, slots=True)
class OwnerGroup:
    """All records published under one owner, sorted by core id."""

    owner: str
    cores: tuple[SerializedCoreRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class SyncReport:
    """Outcome of a full synchronization run."""

    groups: tuple[OwnerGroup, ...] = ()
    results: tuple[RepositoryResult, ...] = ()
    failures: tuple[RepositoryFailure, ...] = ()

    def inventory(self) -> list[dict[str, Any]]:
        """Return the nested structure handed to the inventory writer."""
        return [
            {"username": group.owner, "cores": list(group.cores)}
            for group in self.groups
        ]

    def count(self, kind: str) -> int:
        """Total cores in a given outcome bucket across repositories.

        Args:
            kind: One of "new", "updated", "unchanged", "skipped" or "failed".
        """
        return sum(len(getattr(result, kind)) for result in self.results)
