"""Core domain services for coreinventory."""

import logging
from collections.abc import Callable, Iterable
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING

from coreinventory.core.acquisition import acquire_repository
from coreinventory.core.exceptions import (
    CacheCorruptError,
    CoreInventoryError,
    ImageDecodeError,
    ParseError,
)
from coreinventory.core.models import (
    CacheEntry,
    ChangeKind,
    Core,
    Found,
    Funding,
    LatestRelease,
    NotificationPayload,
    OwnerGroup,
    RepositoryDescriptor,
    RepositoryFailure,
    RepositoryResult,
    SerializedCoreRecord,
    SyncReport,
    Unreadable,
    classify_change,
)
from coreinventory.core.ports import (
    ArchivePort,
    ExecutorPort,
    GitHubPort,
    NullProgressReporter,
    PostPort,
    ProgressReporter,
    VersionCachePort,
)
from coreinventory.core.serialization import serialize_core
from coreinventory.core.sponsor import SponsorPolicy, default_sponsor_policy
from coreinventory.pocket.assets import AssetExporter
from coreinventory.pocket.definitions import DefinitionParser


if TYPE_CHECKING:
    from types import TracebackType

    from coreinventory.config import InventoryConfig

logger = logging.getLogger(__name__)

ParserFactory = Callable[[Path], DefinitionParser]


class _RepositoryMetadata:
    """Per-repository lookups resolved at most once, on first changed core."""

    def __init__(
        self,
        repository: RepositoryDescriptor,
        archives: ArchivePort,
        github: GitHubPort,
    ) -> None:
        self._repository = repository
        self._archives = archives
        self._github = github

    @cached_property
    def download_url(self) -> str:
        return self._archives.download_url(self._repository)

    @cached_property
    def funding(self) -> Funding | None:
        return self._github.funding(self._repository)

    @cached_property
    def latest_release(self) -> LatestRelease | None:
        if not self._repository.release:
            return None
        return self._github.latest_release(self._repository)


class Synchronizer:
    """Orchestrates incremental inventory updates across repositories.

    Each repository is acquired into a private temporary directory, its cores
    are parsed and compared against the version cache, and only cores whose
    version changed pay for asset export, GitHub lookups and post creation.
    """

    def __init__(
        self,
        archives: ArchivePort,
        cache: VersionCachePort,
        github: GitHubPort,
        posts: PostPort,
        assets: AssetExporter,
        sponsor_policy: SponsorPolicy | None = None,
        executor: ExecutorPort | None = None,
        parser_factory: ParserFactory = DefinitionParser,
    ) -> None:
        self._archives = archives
        self._cache = cache
        self._github = github
        self._posts = posts
        self._assets = assets
        self._sponsor_policy = sponsor_policy or default_sponsor_policy()
        self._executor = executor
        self._parser_factory = parser_factory
        self._closers: list[Callable[[], None]] = []

    @classmethod
    def from_config(
        cls,
        config: "InventoryConfig",
        archives: ArchivePort | None = None,
        max_workers: int = 1,
    ) -> "Synchronizer":
        """Create a Synchronizer wired with the default adapters.

        Args:
            config: Resolved directory layout and network settings.
            archives: Archive source; defaults to GitHub downloads.
            max_workers: Repositories processed in parallel. 1 is sequential.

        Returns:
            Synchronizer using FileVersionCache, GitHubClient and
            JekyllPostWriter under the config's directories. Close it, or
            use it as a context manager, to release the HTTP clients it
            created.
        """
        from coreinventory.adapters.archive import GitHubArchiveStorage
        from coreinventory.adapters.cache import FileVersionCache
        from coreinventory.adapters.executor import ThreadPoolExecutorAdapter
        from coreinventory.adapters.github import GitHubClient
        from coreinventory.adapters.output import JekyllPostWriter

        executor = None
        if max_workers > 1:
            executor = ThreadPoolExecutorAdapter(max_workers=max_workers)

        github = GitHubClient(token=config.github_token, timeout=config.timeout)
        closers: list[Callable[[], None]] = [github.close]
        if archives is None:
            storage = GitHubArchiveStorage(timeout=config.timeout)
            closers.append(storage.close)
            archives = storage

        synchronizer = cls(
            archives=archives,
            cache=FileVersionCache(config.cache_dir),
            github=github,
            posts=JekyllPostWriter(config.posts_dir),
            assets=AssetExporter(config.assets_dir),
            executor=executor,
        )
        synchronizer._closers.extend(closers)
        return synchronizer

    def __enter__(self) -> "Synchronizer":
        return self

    def __exit__(
        self,
        exc_type: "type[BaseException] | None",
        exc_val: BaseException | None,
        exc_tb: "TracebackType | None",
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the adapters this synchronizer created.

        Adapters passed to the constructor belong to the caller and are left
        open.
        """
        while self._closers:
            self._closers.pop()()

    def sync(
        self,
        repositories: Iterable[RepositoryDescriptor],
        progress: ProgressReporter | None = None,
    ) -> SyncReport:
        """Process every repository and fold the results into owner groups.

        Repositories are processed sequentially unless an executor was
        injected. A failing repository is recorded in the report and never
        prevents the others from being processed.

        Args:
            repositories: Repositories to process, in list order.
            progress: Optional progress reporter for download feedback.

        Returns:
            SyncReport with owner groups sorted by core id.
        """
        if progress is None:
            progress = NullProgressReporter()

        repositories = list(repositories)
        if self._executor is None:
            outcomes = [self._sync_isolated(repo, progress) for repo in repositories]
        else:
            executor = self._executor
            with executor:
                futures = [
                    executor.submit(self._sync_isolated, repo, progress)
                    for repo in repositories
                ]
                outcomes = [future.result() for future in futures]

        return fold_outcomes(outcomes)

    def sync_repository(
        self,
        repository: RepositoryDescriptor,
        progress: ProgressReporter | None = None,
    ) -> RepositoryResult:
        """Acquire one repository and process each of its cores.

        Args:
            repository: The repository to process.
            progress: Optional progress reporter for download feedback.

        Returns:
            The repository's records and per-core outcomes.

        Raises:
            AcquisitionError: If the repository cannot be downloaded or
                extracted. The temporary directory is removed regardless.
        """
        logger.info("Processing repository: %s", repository.display_name)
        result = RepositoryResult(repository=repository)
        metadata = _RepositoryMetadata(repository, self._archives, self._github)

        with acquire_repository(self._archives, repository, progress) as root:
            parser = self._parser_factory(root)
            for core_id in parser.core_ids():
                try:
                    self._process_core(parser, core_id, repository, metadata, result)
                except (ParseError, ImageDecodeError) as e:
                    logger.error("Skipping core %s: %s", core_id, e)
                    result.failed.append(core_id)

        return result

    def _sync_isolated(
        self, repository: RepositoryDescriptor, progress: ProgressReporter
    ) -> RepositoryResult | RepositoryFailure:
        try:
            return self.sync_repository(repository, progress)
        except (CoreInventoryError, OSError) as e:
            logger.error("Repository %s failed: %s", repository.github_repository, e)
            return RepositoryFailure(repository=repository, message=str(e))

    def _process_core(
        self,
        parser: DefinitionParser,
        core_id: str,
        repository: RepositoryDescriptor,
        metadata: _RepositoryMetadata,
        result: RepositoryResult,
    ) -> None:
        core = parser.get_core(core_id)
        if core is None:
            result.skipped.append(core_id)
            return

        entry = self._cached_entry(core.id)
        kind = classify_change(entry, core.version)
        if kind is ChangeKind.UNCHANGED:
            assert entry is not None
            logger.debug("Core %s unchanged at %s", core.id, core.version)
            result.records.append(entry.record)
            result.unchanged.append(core.id)
            return

        logger.info("Core %s is %s at %s", core.id, kind.name.lower(), core.version)
        definition = core.definition
        platform = parser.get_platform(definition.platform_id)
        sponsor_only = self._sponsor_policy(definition.author, core.data_slots)

        self._assets.export_icon(parser, core.id)
        self._assets.export_platform_image(parser, definition.platform_id)

        self._posts.create_post(self._payload(parser, core, kind))

        record = serialize_core(
            repository,
            core,
            platform,
            metadata.download_url,
            metadata.latest_release,
            metadata.funding,
            sponsor_only,
        )
        self._cache.put(core.id, CacheEntry(version=core.version, record=record))

        result.records.append(record)
        if kind is ChangeKind.NEW:
            result.new.append(core.id)
        else:
            result.updated.append(core.id)

    def _cached_entry(self, core_id: str) -> CacheEntry | None:
        """Look up a cache entry, treating inconsistent entries as a miss."""
        try:
            return self._cache.get(core_id)
        except CacheCorruptError as e:
            logger.warning("Ignoring cache entry for %s: %s", core_id, e)
            return None

    def _payload(
        self, parser: DefinitionParser, core: Core, kind: ChangeKind
    ) -> NotificationPayload:
        info = parser.get_info(core.id)
        content = None
        if isinstance(info, Found):
            content = info.value
        elif isinstance(info, Unreadable):
            logger.warning(
                "Could not read release notes for %s: %s", core.id, info.reason
            )

        definition = core.definition
        return NotificationPayload(
            core_id=core.id,
            author=definition.author,
            shortname=definition.shortname,
            version=definition.version,
            kind=kind,
            content=content,
        )


def fold_outcomes(
    outcomes: Iterable[RepositoryResult | RepositoryFailure],
) -> SyncReport:
    """Group per-repository records by owner, sorting each group by core id.

    Owners appear in the order their first successful repository appears.
    """
    results: list[RepositoryResult] = []
    failures: list[RepositoryFailure] = []
    by_owner: dict[str, list[SerializedCoreRecord]] = {}

    for outcome in outcomes:
        if isinstance(outcome, RepositoryFailure):
            failures.append(outcome)
            continue
        results.append(outcome)
        by_owner.setdefault(outcome.repository.owner, []).extend(outcome.records)

    groups = tuple(
        OwnerGroup(
            owner=owner,
            cores=tuple(sorted(records, key=lambda record: record["id"])),
        )
        for owner, records in by_owner.items()
    )
    return SyncReport(groups=groups, results=tuple(results), failures=tuple(failures))
