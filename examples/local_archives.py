"""Offline development example using FilesystemArchiveStorage.

Mirror the archives you want to test with as ``<root>/<owner>/<name>.zip``
and point the synchronizer at that directory instead of GitHub. Funding
and release lookups are replaced by a stub so nothing touches the network.
"""

from pathlib import Path

from coreinventory import (
    FilesystemArchiveStorage,
    FileVersionCache,
    InventoryConfig,
    JekyllPostWriter,
    RepositoryDescriptor,
    Synchronizer,
    YamlInventoryWriter,
)
from coreinventory.core.models import Funding, LatestRelease
from coreinventory.pocket import AssetExporter


ARCHIVES = Path("./test_fixtures/archives")


class OfflineGitHub:
    """GitHubPort stand-in that reports no funding and no releases."""

    def funding(self, repository: RepositoryDescriptor) -> Funding | None:
        return None

    def latest_release(self, repository: RepositoryDescriptor) -> LatestRelease | None:
        return None


def create_dev_synchronizer(config: InventoryConfig) -> Synchronizer:
    """Wire a synchronizer that only reads local archives."""
    return Synchronizer(
        archives=FilesystemArchiveStorage(ARCHIVES),
        cache=FileVersionCache(config.cache_dir),
        github=OfflineGitHub(),
        posts=JekyllPostWriter(config.posts_dir),
        assets=AssetExporter(config.assets_dir),
    )


if __name__ == "__main__":
    config = InventoryConfig.from_directory()
    synchronizer = create_dev_synchronizer(config)

    # Archive files named after the repository they mirror
    repositories = [
        RepositoryDescriptor(owner=archive.parent.name, name=archive.stem)
        for archive in sorted(ARCHIVES.glob("*/*.zip"))
    ]

    report = synchronizer.sync(repositories)
    YamlInventoryWriter(config.cores_path).write(report.inventory())

    for result in report.results:
        print(f"{result.repository.github_repository}: {len(result.records)} core(s)")
