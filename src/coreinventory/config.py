"""Configuration utilities for coreinventory.

This module provides project root discovery and the directory layout of the
inventory site the synchronizer reads from and writes to.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root directory by walking up from start directory.

    Searches for marker files in the following priority order:
    1. .coreinventory - Explicit project marker
    2. _config.yml - Jekyll site root
    3. .git - Version control root

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to project root directory. Returns start directory if no markers found.

    Example:
        >>> from coreinventory.config import find_project_root
        >>> root = find_project_root()
        >>> repositories = root / "_data" / "repositories.yml"
    """
    if start is None:
        start = Path.cwd()

    markers = [".coreinventory", "_config.yml", ".git"]
    current = start.resolve()

    for parent in [current, *current.parents]:
        for marker in markers:
            if (parent / marker).exists():
                return parent

    return current


@dataclass(frozen=True, slots=True)
class InventoryConfig:
    """Directory layout and runtime settings for a synchronization run.

    Relative paths are resolved against ``root`` by from_directory().

    Attributes:
        root: Project (site) root.
        data_dir: Directory holding the repository list and the inventory.
        assets_dir: Root of exported images.
        posts_dir: Directory notification posts are written to.
        cache_dir: Directory of the version cache.
        repositories_file: Repository list filename inside data_dir.
        cores_file: Inventory filename inside data_dir.
        timeout: Per-request network timeout in seconds.
        github_token: Optional token for the GitHub API.
    """

    root: Path
    data_dir: Path = Path("_data")
    assets_dir: Path = Path("assets")
    posts_dir: Path = Path("_posts")
    cache_dir: Path = Path(".cache/cores")
    repositories_file: str = "repositories.yml"
    cores_file: str = "cores.yml"
    timeout: float = 30.0
    github_token: str | None = None

    @classmethod
    def from_directory(
        cls, directory: Path | None = None, **overrides: Any
    ) -> InventoryConfig:
        """Create a config rooted at the discovered project root.

        Args:
            directory: Start directory for root discovery (defaults to cwd).
            **overrides: Field values to use instead of the defaults. None
                values are ignored so CLI options can be passed through.

        Returns:
            InventoryConfig with every directory resolved against the root.
        """
        root = find_project_root(directory)
        config = cls(root=root)
        values = {key: value for key, value in overrides.items() if value is not None}
        if values:
            config = replace(config, **values)
        return config.resolved()

    def resolved(self) -> InventoryConfig:
        """Return a copy with relative directories joined onto root."""

        def resolve(path: Path) -> Path:
            path = Path(path)
            return path if path.is_absolute() else self.root / path

        return replace(
            self,
            data_dir=resolve(self.data_dir),
            assets_dir=resolve(self.assets_dir),
            posts_dir=resolve(self.posts_dir),
            cache_dir=resolve(self.cache_dir),
        )

    @property
    def repositories_path(self) -> Path:
        return self.data_dir / self.repositories_file

    @property
    def cores_path(self) -> Path:
        return self.data_dir / self.cores_file
