"""Loading of the declarative repository list.

The list lives in ``_data/repositories.yml`` and groups repositories by
owner::

    - username: agg23
      repositories:
        - name: openfpga-pong
          display_name: Pong for Analogue Pocket
          release: true
          prerelease: false
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from coreinventory.core.exceptions import RepositoryListError
from coreinventory.core.models import RepositoryDescriptor


if TYPE_CHECKING:
    from pathlib import Path


def parse_repositories(path: Path) -> list[RepositoryDescriptor]:
    """Parse the repository list into descriptors, preserving file order.

    Args:
        path: Path to the repository list YAML file.

    Returns:
        One descriptor per listed repository.

    Raises:
        RepositoryListError: If the file is missing, is not valid YAML,
            has the wrong shape, or lists a repository twice.
    """
    try:
        with path.open(encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise RepositoryListError(
            f"Repository list not found: {path}", path=path, cause=e
        ) from e
    except yaml.YAMLError as e:
        raise RepositoryListError(
            f"Invalid YAML in {path.name}: {e}", path=path, cause=e
        ) from e

    if document is None:
        return []
    if not isinstance(document, list):
        raise RepositoryListError(
            f"{path.name} must contain a list of owners", path=path
        )

    repositories: list[RepositoryDescriptor] = []
    seen: set[tuple[str, str]] = set()
    for index, owner_entry in enumerate(document):
        for repository in _parse_owner(owner_entry, index, path):
            identity = (repository.owner, repository.name)
            if identity in seen:
                raise RepositoryListError(
                    f"Duplicate repository {repository.github_repository}",
                    path=path,
                )
            seen.add(identity)
            repositories.append(repository)

    return repositories


def _parse_owner(entry: Any, index: int, path: Path) -> list[RepositoryDescriptor]:
    if not isinstance(entry, dict):
        raise RepositoryListError(f"Entry #{index} must be a mapping", path=path)

    owner = entry.get("username")
    if not isinstance(owner, str) or not owner:
        raise RepositoryListError(f"Entry #{index} is missing 'username'", path=path)

    raw_repositories = entry.get("repositories") or []
    if not isinstance(raw_repositories, list):
        raise RepositoryListError(
            f"'repositories' for {owner} must be a list", path=path
        )

    return [_parse_repository(owner, raw, path) for raw in raw_repositories]


def _parse_repository(owner: str, raw: Any, path: Path) -> RepositoryDescriptor:
    if not isinstance(raw, dict):
        raise RepositoryListError(
            f"Repositories for {owner} must be mappings", path=path
        )

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise RepositoryListError(
            f"A repository for {owner} is missing 'name'", path=path
        )

    display_name = raw.get("display_name") or name
    if not isinstance(display_name, str):
        raise RepositoryListError(
            f"'display_name' for {owner}/{name} must be a string", path=path
        )

    flags = {}
    for flag in ("release", "prerelease"):
        value = raw.get(flag, False)
        if not isinstance(value, bool):
            raise RepositoryListError(
                f"'{flag}' for {owner}/{name} must be true or false", path=path
            )
        flags[flag] = value

    return RepositoryDescriptor(
        owner=owner,
        name=name,
        display_name=display_name,
        release=flags["release"],
        prerelease=flags["prerelease"],
    )
