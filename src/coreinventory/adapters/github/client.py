"""GitHub metadata adapter implementing GitHubPort.

Funding links come from the repository's ``.github/FUNDING.yml`` and release
information from the REST API. Any lookup that fails or finds nothing yields
None: metadata is optional in the inventory, so it never fails a core.
"""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import TYPE_CHECKING, Any

import httpx
import yaml

from coreinventory.core.models import Funding, LatestRelease


if TYPE_CHECKING:
    from types import TracebackType

    from coreinventory.core.models import RepositoryDescriptor

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
RAW_URL = "https://raw.githubusercontent.com"
USER_AGENT = "coreinventory"

_FUNDING_PLATFORMS = frozenset(f.name for f in fields(Funding))


class GitHubClient:
    """Reads funding and release metadata for repositories.

    Example:
        >>> with GitHubClient(token=os.environ.get("GITHUB_TOKEN")) as github:
        ...     release = github.latest_release(repository)
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        token: str | None = None,
        timeout: float = 30.0,
        api_url: str = API_URL,
        raw_url: str = RAW_URL,
    ) -> None:
        """Initialize the client.

        Args:
            client: Optional preconfigured httpx client (used in tests).
            token: Optional GitHub token, sent to the API only.
            timeout: Per-request timeout in seconds when creating a client.
            api_url: GitHub REST API root.
            raw_url: Raw content root used for FUNDING.yml.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._raw_url = raw_url.rstrip("/")

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this adapter created it."""
        if self._owns_client:
            self._client.close()

    def funding(self, repository: RepositoryDescriptor) -> Funding | None:
        """Return the repository's funding links, or None if it has none."""
        url = f"{self._raw_url}/{repository.github_repository}/HEAD/.github/FUNDING.yml"
        response = self._get(url)
        if response is None:
            return None

        try:
            document = yaml.safe_load(response.text)
        except yaml.YAMLError as e:
            logger.warning(
                "Invalid FUNDING.yml in %s: %s", repository.github_repository, e
            )
            return None
        if not isinstance(document, dict):
            return None

        values = {
            key: _funding_value(value)
            for key, value in document.items()
            if key in _FUNDING_PLATFORMS
        }
        values = {key: value for key, value in values.items() if value}
        if not values:
            return None
        return Funding(**values)

    def latest_release(self, repository: RepositoryDescriptor) -> LatestRelease | None:
        """Return the newest release, considering prereleases when allowed.

        GitHub's ``/releases/latest`` never returns prereleases, so when the
        repository accepts them the newest entry of ``/releases`` is used.
        """
        base = f"{self._api_url}/repos/{repository.github_repository}/releases"
        if repository.prerelease:
            response = self._get(base, api=True, params={"per_page": 10})
            if response is None:
                return None
            releases = [
                release
                for release in _json_list(response)
                if isinstance(release, dict) and not release.get("draft")
            ]
            if not releases:
                return None
            data = releases[0]
        else:
            response = self._get(f"{base}/latest", api=True)
            if response is None:
                return None
            data = _json_object(response)

        tag_name = data.get("tag_name") if isinstance(data, dict) else None
        if not tag_name:
            return None
        return LatestRelease(tag_name=tag_name, prerelease=bool(data.get("prerelease")))

    def _get(
        self,
        url: str,
        *,
        api: bool = False,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        headers = {}
        if api:
            headers["Accept"] = "application/vnd.github+json"
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = self._client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.warning("GitHub request to %s failed: %s", url, e)
            return None

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("Not found: %s", url)
            return None
        if response.is_error:
            logger.warning(
                "GitHub request to %s returned %s", url, response.status_code
            )
            return None
        return response


def _funding_value(value: Any) -> str | list[str] | None:
    if isinstance(value, str):
        return value or None
    if isinstance(value, list):
        items = [str(item) for item in value if item]
        return items or None
    return None


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        data = response.json()
    except ValueError as e:
        logger.warning("Invalid JSON from %s: %s", response.url, e)
        return None
    return data if isinstance(data, dict) else None


def _json_list(response: httpx.Response) -> list[Any]:
    try:
        data = response.json()
    except ValueError as e:
        logger.warning("Invalid JSON from %s: %s", response.url, e)
        return []
    return data if isinstance(data, list) else []
