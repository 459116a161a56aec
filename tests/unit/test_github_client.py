"""Unit tests for the GitHub metadata adapter."""

import httpx
import pytest

from coreinventory.core.models import RepositoryDescriptor


REPO = RepositoryDescriptor(owner="agg23", name="openfpga-pong", release=True)
PRERELEASE_REPO = RepositoryDescriptor(
    owner="agg23", name="openfpga-pong", release=True, prerelease=True
)

FUNDING_PATH = "/agg23/openfpga-pong/HEAD/.github/FUNDING.yml"
RELEASES_PATH = "/repos/agg23/openfpga-pong/releases"


def _client(handler, token: str | None = None):
    from coreinventory.adapters.github import GitHubClient

    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GitHubClient(client=client, token=token)


@pytest.mark.core
@pytest.mark.tier(1)
class TestFunding:
    """Tests for GitHubClient.funding()."""

    def test_satisfies_protocol(self) -> None:
        """GitHubClient should implement GitHubPort."""
        from coreinventory.core.ports import GitHubPort

        assert isinstance(_client(lambda request: httpx.Response(404)), GitHubPort)

    def test_reads_funding_yml(self) -> None:
        """Known platforms are read; empty and unknown ones are dropped."""
        from coreinventory.core.models import Funding

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == "raw.githubusercontent.com"
            assert request.url.path == FUNDING_PATH
            return httpx.Response(
                200,
                text=(
                    "github: agg23\n"
                    "patreon: ''\n"
                    "custom: ['https://example.com/donate']\n"
                    "unknown_platform: someone\n"
                ),
            )

        funding = _client(handler).funding(REPO)

        assert funding == Funding(
            github="agg23", custom=["https://example.com/donate"]
        )

    def test_missing_funding_file(self) -> None:
        """A repository without FUNDING.yml has no funding."""
        assert _client(lambda request: httpx.Response(404)).funding(REPO) is None

    def test_invalid_funding_yaml(self) -> None:
        """Unparseable FUNDING.yml is treated as absent."""
        client = _client(lambda request: httpx.Response(200, text="github: [oops"))

        assert client.funding(REPO) is None

    def test_token_not_sent_to_raw_host(self) -> None:
        """The API token is only sent to the API."""
        seen: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(404)

        _client(handler, token="secret").funding(REPO)

        assert seen == [None]


@pytest.mark.core
@pytest.mark.tier(1)
class TestLatestRelease:
    """Tests for GitHubClient.latest_release()."""

    def test_latest_release(self) -> None:
        """Stable tracking uses /releases/latest."""
        from coreinventory.core.models import LatestRelease

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"{RELEASES_PATH}/latest"
            return httpx.Response(200, json={"tag_name": "1.2.0", "prerelease": False})

        assert _client(handler).latest_release(REPO) == LatestRelease(tag_name="1.2.0")

    def test_newest_prerelease(self) -> None:
        """Prerelease tracking takes the newest non-draft release."""
        from coreinventory.core.models import LatestRelease

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == RELEASES_PATH
            return httpx.Response(
                200,
                json=[
                    {"tag_name": "2.0.0-rc1", "prerelease": True, "draft": True},
                    {"tag_name": "1.9.0-beta", "prerelease": True},
                    {"tag_name": "1.8.0", "prerelease": False},
                ],
            )

        release = _client(handler).latest_release(PRERELEASE_REPO)

        assert release == LatestRelease(tag_name="1.9.0-beta", prerelease=True)

    def test_sends_bearer_token(self) -> None:
        """A configured token is sent as a bearer header."""
        seen: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={"tag_name": "1.0.0"})

        _client(handler, token="secret").latest_release(REPO)

        assert seen == ["Bearer secret"]

    def test_no_releases(self) -> None:
        """A repository without releases yields None."""
        assert _client(lambda request: httpx.Response(404)).latest_release(REPO) is None

    def test_server_error(self, caplog: pytest.LogCaptureFixture) -> None:
        """Error responses are logged and yield None."""
        client = _client(lambda request: httpx.Response(503))

        with caplog.at_level("WARNING"):
            assert client.latest_release(REPO) is None

        assert "503" in caplog.text

    def test_network_error(self) -> None:
        """Connection failures yield None."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        assert _client(handler).latest_release(REPO) is None

    def test_invalid_json(self) -> None:
        """A body that is not JSON yields None."""
        client = _client(lambda request: httpx.Response(200, text="<html>"))

        assert client.latest_release(REPO) is None
