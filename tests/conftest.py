"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
builders for openFPGA core packages plus fakes for the GitHub and post
collaborators.
"""

from __future__ import annotations

import json
import struct
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from coreinventory.core.models import Funding, LatestRelease


if TYPE_CHECKING:
    from collections.abc import Callable

    from coreinventory.core.models import NotificationPayload, RepositoryDescriptor

ICON_SIZE = 36 * 36 * 2
PLATFORM_IMAGE_SIZE = 521 * 165 * 2


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "storage: Archive adapters (github, filesystem)")
    config.addinivalue_line("markers", "cache: File version cache adapter")
    config.addinivalue_line("markers", "pocket: openFPGA package parsing and images")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation "
        "(0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


def write_core(
    root: Path,
    core_id: str = "agg23.pong",
    *,
    author: str = "agg23",
    shortname: str = "pong",
    version: str = "1.0.0",
    platform_id: str = "pong",
    description: str = "Pong for the Pocket",
    date_release: str | None = "2022-08-01",
    data_slots: list[dict[str, Any]] | None = None,
    data_manifest: bool = True,
    icon: bytes | None = None,
    info: str | None = None,
    platform: dict[str, Any] | None = None,
    platform_image: bytes | None = None,
) -> Path:
    """Write one core (and its platform) into a package rooted at root.

    Returns:
        The core's directory.
    """
    core_dir = root / "Cores" / core_id
    core_dir.mkdir(parents=True, exist_ok=True)

    metadata: dict[str, Any] = {
        "platform_ids": [platform_id],
        "shortname": shortname,
        "description": description,
        "author": author,
        "url": f"https://github.com/{author}",
        "version": version,
    }
    if date_release is not None:
        metadata["date_release"] = date_release
    (core_dir / "core.json").write_text(
        json.dumps({"core": {"magic": "APF_VER_1", "metadata": metadata}})
    )

    if data_manifest:
        if data_slots is None:
            data_slots = [
                {
                    "name": "ROM",
                    "id": 1,
                    "required": True,
                    "parameters": "0x13",
                    "extensions": ["bin"],
                },
                {"name": "Saves", "id": 2, "required": False, "parameters": 0},
            ]
        (core_dir / "data.json").write_text(
            json.dumps({"data": {"magic": "APF_VER_1", "data_slots": data_slots}})
        )

    if icon is not None:
        (core_dir / "icon.bin").write_bytes(icon)
    if info is not None:
        (core_dir / "info.txt").write_text(info)

    platforms_dir = root / "Platforms"
    platforms_dir.mkdir(parents=True, exist_ok=True)
    if platform is None:
        platform = {
            "category": "Arcade",
            "name": platform_id.capitalize(),
            "manufacturer": "Atari",
            "year": 1972,
        }
    (platforms_dir / f"{platform_id}.json").write_text(
        json.dumps({"platform": platform})
    )
    if platform_image is not None:
        images_dir = platforms_dir / "_images"
        images_dir.mkdir(exist_ok=True)
        (images_dir / f"{platform_id}.bin").write_bytes(platform_image)

    return core_dir


def zip_package(
    source: Path,
    dest: Path,
    prefix: str = "",
    compression: int = zipfile.ZIP_STORED,
) -> Path:
    """Zip every file under source into dest, nesting them under prefix.

    Use a prefix such as ``"openfpga-pong-main/"`` to mimic GitHub zipballs.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(dest, "w", compression) as archive:
        for path in sorted(source.rglob("*")):
            if path.is_file():
                archive.write(path, prefix + path.relative_to(source).as_posix())
    return dest


def damage_zip(archive: Path, *, compress_type: int | None = None) -> Path:
    """Break a deflated archive while keeping its central directory valid.

    Without compress_type, the first member's deflate stream is overwritten
    with an invalid block header. With compress_type, every central
    directory entry is relabelled to that compression method.
    """
    data = bytearray(archive.read_bytes())
    if compress_type is None:
        name_length, extra_length = struct.unpack_from("<HH", data, 26)
        start = 30 + name_length + extra_length
        data[start : start + 4] = b"\xff\xff\xff\xff"
    else:
        end = data.rfind(b"PK\x05\x06")
        (count,) = struct.unpack_from("<H", data, end + 10)
        (offset,) = struct.unpack_from("<I", data, end + 16)
        for _ in range(count):
            struct.pack_into("<H", data, offset + 10, compress_type)
            lengths = struct.unpack_from("<HHH", data, offset + 28)
            offset += 46 + sum(lengths)
    archive.write_bytes(bytes(data))
    return archive


@pytest.fixture
def core_writer() -> Callable[..., Path]:
    """Builder that writes a core into a package directory."""
    return write_core


@pytest.fixture
def package_zipper() -> Callable[..., Path]:
    """Builder that zips a package directory into an archive."""
    return zip_package


@pytest.fixture
def zip_damager() -> Callable[..., Path]:
    """Corrupts member data of an archive built by package_zipper."""
    return damage_zip


@pytest.fixture
def icon_bytes() -> bytes:
    """A valid 36x36 binary icon."""
    return bytes(range(256)) * (ICON_SIZE // 256) + bytes(ICON_SIZE % 256)


@pytest.fixture
def platform_image_bytes() -> bytes:
    """A valid 521x165 binary platform image."""
    return b"\x00\x80" * (PLATFORM_IMAGE_SIZE // 2)


class FakeGitHub:
    """GitHubPort fake that records which repositories were looked up."""

    def __init__(
        self,
        funding: Funding | None = None,
        release: LatestRelease | None = None,
    ) -> None:
        self._funding = funding
        self._release = release
        self.funding_calls: list[str] = []
        self.release_calls: list[str] = []

    def funding(self, repository: RepositoryDescriptor) -> Funding | None:
        self.funding_calls.append(repository.github_repository)
        return self._funding

    def latest_release(self, repository: RepositoryDescriptor) -> LatestRelease | None:
        self.release_calls.append(repository.github_repository)
        return self._release


class RecordingPostWriter:
    """PostPort fake that keeps every payload it is given."""

    def __init__(self) -> None:
        self.payloads: list[NotificationPayload] = []

    def create_post(self, payload: NotificationPayload) -> None:
        self.payloads.append(payload)


@pytest.fixture
def fake_github() -> FakeGitHub:
    """GitHub fake with funding for every repository and no releases."""
    return FakeGitHub(funding=Funding(github="agg23"))


@pytest.fixture
def recording_posts() -> RecordingPostWriter:
    """Post writer fake recording payloads in memory."""
    return RecordingPostWriter()


@pytest.fixture
def github_factory() -> type[FakeGitHub]:
    """The FakeGitHub class, for tests that need custom metadata."""
    return FakeGitHub
