"""Building of the per-core inventory record."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from coreinventory.core.models import (
        Core,
        DataSlot,
        Funding,
        LatestRelease,
        PlatformMetadata,
        RepositoryDescriptor,
        SerializedCoreRecord,
    )


def serialize_core(
    repository: RepositoryDescriptor,
    core: Core,
    platform: PlatformMetadata,
    download_url: str | None,
    latest_release: LatestRelease | None,
    funding: Funding | None,
    sponsor_only: bool,
) -> SerializedCoreRecord:
    """Merge a core's definition and repository metadata into one record.

    Key order is fixed so the YAML output diffs cleanly between runs.
    Optional data (release tag, asset filename and extensions, funding)
    only appears when present.
    """
    definition = core.definition

    repository_info: dict[str, Any] = {
        "platform": "github",
        "name": repository.name,
        "prerelease": repository.prerelease,
    }
    if latest_release is not None:
        repository_info["tag_name"] = latest_release.tag_name

    record: SerializedCoreRecord = {
        "id": definition.id,
        "display_name": repository.display_name,
        "repository": repository_info,
        "sponsor_only": sponsor_only,
        "download_url": download_url,
        "platform_id": definition.platform_id,
        "description": definition.description,
        "version": definition.version,
        "date_release": definition.date_release,
        "platform": {
            "category": platform.category,
            "name": platform.name,
            "manufacturer": platform.manufacturer,
            "year": platform.year,
        },
        "assets": [
            _serialize_asset(definition.platform_id, slot)
            for slot in core.required_slots
        ],
    }

    if funding is not None:
        record["sponsor"] = funding.to_dict()

    return record


def _serialize_asset(platform_id: str, slot: DataSlot) -> dict[str, Any]:
    asset: dict[str, Any] = {"platform": platform_id}
    if slot.filename is not None:
        asset["filename"] = slot.filename
    if slot.extensions is not None:
        asset["extensions"] = list(slot.extensions)
    if slot.core_specific:
        asset["core_specific"] = True
    return asset
