"""Parser for Analogue Pocket openFPGA core packages.

An extracted package looks like::

    Cores/<core_id>/core.json          core metadata (required)
    Cores/<core_id>/data.json          data-slot manifest
    Cores/<core_id>/icon.bin           optional author icon
    Cores/<core_id>/info.txt           optional release notes
    Cores/<core_id>/updater.json       optional updater descriptor
    Platforms/<platform_id>.json       platform catalog
    Platforms/_images/<platform_id>.bin  optional platform image

Required files that are malformed raise ParseError. Optional resources are
returned as Found / NotPresent / Unreadable so callers can tell "absent"
apart from "failed to read".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from coreinventory.core.exceptions import ParseError
from coreinventory.core.models import (
    Core,
    CoreDefinition,
    CoreUpdater,
    DataSlot,
    Found,
    Lookup,
    NotPresent,
    PlatformMetadata,
    PreviousCore,
    Unreadable,
)


logger = logging.getLogger(__name__)

CORES_DIRECTORY = "Cores"
PLATFORMS_DIRECTORY = "Platforms"
PLATFORM_IMAGES_DIRECTORY = "_images"

CORE_FILE = "core.json"
DATA_FILE = "data.json"
UPDATER_FILE = "updater.json"
ICON_FILE = "icon.bin"
INFO_FILE = "info.txt"


class DefinitionParser:
    """Reads core and platform definitions from an extracted package.

    Attributes:
        root: Package root, the directory that contains ``Cores/``.

    Example:
        >>> parser = DefinitionParser(Path("extracted"))
        >>> for core_id in parser.core_ids():
        ...     core = parser.get_core(core_id)
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._platforms: dict[str, PlatformMetadata] = {}

    @property
    def cores_dir(self) -> Path:
        return self.root / CORES_DIRECTORY

    @property
    def platforms_dir(self) -> Path:
        return self.root / PLATFORMS_DIRECTORY

    def core_ids(self) -> list[str]:
        """List the core directories in the package, sorted by id."""
        if not self.cores_dir.is_dir():
            return []
        return sorted(p.name for p in self.cores_dir.iterdir() if p.is_dir())

    def core_dir(self, core_id: str) -> Path:
        """Return the directory of a core, rejecting ids that are not plain names.

        Raises:
            ParseError: If the id contains path separators or does not exist.
        """
        path = self.cores_dir / core_id
        if not core_id or Path(core_id).name != core_id or core_id in (".", ".."):
            raise ParseError(path, f"invalid core id {core_id!r}")
        if not path.is_dir():
            raise ParseError(path, "core directory not found")
        return path

    def get_core(self, core_id: str) -> Core | None:
        """Parse a core's metadata and data-slot manifest.

        Args:
            core_id: Directory name of the core under ``Cores/``.

        Returns:
            The parsed Core, or None when the core ships no data manifest.

        Raises:
            ParseError: If core.json is missing or either file is malformed.
        """
        core_dir = self.core_dir(core_id)

        data_path = core_dir / DATA_FILE
        if not data_path.is_file():
            logger.warning("Skipping core %s: %s not found", core_id, DATA_FILE)
            return None

        definition = self._parse_definition(core_id, core_dir / CORE_FILE)
        data_slots = self._parse_data_slots(data_path)
        return Core(definition=definition, data_slots=data_slots)

    def get_platform(self, platform_id: str) -> PlatformMetadata:
        """Look up platform metadata in the package's platform catalog.

        Results are cached so cores sharing a platform share one instance.

        Raises:
            ParseError: If the platform file is missing or malformed.
        """
        if platform_id in self._platforms:
            return self._platforms[platform_id]

        path = self.platforms_dir / f"{platform_id}.json"
        document = _read_json(path)
        platform = _require_mapping(document, "platform", path)

        year = platform.get("year")
        if isinstance(year, str) and year.isdigit():
            year = int(year)
        elif year is not None and not isinstance(year, int):
            raise ParseError(path, f"'year' must be an integer, got {year!r}")

        metadata = PlatformMetadata(
            id=platform_id,
            name=_require_str(platform, "name", path),
            category=_optional_str(platform, "category", path),
            manufacturer=_optional_str(platform, "manufacturer", path),
            year=year,
        )
        self._platforms[platform_id] = metadata
        return metadata

    def get_info(self, core_id: str) -> Lookup[str]:
        """Read the core's free-text release notes, if it ships any."""
        path = self.cores_dir / core_id / INFO_FILE
        if not path.is_file():
            return NotPresent()
        try:
            return Found(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            return Unreadable(str(e))

    def get_updater(self, core_id: str) -> Lookup[CoreUpdater]:
        """Read the core's updater descriptor, if it ships one."""
        path = self.cores_dir / core_id / UPDATER_FILE
        if not path.is_file():
            return NotPresent()
        try:
            document = _read_json(path)
            return Found(_parse_updater(document, path))
        except ParseError as e:
            return Unreadable(e.reason)

    def get_icon(self, core_id: str) -> Lookup[bytes]:
        """Read the core's raw binary icon, if it ships one."""
        return _read_bytes(self.cores_dir / core_id / ICON_FILE)

    def get_platform_image(self, platform_id: str) -> Lookup[bytes]:
        """Read the raw binary image of a platform, if the package ships one."""
        return _read_bytes(
            self.platforms_dir / PLATFORM_IMAGES_DIRECTORY / f"{platform_id}.bin"
        )

    def _parse_definition(self, core_id: str, path: Path) -> CoreDefinition:
        document = _read_json(path)
        core = _require_mapping(document, "core", path)
        metadata = _require_mapping(core, "metadata", path)

        platform_ids = metadata.get("platform_ids")
        if (
            not isinstance(platform_ids, list)
            or not platform_ids
            or not all(isinstance(p, str) and p for p in platform_ids)
        ):
            raise ParseError(path, "'platform_ids' must be a non-empty list of strings")

        version = metadata.get("version")
        if isinstance(version, int | float) and not isinstance(version, bool):
            version = str(version)
        if not isinstance(version, str) or not version:
            raise ParseError(path, "missing required field 'version'")

        return CoreDefinition(
            id=core_id,
            platform_id=platform_ids[0],
            author=_require_str(metadata, "author", path),
            shortname=_require_str(metadata, "shortname", path),
            version=version,
            description=_optional_str(metadata, "description", path) or "",
            date_release=_optional_str(metadata, "date_release", path),
            url=_optional_str(metadata, "url", path),
            platform_ids=tuple(platform_ids),
        )

    def _parse_data_slots(self, path: Path) -> tuple[DataSlot, ...]:
        document = _read_json(path)
        data = _require_mapping(document, "data", path)

        raw_slots = data.get("data_slots", [])
        if not isinstance(raw_slots, list):
            raise ParseError(path, "'data_slots' must be a list")

        slots = []
        for index, raw in enumerate(raw_slots):
            if not isinstance(raw, dict):
                raise ParseError(path, f"data slot #{index} must be an object")
            slots.append(_parse_data_slot(raw, index, path))
        return tuple(slots)


def _parse_data_slot(raw: dict[str, Any], index: int, path: Path) -> DataSlot:
    name = raw.get("name")
    if not isinstance(name, str):
        raise ParseError(path, f"data slot #{index} is missing 'name'")

    extensions = raw.get("extensions")
    if extensions is not None:
        if not isinstance(extensions, list) or not all(
            isinstance(ext, str) for ext in extensions
        ):
            raise ParseError(path, f"data slot '{name}': 'extensions' must be strings")
        extensions = tuple(extensions)

    slot_id = raw.get("id")
    if isinstance(slot_id, str):
        slot_id = _parse_int(slot_id, path, f"data slot '{name}' id")

    return DataSlot(
        name=name,
        required=bool(raw.get("required", False)),
        filename=_optional_str(raw, "filename", path),
        extensions=extensions,
        id=slot_id,
        parameters=_parse_parameters(raw.get("parameters", 0), name, path),
    )


def _parse_parameters(value: Any, slot_name: str, path: Path) -> int:
    """Parameters are an int bitmap or a hex string such as "0x13"."""
    if isinstance(value, bool):
        raise ParseError(path, f"data slot '{slot_name}': invalid parameters")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return _parse_int(value, path, f"data slot '{slot_name}' parameters")
    raise ParseError(path, f"data slot '{slot_name}': invalid parameters {value!r}")


def _parse_int(value: str, path: Path, what: str) -> int:
    try:
        return int(value, 0)
    except ValueError as e:
        raise ParseError(path, f"{what} is not a number: {value!r}", cause=e) from e


def _parse_updater(document: Any, path: Path) -> CoreUpdater:
    if not isinstance(document, dict):
        raise ParseError(path, "top level must be an object")

    previous = []
    for entry in document.get("previous", []) or []:
        if not isinstance(entry, dict):
            raise ParseError(path, "'previous' entries must be objects")
        previous.append(
            PreviousCore(
                shortname=_require_str(entry, "shortname", path),
                author=_require_str(entry, "author", path),
                platform_id=_optional_str(entry, "platform_id", path),
            )
        )

    license_filename = None
    license_info = document.get("license")
    if isinstance(license_info, dict):
        license_filename = _optional_str(license_info, "filename", path)

    return CoreUpdater(previous=tuple(previous), license_filename=license_filename)


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ParseError(path, "file not found", cause=e) from e
    except json.JSONDecodeError as e:
        raise ParseError(
            path, f"invalid JSON at line {e.lineno}: {e.msg}", cause=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(path, str(e), cause=e) from e


def _read_bytes(path: Path) -> Lookup[bytes]:
    if not path.is_file():
        return NotPresent()
    try:
        return Found(path.read_bytes())
    except OSError as e:
        return Unreadable(str(e))


def _require_mapping(document: Any, key: str, path: Path) -> dict[str, Any]:
    value = document.get(key) if isinstance(document, dict) else None
    if not isinstance(value, dict):
        raise ParseError(path, f"missing required object '{key}'")
    return value


def _require_str(mapping: dict[str, Any], key: str, path: Path) -> str:
    value = mapping.get(key)
    if not isinstance(value, str) or not value:
        raise ParseError(path, f"missing required field '{key}'")
    return value


def _optional_str(mapping: dict[str, Any], key: str, path: Path) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(path, f"'{key}' must be a string")
    return value
