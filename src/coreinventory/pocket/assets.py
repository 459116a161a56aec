"""PNG export of core icons and platform images."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from coreinventory.core.exceptions import ImageDecodeError
from coreinventory.core.models import Found, NotPresent
from coreinventory.pocket.binary_image import decode_binary_image


if TYPE_CHECKING:
    from coreinventory.core.models import Lookup
    from coreinventory.pocket.definitions import DefinitionParser

logger = logging.getLogger(__name__)

IMAGES_DIRECTORY = "images"
AUTHORS_DIRECTORY = "authors"
PLATFORMS_DIRECTORY = "platforms"

ICON_WIDTH = 36
ICON_HEIGHT = 36
PLATFORM_IMAGE_WIDTH = 521
PLATFORM_IMAGE_HEIGHT = 165


class AssetExporter:
    """Writes core icons and platform images as PNG files.

    Output paths depend only on the id, so re-runs overwrite earlier
    exports instead of accumulating files.

    Attributes:
        assets_dir: Root of the asset tree (``assets/`` in the site).
    """

    def __init__(self, assets_dir: Path) -> None:
        self.assets_dir = assets_dir

    def icon_path(self, core_id: str) -> Path:
        return self.assets_dir / IMAGES_DIRECTORY / AUTHORS_DIRECTORY / f"{core_id}.png"

    def platform_image_path(self, platform_id: str) -> Path:
        return (
            self.assets_dir
            / IMAGES_DIRECTORY
            / PLATFORMS_DIRECTORY
            / f"{platform_id}.png"
        )

    def export_icon(self, parser: DefinitionParser, core_id: str) -> Path | None:
        """Export a core's icon at 36x36.

        Returns:
            The written path, or None when the core ships no icon.

        Raises:
            ImageDecodeError: If the icon exists but cannot be decoded.
        """
        return self._export(
            parser.get_icon(core_id),
            self.icon_path(core_id),
            ICON_WIDTH,
            ICON_HEIGHT,
        )

    def export_platform_image(
        self, parser: DefinitionParser, platform_id: str
    ) -> Path | None:
        """Export a platform's image at 521x165.

        Returns:
            The written path, or None when the package ships no image.

        Raises:
            ImageDecodeError: If the image exists but cannot be decoded.
        """
        return self._export(
            parser.get_platform_image(platform_id),
            self.platform_image_path(platform_id),
            PLATFORM_IMAGE_WIDTH,
            PLATFORM_IMAGE_HEIGHT,
        )

    def _export(
        self, source: Lookup[bytes], dest: Path, width: int, height: int
    ) -> Path | None:
        if isinstance(source, NotPresent):
            return None
        if not isinstance(source, Found):
            raise ImageDecodeError(
                f"Could not read image for {dest.name}: {source.reason}"
            )

        try:
            image = decode_binary_image(source.value, width, height)
        except ImageDecodeError as e:
            raise ImageDecodeError(f"{dest.stem}: {e}", path=dest) from e

        dest.parent.mkdir(parents=True, exist_ok=True)
        image.save(dest, format="PNG")
        logger.debug("Exported %s", dest)
        return dest
