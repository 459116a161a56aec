"""Analogue Pocket openFPGA package support: definitions and image assets."""

from coreinventory.pocket.assets import AssetExporter
from coreinventory.pocket.binary_image import decode_binary_image
from coreinventory.pocket.definitions import DefinitionParser


__all__ = ["AssetExporter", "DefinitionParser", "decode_binary_image"]
