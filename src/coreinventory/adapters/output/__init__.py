"""Output adapters: notification posts and the inventory file."""

from coreinventory.adapters.output.inventory import HEADER, YamlInventoryWriter
from coreinventory.adapters.output.posts import JekyllPostWriter


__all__ = ["HEADER", "JekyllPostWriter", "YamlInventoryWriter"]
