"""Version cache adapters."""

from coreinventory.adapters.cache.file_cache import FileVersionCache


__all__ = ["FileVersionCache"]
