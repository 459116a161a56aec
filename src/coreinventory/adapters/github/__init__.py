"""GitHub metadata adapters."""

from coreinventory.adapters.github.client import GitHubClient


__all__ = ["GitHubClient"]
