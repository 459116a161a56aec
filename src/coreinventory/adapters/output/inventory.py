"""YAML writer for the generated cores inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml


if TYPE_CHECKING:
    from pathlib import Path


HEADER = """\
# ##############################################################################
# #                                                                            #
# #                        THIS FILE IS AUTO-GENERATED                         #
# #                           DO NOT EDIT THIS FILE                            #
# #               ADD NEW CORE REPOSITORIES TO REPOSITORIES.YML                #
# #                                                                            #
# ##############################################################################
"""


class YamlInventoryWriter:
    """Serializes the owner-grouped inventory behind a fixed header."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def render(self, inventory: list[dict[str, Any]]) -> str:
        """Return the file contents for an inventory, header included."""
        body = yaml.safe_dump(
            inventory,
            sort_keys=False,
            allow_unicode=True,
            explicit_start=True,
        )
        return HEADER + body

    def write(self, inventory: list[dict[str, Any]]) -> None:
        """Write the inventory, replacing any previous file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.render(inventory), encoding="utf-8")
