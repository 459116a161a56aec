"""Jekyll post writer implementing PostPort."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import yaml


if TYPE_CHECKING:
    from pathlib import Path

    from coreinventory.core.models import NotificationPayload


Clock = Callable[[], datetime]


def slugify(text: str) -> str:
    """Lowercase text with runs of non-alphanumerics collapsed to dashes."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JekyllPostWriter:
    """Writes one Markdown post with YAML front matter per payload.

    Posts land in ``{posts_dir}/{YYYY-MM-DD}-{author}-{shortname}.md``.
    """

    def __init__(self, posts_dir: Path, clock: Clock = _utc_now) -> None:
        self.posts_dir = posts_dir
        self._clock = clock

    def post_path(self, payload: NotificationPayload, date: datetime) -> Path:
        slug = slugify(f"{payload.author}-{payload.shortname}")
        return self.posts_dir / f"{date:%Y-%m-%d}-{slug}.md"

    def create_post(self, payload: NotificationPayload) -> None:
        """Write the post for a new or updated core."""
        date = self._clock()
        front_matter = {
            "title": payload.title,
            "date": date.strftime("%Y-%m-%d %H:%M:%S %z"),
            "categories": payload.categories,
            "tags": payload.tags,
        }

        path = self.post_path(payload, date)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write("---\n")
            f.write(yaml.safe_dump(front_matter, sort_keys=False, allow_unicode=True))
            f.write("---\n")
            if payload.content:
                f.write("\n")
                f.write(payload.content)
