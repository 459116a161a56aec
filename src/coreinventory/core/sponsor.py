"""Sponsor-only detection rules.

Some authors publish sponsor-only builds that are recognizable from their
data-slot manifest. Each rule is a predicate over the author and the data
slots; the synchronizer takes any callable with that signature.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from coreinventory.core.models import DataSlot


SponsorPolicy = Callable[[str, Sequence[DataSlot]], bool]


@dataclass(frozen=True, slots=True)
class AuthorSlotRule:
    """Matches cores by a given author that declare a given data slot."""

    author: str
    slot_name: str

    def __call__(self, author: str, data_slots: Sequence[DataSlot]) -> bool:
        if author != self.author:
            return False
        return any(slot.name == self.slot_name for slot in data_slots)


def any_of(*rules: SponsorPolicy) -> SponsorPolicy:
    """Combine rules so a core is sponsor-only if any rule matches."""

    def policy(author: str, data_slots: Sequence[DataSlot]) -> bool:
        return any(rule(author, data_slots) for rule in rules)

    return policy


def default_sponsor_policy() -> SponsorPolicy:
    """The rules applied by the published inventory."""
    return any_of(AuthorSlotRule(author="jotego", slot_name="JTBETA"))
