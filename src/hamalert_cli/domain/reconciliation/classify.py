"""Partition a live rule collection into permanent, expected and unexpected rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .matching import contains_match

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hamalert_cli.domain.model import RemoteRule, RuleRecord


@dataclass(slots=True)
class Classification:
    permanent_matches: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    reference_matches: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    unexpected: list[RemoteRule] = field(default_factory=list["RemoteRule"])

    @property
    def total(self) -> int:
        return len(self.permanent_matches) + len(self.reference_matches) + len(self.unexpected)


def classify(
    live: Sequence[RemoteRule],
    permanent: Sequence[RuleRecord],
    reference: Sequence[RuleRecord] | None = None,
) -> Classification:
    """Place every live rule in exactly one bucket.

    Without a reference profile nothing non-permanent is accounted for, so every
    non-permanent live rule is unexpected.
    """

    result = Classification()
    for rule in live:
        if contains_match(permanent, rule.record):
            result.permanent_matches.append(rule)
        elif reference is not None and contains_match(reference, rule.record):
            result.reference_matches.append(rule)
        else:
            result.unexpected.append(rule)
    return result
