"""Rule identity and profile coverage.

Two records are the same rule when their conditions documents are structurally
equal and their comments are identical. Actions and options never take part.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from hamalert_cli.domain.model import RuleRecord


def rules_match(a: RuleRecord, b: RuleRecord) -> bool:
    return a.conditions == b.conditions and a.comment == b.comment


def contains_match(records: Iterable[RuleRecord], record: RuleRecord) -> bool:
    return any(rules_match(candidate, record) for candidate in records)


def filter_out_permanent(
    records: Sequence[RuleRecord],
    permanent: Sequence[RuleRecord],
) -> list[RuleRecord]:
    return [record for record in records if not contains_match(permanent, record)]


@dataclass(frozen=True, slots=True)
class MatchScore:
    matched: int
    total: int

    @property
    def percentage(self) -> int:
        # an empty profile is vacuously a full match
        if self.total == 0:
            return 100
        return self.matched * 100 // self.total

    @property
    def is_exact(self) -> bool:
        return self.total > 0 and self.matched == self.total


def score(live: Sequence[RuleRecord], profile: Sequence[RuleRecord]) -> MatchScore:
    """Count the profile entries that have at least one match in ``live``.

    Live records are not consumed: one live record may satisfy several
    profile entries.
    """

    matched = sum(1 for entry in profile if contains_match(live, entry))
    return MatchScore(matched=matched, total=len(profile))
