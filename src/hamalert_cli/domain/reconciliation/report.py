"""Read-only status of the live collection against every stored profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from hamalert_cli.domain.model import records_of

from .classify import classify
from .matching import MatchScore, score

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from hamalert_cli.domain.model import RemoteRule, RuleRecord
    from hamalert_cli.domain.ports import (
        CurrentProfileMarker,
        PermanentStore,
        ProfileStore,
        TriggerSource,
    )


class CorrectiveAction(StrEnum):
    UPDATE_MARKER = "update-marker"
    SAVE_AS_PROFILE = "save-as-profile"
    IGNORE = "ignore"


@dataclass(frozen=True, slots=True)
class ProfileMatch:
    name: str
    score: MatchScore
    is_current: bool = False


@dataclass(slots=True, kw_only=True)
class ReconciliationReport:
    current: str | None
    matches: list[ProfileMatch] = field(default_factory=list["ProfileMatch"])
    permanent_matches: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    non_permanent: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    permanent_count: int = 0

    @property
    def best_match(self) -> ProfileMatch | None:
        """Highest ``matched`` count; ties go to the alphabetically first name."""

        if not self.matches:
            return None
        return min(self.matches, key=lambda match: (-match.score.matched, match.name))

    @property
    def current_match(self) -> ProfileMatch | None:
        return next((match for match in self.matches if match.is_current), None)

    @property
    def in_sync(self) -> bool:
        best = self.best_match
        return best is not None and best.name == self.current and best.score.is_exact

    @property
    def better_match_than_current(self) -> ProfileMatch | None:
        """An exact match other than the recorded profile, when the recorded one is not exact."""

        best = self.best_match
        if best is None or self.current is None or best.name == self.current:
            return None
        if not best.score.is_exact:
            return None
        current = self.current_match
        if current is not None and current.score.is_exact:
            return None
        return best

    @property
    def corrective_actions(self) -> tuple[CorrectiveAction, ...]:
        if self.in_sync:
            return ()
        actions: list[CorrectiveAction] = []
        if self.best_match is not None and self.best_match.name != self.current:
            actions.append(CorrectiveAction.UPDATE_MARKER)
        actions.extend((CorrectiveAction.SAVE_AS_PROFILE, CorrectiveAction.IGNORE))
        return tuple(actions)


def build_report(
    *,
    live: Sequence[RemoteRule],
    permanent: Sequence[RuleRecord],
    profiles: Mapping[str, Sequence[RuleRecord]],
    current: str | None,
) -> ReconciliationReport:
    classification = classify(live, permanent)
    non_permanent = classification.unexpected
    non_permanent_records = records_of(non_permanent)
    matches = [
        ProfileMatch(
            name=name,
            score=score(non_permanent_records, records),
            is_current=name == current,
        )
        for name, records in sorted(profiles.items())
    ]
    return ReconciliationReport(
        current=current,
        matches=matches,
        permanent_matches=classification.permanent_matches,
        non_permanent=non_permanent,
        permanent_count=len(permanent),
    )


@dataclass(slots=True)
class ReconciliationReportBuilder:
    """Loads everything the report needs; never writes anything."""

    triggers: TriggerSource
    profiles: ProfileStore
    permanent: PermanentStore
    marker: CurrentProfileMarker

    def build(self) -> ReconciliationReport:
        permanent = self.permanent.load()
        current = self.marker.load()
        profiles = {name: self.profiles.load(name) for name in self.profiles.list_names()}
        live = self.triggers.fetch()
        return build_report(live=live, permanent=permanent, profiles=profiles, current=current)
