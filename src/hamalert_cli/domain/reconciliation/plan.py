"""Switch planning: what to delete, what to create, and what to do about strays.

The plan is the contract between the planner and the executor:
- ``keep`` holds live rules matching the permanent set; they are never touched
- ``to_delete`` holds every other live rule, in live order
- ``to_create`` holds the target profile's records verbatim
- ``unexpected`` is the part of ``to_delete`` that matches neither the permanent
  set nor the profile recorded by the current-profile marker

Planning is read-only apart from one explicit user choice: saving unexpected
rules into the previously recorded profile writes to the profile store right
away, even when the switch itself is only a dry run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .classify import classify
from .matching import contains_match

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hamalert_cli.domain.model import RemoteRule, RuleRecord
    from hamalert_cli.domain.ports import (
        CurrentProfileMarker,
        PermanentStore,
        ProfileStore,
        Prompter,
        TriggerSource,
    )

log = getLogger(__name__)


class UnexpectedResolution(StrEnum):
    """How the rules matching neither permanent nor reference were handled."""

    NONE = "none"
    DELETE = "delete"
    SAVE_TO_CURRENT = "save-to-current"
    CANCEL = "cancel"


@dataclass(slots=True, kw_only=True)
class ReconciliationPlan:
    target: str
    reference: str | None
    live: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    keep: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    to_delete: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    to_create: list[RuleRecord] = field(default_factory=list["RuleRecord"])
    unexpected: list[RemoteRule] = field(default_factory=list["RemoteRule"])


def build_reconciliation_plan(
    *,
    target: str,
    target_records: Sequence[RuleRecord],
    live: Sequence[RemoteRule],
    permanent: Sequence[RuleRecord],
    reference: str | None = None,
    reference_records: Sequence[RuleRecord] | None = None,
) -> ReconciliationPlan:
    """Compute the plan for switching ``live`` to ``target_records``.

    Deletion does not depend on the reference profile: every non-permanent live
    rule is deleted and the target profile recreated in full, even when the
    target is already active.
    """

    classification = classify(live, permanent, reference_records)
    return ReconciliationPlan(
        target=target,
        reference=reference,
        live=list(live),
        keep=list(classification.permanent_matches),
        to_delete=[rule for rule in live if not contains_match(permanent, rule.record)],
        to_create=list(target_records),
        unexpected=list(classification.unexpected),
    )


def merge_into_profile(
    existing: Sequence[RuleRecord],
    additions: Sequence[RuleRecord],
) -> tuple[list[RuleRecord], int]:
    """Append ``additions`` not already present by identity; return the merge and count."""

    merged = list(existing)
    added = 0
    for record in additions:
        if contains_match(merged, record):
            continue
        merged.append(record)
        added += 1
    return merged, added


@dataclass(slots=True)
class SwitchPlanner:
    """Builds a switch plan from freshly loaded state and resolves unexpected rules."""

    triggers: TriggerSource
    profiles: ProfileStore
    permanent: PermanentStore
    marker: CurrentProfileMarker
    prompter: Prompter

    def plan(self, target: str) -> ReconciliationPlan:
        target_records = self.profiles.load(target)
        permanent = self.permanent.load()
        reference = self.marker.load()
        reference_records = self._load_reference(reference)

        # always re-read the live collection right before planning
        live = self.triggers.fetch()
        plan = build_reconciliation_plan(
            target=target,
            target_records=target_records,
            live=live,
            permanent=permanent,
            reference=reference,
            reference_records=reference_records,
        )
        log.info(
            "Planned switch to '%s': keep=%s, delete=%s, create=%s, unexpected=%s",
            target,
            len(plan.keep),
            len(plan.to_delete),
            len(plan.to_create),
            len(plan.unexpected),
        )
        return plan

    def resolve_unexpected(self, plan: ReconciliationPlan) -> UnexpectedResolution:
        if not plan.unexpected:
            return UnexpectedResolution.NONE

        labels = self._resolution_labels(plan.reference)
        if plan.reference is None:
            message = (
                f"No current profile is recorded, so {len(plan.unexpected)} non-permanent "
                "trigger(s) cannot be attributed to a profile. What should happen to them?"
            )
        else:
            message = (
                f"{len(plan.unexpected)} trigger(s) are neither permanent nor part of "
                f"profile '{plan.reference}'. What should happen to them?"
            )

        choice = self.prompter.choose(message, list(labels))
        resolution = labels.get(choice) if choice is not None else None
        if resolution is None or resolution is UnexpectedResolution.CANCEL:
            log.info("Switch to '%s' cancelled", plan.target)
            return UnexpectedResolution.CANCEL

        if resolution is UnexpectedResolution.SAVE_TO_CURRENT and plan.reference is not None:
            self.save_to_profile(plan.reference, [rule.record for rule in plan.unexpected])
        return resolution

    def save_to_profile(self, name: str, records: Sequence[RuleRecord]) -> int:
        existing = self.profiles.load(name) if self.profiles.exists(name) else []
        merged, added = merge_into_profile(existing, records)
        self.profiles.save(name, merged)
        log.info("Saved %s unexpected trigger(s) to profile '%s'", added, name)
        return added

    def _load_reference(self, reference: str | None) -> list[RuleRecord] | None:
        if reference is None:
            return None
        if not self.profiles.exists(reference):
            log.warning("Recorded current profile '%s' no longer exists", reference)
            return None
        return self.profiles.load(reference)

    @staticmethod
    def _resolution_labels(reference: str | None) -> dict[str, UnexpectedResolution]:
        labels = {"Delete them": UnexpectedResolution.DELETE}
        if reference is not None:
            labels[f"Save them to profile '{reference}' first"] = (
                UnexpectedResolution.SAVE_TO_CURRENT
            )
        labels["Cancel"] = UnexpectedResolution.CANCEL
        return labels
