"""Application services for saving, deleting and correcting profiles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from hamalert_cli.domain.errors import ProfileNotFoundError
from hamalert_cli.domain.reconciliation import (
    CorrectiveAction,
    contains_match,
    filter_out_permanent,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from hamalert_cli.domain.model import RuleRecord
    from hamalert_cli.domain.ports import (
        CurrentProfileMarker,
        PermanentStore,
        ProfileStore,
        Prompter,
    )
    from hamalert_cli.domain.reconciliation import ReconciliationReport

log = getLogger(__name__)

_FORBIDDEN_NAME_CHARS = frozenset('/\\:*?"<>|')


def validate_profile_name(name: str) -> str:
    stripped = name.strip()
    if not stripped:
        raise ValueError("Profile name must not be empty")
    if stripped.startswith("."):
        raise ValueError(f"Invalid profile name '{name}': must not start with '.'")
    if any(char in _FORBIDDEN_NAME_CHARS for char in stripped):
        raise ValueError(f"Invalid profile name '{name}': contains a path or reserved character")
    return stripped


class SaveStatus(StrEnum):
    SAVED = "saved"
    UNCHANGED = "unchanged"
    CANCELLED = "cancelled"


@dataclass(slots=True, kw_only=True)
class SaveProfileResult:
    name: str
    status: SaveStatus
    saved: int = 0
    excluded_permanent: int = 0
    marker_updated: bool = False


@dataclass(slots=True, kw_only=True)
class CorrectionResult:
    action: CorrectiveAction
    profile: str | None = None
    applied: bool = False


@dataclass(slots=True)
class ProfileService:
    profiles: ProfileStore
    permanent: PermanentStore
    marker: CurrentProfileMarker
    prompter: Prompter

    def save(
        self,
        name: str,
        records: Sequence[RuleRecord],
        *,
        from_live: bool,
    ) -> SaveProfileResult:
        """Store the non-permanent part of ``records`` under ``name``.

        Saving from the live collection also records ``name`` as the current
        profile, even when the stored content was already identical.
        """

        name = validate_profile_name(name)
        permanent = self.permanent.load()
        profile_records = filter_out_permanent(records, permanent)
        excluded = len(records) - len(profile_records)

        if self.profiles.exists(name):
            existing = self.profiles.load(name)
            if existing == profile_records:
                log.info("Profile '%s' already has identical content", name)
                return SaveProfileResult(
                    name=name,
                    status=SaveStatus.UNCHANGED,
                    excluded_permanent=excluded,
                    marker_updated=self._record_current(name, from_live=from_live),
                )
            confirmed = self.prompter.confirm(
                f"Profile '{name}' already exists with different content "
                f"(existing: {len(existing)} triggers, new: {len(profile_records)} triggers). "
                "Overwrite?"
            )
            if not confirmed:
                return SaveProfileResult(name=name, status=SaveStatus.CANCELLED)

        self.profiles.save(name, profile_records)
        log.info(
            "Saved %s trigger(s) to profile '%s' (excluded %s permanent)",
            len(profile_records),
            name,
            excluded,
        )
        return SaveProfileResult(
            name=name,
            status=SaveStatus.SAVED,
            saved=len(profile_records),
            excluded_permanent=excluded,
            marker_updated=self._record_current(name, from_live=from_live),
        )

    def delete(self, name: str) -> bool:
        if not self.profiles.exists(name):
            raise ProfileNotFoundError(name, known=self.profiles.list_names())
        if not self.prompter.confirm(f"Delete profile '{name}'?"):
            return False
        self.profiles.delete(name)
        if self.marker.load() == name:
            self.marker.clear()
            log.info("Cleared current profile marker (was '%s')", name)
        log.info("Deleted profile '%s'", name)
        return True

    def set_permanent(
        self,
        records: Sequence[RuleRecord],
        *,
        describe: Callable[[RuleRecord], str],
    ) -> list[RuleRecord] | None:
        """Let the user pick the permanent rules; already-permanent ones start checked."""

        existing = self.permanent.load()
        selected = self.prompter.multi_select(
            "Permanent triggers (checked = permanent):",
            [describe(record) for record in records],
            [contains_match(existing, record) for record in records],
        )
        if selected is None:
            return None
        permanent = [records[index] for index in sorted(set(selected))]
        self.permanent.save(permanent)
        log.info("Saved %s permanent trigger(s)", len(permanent))
        return permanent

    def apply_correction(
        self,
        report: ReconciliationReport,
        action: CorrectiveAction,
    ) -> CorrectionResult:
        """Carry out one of the corrective actions offered by a status report."""

        if action is CorrectiveAction.UPDATE_MARKER:
            best = report.best_match
            if best is None:
                return CorrectionResult(action=action)
            self.marker.save(best.name)
            return CorrectionResult(action=action, profile=best.name, applied=True)

        if action is CorrectiveAction.SAVE_AS_PROFILE:
            name = self.prompter.text("Name for the new profile:")
            if not name:
                return CorrectionResult(action=action)
            result = self.save(name, [rule.record for rule in report.non_permanent], from_live=True)
            return CorrectionResult(
                action=action,
                profile=result.name,
                applied=result.status is not SaveStatus.CANCELLED,
            )

        return CorrectionResult(action=action)

    def _record_current(self, name: str, *, from_live: bool) -> bool:
        if not from_live:
            return False
        self.marker.save(name)
        return True
