"""Application services for adding, backing up, restoring and bulk-deleting triggers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from hamalert_cli.domain.model import CallsignFormat, RuleRecord, records_of
from hamalert_cli.domain.reconciliation import apply_fail_fast, snapshot_live

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from hamalert_cli.domain.model import Action, JsonValue, Mode, RemoteId, RemoteRule
    from hamalert_cli.domain.ports import BackupSink, Prompter, TriggerSource
    from hamalert_cli.domain.reconciliation import MutationResult

log = getLogger(__name__)

_COMMENT_PREFIXES = ("#", "//")


def parse_polo_notes(content: str) -> list[str]:
    """Extract callsigns from a Ham2K PoLo callsign notes file.

    Each line's first word is a callsign; blank lines and lines starting with
    ``#`` or ``//`` are skipped.
    """

    callsigns: list[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(_COMMENT_PREFIXES):
            continue
        callsigns.append(stripped.split()[0])
    return callsigns


def build_callsign_rule(
    *,
    callsigns: Sequence[str],
    comment: str,
    actions: Iterable[Action] = (),
    mode: Mode | None = None,
    callsign_format: CallsignFormat = CallsignFormat.DEFAULT,
) -> RuleRecord:
    if not callsigns:
        raise ValueError("At least one callsign must be provided")
    conditions: dict[str, JsonValue] = {"callsign": callsign_format.separator.join(callsigns)}
    if mode is not None:
        conditions["mode"] = str(mode)
    return RuleRecord.create(
        conditions=conditions,
        actions=[str(action) for action in actions],
        comment=comment,
        options={},
    )


class RunOutcome(StrEnum):
    DRY_RUN = "dry-run"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NOTHING_TO_DO = "nothing-to-do"


@dataclass(slots=True, kw_only=True)
class RestoreResult:
    outcome: RunOutcome
    live: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    to_create: list[RuleRecord] = field(default_factory=list["RuleRecord"])
    mutation: MutationResult | None = None


@dataclass(slots=True, kw_only=True)
class BulkDeleteResult:
    outcome: RunOutcome
    live: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    to_delete: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    mutation: MutationResult | None = None


@dataclass(slots=True)
class TriggerService:
    triggers: TriggerSource
    backups: BackupSink
    prompter: Prompter

    def add(self, record: RuleRecord) -> RemoteId:
        remote_id = self.triggers.create(record)
        log.info("Added trigger %r as %s", record.comment, remote_id)
        return remote_id

    def backup(self) -> tuple[str, int]:
        live = self.triggers.fetch()
        return snapshot_live(self.backups, live, label=""), len(live)

    def restore(self, records: Sequence[RuleRecord], *, dry_run: bool = True) -> RestoreResult:
        """Replace the whole live collection with ``records``.

        The live set is snapshotted first; deletion and creation stop at the first
        remote failure without undoing earlier calls.
        """

        live = self.triggers.fetch()
        if dry_run:
            return RestoreResult(outcome=RunOutcome.DRY_RUN, live=live, to_create=list(records))

        location = snapshot_live(self.backups, live, label="before-restore")
        mutation = apply_fail_fast(
            self.triggers,
            to_delete=live,
            to_create=records,
            backup_location=location,
        )
        return RestoreResult(
            outcome=RunOutcome.COMPLETED,
            live=live,
            to_create=list(records),
            mutation=mutation,
        )

    def bulk_delete(
        self,
        *,
        describe: Callable[[RuleRecord], str],
        dry_run: bool = False,
    ) -> BulkDeleteResult:
        """Delete the rules the user unchecks; every rule starts checked (kept)."""

        live = self.triggers.fetch()
        if not live:
            return BulkDeleteResult(outcome=RunOutcome.NOTHING_TO_DO)

        kept = self.prompter.multi_select(
            "Select triggers to KEEP (unchecked will be deleted):",
            [describe(record) for record in records_of(live)],
            [True] * len(live),
        )
        if kept is None:
            return BulkDeleteResult(outcome=RunOutcome.CANCELLED, live=live)

        kept_indices = set(kept)
        to_delete = [rule for index, rule in enumerate(live) if index not in kept_indices]
        if not to_delete:
            return BulkDeleteResult(outcome=RunOutcome.NOTHING_TO_DO, live=live)
        if dry_run:
            return BulkDeleteResult(outcome=RunOutcome.DRY_RUN, live=live, to_delete=to_delete)

        if not self.prompter.confirm(f"Proceed with deleting {len(to_delete)} trigger(s)?"):
            return BulkDeleteResult(outcome=RunOutcome.CANCELLED, live=live, to_delete=to_delete)

        location = snapshot_live(self.backups, live, label="before-bulk-delete")
        mutation = apply_fail_fast(
            self.triggers,
            to_delete=to_delete,
            to_create=(),
            backup_location=location,
        )
        return BulkDeleteResult(
            outcome=RunOutcome.COMPLETED,
            live=live,
            to_delete=to_delete,
            mutation=mutation,
        )
