"""Apply a plan to the remote collection: backup, delete, create, record.

Remote mutations are independent calls with no transaction around them. The
first failing call stops the run; everything done before it stays done and the
snapshot written up front is the only way back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from hamalert_cli.domain.errors import SwitchExecutionError, TriggerSourceError
from hamalert_cli.domain.model import records_of

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hamalert_cli.domain.model import RemoteId, RemoteRule, RuleRecord
    from hamalert_cli.domain.ports import BackupSink, CurrentProfileMarker, TriggerSource

    from .plan import ReconciliationPlan

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class MutationResult:
    backup_location: str
    deleted: list[RemoteRule] = field(default_factory=list["RemoteRule"])
    created: list[RemoteId] = field(default_factory=list["RemoteId"])


def snapshot_live(backups: BackupSink, live: Sequence[RemoteRule], *, label: str) -> str:
    """Write the whole live set to the backup sink before any mutation."""

    location = backups.write_snapshot(records_of(live), label=label)
    log.info("Backed up %s trigger(s) to %s", len(live), location)
    return location


def apply_fail_fast(
    triggers: TriggerSource,
    *,
    to_delete: Sequence[RemoteRule],
    to_create: Sequence[RuleRecord],
    backup_location: str,
) -> MutationResult:
    """Delete then create, one remote call per rule, stopping at the first failure."""

    result = MutationResult(backup_location=backup_location)
    phase = "delete"
    try:
        for rule in to_delete:
            triggers.delete(rule.remote_id)
            result.deleted.append(rule)
            log.debug("Deleted trigger %s (%r)", rule.remote_id, rule.comment)
        phase = "create"
        for record in to_create:
            result.created.append(triggers.create(record))
            log.debug("Created trigger %r", record.comment)
    except TriggerSourceError as exc:
        log.error(  # noqa: TRY400
            "Remote %s failed: %s (deleted %s/%s, created %s/%s)",
            phase,
            exc,
            len(result.deleted),
            len(to_delete),
            len(result.created),
            len(to_create),
        )
        raise SwitchExecutionError(
            phase=phase,
            deleted=len(result.deleted),
            created=len(result.created),
            total_delete=len(to_delete),
            total_create=len(to_create),
            backup_location=backup_location,
        ) from exc
    return result


@dataclass(slots=True)
class SwitchExecutor:
    """The only component allowed to mutate the remote collection during a switch."""

    triggers: TriggerSource
    backups: BackupSink
    marker: CurrentProfileMarker

    def execute(self, plan: ReconciliationPlan) -> MutationResult:
        backup_location = snapshot_live(self.backups, plan.live, label="before-switch")
        result = apply_fail_fast(
            self.triggers,
            to_delete=plan.to_delete,
            to_create=plan.to_create,
            backup_location=backup_location,
        )
        self.marker.save(plan.target)
        log.info(
            "Switched to profile '%s': deleted=%s, created=%s",
            plan.target,
            len(result.deleted),
            len(result.created),
        )
        return result
