# ruff: noqa: T201

"""Human-readable rendering of rules, plans and reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hamalert_cli.domain.reconciliation import SwitchOutcome, UnexpectedResolution
from hamalert_cli.domain.triggers import RunOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hamalert_cli.domain.model import RemoteRule, RuleRecord
    from hamalert_cli.domain.reconciliation import ReconciliationReport, SwitchReport
    from hamalert_cli.domain.triggers import BulkDeleteResult, RestoreResult


def describe_rule(record: RuleRecord) -> str:
    """One-line label: ``[mode] callsign - "comment"``."""

    mode = record.conditions.get("mode")
    callsign = record.conditions.get("callsign")
    mode_label = mode if isinstance(mode, str) else "any"
    callsign_label = callsign.replace("\n", ", ") if isinstance(callsign, str) else "?"
    return f'[{mode_label}] {callsign_label} - "{record.comment}"'


def print_rules(records: Sequence[RuleRecord], *, indent: str = "  - ") -> None:
    for record in records:
        print(f"{indent}{describe_rule(record)}")


def print_remote_rules(rules: Sequence[RemoteRule], *, indent: str = "  - ") -> None:
    print_rules([rule.record for rule in rules], indent=indent)


def print_profile_list(report: ReconciliationReport) -> None:
    print("Profiles:")
    for match in report.matches:
        marker = "*" if match.is_current else " "
        suffix = " <- current" if match.is_current else ""
        print(
            f"  {marker} {match.name:<15} ({match.score.matched}/{match.score.total}  "
            f"{match.score.percentage}% match){suffix}"
        )

    better = report.better_match_than_current
    if better is not None:
        print(f"\n! Current triggers match '{better.name}' better than recorded '{report.current}'")
        print("Run 'profile status' for details.")

    print(f"\nPermanent triggers: {report.permanent_count}")


def print_status(report: ReconciliationReport) -> None:
    print(f"Recorded profile: {report.current or '(none)'}")
    print(
        f"Live triggers: {len(report.permanent_matches) + len(report.non_permanent)} "
        f"({len(report.permanent_matches)} permanent, {len(report.non_permanent)} other)"
    )
    best = report.best_match
    if best is None:
        print("No profiles saved.")
    else:
        print(
            f"Best match: {best.name} ({best.score.matched}/{best.score.total}, "
            f"{best.score.percentage}%)"
        )
    if report.in_sync:
        print("Status: in sync")
    else:
        print("Status: out of sync")


def print_switch_report(report: SwitchReport) -> None:
    plan = report.plan
    if report.outcome is SwitchOutcome.CANCELLED:
        print("Switch cancelled. No changes were made to HamAlert.")
        if report.resolution is UnexpectedResolution.SAVE_TO_CURRENT:
            print(f"Unexpected triggers were saved to profile '{plan.reference}'.")
        return

    if report.outcome is SwitchOutcome.DRY_RUN:
        print("DRY RUN - No changes will be made to HamAlert\n")

    print(f"Permanent triggers kept: {len(plan.keep)}")
    print(f"\nTriggers to delete ({len(plan.to_delete)}):")
    print_remote_rules(plan.to_delete)
    print(f"\nTriggers to create from profile '{plan.target}' ({len(plan.to_create)}):")
    print_rules(plan.to_create)
    print(f"\nUnexpected triggers: {_describe_resolution(report)}")

    if report.outcome is SwitchOutcome.DRY_RUN:
        print("\nRun with --no-dry-run to execute.")
        return

    if report.execution is not None:
        print(f"\nBacked up live triggers to {report.execution.backup_location}")
        print(
            f"Switched to profile '{plan.target}': deleted {len(report.execution.deleted)}, "
            f"created {len(report.execution.created)}."
        )


def _describe_resolution(report: SwitchReport) -> str:
    count = len(report.plan.unexpected)
    match report.resolution:
        case UnexpectedResolution.NONE:
            return "none"
        case UnexpectedResolution.DELETE:
            return f"{count} will be deleted"
        case UnexpectedResolution.SAVE_TO_CURRENT:
            return (
                f"{count} saved to profile '{report.plan.reference}' "
                "(profile file updated even in a dry run)"
            )
        case _:
            return f"{count} (cancelled)"


def print_restore_result(result: RestoreResult, *, source: object) -> None:
    if result.outcome is RunOutcome.DRY_RUN:
        print("DRY RUN - No changes will be made\n")
        print(
            f"This will DELETE {len(result.live)} existing triggers and restore "
            f"{len(result.to_create)} triggers from backup.\n"
        )
        print("Triggers to be restored:")
        print_rules(result.to_create, indent="  ")
        print("\nRun with --no-dry-run to execute.")
        return

    if result.mutation is not None:
        location = result.mutation.backup_location
        print(f"Backed up {len(result.live)} existing triggers to {location}")
        print(f"Deleted {len(result.mutation.deleted)} existing triggers")
        print(f"\nRestored {len(result.mutation.created)} triggers from {source}")


def print_bulk_delete_result(result: BulkDeleteResult) -> None:
    match result.outcome:
        case RunOutcome.NOTHING_TO_DO:
            print("No triggers selected for deletion." if result.live else "No triggers found.")
            return
        case RunOutcome.CANCELLED:
            print("Deletion cancelled.")
            return
        case _:
            pass

    print(f"\nTriggers to DELETE ({len(result.to_delete)}):")
    print_remote_rules(result.to_delete)
    if result.outcome is RunOutcome.DRY_RUN:
        print("\n[DRY RUN] No triggers were deleted.")
        return

    if result.mutation is not None:
        print(f"\nBacked up {len(result.live)} triggers to {result.mutation.backup_location}")
        print(
            f"Deleted {len(result.mutation.deleted)} trigger(s). "
            f"Kept {len(result.live) - len(result.mutation.deleted)} trigger(s)."
        )
