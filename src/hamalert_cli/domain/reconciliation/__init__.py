"""Reconciliation engine for switching the live trigger collection between profiles.

Flow of a switch:
1) fetch the live collection and load the target, permanent and reference sets
2) classify live rules as permanent, reference-matched or unexpected
3) ask the user what to do with unexpected rules
4) dry run: report the plan; otherwise back up, delete, create, record the marker
"""

from __future__ import annotations

from .classify import Classification, classify
from .engine import ProfileSwitcher, SwitchOutcome, SwitchReport
from .execute import MutationResult, SwitchExecutor, apply_fail_fast, snapshot_live
from .matching import MatchScore, contains_match, filter_out_permanent, rules_match, score
from .plan import (
    ReconciliationPlan,
    SwitchPlanner,
    UnexpectedResolution,
    build_reconciliation_plan,
    merge_into_profile,
)
from .report import (
    CorrectiveAction,
    ProfileMatch,
    ReconciliationReport,
    ReconciliationReportBuilder,
    build_report,
)

__all__ = [
    "Classification",
    "CorrectiveAction",
    "MatchScore",
    "MutationResult",
    "ProfileMatch",
    "ProfileSwitcher",
    "ReconciliationPlan",
    "ReconciliationReport",
    "ReconciliationReportBuilder",
    "SwitchExecutor",
    "SwitchOutcome",
    "SwitchPlanner",
    "SwitchReport",
    "UnexpectedResolution",
    "apply_fail_fast",
    "build_reconciliation_plan",
    "build_report",
    "classify",
    "contains_match",
    "filter_out_permanent",
    "merge_into_profile",
    "rules_match",
    "score",
    "snapshot_live",
]
