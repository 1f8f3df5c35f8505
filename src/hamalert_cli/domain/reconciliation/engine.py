"""Profile switch state machine.

Planning -> (unexpected-rule resolution)? -> dry-run report | execution.
A dry run never calls the trigger source after the initial fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .plan import UnexpectedResolution

if TYPE_CHECKING:
    from .execute import MutationResult, SwitchExecutor
    from .plan import ReconciliationPlan, SwitchPlanner

log = getLogger(__name__)


class SwitchOutcome(StrEnum):
    DRY_RUN = "dry-run"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(slots=True, kw_only=True)
class SwitchReport:
    outcome: SwitchOutcome
    plan: ReconciliationPlan
    resolution: UnexpectedResolution
    execution: MutationResult | None = None


@dataclass(slots=True)
class ProfileSwitcher:
    planner: SwitchPlanner
    executor: SwitchExecutor

    def switch(self, target: str, *, dry_run: bool = True) -> SwitchReport:
        """Switch the remote collection to ``target``.

        Raises ``SwitchExecutionError`` when a remote mutation fails mid-way.
        """

        plan = self.planner.plan(target)
        resolution = self.planner.resolve_unexpected(plan)
        if resolution is UnexpectedResolution.CANCEL:
            return SwitchReport(outcome=SwitchOutcome.CANCELLED, plan=plan, resolution=resolution)

        if dry_run:
            log.debug("Dry run: no remote changes for switch to '%s'", target)
            return SwitchReport(outcome=SwitchOutcome.DRY_RUN, plan=plan, resolution=resolution)

        execution = self.executor.execute(plan)
        return SwitchReport(
            outcome=SwitchOutcome.COMPLETED,
            plan=plan,
            resolution=resolution,
            execution=execution,
        )
