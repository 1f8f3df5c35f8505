"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from hamalert_cli.adapters.filesystem import (
    build_backup_sink,
    build_current_profile_marker,
    build_permanent_store,
    build_profile_store,
    read_backup,
    write_rules_file,
)
from hamalert_cli.adapters.hamalert import HamAlertClient
from hamalert_cli.adapters.polo_notes import PoloNotesFetcher
from hamalert_cli.config import (
    default_polo_notes_resilience,
    get_hamalert_config,
    get_storage_config,
)
from hamalert_cli.domain.errors import BackupError
from hamalert_cli.domain.model import CallsignFormat, records_of
from hamalert_cli.domain.profiles import ProfileService, validate_profile_name
from hamalert_cli.domain.reconciliation import (
    CorrectiveAction,
    ProfileSwitcher,
    ReconciliationReportBuilder,
    SwitchExecutor,
    SwitchPlanner,
)
from hamalert_cli.domain.triggers import TriggerService, build_callsign_rule
from hamalert_cli.ui.formatting import describe_rule
from hamalert_cli.ui.prompter import QuestionaryPrompter

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from contextlib import AbstractContextManager
    from pathlib import Path
    from types import TracebackType

    from hamalert_cli.config import StorageConfig
    from hamalert_cli.domain.model import Action, Mode, RemoteId, RuleRecord
    from hamalert_cli.domain.ports import (
        BackupSink,
        CurrentProfileMarker,
        PermanentStore,
        ProfileStore,
        Prompter,
        TriggerSource,
    )
    from hamalert_cli.domain.profiles import CorrectionResult, SaveProfileResult
    from hamalert_cli.domain.reconciliation import ReconciliationReport, SwitchReport
    from hamalert_cli.domain.triggers import BulkDeleteResult, RestoreResult

type TriggerSourceFactory = Callable[[], AbstractContextManager[TriggerSource]]
type NotesFetcher = Callable[[str], list[str]]

log = getLogger(__name__)

_CORRECTION_LABELS: dict[CorrectiveAction, str] = {
    CorrectiveAction.UPDATE_MARKER: "Update the recorded profile to the best match",
    CorrectiveAction.SAVE_AS_PROFILE: "Save the current triggers as a new profile",
    CorrectiveAction.IGNORE: "Ignore",
}


@dataclass(slots=True)
class AppContext:
    """Explicit handles on every store the commands use.

    The remote trigger source is opened on first use so purely local commands
    never need credentials.
    """

    profiles: ProfileStore
    permanent: PermanentStore
    marker: CurrentProfileMarker
    backups: BackupSink
    prompter: Prompter
    trigger_source_factory: TriggerSourceFactory
    notes_fetcher: NotesFetcher = field(default_factory=PoloNotesFetcher)
    _exit_stack: ExitStack = field(default_factory=ExitStack, init=False, repr=False)
    _triggers: TriggerSource | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> AppContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._exit_stack.close()

    @property
    def triggers(self) -> TriggerSource:
        if self._triggers is None:
            self._triggers = self._exit_stack.enter_context(self.trigger_source_factory())
        return self._triggers

    def profile_service(self) -> ProfileService:
        return ProfileService(
            profiles=self.profiles,
            permanent=self.permanent,
            marker=self.marker,
            prompter=self.prompter,
        )

    def trigger_service(self) -> TriggerService:
        return TriggerService(triggers=self.triggers, backups=self.backups, prompter=self.prompter)

    def switcher(self) -> ProfileSwitcher:
        planner = SwitchPlanner(
            triggers=self.triggers,
            profiles=self.profiles,
            permanent=self.permanent,
            marker=self.marker,
            prompter=self.prompter,
        )
        executor = SwitchExecutor(triggers=self.triggers, backups=self.backups, marker=self.marker)
        return ProfileSwitcher(planner=planner, executor=executor)

    def report_builder(self) -> ReconciliationReportBuilder:
        return ReconciliationReportBuilder(
            triggers=self.triggers,
            profiles=self.profiles,
            permanent=self.permanent,
            marker=self.marker,
        )


def build_app_context(
    *,
    config_file: Path | None = None,
    storage: StorageConfig | None = None,
) -> AppContext:
    storage_config = storage or get_storage_config()

    def open_hamalert() -> HamAlertClient:
        return HamAlertClient(config=get_hamalert_config(config_file=config_file))

    return AppContext(
        profiles=build_profile_store(storage_config),
        permanent=build_permanent_store(storage_config),
        marker=build_current_profile_marker(storage_config),
        backups=build_backup_sink(storage_config),
        prompter=QuestionaryPrompter(),
        trigger_source_factory=open_hamalert,
        notes_fetcher=PoloNotesFetcher(
            resilience=default_polo_notes_resilience(storage_config),
        ),
    )


def _load_source_records(ctx: AppContext, from_backup: Path | None) -> list[RuleRecord]:
    if from_backup is not None:
        return read_backup(from_backup)
    return records_of(ctx.triggers.fetch())


# profile commands


def list_profiles(ctx: AppContext) -> ReconciliationReport | None:
    """Score every profile against the live triggers; ``None`` when no profile exists."""

    if not ctx.profiles.list_names():
        return None
    return ctx.report_builder().build()


def show_profile(ctx: AppContext, name: str) -> list[RuleRecord]:
    return ctx.profiles.load(validate_profile_name(name))


def profile_status(ctx: AppContext) -> ReconciliationReport:
    return ctx.report_builder().build()


def correct_profile_status(
    ctx: AppContext,
    report: ReconciliationReport,
) -> CorrectionResult | None:
    """Offer the report's corrective actions and apply the one the user picks."""

    actions = report.corrective_actions
    if not actions:
        return None
    labels = {_CORRECTION_LABELS[action]: action for action in actions}
    best = report.best_match
    if best is None:
        message = "Live triggers do not match any saved profile. What now?"
    else:
        recorded = f"'{report.current}'" if report.current else "no profile"
        message = f"Live triggers best match '{best.name}' but {recorded} is recorded. What now?"
    choice = ctx.prompter.choose(message, list(labels))
    if choice is None:
        return None
    result = ctx.profile_service().apply_correction(report, labels[choice])
    log.info("Corrective action %s applied=%s", result.action, result.applied)
    return result


def save_profile(
    ctx: AppContext,
    name: str,
    *,
    from_backup: Path | None = None,
) -> SaveProfileResult:
    records = _load_source_records(ctx, from_backup)
    return ctx.profile_service().save(name, records, from_live=from_backup is None)


def switch_profile(ctx: AppContext, name: str, *, dry_run: bool = True) -> SwitchReport:
    return ctx.switcher().switch(validate_profile_name(name), dry_run=dry_run)


def delete_profile(ctx: AppContext, name: str) -> bool:
    return ctx.profile_service().delete(validate_profile_name(name))


def set_permanent(ctx: AppContext, *, from_backup: Path | None = None) -> list[RuleRecord] | None:
    records = _load_source_records(ctx, from_backup)
    if not records:
        return []
    return ctx.profile_service().set_permanent(records, describe=describe_rule)


def show_permanent(ctx: AppContext) -> list[RuleRecord]:
    return ctx.permanent.load()


# trigger commands


def add_trigger(
    ctx: AppContext,
    *,
    callsigns: Sequence[str],
    comment: str,
    actions: Sequence[Action] = (),
    mode: Mode | None = None,
    callsign_format: CallsignFormat = CallsignFormat.DEFAULT,
) -> RemoteId:
    record = build_callsign_rule(
        callsigns=callsigns,
        comment=comment,
        actions=actions,
        mode=mode,
        callsign_format=callsign_format,
    )
    return ctx.trigger_service().add(record)


def import_polo_notes(
    ctx: AppContext,
    *,
    url: str,
    comment: str,
    actions: Sequence[Action] = (),
    mode: Mode | None = None,
    callsign_format: CallsignFormat = CallsignFormat.DEFAULT,
    dry_run: bool = False,
    fetcher: NotesFetcher | None = None,
) -> tuple[list[str], RemoteId | None]:
    """Create one trigger covering every callsign in a PoLo notes file."""

    callsigns = (fetcher or ctx.notes_fetcher)(url)
    if not callsigns or dry_run:
        return callsigns, None
    remote_id = add_trigger(
        ctx,
        callsigns=callsigns,
        comment=comment,
        actions=actions,
        mode=mode,
        callsign_format=callsign_format,
    )
    return callsigns, remote_id


def backup_triggers(ctx: AppContext, *, output: Path | None = None) -> tuple[str, int]:
    if output is None:
        return ctx.trigger_service().backup()
    live = ctx.triggers.fetch()
    try:
        write_rules_file(output, records_of(live))
    except OSError as exc:
        raise BackupError(f"Failed to write backup to {output}: {exc}") from exc
    return str(output), len(live)


def restore_triggers(ctx: AppContext, *, source: Path, dry_run: bool = True) -> RestoreResult:
    records = read_backup(source)
    return ctx.trigger_service().restore(records, dry_run=dry_run)


def bulk_delete_triggers(ctx: AppContext, *, dry_run: bool = False) -> BulkDeleteResult:
    return ctx.trigger_service().bulk_delete(describe=describe_rule, dry_run=dry_run)
