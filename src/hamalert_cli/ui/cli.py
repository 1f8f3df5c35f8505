# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from hamalert_cli import __version__
from hamalert_cli.app import (
    add_trigger,
    backup_triggers,
    build_app_context,
    bulk_delete_triggers,
    correct_profile_status,
    delete_profile,
    import_polo_notes,
    list_profiles,
    profile_status,
    restore_triggers,
    save_profile,
    set_permanent,
    show_permanent,
    show_profile,
    switch_profile,
)
from hamalert_cli.config import ConfigurationError, configure_logging
from hamalert_cli.domain.errors import HamAlertError
from hamalert_cli.domain.model import Action, CallsignFormat, Mode
from hamalert_cli.domain.profiles import SaveStatus
from hamalert_cli.ui.formatting import (
    print_bulk_delete_result,
    print_profile_list,
    print_restore_result,
    print_rules,
    print_status,
    print_switch_report,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from hamalert_cli.app import AppContext

log = logging.getLogger(__name__)


def _add_callsign_format_flags(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--compact",
        action="store_true",
        help="Join callsigns with a bare comma (no spaces)",
    )
    group.add_argument(
        "--one-per-line",
        action="store_true",
        help="Send callsigns one per line instead of comma-separated",
    )


def _add_rule_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--comment", type=str, required=True, help="Trigger comment")
    parser.add_argument(
        "--actions",
        type=Action,
        choices=list(Action),
        action="append",
        default=[],
        help="Notification action; repeat for several",
    )
    parser.add_argument("--mode", type=Mode, choices=list(Mode), help="Restrict to one mode")
    _add_callsign_format_flags(parser)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hamalert-cli", description="CLI for HamAlert triggers")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config-file",
        type=Path,
        help="TOML file with HamAlert credentials (defaults to the user config directory)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add-trigger", help="Add a callsign trigger")
    add.add_argument(
        "--callsign",
        type=str,
        action="append",
        required=True,
        help="Callsign to match; repeat for several",
    )
    _add_rule_flags(add)

    polo = subparsers.add_parser(
        "import-polo-notes",
        help="Add one trigger for all callsigns in a Ham2K PoLo callsign notes file",
    )
    polo.add_argument("--url", type=str, required=True, help="URL of the PoLo notes file")
    polo.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without adding the trigger",
    )
    _add_rule_flags(polo)

    backup = subparsers.add_parser("backup", help="Back up all triggers to a JSON file")
    backup.add_argument(
        "--output",
        type=Path,
        help="Output file path (defaults to a timestamped file in the backups directory)",
    )

    restore = subparsers.add_parser("restore", help="Restore triggers from a JSON backup file")
    restore.add_argument("--input", type=Path, required=True, help="Backup file to restore")
    restore.add_argument(
        "--no-dry-run",
        action="store_true",
        help="Actually perform the restore (default is dry-run)",
    )

    bulk = subparsers.add_parser("bulk-delete", help="Interactively delete several triggers")
    bulk.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without deleting",
    )

    profile = subparsers.add_parser("profile", help="Manage trigger profiles")
    profile_sub = profile.add_subparsers(dest="profile_command", required=True)
    profile_sub.add_parser("list", help="List profiles with their match against live triggers")
    show = profile_sub.add_parser("show", help="Show the triggers stored in a profile")
    show.add_argument("name", type=str, help="Profile name")
    profile_sub.add_parser("status", help="Show which profile the live triggers match")
    save = profile_sub.add_parser("save", help="Save the live triggers as a profile")
    save.add_argument("name", type=str, help="Profile name")
    save.add_argument(
        "--from-backup",
        type=Path,
        help="Create the profile from a backup file instead of the live triggers",
    )
    switch = profile_sub.add_parser("switch", help="Switch the live triggers to a profile")
    switch.add_argument("name", type=str, help="Profile to switch to")
    switch.add_argument(
        "--no-dry-run",
        action="store_true",
        help=(
            "Actually perform the switch (default is dry-run; saving unexpected triggers "
            "to the recorded profile still writes the profile file in a dry run)"
        ),
    )
    delete = profile_sub.add_parser("delete", help="Delete a profile")
    delete.add_argument("name", type=str, help="Profile name")
    permanent = profile_sub.add_parser(
        "set-permanent",
        help="Interactively select the triggers kept across every switch",
    )
    permanent.add_argument(
        "--from-backup",
        type=Path,
        help="Select from a backup file instead of the live triggers",
    )
    profile_sub.add_parser("show-permanent", help="Show the permanent triggers")

    return parser.parse_args(list(argv))


def _callsign_format(args: argparse.Namespace) -> CallsignFormat:
    return CallsignFormat.from_flags(compact=args.compact, one_per_line=args.one_per_line)


def _cmd_add_trigger(ctx: AppContext, args: argparse.Namespace) -> None:
    remote_id = add_trigger(
        ctx,
        callsigns=args.callsign,
        comment=args.comment,
        actions=args.actions,
        mode=args.mode,
        callsign_format=_callsign_format(args),
    )
    print(f"Trigger added{f' ({remote_id})' if remote_id else ''}.")


def _cmd_import_polo_notes(ctx: AppContext, args: argparse.Namespace) -> None:
    callsigns, remote_id = import_polo_notes(
        ctx,
        url=args.url,
        comment=args.comment,
        actions=args.actions,
        mode=args.mode,
        callsign_format=_callsign_format(args),
        dry_run=args.dry_run,
    )
    if not callsigns:
        print("No callsigns found in the notes file.")
        return
    print(f"Found {len(callsigns)} callsign(s): {', '.join(callsigns)}")
    if args.dry_run:
        print("\n[DRY RUN] No trigger was added.")
        return
    print(f"Trigger added{f' ({remote_id})' if remote_id else ''}.")


def _cmd_backup(ctx: AppContext, args: argparse.Namespace) -> None:
    location, count = backup_triggers(ctx, output=args.output)
    print(f"Backed up {count} trigger(s) to {location}")


def _cmd_restore(ctx: AppContext, args: argparse.Namespace) -> None:
    result = restore_triggers(ctx, source=args.input, dry_run=not args.no_dry_run)
    print_restore_result(result, source=args.input)


def _cmd_bulk_delete(ctx: AppContext, args: argparse.Namespace) -> None:
    print_bulk_delete_result(bulk_delete_triggers(ctx, dry_run=args.dry_run))


def _cmd_profile_list(ctx: AppContext, _args: argparse.Namespace) -> None:
    report = list_profiles(ctx)
    if report is None:
        print("No profiles saved yet. Use 'profile save <name>' to create one.")
        return
    print_profile_list(report)


def _cmd_profile_show(ctx: AppContext, args: argparse.Namespace) -> None:
    records = show_profile(ctx, args.name)
    print(f"Profile '{args.name}' ({len(records)} triggers):")
    print_rules(records)


def _cmd_profile_status(ctx: AppContext, _args: argparse.Namespace) -> None:
    report = profile_status(ctx)
    print_status(report)
    if report.in_sync:
        return
    result = correct_profile_status(ctx, report)
    if result is not None and result.applied:
        print(f"Recorded profile is now '{result.profile}'.")


def _cmd_profile_save(ctx: AppContext, args: argparse.Namespace) -> None:
    result = save_profile(ctx, args.name, from_backup=args.from_backup)
    match result.status:
        case SaveStatus.UNCHANGED:
            print(f"Profile '{result.name}' is already up to date.")
        case SaveStatus.CANCELLED:
            print("Save cancelled.")
        case SaveStatus.SAVED:
            print(
                f"Saved {result.saved} trigger(s) to profile '{result.name}' "
                f"(excluded {result.excluded_permanent} permanent)."
            )


def _cmd_profile_switch(ctx: AppContext, args: argparse.Namespace) -> None:
    print_switch_report(switch_profile(ctx, args.name, dry_run=not args.no_dry_run))


def _cmd_profile_delete(ctx: AppContext, args: argparse.Namespace) -> None:
    if delete_profile(ctx, args.name):
        print(f"Deleted profile '{args.name}'.")
    else:
        print("Delete cancelled.")


def _cmd_set_permanent(ctx: AppContext, args: argparse.Namespace) -> None:
    selected = set_permanent(ctx, from_backup=args.from_backup)
    if selected is None:
        print("Selection cancelled.")
        return
    print(f"Saved {len(selected)} permanent trigger(s).")


def _cmd_show_permanent(ctx: AppContext, _args: argparse.Namespace) -> None:
    records = show_permanent(ctx)
    if not records:
        print("No permanent triggers set. Use 'profile set-permanent' to select some.")
        return
    print(f"Permanent triggers ({len(records)}):")
    print_rules(records)


_COMMANDS: dict[str, Callable[[AppContext, argparse.Namespace], None]] = {
    "add-trigger": _cmd_add_trigger,
    "import-polo-notes": _cmd_import_polo_notes,
    "backup": _cmd_backup,
    "restore": _cmd_restore,
    "bulk-delete": _cmd_bulk_delete,
    "profile list": _cmd_profile_list,
    "profile show": _cmd_profile_show,
    "profile status": _cmd_profile_status,
    "profile save": _cmd_profile_save,
    "profile switch": _cmd_profile_switch,
    "profile delete": _cmd_profile_delete,
    "profile set-permanent": _cmd_set_permanent,
    "profile show-permanent": _cmd_show_permanent,
}


def _command_key(args: argparse.Namespace) -> str:
    if args.command == "profile":
        return f"profile {args.profile_command}"
    return args.command


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    handler = _COMMANDS[_command_key(parsed_args)]
    try:
        with build_app_context(config_file=parsed_args.config_file) as ctx:
            handler(ctx, parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except (HamAlertError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
