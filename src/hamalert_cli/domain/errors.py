"""Errors raised by the profile and reconciliation services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class HamAlertError(RuntimeError):
    """Base class for failures reported to the CLI."""


class ProfileNotFoundError(HamAlertError):
    """Raised when a named profile does not exist."""

    def __init__(self, name: str, *, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = tuple(sorted(known))
        alternatives = ", ".join(self.known) if self.known else "none"
        super().__init__(f"Profile '{name}' not found (available profiles: {alternatives})")


class BackupNotFoundError(HamAlertError):
    """Raised when a backup file given as input does not exist."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Backup file not found: {path}")


class StoredDataParseError(HamAlertError):
    """Raised when a persisted rule document is malformed."""

    def __init__(self, source: object, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Failed to parse {source}: {detail}")


class TriggerSourceError(HamAlertError):
    """Raised when the remote trigger collection rejects or fails a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message if status_code is None else f"{message} (HTTP {status_code})")
        self.status_code = status_code


class LoginError(TriggerSourceError):
    """Raised when the remote service refuses the configured credentials."""


class BackupError(HamAlertError):
    """Raised when a snapshot of the live collection could not be written."""


class SwitchExecutionError(HamAlertError):
    """Raised when a remote mutation fails part-way through a switch.

    No compensating action is attempted: ``deleted`` and ``created`` count the
    remote calls that succeeded before the failure, and ``backup_location``
    points at the snapshot taken before the first mutation.
    """

    def __init__(
        self,
        *,
        phase: str,
        deleted: int,
        created: int,
        total_delete: int,
        total_create: int,
        backup_location: object,
    ) -> None:
        self.phase = phase
        self.deleted = deleted
        self.created = created
        self.total_delete = total_delete
        self.total_create = total_create
        self.backup_location = backup_location
        super().__init__(
            f"Remote {phase} failed after deleting {deleted}/{total_delete} and creating "
            f"{created}/{total_create} triggers; restore from backup {backup_location} if needed"
        )
