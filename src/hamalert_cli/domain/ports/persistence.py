"""Ports for locally persisted rule sets and bookkeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hamalert_cli.domain.model import RuleRecord


@runtime_checkable
class ProfileStore(Protocol):
    """Named rule sets. ``load``/``delete`` raise ``ProfileNotFoundError``."""

    def load(self, name: str) -> list[RuleRecord]: ...

    def save(self, name: str, records: Sequence[RuleRecord]) -> None: ...

    def list_names(self) -> list[str]: ...

    def delete(self, name: str) -> None: ...

    def exists(self, name: str) -> bool: ...


@runtime_checkable
class PermanentStore(Protocol):
    """The single always-active rule set; empty when never saved."""

    def load(self) -> list[RuleRecord]: ...

    def save(self, records: Sequence[RuleRecord]) -> None: ...


@runtime_checkable
class CurrentProfileMarker(Protocol):
    """Advisory record of the last profile switched to."""

    def load(self) -> str | None: ...

    def save(self, name: str) -> None: ...

    def clear(self) -> None: ...


@runtime_checkable
class BackupSink(Protocol):
    """Writes snapshots of the live collection and returns where they went."""

    def write_snapshot(self, records: Sequence[RuleRecord], *, label: str = "") -> str: ...


__all__ = ["BackupSink", "CurrentProfileMarker", "PermanentStore", "ProfileStore"]
