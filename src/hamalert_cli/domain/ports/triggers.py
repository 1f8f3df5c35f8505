"""Port for the remote trigger collection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hamalert_cli.domain.model import RemoteId, RemoteRule, RuleRecord


@runtime_checkable
class TriggerSource(Protocol):
    """The live, remotely hosted rule collection.

    Every call is one independent remote request. Failures raise
    ``TriggerSourceError`` carrying the remote status.
    """

    def fetch(self) -> list[RemoteRule]: ...

    def create(self, record: RuleRecord) -> RemoteId: ...

    def delete(self, remote_id: RemoteId) -> None: ...


__all__ = ["TriggerSource"]
