"""Alert rule records and rule sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .document import Document

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .document import JsonValue

type RemoteId = str


@dataclass(frozen=True, slots=True, kw_only=True)
class RuleRecord:
    """One alert rule as stored in profiles, the permanent set and backups.

    ``conditions`` and ``comment`` form the rule's identity; ``actions`` and
    ``options`` are payload.
    """

    conditions: Document
    actions: tuple[str, ...] = ()
    comment: str = ""
    options: Document | None = None

    @classmethod
    def create(
        cls,
        *,
        conditions: JsonValue,
        actions: Iterable[str] = (),
        comment: str = "",
        options: JsonValue = None,
    ) -> RuleRecord:
        return cls(
            conditions=Document.of(conditions),
            actions=tuple(actions),
            comment=comment,
            options=None if options is None else Document.of(options),
        )

    @property
    def identity(self) -> tuple[Document, str]:
        return (self.conditions, self.comment)


@dataclass(frozen=True, slots=True)
class RemoteRule:
    """A rule as it currently exists in the remote collection."""

    remote_id: RemoteId
    record: RuleRecord
    owner_id: str | None = field(default=None, compare=False)

    @property
    def comment(self) -> str:
        return self.record.comment


type RuleSet = Sequence[RuleRecord]


def records_of(rules: Iterable[RemoteRule]) -> list[RuleRecord]:
    return [rule.record for rule in rules]
