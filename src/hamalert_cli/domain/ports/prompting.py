"""Port for interactive decisions.

Every method returns ``None`` when the user cancels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Prompter(Protocol):
    def choose(self, message: str, options: Sequence[str]) -> str | None: ...

    def multi_select(
        self,
        message: str,
        items: Sequence[str],
        default_checked: Sequence[bool],
    ) -> list[int] | None: ...

    def confirm(self, message: str) -> bool | None: ...

    def text(self, message: str) -> str | None: ...


__all__ = ["Prompter"]
