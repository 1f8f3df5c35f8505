"""Interactive prompts rendered with questionary."""

from __future__ import annotations

from typing import TYPE_CHECKING

import questionary

from hamalert_cli.domain.ports import Prompter

if TYPE_CHECKING:
    from collections.abc import Sequence

_CHECKBOX_HELP = "(Space to toggle, Enter to confirm, Ctrl+C to cancel)"


class QuestionaryPrompter:
    """``Prompter`` for a terminal; ``ask()`` already maps Ctrl+C to ``None``."""

    def choose(self, message: str, options: Sequence[str]) -> str | None:
        return questionary.select(message, choices=list(options)).ask()

    def multi_select(
        self,
        message: str,
        items: Sequence[str],
        default_checked: Sequence[bool],
    ) -> list[int] | None:
        choices = [
            questionary.Choice(title=item, value=index, checked=checked)
            for index, (item, checked) in enumerate(zip(items, default_checked, strict=True))
        ]
        selected = questionary.checkbox(message, choices=choices, instruction=_CHECKBOX_HELP).ask()
        if selected is None:
            return None
        return [int(index) for index in selected]

    def confirm(self, message: str) -> bool | None:
        return questionary.confirm(message, default=False).ask()

    def text(self, message: str) -> str | None:
        answer = questionary.text(message).ask()
        if answer is None:
            return None
        return answer.strip()


if TYPE_CHECKING:
    _prompter_check: Prompter = QuestionaryPrompter()
