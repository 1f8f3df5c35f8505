"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def read_env_vars(names: Iterable[str]) -> dict[str, str]:
    """Return the subset of ``names`` that are set to a non-blank value."""

    return {name: value for name in names if (value := os.getenv(name, "")).strip()}
