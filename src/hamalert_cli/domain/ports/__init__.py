"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import BackupSink, CurrentProfileMarker, PermanentStore, ProfileStore
from .prompting import Prompter
from .triggers import TriggerSource

__all__ = [
    "BackupSink",
    "CurrentProfileMarker",
    "PermanentStore",
    "ProfileStore",
    "Prompter",
    "TriggerSource",
]
