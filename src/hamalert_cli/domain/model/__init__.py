"""Domain model for alert rules."""

from __future__ import annotations

from .document import Document, JsonValue
from .enums import Action, CallsignFormat, Mode
from .rules import RemoteId, RemoteRule, RuleRecord, RuleSet, records_of

__all__ = [
    "Action",
    "CallsignFormat",
    "Document",
    "JsonValue",
    "Mode",
    "RemoteId",
    "RemoteRule",
    "RuleRecord",
    "RuleSet",
    "records_of",
]
