"""Public interface for the HamAlert adapter."""

from __future__ import annotations

from .client import HamAlertClient
from .schema import TriggerPayload
from .translator import build_trigger_body, parse_trigger

__all__ = [
    "HamAlertClient",
    "TriggerPayload",
    "build_trigger_body",
    "parse_trigger",
]
