"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Action(StrEnum):
    """Notification channels a trigger can fire."""

    URL = "url"
    APP = "app"
    THREEMA = "threema"
    TELNET = "telnet"


class Mode(StrEnum):
    CW = "cw"
    FT8 = "ft8"
    SSB = "ssb"


class CallsignFormat(StrEnum):
    """How several callsigns are joined into one ``callsign`` condition."""

    DEFAULT = "default"
    COMPACT = "compact"
    ONE_PER_LINE = "one-per-line"

    @property
    def separator(self) -> str:
        return _SEPARATORS[self]

    @classmethod
    def from_flags(cls, *, compact: bool, one_per_line: bool) -> CallsignFormat:
        if compact:
            return cls.COMPACT
        if one_per_line:
            return cls.ONE_PER_LINE
        return cls.DEFAULT


_SEPARATORS: dict[CallsignFormat, str] = {
    CallsignFormat.DEFAULT: ", ",
    CallsignFormat.COMPACT: ",",
    CallsignFormat.ONE_PER_LINE: "\n",
}
