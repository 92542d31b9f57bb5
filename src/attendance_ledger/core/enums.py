from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Kinds of raw attendance events stored in the ledger."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"

    @classmethod
    def parse(cls, value: object) -> "EventType":
        """Accept wire values (``clock_in``) as well as camel-case (``clockIn``)."""

        if isinstance(value, EventType):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unsupported event type: {value!r}")

        key = value.strip()
        if key in _CAMEL_ALIASES:
            return _CAMEL_ALIASES[key]
        return cls(key.lower())


_CAMEL_ALIASES = {
    "clockIn": EventType.CLOCK_IN,
    "clockOut": EventType.CLOCK_OUT,
    "breakStart": EventType.BREAK_START,
    "breakEnd": EventType.BREAK_END,
}


class WorkState(str, Enum):
    """Logical per-user state while replaying events."""

    IDLE = "idle"
    WORKING = "working"
    ON_BREAK = "on_break"


class AnomalyKind(str, Enum):
    DUPLICATE_CLOCK_IN = "duplicate_clock_in"
    CLOCK_IN_DURING_BREAK = "clock_in_during_break"
    CLOCK_OUT_WITHOUT_CLOCK_IN = "clock_out_without_clock_in"
    CLOCK_OUT_DURING_BREAK = "clock_out_during_break"
    BREAK_START_OUTSIDE_SESSION = "break_start_outside_session"
    DUPLICATE_BREAK_START = "duplicate_break_start"
    BREAK_END_WITHOUT_BREAK_START = "break_end_without_break_start"
    UNCLOSED_SESSION = "unclosed_session"


class TimingSignalKind(str, Enum):
    """Divergence between the three event timestamps."""

    LATE_SUBMISSION = "late_submission"
    FUTURE_DATED = "future_dated"
    STORAGE_DELAY = "storage_delay"


class DayAttribution(str, Enum):
    CLOCK_IN_DAY = "clock_in_day"
    MIDNIGHT_SPLIT = "midnight_split"
