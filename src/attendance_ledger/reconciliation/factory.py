from __future__ import annotations

from ..core.enums import DayAttribution
from ..core.exceptions import ValidationError
from .policies.base import DayAttributionPolicy
from .policies.clock_in_day import ClockInDayPolicy
from .policies.midnight_split import MidnightSplitPolicy


def policy_for(name: str | None) -> DayAttributionPolicy:
    """Factory Pattern: choose the day-attribution policy from configuration."""

    try:
        kind = DayAttribution((name or DayAttribution.CLOCK_IN_DAY.value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown day attribution policy: {name!r}") from None

    if kind is DayAttribution.MIDNIGHT_SPLIT:
        return MidnightSplitPolicy()
    return ClockInDayPolicy()
