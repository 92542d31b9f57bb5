from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from None


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 instant. The offset is mandatory."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Timestamp is required")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}") from None
    return require_aware(parsed, "timestamp")


def require_aware(value: datetime, field_name: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(f"{field_name} is required")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field_name} must carry a time-zone offset")
    return value


def now_utc() -> datetime:
    """Current instant in UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    """DATETIME(6) columns hold UTC wall time without tzinfo."""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def offset_minutes(value: datetime) -> int:
    offset = value.utcoffset() or timedelta(0)
    return int(offset.total_seconds() // 60)


def with_offset(value: datetime, minutes: int) -> datetime:
    """Re-express a UTC instant in the offset it was originally submitted with."""
    return value.astimezone(timezone(timedelta(minutes=int(minutes))))


def local_date(value: datetime, zone: tzinfo) -> date:
    return value.astimezone(zone).date()


def local_midnight(day: date, zone: tzinfo) -> datetime:
    """First instant of ``day`` in ``zone``.

    zoneinfo resolves the wall time, so DST days are 23 or 25 hours long.
    """
    return datetime.combine(day, time.min, tzinfo=zone)


def day_bounds_utc(start: date, end: date, zone: tzinfo) -> tuple[datetime, datetime]:
    """Half-open UTC range covering local dates ``start`` .. ``end`` inclusive."""
    lower = local_midnight(start, zone).astimezone(timezone.utc)
    upper = local_midnight(end + timedelta(days=1), zone).astimezone(timezone.utc)
    return lower, upper


def iter_dates(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
