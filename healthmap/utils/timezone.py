from datetime import datetime, timezone as dt_timezone


def utcnow() -> datetime:
    return datetime.now(dt_timezone.utc)


def to_utc_aware(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC) for comparisons.
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached (SQLite drops tzinfo on read)
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)
