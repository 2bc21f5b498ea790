"""UTC time helpers. All timestamps in the package are timezone-aware UTC."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Convert to UTC; naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_to_iso_utc(dt: datetime) -> str:
    """ISO 8601 with a 'Z' suffix, e.g. 2026-03-01T09:30:00Z."""
    return ensure_utc(dt).isoformat().replace('+00:00', 'Z')
