from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_bound(value: Optional[str], field_name: str) -> Tuple[Optional[datetime], bool]:
    """Parse an ISO-8601 date or datetime query value.

    Returns ``(moment, date_only)``; ``date_only`` tells callers that the
    value named a whole day rather than an instant.
    """
    if value is None or not str(value).strip():
        return None, False
    raw = str(value).strip()
    try:
        if len(raw) == 10:
            d = parse_iso_date(raw)
            return datetime(d.year, d.month, d.day), True
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format")
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment, False


def end_of_day(moment: datetime) -> datetime:
    return moment + timedelta(days=1) - timedelta(microseconds=1)


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (as stored in MySQL DATETIME).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
