from __future__ import annotations

import re
from datetime import datetime, timezone

# Postgres trims trailing zeros from fractional seconds ("12:00:00.5+00:00").
_FRACTION = re.compile(r"\.(\d+)")


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse a timestamp from the tabular store into a tz-aware UTC datetime.

    Accepts RFC3339 ("2025-01-01T12:34:56Z") and Postgres text output
    ("2025-01-01 12:34:56.5+09:00"). A missing offset is read as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty string")

    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """Format as RFC3339 in UTC with a 'Z' suffix and microseconds."""
    utc = normalize_dt(dt).astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt
