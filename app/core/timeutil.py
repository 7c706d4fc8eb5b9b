"""
Timestamp normalisation shared by the API, the services and the schemas.
"""

from datetime import datetime, timezone


def as_utc(ts: datetime | None) -> datetime | None:
    """Return ``ts`` as an aware UTC datetime. Naive values are taken as UTC."""
    # SQLite and some clients hand back naive datetimes
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
