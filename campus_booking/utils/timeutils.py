from datetime import datetime
import pytz
from flask import current_app


def campus_timezone():
    return pytz.timezone(current_app.config['CAMPUS_TIMEZONE'])


def local_now():
    """Current wall-clock time on campus, as a naive datetime."""
    return datetime.now(campus_timezone()).replace(tzinfo=None, microsecond=0)


def to_local_naive(value: datetime) -> datetime:
    """
    Normalize a datetime to naive campus-local time.
    Naive input is assumed to already be campus-local.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(campus_timezone()).replace(tzinfo=None)


def parse_datetime(raw) -> datetime:
    """Parse an ISO-8601 timestamp from a request payload."""
    if isinstance(raw, datetime):
        return to_local_naive(raw)
    if not isinstance(raw, str):
        raise ValueError(f"Expected an ISO-8601 timestamp, got {raw!r}.")
    # fromisoformat does not accept a trailing Z before Python 3.11
    if raw.endswith('Z'):
        raw = raw[:-1] + '+00:00'
    return to_local_naive(datetime.fromisoformat(raw))


def parse_date(raw):
    if 'T' in raw:
        return datetime.fromisoformat(raw).date()
    return datetime.strptime(raw, "%Y-%m-%d").date()
