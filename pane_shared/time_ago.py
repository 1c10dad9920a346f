"""
Relative age formatting for notification timestamps.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

JUST_NOW = "just now"


class TimestampParseError(ValueError):
    """Raised when a timestamp does not match any accepted encoding."""


def parse_timestamp(value: str) -> datetime:
    """
    Parse a raw notification timestamp into an aware datetime.

    Accepted encodings, tried in order:

    * ``DD/MM/YYYY[ HH:MM:SS]`` for any value containing ``/``; missing time
      parts default to zero.
    * an all-digit string holding epoch milliseconds.
    * ISO-8601 (a trailing ``Z`` is accepted).
    * RFC 2822, as sent in HTTP and mail headers.

    Values without an offset are interpreted as local time.
    """
    if not isinstance(value, str):
        raise TimestampParseError(f"Unsupported timestamp type {type(value).__name__}.")

    cleaned = value.strip()
    if not cleaned:
        raise TimestampParseError("Timestamp is empty.")

    try:
        if "/" in cleaned:
            parsed = _parse_day_first(cleaned)
        elif cleaned.isdigit():
            parsed = datetime.fromtimestamp(int(cleaned) / 1000, tz=timezone.utc)
        else:
            parsed = _parse_standard(cleaned)
        return _as_aware(parsed)
    except (ValueError, OverflowError, OSError) as exc:
        raise TimestampParseError(f"Unable to parse timestamp {value!r}.") from exc


def format_time_ago(timestamp: Optional[str], *, now: Optional[datetime] = None) -> str:
    """
    Return a short relative age such as ``"3 hours ago"``.

    Unparseable or empty values produce an empty string. Timestamps in the
    future produce ``"just now"``.
    """
    if not timestamp:
        return ""
    try:
        instant = parse_timestamp(timestamp)
        reference = _as_aware(now) if now is not None else datetime.now(timezone.utc)
        seconds = math.floor((reference - instant).total_seconds())
    except (TimestampParseError, ValueError, OverflowError, OSError):
        return ""

    if seconds < 0:
        return JUST_NOW

    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} min{'s' if minutes > 1 else ''} ago"
    return f"{seconds} sec{'' if seconds == 1 else 's'} ago"


def _parse_day_first(value: str) -> datetime:
    date_part, _, time_part = value.partition(" ")
    day, month, year = (int(part) for part in date_part.split("/"))
    time_fields = [int(part) for part in time_part.strip().split(":")] if time_part.strip() else []
    if len(time_fields) > 3:
        raise ValueError("Too many time components.")
    hour, minute, second = (time_fields + [0, 0, 0])[:3]
    return datetime(year, month, day, hour, minute, second)


def _parse_standard(value: str) -> datetime:
    iso_candidate = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return datetime.fromisoformat(iso_candidate)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, IndexError) as exc:
        raise ValueError(f"Unrecognised date string {value!r}.") from exc


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.astimezone()
    return value
