"""
Date and Time utilities

This module handles XMLTV timestamp decoding, UTC normalization, slot
alignment and display timezone conversion. Every instant stored by the
guide is a timezone-aware UTC datetime; conversion to a viewer's wall clock
happens only here and in the presentation helpers.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
import re

logger = logging.getLogger(__name__)

# YYYYMMDDHHMMSS, an optional (+|-)HHMM offset and nothing else
_XMLTV_TIME_RE = re.compile(
    r"^\s*(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})\s*(?:([+-])([01]\d|2[0-3])([0-5]\d))?\s*$"
)


class XmltvTimeError(ValueError):
    """Raised when an XMLTV timestamp cannot be decoded"""
    pass


def now_utc() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def parse_xmltv_time(time_str: str | None) -> datetime:
    """
    Convert XMLTV time format to an aware UTC datetime

    The calendar fields are read as a naive instant. When a signed offset is
    present the instant is expressed in that offset, so the offset is
    subtracted to reach UTC. Without an offset the instant is already UTC.

    Args:
        time_str: XMLTV time like '20080715003000 -0600'

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        XmltvTimeError: If the string does not hold valid calendar fields
    """
    if not time_str:
        raise XmltvTimeError("Empty XMLTV timestamp")

    match = _XMLTV_TIME_RE.match(time_str)
    if match is None:
        raise XmltvTimeError(f"Invalid XMLTV timestamp: '{time_str}'")

    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    try:
        dt = datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise XmltvTimeError(f"Invalid calendar fields in XMLTV timestamp: '{time_str}'") from e

    tz_sign, tz_hours, tz_mins = match.groups()[6:]
    tz_offset_minutes = 0
    if tz_sign:
        tz_offset_minutes = int(tz_hours) * 60 + int(tz_mins)
        if tz_sign == '-':
            tz_offset_minutes = -tz_offset_minutes

    try:
        dt_utc = dt - timedelta(minutes=tz_offset_minutes)
    except OverflowError as e:
        raise XmltvTimeError(f"XMLTV timestamp out of range: '{time_str}'") from e

    return dt_utc.replace(tzinfo=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(name: str) -> ZoneInfo | timezone:
    """
    Resolve a timezone name to a tzinfo

    Args:
        name: IANA timezone name or 'UTC'

    Raises:
        ValueError: If the timezone is unknown
    """
    if name == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Invalid timezone: {name}") from e


def floor_to_slot(value: datetime, slot_minutes: int, tz_name: str = "UTC") -> datetime:
    """
    Floor an instant to the start of its slot on the viewer's wall clock

    Seconds and microseconds are zeroed and minutes are floored to a multiple
    of slot_minutes within the same day, e.g. 10:47 -> 10:30 for 30 minute
    slots.

    Args:
        value: Instant to align (naive values are taken to be UTC)
        slot_minutes: Slot length, a divisor of one day
        tz_name: Display timezone whose wall clock defines the slot grid

    Returns:
        Aligned instant in UTC
    """
    local = ensure_utc(value).astimezone(resolve_timezone(tz_name))
    minute_of_day = local.hour * 60 + local.minute
    floored = (minute_of_day // slot_minutes) * slot_minutes
    aligned = local.replace(
        hour=floored // 60,
        minute=floored % 60,
        second=0,
        microsecond=0,
    )
    return aligned.astimezone(timezone.utc)


def convert_to_timezone(utc_time: datetime, target_tz: str) -> str:
    """
    Convert a UTC instant to an ISO8601 string in the target timezone

    Args:
        utc_time: Aware (or naive UTC) datetime
        target_tz: Target timezone (IANA format or 'UTC')

    Returns:
        ISO8601 timestamp in target timezone
    """
    dt = ensure_utc(utc_time)

    if target_tz == "UTC":
        return dt.isoformat()

    return dt.astimezone(resolve_timezone(target_tz)).isoformat()
