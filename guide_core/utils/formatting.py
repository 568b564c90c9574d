"""
Display formatting helpers

Turns guide values into the short labels shown by the grid header, info
panel and player bar. All conversion to the viewer's wall clock happens
here; the schedule itself only holds UTC instants.
"""
from datetime import datetime
import math

from guide_core.services.guide_types import Programme, TimeWindow
from guide_core.utils.timezone import ensure_utc, resolve_timezone


def _local(value: datetime, tz_name: str) -> datetime:
    return ensure_utc(value).astimezone(resolve_timezone(tz_name))


def format_time_label(value: datetime, tz_name: str = "UTC") -> str:
    """12-hour label with a one-letter am/pm suffix, e.g. '4:00a'"""
    local = _local(value, tz_name)
    suffix = "p" if local.hour >= 12 else "a"
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d}{suffix}"


def format_date_label(value: datetime, tz_name: str = "UTC") -> str:
    """Weekday and month/day, e.g. 'Fri 9/24'"""
    local = _local(value, tz_name)
    return f"{local:%a} {local.month}/{local.day}"


def format_duration(seconds: float) -> str:
    """m:ss for a number of seconds; negative values render as 0:00"""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


def episode_label(programme: Programme) -> str:
    """'S2E5' when both numbers are known, otherwise ''"""
    if programme.season is None or programme.episode is None:
        return ""
    return f"S{programme.season}E{programme.episode}"


def rating_line(programme: Programme) -> str:
    """Episode label followed by the content rating"""
    return " ".join(part for part in (episode_label(programme), programme.rating) if part)


def display_title(programme: Programme, with_episode: bool = False) -> str:
    """Title with the subtitle in parentheses and, optionally, the episode label"""
    title = programme.title
    if programme.subtitle:
        title += f" ({programme.subtitle})"
    if with_episode:
        label = episode_label(programme)
        if label:
            title += f" - {label}"
    return title


def description_text(programme: Programme) -> str:
    """Subtitle and description joined for the info panel"""
    if programme.subtitle and programme.description:
        return f"{programme.subtitle} - {programme.description}"
    return programme.subtitle or programme.description or ""


def time_range_label(programme: Programme, tz_name: str = "UTC") -> str:
    return f"{format_time_label(programme.start, tz_name)} - {format_time_label(programme.end, tz_name)}"


def timeline_labels(window: TimeWindow, tz_name: str = "UTC") -> list[str]:
    """Date label followed by one time label per visible slot"""
    labels = [format_date_label(window.start, tz_name)]
    labels.extend(format_time_label(slot_start, tz_name) for slot_start, _ in window.slot_bounds())
    return labels


def empty_slot_message(has_schedule: bool) -> str:
    """Info panel text for a slot without a programme"""
    if has_schedule:
        return "No programme information for this slot"
    return "No EPG data available"
