"""
Guide Grid Builder

Pure functions composing channels, the schedule index and a time window
into the structures consumed by the grid, mini guide and player views.
"""
from collections.abc import Iterable
from datetime import datetime, timedelta
import logging
import math

from guide_core.services.guide_types import (
    Channel,
    GridCell,
    GuideGrid,
    GuideRow,
    MiniGuideEntry,
    Programme,
    ProgrammeProgress,
    TimeWindow,
)
from guide_core.services.schedule_index import ScheduleIndex
from guide_core.services.slot_matcher import find_programme, has_schedule
from guide_core.utils.timezone import ensure_utc

logger = logging.getLogger(__name__)

# Width of the probe slot used for "now" lookups
NOW_PROBE = timedelta(milliseconds=1)


def build_guide_grid(channels: Iterable[Channel], index: ScheduleIndex, window: TimeWindow) -> GuideGrid:
    """
    Build the guide grid for the given window

    Column i covers [window.start + i*slot, window.start + (i+1)*slot). A cell
    holds the programme matched for that slot, or None.

    Args:
        channels: Channels in display order (one row each)
        index: Schedule index to query
        window: Visible time window

    Returns:
        GuideGrid with one row per channel
    """
    bounds = window.slot_bounds()
    rows = []

    for channel in channels:
        cells: list[GridCell | None] = []
        for column, (slot_start, slot_end) in enumerate(bounds):
            programme = find_programme(index, channel, slot_start, slot_end)
            if programme is None:
                cells.append(None)
                continue
            col_start, col_end = _column_span(programme, window)
            cells.append(GridCell(
                programme=programme,
                channel=channel,
                column=column,
                slot_start=slot_start,
                slot_end=slot_end,
                col_start=col_start,
                col_end=col_end,
            ))
        rows.append(GuideRow(
            channel=channel,
            has_schedule=has_schedule(index, channel),
            cells=tuple(cells),
        ))

    logger.debug(f"Built guide grid: {len(rows)} rows x {window.visible_slots} columns")
    return GuideGrid(window=window, rows=tuple(rows))


def _column_span(programme: Programme, window: TimeWindow) -> tuple[int, int]:
    """Half-open range of visible columns covered by a programme"""
    slot_seconds = window.slot_length.total_seconds()
    first = math.floor((programme.start - window.start).total_seconds() / slot_seconds)
    last = math.ceil((programme.end - window.start).total_seconds() / slot_seconds)
    return max(0, first), min(window.visible_slots, last)


def now_playing(index: ScheduleIndex, channel: Channel, at: datetime) -> Programme | None:
    """Programme airing on a channel at an instant"""
    at = ensure_utc(at)
    return find_programme(index, channel, at, at + NOW_PROBE)


def programme_progress(programme: Programme, at: datetime) -> ProgrammeProgress:
    """
    Progress through a programme at an instant

    Percent is clamped to [0, 100]; elapsed seconds are not clamped so a
    caller can tell how far outside the programme the instant lies.
    """
    at = ensure_utc(at)
    duration = programme.duration.total_seconds()
    elapsed = (at - programme.start).total_seconds()
    percent = max(0.0, min(100.0, elapsed / duration * 100)) if duration > 0 else 0.0
    return ProgrammeProgress(
        programme=programme,
        elapsed_seconds=elapsed,
        duration_seconds=duration,
        percent=percent,
    )


def build_mini_guide(channels: Iterable[Channel], index: ScheduleIndex, at: datetime) -> list[MiniGuideEntry]:
    """Every channel paired with its currently airing programme"""
    return [
        MiniGuideEntry(channel=channel, programme=now_playing(index, channel, at))
        for channel in channels
    ]
