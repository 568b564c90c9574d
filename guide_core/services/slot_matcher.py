"""
Slot Matcher

Resolves a channel to its programme list and finds the programme airing in
a half-open time slot.
"""
from bisect import bisect_left
from datetime import datetime
import logging

from guide_core.services.guide_types import Channel, Programme
from guide_core.services.schedule_index import ScheduleIndex
from guide_core.utils.timezone import ensure_utc

logger = logging.getLogger(__name__)


def candidates_for(index: ScheduleIndex, channel: Channel) -> tuple[Programme, ...]:
    """
    Resolve the programme list for a channel

    Lookup order, first non-empty list wins:
    1. stable id in the feed id index
    2. lower-cased display name in the normalized name index
    3. exact display name
    """
    if channel.stable_id:
        programmes = index.for_feed_id(channel.stable_id)
        if programmes:
            return programmes

    name = channel.display_name
    if name:
        programmes = index.for_name(name)
        if programmes:
            return programmes

        programmes = index.for_exact_name(name)
        if programmes:
            return programmes

    return ()


def has_schedule(index: ScheduleIndex, channel: Channel) -> bool:
    """True when the index holds any programme at all for the channel"""
    return bool(candidates_for(index, channel))


def find_programme(
    index: ScheduleIndex,
    channel: Channel,
    slot_start: datetime,
    slot_end: datetime
) -> Programme | None:
    """
    Find the programme airing on a channel during [slot_start, slot_end)

    Returns the first programme in ascending start order that overlaps the
    slot, or None.

    Args:
        index: Schedule index to search
        channel: Channel to resolve
        slot_start: Inclusive start of the slot
        slot_end: Exclusive end of the slot
    """
    slot_start = ensure_utc(slot_start)
    slot_end = ensure_utc(slot_end)
    if slot_start >= slot_end:
        return None

    programmes = candidates_for(index, channel)
    if not programmes:
        return None

    # Only programmes starting before slot_end can overlap
    limit = bisect_left(programmes, slot_end, key=_start_of)
    for programme in programmes[:limit]:
        if programme.end > slot_start:
            return programme

    return None


def _start_of(programme: Programme) -> datetime:
    return programme.start
