"""
Shared dataclasses used across the programme guide.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class Channel:
    """A playable channel from the playlist."""
    display_name: str
    stream_url: str = ""
    stable_id: str | None = None
    group_name: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True, slots=True)
class Programme:
    """A single guide entry. start/end are aware UTC datetimes, start < end."""
    title: str
    start: datetime
    end: datetime
    source_channel_key: str
    subtitle: str | None = None
    description: str | None = None
    rating: str | None = None
    season: int | None = None
    episode: int | None = None
    icon: str | None = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, slot_start: datetime, slot_end: datetime) -> bool:
        """Half-open interval overlap with [slot_start, slot_end)"""
        return self.start < slot_end and self.end > slot_start


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Immutable snapshot of the visible guide range."""
    start: datetime
    slot_minutes: int
    visible_slots: int

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)

    @property
    def end(self) -> datetime:
        return self.start + self.slot_length * self.visible_slots

    def slot_bounds(self) -> list[tuple[datetime, datetime]]:
        """(slot_start, slot_end) for every visible column"""
        length = self.slot_length
        return [
            (self.start + length * i, self.start + length * (i + 1))
            for i in range(self.visible_slots)
        ]


@dataclass(frozen=True, slots=True)
class ShiftResult:
    """Outcome of a navigation request on the time window."""
    accepted: bool
    message: str
    window: TimeWindow


@dataclass(frozen=True, slots=True)
class GridCell:
    """A matched programme in one grid column.

    col_start/col_end are the half-open column range of the visible window
    covered by the programme.
    """
    programme: Programme
    channel: Channel
    column: int
    slot_start: datetime
    slot_end: datetime
    col_start: int
    col_end: int


@dataclass(frozen=True, slots=True)
class GuideRow:
    channel: Channel
    has_schedule: bool
    cells: tuple[GridCell | None, ...]

    def segments(self) -> list[tuple[Programme, int, int]]:
        """Merge consecutive columns showing the same programme into spans."""
        spans: list[tuple[Programme, int, int]] = []
        for column, cell in enumerate(self.cells):
            if cell is None:
                continue
            if spans and spans[-1][0] is cell.programme and spans[-1][2] == column:
                programme, first, _ = spans[-1]
                spans[-1] = (programme, first, column + 1)
            else:
                spans.append((cell.programme, column, column + 1))
        return spans


@dataclass(frozen=True, slots=True)
class GuideGrid:
    window: TimeWindow
    rows: tuple[GuideRow, ...] = field(default_factory=tuple)

    @property
    def column_count(self) -> int:
        return self.window.visible_slots


@dataclass(frozen=True, slots=True)
class ProgrammeProgress:
    programme: Programme
    elapsed_seconds: float
    duration_seconds: float
    percent: float


@dataclass(frozen=True, slots=True)
class MiniGuideEntry:
    channel: Channel
    programme: Programme | None


__all__ = [
    "Channel",
    "Programme",
    "TimeWindow",
    "ShiftResult",
    "GridCell",
    "GuideRow",
    "GuideGrid",
    "ProgrammeProgress",
    "MiniGuideEntry",
]
