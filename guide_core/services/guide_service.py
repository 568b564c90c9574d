"""
Guide Service

Owns the channel directory, schedule index and time window. Reloads build
new objects and swap a single reference, so readers always see either the
previous or the next state, never a partial one.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Callable

from guide_core.config import GuideSettings, settings as default_settings
from guide_core.services.channel_directory import ChannelDirectory
from guide_core.services.grid_builder_service import (
    build_guide_grid,
    build_mini_guide,
    now_playing,
    programme_progress,
)
from guide_core.services.guide_types import (
    Channel,
    GuideGrid,
    MiniGuideEntry,
    Programme,
    ProgrammeProgress,
    ShiftResult,
    TimeWindow,
)
from guide_core.services.schedule_index import ScheduleIndex
from guide_core.services.slot_matcher import find_programme, has_schedule
from guide_core.services.time_window_service import TimeWindowController
from guide_core.services.xmltv_parser_service import parse_xmltv
from guide_core.utils.timezone import now_utc


logger = logging.getLogger(__name__)


class GuideService:
    """Programme guide state and the queries consumers run against it."""

    def __init__(
        self,
        guide_settings: GuideSettings | None = None,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.settings = guide_settings or default_settings
        self._clock = clock
        self._directory = ChannelDirectory()
        self._index = ScheduleIndex.empty()
        self.window = TimeWindowController(
            visible_slots=self.settings.visible_slots,
            slot_minutes=self.settings.slot_minutes,
            limit_days=self.settings.navigation_limit_days,
            display_timezone=self.settings.display_timezone,
            clock=clock,
        )

    @property
    def directory(self) -> ChannelDirectory:
        return self._directory

    @property
    def index(self) -> ScheduleIndex:
        return self._index

    def load_channels(self, playlist_text: str | None) -> ChannelDirectory:
        """Replace the channel directory from playlist text"""
        directory = ChannelDirectory.from_playlist(
            playlist_text,
            unknown_name=self.settings.unknown_channel_name,
        )
        return self._install_directory(directory)

    def load_channel_records(self, records: Iterable[Mapping[str, Any]]) -> ChannelDirectory:
        """Replace the channel directory from collaborator-supplied records"""
        return self._install_directory(ChannelDirectory.from_records(records))

    def _install_directory(self, directory: ChannelDirectory) -> ChannelDirectory:
        self._directory = directory
        if directory and not self.window.initialized:
            self.window.initialize()
        return directory

    def load_feed(self, feed_text: str | bytes | None) -> ScheduleIndex:
        """
        Parse feed text and swap in the new schedule index

        A malformed feed yields an empty index rather than an error.
        """
        index = parse_xmltv(feed_text)
        self._index = index
        logger.info(f"Schedule index replaced: {index!r}")
        return index

    def find_programme(self, channel: Channel, slot_start: datetime, slot_end: datetime) -> Programme | None:
        return find_programme(self._index, channel, slot_start, slot_end)

    def has_schedule(self, channel: Channel) -> bool:
        return has_schedule(self._index, channel)

    def now_playing(self, channel: Channel, at: datetime | None = None) -> Programme | None:
        return now_playing(self._index, channel, at or self._clock())

    def progress(self, channel: Channel, at: datetime | None = None) -> ProgrammeProgress | None:
        """Progress through the programme airing now, or None when nothing is"""
        at = at or self._clock()
        programme = now_playing(self._index, channel, at)
        if programme is None:
            return None
        return programme_progress(programme, at)

    def mini_guide(self, at: datetime | None = None) -> list[MiniGuideEntry]:
        return build_mini_guide(self._directory, self._index, at or self._clock())

    def build_grid(self, channels: Iterable[Channel] | None = None) -> GuideGrid:
        """
        Build the grid for the current window

        Args:
            channels: Rows to render, defaults to the directory in playlist order
        """
        directory, index = self._directory, self._index
        rows = directory if channels is None else channels
        return build_guide_grid(rows, index, self.window.snapshot())

    def window_snapshot(self) -> TimeWindow:
        return self.window.snapshot()

    def shift(self, delta_minutes: int) -> ShiftResult:
        return self.window.shift(delta_minutes)

    def shift_hours(self, hours: int) -> ShiftResult:
        return self.window.shift_hours(hours)
