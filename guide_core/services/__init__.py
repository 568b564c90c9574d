"""
Services package for the programme guide

This package contains the parsing, indexing, matching and window logic.
"""
from guide_core.services.channel_directory import ChannelDirectory
from guide_core.services.grid_builder_service import (
    build_guide_grid,
    build_mini_guide,
    now_playing,
    programme_progress,
)
from guide_core.services.guide_service import GuideService
from guide_core.services.playlist_parser_service import parse_m3u
from guide_core.services.schedule_index import ScheduleIndex
from guide_core.services.slot_matcher import find_programme, has_schedule
from guide_core.services.time_window_service import TimeWindowController, WindowNotInitializedError
from guide_core.services.xmltv_parser_service import parse_xmltv

__all__ = [
    'ChannelDirectory',
    'GuideService',
    'ScheduleIndex',
    'TimeWindowController',
    'WindowNotInitializedError',
    'build_guide_grid',
    'build_mini_guide',
    'find_programme',
    'has_schedule',
    'now_playing',
    'parse_m3u',
    'parse_xmltv',
    'programme_progress',
]
