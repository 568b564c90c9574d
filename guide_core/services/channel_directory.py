"""
Channel Directory

Ordered, immutable collection of the channels parsed from the playlist.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from guide_core.services.guide_types import Channel
from guide_core.services.playlist_parser_service import DEFAULT_CHANNEL_NAME, parse_m3u
from guide_core.utils.logging_helpers import log_directory_summary


logger = logging.getLogger(__name__)


class ChannelDirectory:
    """Channels in playlist order. Replaced wholesale, never mutated."""

    __slots__ = ("_channels",)

    def __init__(self, channels: Iterable[Channel] = ()):
        self._channels: tuple[Channel, ...] = tuple(channels)

    @classmethod
    def from_playlist(cls, playlist_text: str | None, unknown_name: str = DEFAULT_CHANNEL_NAME) -> ChannelDirectory:
        directory = cls(parse_m3u(playlist_text, unknown_name=unknown_name))
        directory.log_summary()
        return directory

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> ChannelDirectory:
        """
        Build a directory from channel records supplied by a collaborator

        Raises:
            pydantic.ValidationError: If a record is malformed
        """
        from guide_core.schemas import ChannelRecord

        directory = cls(ChannelRecord.model_validate(record).to_channel() for record in records)
        directory.log_summary()
        return directory

    @property
    def channels(self) -> tuple[Channel, ...]:
        return self._channels

    def alphabetized(self) -> ChannelDirectory:
        """New directory sorted case-insensitively by display name"""
        return ChannelDirectory(sorted(self._channels, key=lambda ch: ch.display_name.casefold()))

    def find_by_stable_id(self, stable_id: str) -> Channel | None:
        for channel in self._channels:
            if channel.stable_id == stable_id:
                return channel
        return None

    def log_summary(self) -> None:
        with_stable_id = sum(1 for channel in self._channels if channel.stable_id)
        log_directory_summary(logger, len(self._channels), with_stable_id)

    def __iter__(self) -> Iterator[Channel]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def __getitem__(self, position: int) -> Channel:
        return self._channels[position]

    def __bool__(self) -> bool:
        return bool(self._channels)

    def __repr__(self) -> str:
        return f"<ChannelDirectory(channels={len(self._channels)})>"
