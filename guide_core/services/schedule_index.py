"""
Schedule Index

Immutable lookup tables of programmes, built once per feed load and replaced
wholesale on the next one.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from operator import attrgetter
from types import MappingProxyType

from guide_core.services.guide_types import Programme


logger = logging.getLogger(__name__)

_by_start = attrgetter("start")


def normalize_name(name: str) -> str:
    """Case-normalize a channel display name for lookups"""
    return name.lower()


class ScheduleIndex:
    """
    Programmes keyed by feed channel id, by normalized display name and by
    exact display name.

    Every list is a tuple sorted ascending by start. The sort is stable, so
    programmes sharing a start time keep feed order. Overlapping entries are
    kept as-is.
    """

    __slots__ = ("_by_feed_id", "_by_normalized_name", "_by_display_name")

    def __init__(
        self,
        by_feed_id: Mapping[str, Iterable[Programme]] | None = None,
        by_normalized_name: Mapping[str, Iterable[Programme]] | None = None,
        by_display_name: Mapping[str, Iterable[Programme]] | None = None,
    ) -> None:
        self._by_feed_id = _freeze(by_feed_id)
        self._by_normalized_name = _freeze(by_normalized_name)
        self._by_display_name = _freeze(by_display_name)

    @classmethod
    def empty(cls) -> "ScheduleIndex":
        return cls()

    @property
    def by_feed_id(self) -> Mapping[str, tuple[Programme, ...]]:
        return self._by_feed_id

    @property
    def by_normalized_name(self) -> Mapping[str, tuple[Programme, ...]]:
        return self._by_normalized_name

    @property
    def by_display_name(self) -> Mapping[str, tuple[Programme, ...]]:
        return self._by_display_name

    def for_feed_id(self, feed_id: str) -> tuple[Programme, ...]:
        return self._by_feed_id.get(feed_id, ())

    def for_name(self, name: str) -> tuple[Programme, ...]:
        return self._by_normalized_name.get(normalize_name(name), ())

    def for_exact_name(self, name: str) -> tuple[Programme, ...]:
        return self._by_display_name.get(name, ())

    @property
    def programme_count(self) -> int:
        return sum(len(programmes) for programmes in self._by_feed_id.values())

    def is_empty(self) -> bool:
        return not self._by_feed_id and not self._by_normalized_name

    def __repr__(self) -> str:
        return (
            f"<ScheduleIndex(feed_ids={len(self._by_feed_id)}, "
            f"names={len(self._by_normalized_name)}, programmes={self.programme_count})>"
        )


class ScheduleIndexBuilder:
    """Accumulates programmes during a parse and produces a ScheduleIndex."""

    def __init__(self) -> None:
        self._by_feed_id: dict[str, list[Programme]] = {}
        self._by_normalized_name: dict[str, list[Programme]] = {}
        self._by_display_name: dict[str, list[Programme]] = {}

    def add(self, programme: Programme, display_name: str) -> None:
        self._by_feed_id.setdefault(programme.source_channel_key, []).append(programme)
        self._by_normalized_name.setdefault(normalize_name(display_name), []).append(programme)
        self._by_display_name.setdefault(display_name, []).append(programme)

    def build(self) -> ScheduleIndex:
        index = ScheduleIndex(
            by_feed_id=self._by_feed_id,
            by_normalized_name=self._by_normalized_name,
            by_display_name=self._by_display_name,
        )
        logger.debug("Built %r", index)
        return index


def _freeze(
    mapping: Mapping[str, Iterable[Programme]] | None
) -> Mapping[str, tuple[Programme, ...]]:
    if not mapping:
        return MappingProxyType({})
    return MappingProxyType({
        key: tuple(sorted(programmes, key=_by_start))
        for key, programmes in mapping.items()
    })
