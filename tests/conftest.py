from datetime import datetime, timedelta, timezone

import pytest

from guide_core.config import GuideSettings
from guide_core.dependencies import reset_guide_service


NEWS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE tv SYSTEM "xmltv.dtd">
<tv generator-info-name="test">
  <channel id="5">
    <display-name>News channel</display-name>
    <icon src="http://example.com/news.png"/>
  </channel>
  <programme channel="5" start="20240101180000 -0500" stop="20240101190000 -0500">
    <title>News</title>
    <sub-title>Evening Edition</sub-title>
    <desc>The day's headlines.</desc>
    <episode-num system="onscreen">S03E12</episode-num>
    <rating system="VCHIP"><value>TV-PG</value></rating>
  </programme>
</tv>
"""

PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="5" tvg-name="News Channel" tvg-logo="http://example.com/logo5.png" group-title="News",News Channel
http://streams.example.com/5.m3u8
#EXTINF:-1 group-title="Movies",Movie Channel
#EXTVLCOPT:http-user-agent=Test
http://streams.example.com/movies.m3u8
"""


class FakeClock:
    """Callable clock whose current time tests can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FakeClock:
    # 2024-01-01 23:10 UTC is 18:10 at -0500
    return FakeClock(utc(2024, 1, 1, 23, 10))


@pytest.fixture
def guide_settings() -> GuideSettings:
    return GuideSettings(
        visible_hours=2,
        slot_minutes=30,
        navigation_limit_days=7,
        display_timezone="UTC",
    )


@pytest.fixture
def news_feed() -> str:
    return NEWS_FEED


@pytest.fixture
def playlist() -> str:
    return PLAYLIST


@pytest.fixture(autouse=True)
def _reset_services():
    yield
    reset_guide_service()
