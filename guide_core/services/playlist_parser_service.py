import logging
import re

from guide_core.services.guide_types import Channel

logger = logging.getLogger(__name__)

_ATTR_RE = re.compile(r'([a-zA-Z0-9\-]+)="([^"]*)"')

DEFAULT_CHANNEL_NAME = "Unknown Channel"


def parse_m3u(playlist_text: str | None, unknown_name: str = DEFAULT_CHANNEL_NAME) -> list[Channel]:
    """
    Parse an M3U/M3U8 playlist into channels

    Each #EXTINF line yields one channel. tvg-id becomes the stable id,
    tvg-name (or the text after the first comma) the display name, and the
    next non-directive line the stream URL.

    Args:
        playlist_text: Raw playlist text
        unknown_name: Display name used when the entry carries none

    Returns:
        Channels in playlist order
    """
    channels: list[Channel] = []
    if not playlist_text:
        return channels

    lines = playlist_text.splitlines()
    for i, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line.startswith('#EXTINF'):
            continue

        attrs = dict(_ATTR_RE.findall(line))
        channels.append(Channel(
            display_name=attrs.get('tvg-name') or _trailing_name(line) or unknown_name,
            stream_url=_stream_url_after(lines, i),
            stable_id=attrs.get('tvg-id') or None,
            group_name=attrs.get('group-title') or None,
            logo_url=attrs.get('tvg-logo') or None,
        ))

    logger.debug(f"Parsed {len(channels)} playlist entries")
    return channels


def _trailing_name(extinf_line: str) -> str | None:
    """Channel name after the first comma outside attribute values"""
    in_quotes = False
    for pos, char in enumerate(extinf_line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            name = extinf_line[pos + 1:].strip()
            return name or None
    return None


def _stream_url_after(lines: list[str], extinf_pos: int) -> str:
    """First line after an #EXTINF entry that is neither blank nor a directive"""
    for line in lines[extinf_pos + 1:]:
        candidate = line.strip()
        if not candidate:
            continue
        if candidate.startswith('#EXTINF'):
            break
        if candidate.startswith('#'):
            continue
        return candidate
    return ''
