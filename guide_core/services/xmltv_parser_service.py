import logging
import re
from dataclasses import dataclass

from lxml import etree # type: ignore

from guide_core.services.guide_types import Programme
from guide_core.services.schedule_index import ScheduleIndex, ScheduleIndexBuilder
from guide_core.utils.logging_helpers import log_feed_summary
from guide_core.utils.timezone import XmltvTimeError, parse_xmltv_time

logger = logging.getLogger(__name__)

_EPISODE_RE = re.compile(r"S?(\d+)[ .:-]?[Ee]?(\d+)")
_NON_DIGITS_RE = re.compile(r"[^0-9]+")


@dataclass(slots=True)
class FeedChannel:
    """Channel definition as declared by the feed."""
    xmltv_id: str
    display_name: str
    icon_url: str | None = None


def parse_xmltv(feed_text: str | bytes | None) -> ScheduleIndex:
    """
    Parse XMLTV feed text into a ScheduleIndex

    Never raises for malformed input: an unparseable document produces an
    empty index, and programmes with bad timestamps are skipped.

    Args:
        feed_text: Raw XMLTV document (already retrieved by the caller)

    Returns:
        ScheduleIndex keyed by feed channel id and by display name
    """
    root = _load_root(feed_text)
    if root is None:
        return ScheduleIndex.empty()

    logger.debug("  Extracting channels...")
    channels = _parse_channels(root)
    logger.debug(f"    Found {len(channels)} valid channels")

    builder = ScheduleIndexBuilder()
    parsed = 0
    skipped = 0

    for programme_elem in root.findall('programme'):
        result = _parse_single_programme(programme_elem, channels)
        if result is None:
            skipped += 1
            continue
        programme, display_name = result
        builder.add(programme, display_name)
        parsed += 1

    log_feed_summary(logger, len(channels), parsed, skipped)
    return builder.build()


def _load_root(feed_text: str | bytes | None) -> etree._Element | None:
    """Parse the document, returning None when it is empty or malformed"""
    if not feed_text or not feed_text.strip():
        logger.warning("EPG feed is empty - guide will have no programme data")
        return None

    # lxml rejects str input that carries an encoding declaration
    data = feed_text.encode('utf-8') if isinstance(feed_text, str) else feed_text
    # The XML declaration must be the first thing in the document
    data = data.lstrip()
    # Text input is already decoded, so a declared encoding must not re-decode it
    parser = etree.XMLParser(
        encoding='utf-8' if isinstance(feed_text, str) else None,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
        remove_comments=True,
    )

    try:
        root = etree.fromstring(data, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"EPG feed could not be parsed, using empty schedule: {e}")
        return None

    if root is None:
        logger.warning("EPG feed has no root element, using empty schedule")
        return None

    logger.debug(f"  XML document loaded (root tag: {root.tag})")
    return root


def _parse_channels(root: etree._Element) -> dict[str, FeedChannel]:
    """Extract channel definitions keyed by id"""
    channels: dict[str, FeedChannel] = {}

    for channel in root.findall('channel'):
        xmltv_id = channel.get('id')
        if not xmltv_id:
            logger.debug("Skipping channel with missing ID attribute")
            continue

        # First display name, falling back to the id
        display_name = _get_text(channel, 'display-name', default=xmltv_id) or xmltv_id

        channels[xmltv_id] = FeedChannel(
            xmltv_id=xmltv_id,
            display_name=display_name,
            icon_url=_get_icon(channel),
        )

    return channels


def _parse_single_programme(
    programme: etree._Element,
    channels: dict[str, FeedChannel],
) -> tuple[Programme, str] | None:
    """Parse a single programme element into (Programme, channel display name)"""
    channel_id = programme.get('channel')
    if not channel_id:
        logger.debug("Skipping programme with missing channel attribute")
        return None

    start_str = programme.get('start')
    stop_str = programme.get('stop')
    try:
        start_time = parse_xmltv_time(start_str)
        stop_time = parse_xmltv_time(stop_str)
    except XmltvTimeError as e:
        logger.debug(f"Skipping programme on {channel_id}: {e}")
        return None

    if start_time >= stop_time:
        logger.debug(
            f"Skipping programme on {channel_id}: start {start_str!r} is not before stop {stop_str!r}"
        )
        return None

    feed_channel = channels.get(channel_id)
    display_name = feed_channel.display_name if feed_channel else channel_id
    season, episode = parse_episode_numbers(_get_text(programme, 'episode-num'))

    record = Programme(
        title=_get_text(programme, 'title', default='') or '',
        subtitle=_get_text(programme, 'sub-title'),
        description=_get_text(programme, 'desc'),
        rating=_get_text(programme, 'rating/value'),
        season=season,
        episode=episode,
        start=start_time,
        end=stop_time,
        icon=_get_icon(programme) or (feed_channel.icon_url if feed_channel else None),
        source_channel_key=channel_id,
    )
    return record, display_name


def parse_episode_numbers(token: str | None) -> tuple[int | None, int | None]:
    """
    Extract (season, episode) from a loosely formatted episode token

    Accepts forms like 'S01E05', 'S1 E3', '2.7', '3/4'. When the S/E pattern
    does not match, the first two digit groups are used. Returns
    (None, None) when fewer than two numbers are present.
    """
    if not token:
        return None, None

    match = _EPISODE_RE.search(token)
    if match:
        return int(match.group(1)), int(match.group(2))

    numbers = [part for part in _NON_DIGITS_RE.split(token) if part]
    if len(numbers) >= 2:
        return int(numbers[0]), int(numbers[1])

    return None, None


def _get_icon(element: etree._Element) -> str | None:
    """Icon reference from an <icon src="..."> child or its text"""
    icon_elem = element.find('icon')
    if icon_elem is None:
        return None
    src = icon_elem.get('src')
    if src:
        return src.strip()
    if icon_elem.text and icon_elem.text.strip():
        return icon_elem.text.strip()
    return None


def _get_text(element: etree._Element, path: str, default: str | None = None) -> str | None:
    """Safely extract text from the first matching child element"""
    child = element.find(path)
    if child is None:
        return default
    text = ''.join(child.itertext()).strip()
    return text or default
