"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging of guide load and
navigation events.
"""
import logging
from datetime import datetime


def log_feed_summary(
    logger: logging.Logger,
    channels_count: int,
    programmes_count: int,
    skipped_count: int
) -> None:
    """
    Log feed parse summary.

    Args:
        logger: Logger instance
        channels_count: Number of channel definitions in the feed
        programmes_count: Number of programmes indexed
        skipped_count: Number of programme entries discarded
    """
    logger.info(
        f"XMLTV parsing complete: {channels_count} channels, "
        f"{programmes_count} programmes, {skipped_count} skipped"
    )


def log_directory_summary(logger: logging.Logger, channels_count: int, with_stable_id: int) -> None:
    """
    Log channel directory load summary.

    Args:
        logger: Logger instance
        channels_count: Number of channels loaded
        with_stable_id: Number of channels carrying a stable identifier
    """
    logger.info(f"Channel directory loaded: {channels_count} channels ({with_stable_id} with stable id)")


def log_window_shift(
    logger: logging.Logger,
    delta_minutes: int,
    accepted: bool,
    window_start: datetime
) -> None:
    """Log a time window navigation request and its outcome."""
    if accepted:
        logger.info(f"Time window shifted by {delta_minutes:+d} min, now starts {window_start.isoformat()}")
    else:
        logger.info(
            f"Time window shift of {delta_minutes:+d} min rejected, "
            f"staying at {window_start.isoformat()}"
        )
