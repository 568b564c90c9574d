"""
Time Window Controller

Tracks the visible span of the guide grid, keeps it aligned to slot
boundaries and bounds navigation to a range around the current time.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable

from guide_core.services.guide_types import ShiftResult, TimeWindow
from guide_core.utils.logging_helpers import log_window_shift
from guide_core.utils.timezone import ensure_utc, floor_to_slot, now_utc, resolve_timezone


logger = logging.getLogger(__name__)


class WindowNotInitializedError(RuntimeError):
    """Raised when the window is used before initialize()"""
    pass


class TimeWindowController:
    """
    Owns the current time window.

    The window start is set once by initialize() and afterwards only moves
    through shift(). Navigation is bounded to limit_days either side of the
    clock's current time, evaluated on every call. Callers must serialize
    shift() themselves.
    """

    def __init__(
        self,
        *,
        visible_slots: int,
        slot_minutes: int = 30,
        limit_days: int = 7,
        display_timezone: str = "UTC",
        clock: Callable[[], datetime] = now_utc,
    ):
        if slot_minutes <= 0 or (24 * 60) % slot_minutes:
            raise ValueError(f"slot_minutes must be a positive divisor of 1440, got {slot_minutes}")
        if visible_slots <= 0:
            raise ValueError(f"visible_slots must be > 0, got {visible_slots}")
        resolve_timezone(display_timezone)

        self.slot_minutes = slot_minutes
        self.visible_slots = visible_slots
        self.limit = timedelta(days=limit_days)
        self.display_timezone = display_timezone
        self._clock = clock
        self._start: datetime | None = None

    @property
    def initialized(self) -> bool:
        return self._start is not None

    def align_to_slot(self, instant: datetime) -> datetime:
        """Floor an instant to the nearest lower slot boundary"""
        return floor_to_slot(instant, self.slot_minutes, self.display_timezone)

    def initialize(self) -> TimeWindow:
        """Align the window to the current slot; no-op once initialized"""
        if self._start is None:
            self._start = self.align_to_slot(self._clock())
            logger.info(f"Time window initialized at {self._start.isoformat()}")
        return self.snapshot()

    def snapshot(self) -> TimeWindow:
        """
        Current window as an immutable value

        Raises:
            WindowNotInitializedError: If initialize() has not run
        """
        if self._start is None:
            raise WindowNotInitializedError("Time window has not been initialized")
        return TimeWindow(
            start=self._start,
            slot_minutes=self.slot_minutes,
            visible_slots=self.visible_slots,
        )

    def shift(self, delta_minutes: int) -> ShiftResult:
        """
        Move the window start by delta_minutes

        The shift is rejected, leaving the window unchanged, when the new
        start would fall earlier than now - limit or later than now + limit.

        Args:
            delta_minutes: Signed number of minutes to move

        Returns:
            ShiftResult with accepted flag and a user-facing message
        """
        current = self.snapshot()
        now = ensure_utc(self._clock())
        try:
            proposed = current.start + timedelta(minutes=delta_minutes)
        except OverflowError:
            # Beyond the datetime range, so past either limit
            proposed = None

        if proposed is None:
            result = ShiftResult(
                accepted=False,
                message=_limit_message("back" if delta_minutes < 0 else "forward", self.limit),
                window=current,
            )
        elif proposed < now - self.limit:
            result = ShiftResult(
                accepted=False,
                message=_limit_message("back", self.limit),
                window=current,
            )
        elif proposed > now + self.limit:
            result = ShiftResult(
                accepted=False,
                message=_limit_message("forward", self.limit),
                window=current,
            )
        else:
            self._start = proposed
            result = ShiftResult(
                accepted=True,
                message=f"Scrolled {_describe_delta(delta_minutes)}",
                window=self.snapshot(),
            )

        log_window_shift(logger, delta_minutes, result.accepted, result.window.start)
        return result

    def shift_hours(self, hours: int) -> ShiftResult:
        return self.shift(hours * 60)


def _limit_message(direction: str, limit: timedelta) -> str:
    return f"Cannot go {direction} more than {_describe_days(limit)}"


def _describe_days(limit: timedelta) -> str:
    if limit.days == 7:
        return "1 week"
    return f"{limit.days} day" if limit.days == 1 else f"{limit.days} days"


def _describe_delta(delta_minutes: int) -> str:
    sign = "+" if delta_minutes >= 0 else "-"
    minutes = abs(delta_minutes)
    if minutes and minutes % 60 == 0:
        hours = minutes // 60
        return f"{sign}{hours} hour" if hours == 1 else f"{sign}{hours} hours"
    return f"{sign}{minutes} minute" if minutes == 1 else f"{sign}{minutes} minutes"
