"""
Unit tests for guide_core.services.time_window_service

Tests slot alignment, one-time initialization and bounded navigation.
"""
import pytest

from guide_core.services.time_window_service import TimeWindowController, WindowNotInitializedError
from conftest import FakeClock, utc

WEEK_MINUTES = 7 * 24 * 60


@pytest.fixture
def controller(clock):
    return TimeWindowController(visible_slots=4, clock=clock)


class TestAlignToSlot:
    def test_mid_slot_floors(self, controller):
        assert controller.align_to_slot(utc(2024, 1, 1, 10, 47)) == utc(2024, 1, 1, 10, 30)

    def test_on_boundary(self, controller):
        assert controller.align_to_slot(utc(2024, 1, 1, 12, 0)) == utc(2024, 1, 1, 12, 0)

    def test_zeroes_seconds(self, controller):
        assert controller.align_to_slot(utc(2024, 1, 1, 12, 29, 59, 999999)) == utc(2024, 1, 1, 12, 0)

    def test_display_timezone(self, clock):
        controller = TimeWindowController(visible_slots=4, display_timezone="Asia/Kolkata", clock=clock)
        # 10:47 UTC is 16:17 IST, floored to 16:00 IST = 10:30 UTC
        assert controller.align_to_slot(utc(2024, 1, 1, 10, 47)) == utc(2024, 1, 1, 10, 30)


class TestInitialize:
    def test_initialize_aligns_now(self, controller):
        window = controller.initialize()
        assert window.start == utc(2024, 1, 1, 23, 0)
        assert window.slot_minutes == 30
        assert window.visible_slots == 4
        assert window.end == utc(2024, 1, 2, 1, 0)

    def test_initialize_is_idempotent(self, controller, clock):
        controller.initialize()
        clock.advance(hours=5)
        assert controller.initialize().start == utc(2024, 1, 1, 23, 0)

    def test_snapshot_before_initialize_raises(self, controller):
        assert not controller.initialized
        with pytest.raises(WindowNotInitializedError):
            controller.snapshot()
        with pytest.raises(WindowNotInitializedError):
            controller.shift(60)

    def test_slot_bounds(self, controller):
        bounds = controller.initialize().slot_bounds()
        assert bounds[0] == (utc(2024, 1, 1, 23, 0), utc(2024, 1, 1, 23, 30))
        assert bounds[-1] == (utc(2024, 1, 2, 0, 30), utc(2024, 1, 2, 1, 0))
        assert len(bounds) == 4


class TestShift:
    """Navigation is bounded to a week either side of now."""

    def test_hour_and_half_day_shifts(self, controller):
        controller.initialize()

        result = controller.shift(60)
        assert result.accepted
        assert result.message == "Scrolled +1 hour"
        assert result.window.start == utc(2024, 1, 2, 0, 0)

        result = controller.shift(-720)
        assert result.accepted
        assert result.message == "Scrolled -12 hours"
        assert controller.snapshot().start == utc(2024, 1, 1, 12, 0)

    def test_arbitrary_minute_delta(self, controller):
        controller.initialize()
        result = controller.shift(7)
        assert result.accepted
        assert result.message == "Scrolled +7 minutes"
        assert result.window.start == utc(2024, 1, 1, 23, 7)

    def test_forward_limit(self, controller):
        controller.initialize()
        # Window 23:00 + 7 days is before now (23:10) + 7 days
        assert controller.shift(WEEK_MINUTES).accepted
        before = controller.snapshot()

        result = controller.shift(60)
        assert not result.accepted
        assert result.message == "Cannot go forward more than 1 week"
        assert result.window == before
        assert controller.snapshot() == before

    def test_back_limit(self, controller):
        controller.initialize()
        before = controller.snapshot()

        result = controller.shift(-(WEEK_MINUTES + 60))
        assert not result.accepted
        assert result.message == "Cannot go back more than 1 week"
        assert controller.snapshot() == before

    def test_limit_is_inclusive(self):
        clock = FakeClock(utc(2024, 1, 1, 12, 0))
        controller = TimeWindowController(visible_slots=4, clock=clock)
        controller.initialize()
        assert controller.shift(-WEEK_MINUTES).accepted
        assert controller.shift(2 * WEEK_MINUTES).accepted
        assert not controller.shift(1).accepted

    def test_bound_uses_current_clock(self, controller, clock):
        controller.initialize()
        assert not controller.shift(WEEK_MINUTES + 60).accepted

        clock.advance(hours=2)
        assert controller.shift(WEEK_MINUTES + 60).accepted

    @pytest.mark.parametrize("delta, message", [
        (10**10, "Cannot go forward more than 1 week"),
        (-(10**10), "Cannot go back more than 1 week"),
        (10**20, "Cannot go forward more than 1 week"),
    ])
    def test_delta_beyond_datetime_range_is_rejected(self, controller, delta, message):
        controller.initialize()
        before = controller.snapshot()

        result = controller.shift(delta)
        assert not result.accepted
        assert result.message == message
        assert result.window == before
        assert controller.snapshot() == before

    def test_shift_hours(self, controller):
        controller.initialize()
        assert controller.shift_hours(-1).window.start == utc(2024, 1, 1, 22, 0)

    def test_custom_limit_message(self, clock):
        controller = TimeWindowController(visible_slots=4, limit_days=2, clock=clock)
        controller.initialize()
        assert controller.shift(-3 * 24 * 60).message == "Cannot go back more than 2 days"


class TestConstruction:
    @pytest.mark.parametrize("kwargs", [
        {"visible_slots": 0},
        {"visible_slots": 4, "slot_minutes": 0},
        {"visible_slots": 4, "slot_minutes": 7},
        {"visible_slots": 4, "display_timezone": "Nowhere/Special"},
    ])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            TimeWindowController(**kwargs)
