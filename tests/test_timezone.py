"""
Unit tests for guide_core.utils.timezone

Tests XMLTV timestamp decoding, slot alignment and display conversion.
"""
from datetime import datetime, timedelta, timezone

import pytest

from guide_core.utils.timezone import (
    XmltvTimeError,
    convert_to_timezone,
    ensure_utc,
    floor_to_slot,
    parse_xmltv_time,
)
from conftest import utc


class TestParseXmltvTime:
    """Test XMLTV timestamp decoding."""

    def test_negative_offset_is_added_back(self):
        assert parse_xmltv_time("20240101180000 -0500") == utc(2024, 1, 1, 23, 0)

    def test_positive_offset_is_subtracted(self):
        assert parse_xmltv_time("20240101003000 +0130") == utc(2023, 12, 31, 23, 0)

    def test_offset_without_space(self):
        assert parse_xmltv_time("20240101180000+0100") == utc(2024, 1, 1, 17, 0)

    def test_missing_offset_is_utc(self):
        result = parse_xmltv_time("20240615123456")
        assert result == utc(2024, 6, 15, 12, 34, 56)
        assert result.tzinfo == timezone.utc

    def test_offset_round_trip_reproduces_wall_clock(self):
        """Re-expressing the UTC instant in the source offset gives the original fields."""
        cases = [
            ("20240101180000 -0500", -300),
            ("20240229235959 +0545", 345),
            ("20231231000000 +1400", 840),
            ("20240310020000 -0930", -570),
        ]
        for raw, offset_minutes in cases:
            instant = parse_xmltv_time(raw)
            local = instant.astimezone(timezone(timedelta(minutes=offset_minutes)))
            assert local.strftime("%Y%m%d%H%M%S") == raw[:14], f"Failed for: {raw}"

    def test_invalid_inputs_raise(self):
        invalid = [
            None,
            "",
            "garbage",
            "2024010118",  # too short
            "20241301180000 +0000",  # month 13
            "20240230120000",  # Feb 30
            "20240101250000",  # hour 25
            "20240101000000 +9999",  # offset minutes 99
            "20240101000000 +2400",  # offset hours 24
            "20240101000000garbage",
            "20240101000000 +0100 extra",
        ]
        for raw in invalid:
            with pytest.raises(XmltvTimeError):
                parse_xmltv_time(raw)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_xmltv_time(" 20240101180000 -0500 \n") == utc(2024, 1, 1, 23, 0)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_xmltv_time("nope")


class TestFloorToSlot:
    """Test slot alignment on the viewer's wall clock."""

    def test_floor_to_half_hour(self):
        assert floor_to_slot(utc(2024, 1, 1, 10, 47, 31, 500), 30) == utc(2024, 1, 1, 10, 30)

    def test_boundary_is_unchanged(self):
        assert floor_to_slot(utc(2024, 1, 1, 12, 0), 30) == utc(2024, 1, 1, 12, 0)

    def test_naive_input_is_utc(self):
        assert floor_to_slot(datetime(2024, 1, 1, 10, 59), 30) == utc(2024, 1, 1, 10, 30)

    def test_aligns_in_display_timezone(self):
        # 10:47 UTC is 16:32 in Kathmandu (+05:45), floored to 16:30 local
        assert floor_to_slot(utc(2024, 1, 1, 10, 47), 30, "Asia/Kathmandu") == utc(2024, 1, 1, 10, 45)

    def test_hour_slots(self):
        assert floor_to_slot(utc(2024, 1, 1, 10, 47), 60) == utc(2024, 1, 1, 10, 0)


class TestConversions:
    def test_ensure_utc_converts_aware_values(self):
        eastern = timezone(timedelta(hours=-5))
        assert ensure_utc(datetime(2024, 1, 1, 18, 0, tzinfo=eastern)) == utc(2024, 1, 1, 23, 0)

    def test_convert_to_timezone(self):
        assert convert_to_timezone(utc(2024, 1, 1, 23, 0), "America/New_York") == "2024-01-01T18:00:00-05:00"
        assert convert_to_timezone(utc(2024, 1, 1, 23, 0), "UTC") == "2024-01-01T23:00:00+00:00"

    def test_convert_to_unknown_timezone_raises(self):
        with pytest.raises(ValueError):
            convert_to_timezone(utc(2024, 1, 1), "Mars/Olympus_Mons")
