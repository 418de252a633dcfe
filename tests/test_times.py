"""Tests for clock time extraction and date/time composition."""

from datetime import datetime, timezone

import pytest

from luma_task.parsers.compose import apply_time, compose_datetime
from luma_task.parsers.times import parse_time

NOW = datetime(2026, 10, 14, 10, 0)


class TestParseTime:
    @pytest.mark.parametrize("text,expected", [
        ("meeting 14:30", (14, 30)),
        ("meeting 9.05", (9, 5)),
        ("meeting 10.30 uhr", (10, 30)),
        ("meeting 18 uhr", (18, 0)),
        ("meeting 14 uhr 30", (14, 30)),
        ("meeting 6 pm", (18, 0)),
        ("meeting 6pm", (18, 0)),
        ("meeting 12 am", (0, 0)),
        ("meeting 12 pm", (12, 0)),
        ("meeting um 9", (9, 0)),
    ])
    def test_clock_times(self, text, expected):
        hour, minute, rest = parse_time(text)
        assert (hour, minute) == expected
        assert rest == "meeting"

    @pytest.mark.parametrize("text,hour", [
        ("joggen morgens", 8),
        ("frühstück vorbereiten", 8),
        ("pause mittags", 12),
        ("kaffee am nachmittag", 15),
        ("kochen heute abend", 19),
        ("backup nachts", 23),
    ])
    def test_day_parts(self, text, hour):
        parsed_hour, minute, _ = parse_time(text)
        assert parsed_hour == hour
        assert minute == 0

    def test_explicit_time_wins_over_day_part(self):
        hour, minute, rest = parse_time("abends 20:15 kino")
        assert (hour, minute) == (20, 15)
        assert rest == "abends kino"

    def test_date_fragment_is_not_a_clock_time(self):
        assert parse_time("treffen 12.13.") == (None, None, "treffen 12.13.")

    def test_out_of_range_values_are_ignored(self):
        assert parse_time("version 25:99") == (None, None, "version 25:99")
        assert parse_time("13 pm") == (None, None, "13 pm")

    def test_skips_invalid_candidate(self):
        hour, minute, rest = parse_time("raum 31.02 um 14:00")
        assert (hour, minute) == (14, 0)
        assert rest == "raum 31.02"

    def test_no_time(self):
        assert parse_time("milch kaufen") == (None, None, "milch kaufen")


class TestComposeDatetime:
    def test_date_and_time(self):
        date = datetime(2026, 10, 15, 10, 0)
        assert compose_datetime(date, 14, 30, NOW) == datetime(2026, 10, 15, 14, 30)

    def test_date_only_gets_default_time(self):
        date = datetime(2026, 10, 15, 10, 42, 17)
        assert compose_datetime(date, None, None, NOW) == datetime(2026, 10, 15, 9, 0)

    def test_custom_default_time(self):
        date = datetime(2026, 10, 15, 10, 0)
        result = compose_datetime(date, None, None, NOW, default_hour=7, default_minute=30)
        assert result == datetime(2026, 10, 15, 7, 30)

    def test_time_only_later_today(self):
        assert compose_datetime(None, 18, 0, NOW) == datetime(2026, 10, 14, 18, 0)

    def test_time_only_in_the_past_rolls_to_tomorrow(self):
        assert compose_datetime(None, 8, 0, NOW) == datetime(2026, 10, 15, 8, 0)

    def test_neither(self):
        assert compose_datetime(None, None, None, NOW) is None

    def test_timezone_is_preserved(self):
        now = NOW.replace(tzinfo=timezone.utc)
        assert apply_time(now, 7, 5).tzinfo is timezone.utc
