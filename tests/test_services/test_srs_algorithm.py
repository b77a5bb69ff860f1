"""Tests for review schedule materialization and input parsing."""

from datetime import date, datetime

import pytest

from procedural_memory.domain.errors import InvalidAlgorithm, InvalidDateFormat
from procedural_memory.domain.models import Algorithm
from procedural_memory.services.srs import (
    materialize_schedule,
    parse_algorithm,
    parse_calendar_date,
)


class TestMaterializeSchedule:
    @pytest.mark.parametrize("algorithm", [Algorithm.MOTOR, Algorithm.COGNITIVE])
    def test_one_event_per_template_row(self, catalog, algorithm):
        schedule = materialize_schedule(date(2024, 1, 1), algorithm, catalog)

        assert len(schedule) == len(catalog.get_template(algorithm)) == 18

    @pytest.mark.parametrize("algorithm", [Algorithm.MOTOR, Algorithm.COGNITIVE])
    def test_first_review_is_start_date(self, catalog, algorithm):
        schedule = materialize_schedule(date(2024, 5, 17), algorithm, catalog)

        assert schedule[0].date == date(2024, 5, 17)

    @pytest.mark.parametrize("algorithm", [Algorithm.MOTOR, Algorithm.COGNITIVE])
    def test_dates_strictly_increasing(self, catalog, algorithm):
        schedule = materialize_schedule(date(2024, 1, 1), algorithm, catalog)

        dates = [e.date for e in schedule]
        assert all(a < b for a, b in zip(dates, dates[1:]))

    def test_all_events_start_pending(self, catalog):
        schedule = materialize_schedule(date(2024, 1, 1), "cognitive", catalog)

        assert not any(e.completed for e in schedule)

    def test_motor_dates(self, catalog):
        schedule = materialize_schedule(date(2024, 1, 1), Algorithm.MOTOR, catalog)

        assert schedule[1].date == date(2024, 1, 2)
        # Day 90 across a leap February
        assert schedule[-1].date == date(2024, 3, 30)

    def test_cognitive_dates(self, catalog):
        schedule = materialize_schedule(date(2024, 1, 1), Algorithm.COGNITIVE, catalog)

        assert schedule[1].date == date(2024, 1, 3)
        assert schedule[-1].date == date(2024, 7, 28)

    def test_labels_follow_template(self, catalog):
        schedule = materialize_schedule(date(2024, 1, 1), Algorithm.MOTOR, catalog)
        template = catalog.get_template(Algorithm.MOTOR)

        assert [e.label for e in schedule] == [s.label for s in template.steps]
        assert schedule[0].label == "Day 1: Initial practice"
        assert schedule[-1].label == "Day 90: Mastery check"

    def test_crosses_year_boundary(self, catalog):
        schedule = materialize_schedule(date(2023, 12, 31), Algorithm.MOTOR, catalog)

        assert schedule[0].date == date(2023, 12, 31)
        assert schedule[1].date == date(2024, 1, 1)

    def test_each_call_returns_fresh_events(self, catalog):
        first = materialize_schedule(date(2024, 1, 1), Algorithm.MOTOR, catalog)
        second = materialize_schedule(date(2024, 1, 1), Algorithm.MOTOR, catalog)

        first[0].completed = True
        assert second[0].completed is False

    def test_defaults_to_configured_catalog(self):
        schedule = materialize_schedule(date(2024, 1, 1), Algorithm.COGNITIVE)

        assert len(schedule) == 18

    def test_unknown_algorithm_rejected(self, catalog):
        with pytest.raises(InvalidAlgorithm):
            materialize_schedule(date(2024, 1, 1), "visual", catalog)


class TestParseAlgorithm:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("motor", Algorithm.MOTOR),
            ("cognitive", Algorithm.COGNITIVE),
            (" Motor ", Algorithm.MOTOR),
            (Algorithm.COGNITIVE, Algorithm.COGNITIVE),
        ],
    )
    def test_known_values(self, raw, expected):
        assert parse_algorithm(raw) is expected

    @pytest.mark.parametrize("raw", ["", "visual", "motor-skill"])
    def test_unknown_values(self, raw):
        with pytest.raises(InvalidAlgorithm) as exc_info:
            parse_algorithm(raw)
        assert exc_info.value.algorithm == raw


class TestParseCalendarDate:
    def test_valid_date(self):
        assert parse_calendar_date("2024-02-29") == date(2024, 2, 29)

    def test_date_passes_through(self):
        assert parse_calendar_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_datetime_narrowed_to_date(self):
        parsed = parse_calendar_date(datetime(2024, 1, 1, 23, 59))

        assert parsed == date(2024, 1, 1)
        assert type(parsed) is date

    @pytest.mark.parametrize(
        "raw",
        ["2023-02-29", "2024-13-01", "2024-1-1", "01/02/2024", "2024-01-01T00:00:00", "", "today"],
    )
    def test_invalid_dates(self, raw):
        with pytest.raises(InvalidDateFormat):
            parse_calendar_date(raw)
