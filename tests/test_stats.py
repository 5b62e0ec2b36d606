"""Tests for the stats cards aggregation."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, date, datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest

from ghost_sightings.analysis.stats import (
    NO_CITY,
    Stats,
    compute_stats,
    days_between,
    most_ghostly_city,
)

if TYPE_CHECKING:
    from conftest import SightingFactory

NOW = datetime(2024, 11, 10, 15, 30, tzinfo=UTC)


class TestDaysBetween:
    """Whole days from UTC midnight of the event date."""

    def test_same_day(self) -> None:
        assert days_between(date(2024, 11, 10), NOW) == 0

    def test_floors(self) -> None:
        assert days_between(date(2024, 11, 9), NOW) == 1
        assert days_between(date(2024, 11, 9), datetime(2024, 11, 10, 0, 0, tzinfo=UTC)) == 1
        assert days_between(date(2024, 11, 9), datetime(2024, 11, 9, 23, 59, tzinfo=UTC)) == 0

    def test_naive_now_is_utc(self) -> None:
        assert days_between(date(2024, 11, 1), datetime(2024, 11, 10, 15, 30)) == 9

    def test_other_timezone(self) -> None:
        # 01:00 at UTC+5 on the 10th is still the 9th in UTC.
        plus_five = datetime(2024, 11, 10, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        assert days_between(date(2024, 11, 9), plus_five) == 0

    def test_future_date_is_negative(self) -> None:
        assert days_between(date(2024, 11, 12), NOW) == -2


class TestMostGhostlyCity:
    """Per-city ranking."""

    def test_empty(self) -> None:
        assert most_ghostly_city([]) == NO_CITY == "N/A"

    def test_highest_count_wins(self, make_sighting: SightingFactory) -> None:
        sightings = [
            make_sighting(city="Salem", state="MA"),
            make_sighting(city="Austin", state="TX"),
            make_sighting(city="Austin", state="TX"),
        ]
        assert most_ghostly_city(sightings) == "Austin, TX"

    def test_same_city_different_state(self, make_sighting: SightingFactory) -> None:
        sightings = [
            make_sighting(city="Portland", state="OR"),
            make_sighting(city="Portland", state="ME"),
            make_sighting(city="Portland", state="ME"),
        ]
        assert most_ghostly_city(sightings) == "Portland, ME"

    def test_tie_goes_to_first_seen(self, make_sighting: SightingFactory) -> None:
        sightings = [
            make_sighting(city="Salem", state="MA"),
            make_sighting(city="Austin", state="TX"),
            make_sighting(city="Austin", state="TX"),
            make_sighting(city="Salem", state="MA"),
        ]
        assert most_ghostly_city(sightings) == "Salem, MA"
        assert most_ghostly_city(list(reversed(sightings))) == "Salem, MA"

    def test_winner_count_is_maximal(self, make_sighting: SightingFactory) -> None:
        cities = ["A", "B", "C", "B", "D", "C", "C", "A", "B"]
        sightings = [make_sighting(city=c, state="XX") for c in cities]
        counts = Counter(s.city_key for s in sightings)
        winner = most_ghostly_city(sightings)
        assert all(counts[winner] >= n for n in counts.values())


class TestComputeStats:
    """The full stats bundle."""

    def test_empty(self) -> None:
        assert compute_stats([], NOW) == Stats(
            total=0, most_recent=None, days_ago=0, most_ghostly_city="N/A"
        )

    def test_total_is_length(self, make_sighting: SightingFactory) -> None:
        sightings = [make_sighting() for _ in range(7)]
        assert compute_stats(sightings, NOW).total == 7

    def test_most_recent_regardless_of_order(self, make_sighting: SightingFactory) -> None:
        old = make_sighting(date=date(2020, 1, 1))
        new = make_sighting(date=date(2024, 11, 3), city="Salem", state="MA")
        mid = make_sighting(date=date(2023, 5, 5))
        stats = compute_stats([old, new, mid], NOW)
        assert stats.most_recent == new
        assert stats.days_ago == 7

    def test_most_recent_tie_goes_to_first_in_input(
        self, make_sighting: SightingFactory
    ) -> None:
        first = make_sighting(date=date(2024, 11, 1), city="First")
        second = make_sighting(date=date(2024, 11, 1), city="Second")
        assert compute_stats([first, second], NOW).most_recent == first
        assert compute_stats([second, first], NOW).most_recent == second

    def test_does_not_reorder_input(self, make_sighting: SightingFactory) -> None:
        sightings = [make_sighting(date=date(2020, 1, d)) for d in (1, 3, 2)]
        before = list(sightings)
        compute_stats(sightings, NOW)
        assert sightings == before

    def test_single_austin_sighting(self, make_sighting: SightingFactory) -> None:
        stats = compute_stats([make_sighting(city="Austin", state="TX")], NOW)
        assert stats.total == 1
        assert stats.most_ghostly_city == "Austin, TX"


class TestDaysLabel:
    """Pluralisation on the card."""

    @pytest.mark.parametrize(("days", "label"), [(0, "Days"), (1, "Day"), (2, "Days")])
    def test_label(self, days: int, label: str) -> None:
        stats = Stats(total=1, most_recent=None, days_ago=days, most_ghostly_city="x")
        assert stats.days_label == label
