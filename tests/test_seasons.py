from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.errors import InvalidDateError, InvalidLatitudeError
from core.seasons import Hemisphere, Season, earth_season


def test_northern_summer():
    info = earth_season("2024-07-15", 45.0)
    assert info.season is Season.SUMMER
    assert info.hemisphere is Hemisphere.NORTHERN
    assert info.next_event == "Autumn Equinox"
    assert info.days_until_next == 69
    # 24.5 of 93 days since the June solstice
    assert info.progress == pytest.approx(24.5 / 93.0 * 100.0)


def test_southern_hemisphere_is_opposite():
    info = earth_season("2024-07-15", -33.9)
    assert info.season is Season.WINTER
    assert info.hemisphere is Hemisphere.SOUTHERN
    assert info.next_event == "Spring Equinox"
    assert info.days_until_next == 69


@pytest.mark.parametrize(
    "latitude, season, next_event",
    [(51.5, Season.WINTER, "Spring Equinox"), (-37.8, Season.SUMMER, "Autumn Equinox")],
)
def test_january_wraps_to_previous_december(latitude, season, next_event):
    info = earth_season("2024-01-10", latitude)
    assert info.season is season
    assert info.next_event == next_event
    assert info.season_start == datetime(2023, 12, 21, tzinfo=timezone.utc)
    assert info.season_end == datetime(2024, 3, 20, tzinfo=timezone.utc)
    assert info.days_until_next == 70


def test_late_december_ends_next_year():
    info = earth_season("2024-12-25", 10.0)
    assert info.season is Season.WINTER
    assert info.season_end == datetime(2025, 3, 20, tzinfo=timezone.utc)


def test_season_starts_at_boundary():
    info = earth_season(datetime(2024, 3, 20, tzinfo=timezone.utc), 40.0)
    assert info.season is Season.SPRING
    assert info.progress == 0.0
    assert info.next_event == "Summer Solstice"


def test_equator_counts_as_northern():
    assert earth_season("2024-08-01").hemisphere is Hemisphere.NORTHERN
    assert Hemisphere.for_latitude(-0.1) is Hemisphere.SOUTHERN


def test_season_helpers():
    assert [s.opposite for s in Season] == [
        Season.AUTUMN, Season.WINTER, Season.SPRING, Season.SUMMER
    ]
    assert Season.WINTER.start_event == "Winter Solstice"


def test_invalid_season_inputs():
    with pytest.raises(InvalidLatitudeError):
        earth_season("2024-07-15", 95.0)
    with pytest.raises(InvalidDateError):
        earth_season("not a date", 0.0)
