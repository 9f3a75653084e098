"""Astronomical seasons on Earth.

Seasons start at fixed approximate equinox and solstice dates (00:00 UTC
on 20 March, 21 June, 22 September and 21 December); the true instants
drift by a day or two from year to year. The southern hemisphere sees
the opposite season.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from core.velocity import validate_latitude
from utils.constants import SECONDS_PER_DAY
from utils.time_utils import DateLike, parse_date_input


class Season(str, Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"

    @property
    def opposite(self) -> "Season":
        return _OPPOSITE[self]

    @property
    def start_event(self) -> str:
        """Name of the equinox or solstice that opens this season."""
        kind = "Equinox" if self in (Season.SPRING, Season.AUTUMN) else "Solstice"
        return f"{self.value} {kind}"


_OPPOSITE = {
    Season.SPRING: Season.AUTUMN,
    Season.SUMMER: Season.WINTER,
    Season.AUTUMN: Season.SPRING,
    Season.WINTER: Season.SUMMER,
}


class Hemisphere(str, Enum):
    NORTHERN = "northern"
    SOUTHERN = "southern"

    @classmethod
    def for_latitude(cls, latitude_deg: float) -> "Hemisphere":
        """The equator counts as northern."""
        lat = validate_latitude(latitude_deg)
        return cls.NORTHERN if lat >= 0.0 else cls.SOUTHERN


# (month, day, northern season that starts there)
_SEASON_STARTS: tuple[tuple[int, int, Season], ...] = (
    (3, 20, Season.SPRING),
    (6, 21, Season.SUMMER),
    (9, 22, Season.AUTUMN),
    (12, 21, Season.WINTER),
)


@dataclass(frozen=True, slots=True)
class SeasonInfo:
    season: Season
    hemisphere: Hemisphere
    progress: float  # percent of the season elapsed, [0, 100]
    next_event: str
    days_until_next: int
    season_start: datetime
    season_end: datetime


def _season_boundaries(year: int) -> list[tuple[datetime, Season]]:
    return [
        (datetime(y, month, day, tzinfo=timezone.utc), season)
        for y in (year - 1, year, year + 1)
        for month, day, season in _SEASON_STARTS
    ]


def earth_season(date: DateLike, latitude_deg: float = 0.0) -> SeasonInfo:
    """Season at ``date`` for an observer at ``latitude_deg``.

    Date-only inputs anchor at 12:00 UTC like every other date here.

    Raises:
        InvalidDateError: If the date cannot be parsed.
        InvalidLatitudeError: If the latitude is out of range.
    """
    moment = parse_date_input(date)
    hemisphere = Hemisphere.for_latitude(latitude_deg)

    boundaries = _season_boundaries(moment.year)
    for (start, season), (end, next_season) in zip(boundaries, boundaries[1:]):
        if start <= moment < end:
            break

    if hemisphere is Hemisphere.SOUTHERN:
        season, next_season = season.opposite, next_season.opposite

    length = (end - start).total_seconds()
    elapsed = (moment - start).total_seconds()
    return SeasonInfo(
        season=season,
        hemisphere=hemisphere,
        progress=min(100.0, max(0.0, elapsed / length * 100.0)),
        next_event=next_season.start_event,
        days_until_next=math.ceil((end - moment).total_seconds() / SECONDS_PER_DAY),
        season_start=start,
        season_end=end,
    )
