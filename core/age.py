"""Elapsed-time decomposition for the age display.

Durations are broken down in Julian units: a year is 365.25 days, a month
is one twelfth of that and a day is 86 400 s. Exactly one Julian year
therefore decomposes to 1y 0m 0d.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.errors import InvalidInputError
from utils.constants import JULIAN_YEAR_SECONDS, SECONDS_PER_DAY
from utils.time_utils import DateLike, parse_date_input, seconds_between

JULIAN_MONTH_SECONDS: float = JULIAN_YEAR_SECONDS / 12.0


@dataclass(frozen=True, slots=True)
class AgeDuration:
    """Calendar-like breakdown of an elapsed duration.

    When ``is_pre_birth`` is set every field is zero; that is a display
    clamp, not an error.
    """

    total_seconds: float
    total_days: float
    total_years: float
    years: int
    months: int
    days: int
    hours: int
    minutes: int
    seconds: int
    is_pre_birth: bool


def compute_duration_seconds(
    birth: DateLike, target: Optional[DateLike] = None
) -> float:
    """Signed seconds from ``birth`` to ``target`` (default: now, UTC).

    Raises:
        InvalidDateError: If either value cannot be parsed.
    """
    start = parse_date_input(birth)
    end = parse_date_input(target) if target is not None else datetime.now(timezone.utc)
    return seconds_between(start, end)


def breakdown_duration(total_seconds: float) -> AgeDuration:
    """Decompose elapsed seconds into years, months, days and h:m:s.

    Negative input yields ``is_pre_birth=True`` with every field zeroed.
    """
    if not math.isfinite(total_seconds):
        raise InvalidInputError(f"Duration must be finite, got {total_seconds!r}")

    is_pre_birth = total_seconds < 0
    effective = max(0.0, float(total_seconds))

    years = math.floor(effective / JULIAN_YEAR_SECONDS)
    remaining = effective - years * JULIAN_YEAR_SECONDS

    months = math.floor(remaining / JULIAN_MONTH_SECONDS)
    remaining -= months * JULIAN_MONTH_SECONDS

    days = math.floor(remaining / SECONDS_PER_DAY)
    remaining -= days * SECONDS_PER_DAY

    hours = math.floor(remaining / 3600.0)
    remaining -= hours * 3600.0

    minutes = math.floor(remaining / 60.0)
    seconds = math.floor(remaining - minutes * 60.0)

    return AgeDuration(
        total_seconds=effective,
        total_days=effective / SECONDS_PER_DAY,
        total_years=effective / JULIAN_YEAR_SECONDS,
        years=years,
        months=months,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        is_pre_birth=is_pre_birth,
    )


def compute_age(birth: DateLike, target: Optional[DateLike] = None) -> AgeDuration:
    """Breakdown of the time elapsed since ``birth``."""
    return breakdown_duration(compute_duration_seconds(birth, target))


def format_duration(duration: AgeDuration) -> str:
    """Render ``"{y}y {m}m {d}d | {HH}h:{MM}m:{SS}s"``."""
    return (
        f"{duration.years}y {duration.months}m {duration.days}d | "
        f"{duration.hours:02d}h:{duration.minutes:02d}m:{duration.seconds:02d}s"
    )
