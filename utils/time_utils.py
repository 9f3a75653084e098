"""Time conversion utilities for ephemeris queries and age arithmetic.

Provides parsing of user-facing date inputs, conversions between Python
datetime, Julian Date and astropy Time, and GMST via ERFA.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Union

import erfa
import numpy as np
from astropy.time import Time

from core.errors import InvalidDateError
from utils.constants import J2000_JD, SECONDS_PER_DAY, TWO_PI

DateLike = Union[datetime, date, str]

# Calendar dates with no time component are anchored at this UTC instant.
DATE_ONLY_ANCHOR: time = time(12, 0, 0, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class JulianDate:
    """Split Julian Date.

    ERFA routines take the date as two floats (typically the integer-ish
    epoch and the fractional part) to keep precision across millennia.
    """

    jd: float
    fr: float

    @property
    def full(self) -> float:
        return self.jd + self.fr


def parse_date_input(value: DateLike) -> datetime:
    """Normalize a date-like value to an aware UTC datetime.

    Args:
        value: A datetime, a calendar date, or a string. ``YYYY-MM-DD``
            strings and bare ``date`` objects are anchored at 12:00 UTC.
            Other strings are parsed as ISO-8601. Naive values are UTC.

    Returns:
        A timezone-aware datetime in UTC.

    Raises:
        InvalidDateError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, DATE_ONLY_ANCHOR)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError("Empty date string", value=value)
        try:
            if len(text) == 10 and text[4] == "-" and text[7] == "-":
                return datetime.combine(date.fromisoformat(text), DATE_ONLY_ANCHOR)
            # fromisoformat() before 3.11 rejects a trailing "Z"
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDateError(f"Unparsable date: {value!r}", value=value) from exc
    else:
        raise InvalidDateError(
            f"Unsupported date type: {type(value).__name__}", value=value
        )

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_to_jd(dt: datetime) -> JulianDate:
    """Convert Python datetime (UTC) to split Julian Date."""
    dt = parse_date_input(dt)
    djm0, djm = erfa.cal2jd(dt.year, dt.month, dt.day)
    day_seconds = (
        dt.hour * 3600.0 + dt.minute * 60.0 + dt.second + dt.microsecond / 1e6
    )
    return JulianDate(jd=float(djm0), fr=float(djm) + day_seconds / SECONDS_PER_DAY)


def days_since_j2000(dt: datetime) -> float:
    """Days elapsed since J2000.0 (UTC treated as TT at this precision)."""
    jd = datetime_to_jd(dt)
    return (jd.jd - J2000_JD) + jd.fr


def to_astropy_time(dt: Union[datetime, list[datetime]]) -> Time:
    """Build an astropy UTC Time from one or many aware datetimes."""
    if isinstance(dt, datetime):
        return Time(parse_date_input(dt).replace(tzinfo=None), scale="utc")
    naive = [parse_date_input(d).replace(tzinfo=None) for d in dt]
    return Time(naive, scale="utc")


def datetime_to_gmst(dt: datetime) -> float:
    """Compute Greenwich Mean Sidereal Time in radians.

    Uses ERFA's IAU 2006 GMST with UT1 approximated by UTC and TT by UTC.
    """
    jd = datetime_to_jd(dt)
    gmst = erfa.gmst06(jd.jd, jd.fr, jd.jd, jd.fr)
    return float(gmst) % TWO_PI


def seconds_between(start: datetime, end: datetime) -> float:
    """Signed elapsed seconds from ``start`` to ``end``."""
    return (parse_date_input(end) - parse_date_input(start)).total_seconds()


def generate_epochs(start: datetime, end: datetime, count: int) -> list[datetime]:
    """Evenly spaced epochs from ``start`` to ``end`` inclusive.

    Returns at least two epochs unless start and end coincide.
    """
    start = parse_date_input(start)
    end = parse_date_input(end)
    total = (end - start).total_seconds()
    if total == 0.0 or not math.isfinite(total):
        return [start]
    n = max(2, int(count))
    offsets = np.linspace(0.0, total, n)
    return [start + timedelta(seconds=float(s)) for s in offsets]
