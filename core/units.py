"""Unit conversions and human-readable formatting for speeds and distances."""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import InvalidInputError
from utils.constants import (
    AU_KM,
    KM_PER_MILE,
    LIGHT_YEAR_KM,
    MOON_MEAN_DISTANCE_KM,
    PARSEC_KM,
    PLUTO_MEAN_DISTANCE_KM,
)

_COMPACT_SUFFIXES = ("", "K", "M", "B", "T")


# --- Speed ---

def kms_to_kmh(kms: float) -> float:
    return kms * 3600.0


def kms_to_mph(kms: float) -> float:
    return kms * 3600.0 / KM_PER_MILE


def kms_to_ms(kms: float) -> float:
    return kms * 1000.0


def ms_to_kms(ms: float) -> float:
    return ms / 1000.0


# --- Distance ---

def km_to_miles(km: float) -> float:
    return km / KM_PER_MILE


def km_to_au(km: float) -> float:
    return km / AU_KM


def au_to_km(au: float) -> float:
    return au * AU_KM


def km_to_light_years(km: float) -> float:
    return km / LIGHT_YEAR_KM


def light_years_to_km(ly: float) -> float:
    return ly * LIGHT_YEAR_KM


def km_to_parsecs(km: float) -> float:
    return km / PARSEC_KM


# --- Comparative distances ---

def moon_round_trips(distance_km: float) -> float:
    """Number of Earth-Moon round trips covering ``distance_km``."""
    return distance_km / (2.0 * MOON_MEAN_DISTANCE_KM)


def pluto_trips(distance_km: float) -> float:
    """Number of one-way Sun-Pluto trips covering ``distance_km``."""
    return distance_km / PLUTO_MEAN_DISTANCE_KM


def light_year_progress(distance_km: float) -> float:
    """Percentage of one light-year covered by ``distance_km``."""
    return distance_km / LIGHT_YEAR_KM * 100.0


# --- Formatting ---

@dataclass(frozen=True, slots=True)
class FormattedDistance:
    value: float
    unit: str
    formatted: str


def format_compact(value: float, decimals: int = 2) -> str:
    """Abbreviate with K/M/B/T suffixes, e.g. 1234567 -> '1.23M'."""
    scaled = abs(value)
    index = 0
    # pick the suffix after rounding so 999.999 reads 1.00K, not 1000.00
    while index < len(_COMPACT_SUFFIXES) - 1 and round(scaled, decimals) >= 1000.0:
        scaled /= 1000.0
        index += 1
    sign = "-" if value < 0 else ""
    return f"{sign}{scaled:.{decimals}f}{_COMPACT_SUFFIXES[index]}"


def format_distance(km: float) -> FormattedDistance:
    """Pick km, AU or light-years depending on magnitude.

    Below 0.01 AU the value stays in km; below 0.01 ly it is shown in AU.
    """
    magnitude = abs(km)
    if magnitude < AU_KM / 100.0:
        return FormattedDistance(km, "km", f"{format_compact(km)} km")
    if magnitude < LIGHT_YEAR_KM / 100.0:
        au = km_to_au(km)
        return FormattedDistance(au, "AU", f"{au:.2f} AU")
    ly = km_to_light_years(km)
    return FormattedDistance(ly, "ly", f"{ly:.4f} ly")


def format_speed(kms: float, unit: str = "km/s") -> str:
    """Format a speed in km/s, km/h or mph.

    Raises:
        InvalidInputError: If ``unit`` is not one of the supported units.
    """
    if unit == "km/s":
        return f"{kms:.2f} km/s"
    if unit == "km/h":
        return f"{format_compact(kms_to_kmh(kms))} km/h"
    if unit == "mph":
        return f"{format_compact(kms_to_mph(kms))} mph"
    raise InvalidInputError(f"Unsupported speed unit: {unit!r}")
