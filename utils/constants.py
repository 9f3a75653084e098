"""Physical constants for worldline kinematics and scene scaling.

All values use km, seconds and degrees as base units unless otherwise noted.
Every entry in PHYSICAL_CONSTANTS carries a source and, where one is
published, a 1-sigma uncertainty. The table is built once at import and
exposed read-only; the module-level floats below are views into it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True, slots=True)
class PhysicalConstant:
    """A single sourced scalar constant."""

    name: str
    value: float
    unit: str
    source: str
    uncertainty: Optional[float] = None


_NIST = "https://tf.nist.gov/general/pdf/1530.pdf"
_IAU = "IAU 2012 Resolution B2 / IAU nominal values"
_OGC = "https://docs.ogc.org/bp/16-011r5.html"
_NASA_EARTH = "https://nssdc.gsfc.nasa.gov/planetary/factsheet/earthfact.html"
_JPL_HOWFAST = "https://nightsky.jpl.nasa.gov/docs/HowFast.pdf"
_PDG_CMB = "https://pdg.lbl.gov/2025/reviews/rpp2025-rev-cosmic-microwave-background.pdf"
_CODATA = "CODATA 2018 (exact)"


def _build_table(*constants: PhysicalConstant) -> Mapping[str, PhysicalConstant]:
    table = {c.name: c for c in constants}
    if len(table) != len(constants):
        raise RuntimeError("Duplicate physical constant name")
    return MappingProxyType(table)


PHYSICAL_CONSTANTS: Mapping[str, PhysicalConstant] = _build_table(
    # --- Time ---
    PhysicalConstant("sidereal_day", 86164.0905, "s", _NIST, 1e-4),
    PhysicalConstant("solar_day", 86400.0, "s", "IAU definition"),
    PhysicalConstant("julian_year", 31557600.0, "s", "IAU definition"),
    # --- Earth shape (WGS84) ---
    PhysicalConstant("wgs84_semi_major_axis", 6378.137, "km", _OGC),
    PhysicalConstant("wgs84_flattening", 1.0 / 298.257223563, "1", _OGC),
    # --- Heliocentric orbit ---
    PhysicalConstant("earth_orbital_velocity", 29.78, "km/s", _NASA_EARTH, 0.01),
    PhysicalConstant("earth_orbital_eccentricity", 0.0167086, "1", _NASA_EARTH),
    PhysicalConstant("earth_orbital_period", 365.256363004 * 86400.0, "s", _NASA_EARTH),
    PhysicalConstant("astronomical_unit", 149597870.7, "km", _IAU),
    # --- Galactic orbit ---
    PhysicalConstant("solar_galactic_velocity", 220.0, "km/s", _JPL_HOWFAST, 15.0),
    PhysicalConstant(
        "sun_galactic_center_distance", 26000.0, "ly", "Reid et al. 2019", 1000.0
    ),
    PhysicalConstant("galactic_orbital_period", 225_000_000.0, "yr", "derived"),
    # --- CMB rest frame ---
    PhysicalConstant("ssb_cmb_velocity", 369.82, "km/s", _PDG_CMB, 0.11),
    PhysicalConstant("ssb_cmb_galactic_longitude", 264.021, "deg", _PDG_CMB, 0.011),
    PhysicalConstant("ssb_cmb_galactic_latitude", 48.253, "deg", _PDG_CMB, 0.005),
    PhysicalConstant("local_group_cmb_velocity", 620.0, "km/s", _PDG_CMB, 15.0),
    PhysicalConstant("local_group_cmb_galactic_longitude", 276.0, "deg", _PDG_CMB, 3.0),
    PhysicalConstant("local_group_cmb_galactic_latitude", 30.0, "deg", _PDG_CMB, 3.0),
    # --- Units ---
    PhysicalConstant("speed_of_light", 299792.458, "km/s", _CODATA),
    PhysicalConstant("parsec", 3.0857e13, "km", "IAU 2015 Resolution B2"),
    PhysicalConstant("km_per_mile", 1.609344, "km", "NBS (exact)"),
    PhysicalConstant("moon_mean_distance", 384400.0, "km", "NASA"),
    PhysicalConstant("pluto_mean_distance", 5_906_380_000.0, "km", "NASA"),
)


def constant(name: str) -> float:
    """Value of a named entry in the constants table."""
    return PHYSICAL_CONSTANTS[name].value


# --- Time ---
SIDEREAL_DAY_SECONDS: float = constant("sidereal_day")
SECONDS_PER_DAY: float = constant("solar_day")
JULIAN_YEAR_SECONDS: float = constant("julian_year")
J2000_JD: float = 2451545.0  # 2000-01-01 12:00 TT

# --- Earth Shape (WGS84) ---
R_EARTH_EQUATORIAL: float = constant("wgs84_semi_major_axis")  # km
FLATTENING: float = constant("wgs84_flattening")
ECCENTRICITY_SQ: float = FLATTENING * (2.0 - FLATTENING)
R_EARTH_POLAR: float = R_EARTH_EQUATORIAL * (1.0 - FLATTENING)  # km

# --- Earth Rotation ---
EARTH_ROTATION_RATE: float = 2.0 * math.pi / SIDEREAL_DAY_SECONDS  # rad/s

# --- Heliocentric Orbit ---
EARTH_ORBITAL_VELOCITY: float = constant("earth_orbital_velocity")  # km/s
EARTH_ORBITAL_ECCENTRICITY: float = constant("earth_orbital_eccentricity")
AU_KM: float = constant("astronomical_unit")

# --- Galactic Orbit ---
SOLAR_GALACTIC_VELOCITY: float = constant("solar_galactic_velocity")  # km/s
SOLAR_GALACTIC_VELOCITY_UNCERTAINTY: float = PHYSICAL_CONSTANTS[
    "solar_galactic_velocity"
].uncertainty
SUN_GALACTIC_CENTER_DISTANCE_LY: float = constant("sun_galactic_center_distance")
GALACTIC_ORBITAL_PERIOD_YEARS: float = constant("galactic_orbital_period")

# --- CMB Rest Frame ---
SSB_CMB_VELOCITY: float = constant("ssb_cmb_velocity")  # km/s
SSB_CMB_VELOCITY_UNCERTAINTY: float = PHYSICAL_CONSTANTS["ssb_cmb_velocity"].uncertainty
SSB_CMB_GALACTIC_LONGITUDE: float = constant("ssb_cmb_galactic_longitude")
SSB_CMB_GALACTIC_LATITUDE: float = constant("ssb_cmb_galactic_latitude")
LOCAL_GROUP_CMB_VELOCITY: float = constant("local_group_cmb_velocity")
LOCAL_GROUP_CMB_VELOCITY_UNCERTAINTY: float = PHYSICAL_CONSTANTS[
    "local_group_cmb_velocity"
].uncertainty
LOCAL_GROUP_CMB_GALACTIC_LONGITUDE: float = constant("local_group_cmb_galactic_longitude")
LOCAL_GROUP_CMB_GALACTIC_LATITUDE: float = constant("local_group_cmb_galactic_latitude")

# --- Units ---
SPEED_OF_LIGHT: float = constant("speed_of_light")  # km/s
LIGHT_YEAR_KM: float = SPEED_OF_LIGHT * JULIAN_YEAR_SECONDS
PARSEC_KM: float = constant("parsec")
KM_PER_MILE: float = constant("km_per_mile")
MOON_MEAN_DISTANCE_KM: float = constant("moon_mean_distance")
PLUTO_MEAN_DISTANCE_KM: float = constant("pluto_mean_distance")

# --- Derived Math Constants ---
TWO_PI: float = 2.0 * math.pi
DEG_TO_RAD: float = math.pi / 180.0
RAD_TO_DEG: float = 180.0 / math.pi

# --- Uncertainty Policy ---
# Relative sigma at or above which an uncertainty is flagged. Zero means
# any nonzero sigma is significant.
SIGNIFICANT_UNCERTAINTY_THRESHOLD: float = 0.0

# --- Camera Defaults ---
CAMERA_FOV_DEGREES: float = 50.0
CAMERA_TRANSITION_SECONDS: float = 1.2
CAMERA_INITIAL_ZOOM_RADII: float = 8.0
CAMERA_NEAR_EPSILON: float = 1e-7
CAMERA_NEAR_RADIUS_DIVISOR: float = 500.0
CAMERA_FAR_MINIMUM: float = 300.0
CAMERA_FAR_RADIUS_MULTIPLIER: float = 1000.0
CAMERA_MIN_COVERAGE: float = 0.8
CAMERA_MAX_COVERAGE: float = 0.03
CAMERA_MAX_COVERAGE_PHYSICAL: float = 0.01
CAMERA_PHYSICAL_RANGE_BOOST: float = 1.7

SCREEN_COVERAGE_BY_PRESET: dict[str, float] = {
    "schoolModel": 0.55,
    "trueSizes": 0.55,
    "truePhysical": 0.12,
    "planetRatio": 0.55,
    "explorer": 0.45,
    "massComparison": 0.55,
}
DEFAULT_SCREEN_COVERAGE: float = 0.35

# Values > 1 push the camera farther out for that body.
BODY_COVERAGE_ADJUSTMENT: dict[str, float] = {
    "Sun": 0.7,
    "Mercury": 0.9,
    "Venus": 1.0,
    "Earth": 1.0,
    "Moon": 1.3,
    "Mars": 0.9,
    "Jupiter": 1.1,
    "Saturn": 1.4,
    "Uranus": 1.1,
    "Neptune": 1.0,
}

# --- Scene Geometry ---
ORBIT_PATH_SEGMENTS: int = 256
ORBIT_DEGENERATE_RADIUS: float = 1e-4
MOTION_TRAIL_LENGTH: int = 8
MOTION_TRAIL_STEP_RAD: float = 0.08
MIN_MOON_EARTH_RADIUS_RATIO: float = 3.0
TIER_B_SAMPLES_PER_YEAR: int = 96
