"""Observer velocity in each of the four nested reference frames.

Each function returns a fresh FrameVelocity. Only the spin frame depends
on latitude; orbit, galaxy and CMB speeds are documented constants.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Optional, Union

from core.coordinate_transforms import parallel_radius
from core.errors import InvalidInputError, InvalidLatitudeError
from core.frames import (
    CMBMetadata,
    CMBReference,
    FrameDistance,
    FrameVelocity,
    GalaxyMetadata,
    OrbitMetadata,
    ReferenceFrame,
    SpinMetadata,
)
from utils.constants import (
    EARTH_ORBITAL_ECCENTRICITY,
    EARTH_ORBITAL_VELOCITY,
    EARTH_ROTATION_RATE,
    GALACTIC_ORBITAL_PERIOD_YEARS,
    LOCAL_GROUP_CMB_GALACTIC_LATITUDE,
    LOCAL_GROUP_CMB_GALACTIC_LONGITUDE,
    LOCAL_GROUP_CMB_VELOCITY,
    LOCAL_GROUP_CMB_VELOCITY_UNCERTAINTY,
    SIGNIFICANT_UNCERTAINTY_THRESHOLD,
    SOLAR_GALACTIC_VELOCITY,
    SOLAR_GALACTIC_VELOCITY_UNCERTAINTY,
    SSB_CMB_GALACTIC_LATITUDE,
    SSB_CMB_GALACTIC_LONGITUDE,
    SSB_CMB_VELOCITY,
    SSB_CMB_VELOCITY_UNCERTAINTY,
    SUN_GALACTIC_CENTER_DISTANCE_LY,
)

_E = EARTH_ORBITAL_ECCENTRICITY
PERIHELION_VELOCITY_KMS: float = EARTH_ORBITAL_VELOCITY * math.sqrt((1 + _E) / (1 - _E))
APHELION_VELOCITY_KMS: float = EARTH_ORBITAL_VELOCITY * math.sqrt((1 - _E) / (1 + _E))


def is_significant_uncertainty(
    value: float,
    sigma: Optional[float],
    rel_threshold: float = SIGNIFICANT_UNCERTAINTY_THRESHOLD,
) -> bool:
    """Whether an uncertainty should be surfaced to the user.

    With the default threshold of zero, any nonzero sigma is significant.
    """
    if not sigma:
        return False
    if value == 0:
        return True
    return abs(sigma / value) >= rel_threshold


def validate_latitude(latitude_deg: float) -> float:
    """Return the latitude as a float or raise InvalidLatitudeError."""
    if isinstance(latitude_deg, bool) or not isinstance(latitude_deg, Real):
        raise InvalidLatitudeError(latitude_deg)
    lat = float(latitude_deg)
    if not math.isfinite(lat) or lat < -90.0 or lat > 90.0:
        raise InvalidLatitudeError(latitude_deg)
    return lat


def spin_velocity_kms(latitude_deg: float) -> float:
    """Surface speed due to Earth rotation, v = omega * r(phi), in km/s."""
    lat = validate_latitude(latitude_deg)
    radius = parallel_radius(lat)
    if radius == 0.0:
        return 0.0
    return EARTH_ROTATION_RATE * radius


def spin_velocity(latitude_deg: float) -> FrameVelocity:
    lat = validate_latitude(latitude_deg)
    return FrameVelocity(
        frame=ReferenceFrame.SPIN,
        velocity_kms=spin_velocity_kms(lat),
        has_significant_uncertainty=False,
        metadata=SpinMetadata(latitude_deg=lat, parallel_radius_km=parallel_radius(lat)),
    )


def orbit_velocity() -> FrameVelocity:
    """Mean heliocentric speed with perihelion/aphelion extrema."""
    return FrameVelocity(
        frame=ReferenceFrame.ORBIT,
        velocity_kms=EARTH_ORBITAL_VELOCITY,
        has_significant_uncertainty=False,
        metadata=OrbitMetadata(
            eccentricity=EARTH_ORBITAL_ECCENTRICITY,
            perihelion_velocity_kms=PERIHELION_VELOCITY_KMS,
            aphelion_velocity_kms=APHELION_VELOCITY_KMS,
        ),
    )


def galaxy_velocity() -> FrameVelocity:
    return FrameVelocity(
        frame=ReferenceFrame.GALAXY,
        velocity_kms=SOLAR_GALACTIC_VELOCITY,
        uncertainty_kms=SOLAR_GALACTIC_VELOCITY_UNCERTAINTY,
        has_significant_uncertainty=is_significant_uncertainty(
            SOLAR_GALACTIC_VELOCITY, SOLAR_GALACTIC_VELOCITY_UNCERTAINTY
        ),
        metadata=GalaxyMetadata(
            distance_to_galactic_center_ly=SUN_GALACTIC_CENTER_DISTANCE_LY,
            orbital_period_years=GALACTIC_ORBITAL_PERIOD_YEARS,
        ),
    )


def cmb_velocity(
    reference: Union[CMBReference, str] = CMBReference.SSB,
) -> FrameVelocity:
    """Speed relative to the CMB rest frame.

    Args:
        reference: ``ssb`` for the solar-system barycenter dipole or
            ``local-group`` for the Local Group's motion.

    Raises:
        InvalidInputError: If the reference is not recognized.
    """
    try:
        reference = CMBReference(reference)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown CMB reference: {reference!r}") from exc

    if reference is CMBReference.SSB:
        speed, sigma = SSB_CMB_VELOCITY, SSB_CMB_VELOCITY_UNCERTAINTY
        lon, lat = SSB_CMB_GALACTIC_LONGITUDE, SSB_CMB_GALACTIC_LATITUDE
    else:
        speed, sigma = LOCAL_GROUP_CMB_VELOCITY, LOCAL_GROUP_CMB_VELOCITY_UNCERTAINTY
        lon, lat = LOCAL_GROUP_CMB_GALACTIC_LONGITUDE, LOCAL_GROUP_CMB_GALACTIC_LATITUDE

    return FrameVelocity(
        frame=ReferenceFrame.CMB,
        velocity_kms=speed,
        uncertainty_kms=sigma,
        has_significant_uncertainty=is_significant_uncertainty(speed, sigma),
        metadata=CMBMetadata(
            reference=reference,
            direction_galactic_longitude=lon,
            direction_galactic_latitude=lat,
        ),
    )


def frame_velocity(
    frame: Union[ReferenceFrame, str],
    latitude_deg: float,
    cmb_reference: Union[CMBReference, str] = CMBReference.SSB,
) -> FrameVelocity:
    """Velocity for any frame.

    Latitude is validated for every frame even though only spin uses it.
    """
    validate_latitude(latitude_deg)
    try:
        frame = ReferenceFrame(frame)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown reference frame: {frame!r}") from exc

    if frame is ReferenceFrame.SPIN:
        return spin_velocity(latitude_deg)
    if frame is ReferenceFrame.ORBIT:
        return orbit_velocity()
    if frame is ReferenceFrame.GALAXY:
        return galaxy_velocity()
    return cmb_velocity(cmb_reference)


def all_frame_velocities(
    latitude_deg: float,
    cmb_reference: Union[CMBReference, str] = CMBReference.SSB,
) -> dict[ReferenceFrame, FrameVelocity]:
    """Velocities for every frame, ordered innermost first."""
    return {
        frame: frame_velocity(frame, latitude_deg, cmb_reference)
        for frame in ReferenceFrame
    }


def rectilinear_distance(velocity: FrameVelocity, duration_seconds: float) -> FrameDistance:
    """Path length as velocity x duration.

    Negative durations give negative path lengths; display clamping is the
    caller's concern.
    """
    if not math.isfinite(duration_seconds):
        raise InvalidInputError(f"Duration must be finite, got {duration_seconds!r}")
    return FrameDistance(
        frame=velocity.frame,
        duration_seconds=duration_seconds,
        path_length_km=velocity.velocity_kms * duration_seconds,
    )
