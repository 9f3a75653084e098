"""Worldline summary: how fast and how far an observer has traveled.

Combines the per-frame velocity model with the elapsed duration since
birth. Two path-length tiers are available:

- RECTILINEAR: path = velocity x duration for every frame.
- EPHEMERIS: for the orbit frame, path = sum of chords between Earth's
  sampled heliocentric positions. Spin, galaxy and CMB are modeled at
  constant speed, so both tiers agree for them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

import numpy as np

from core.age import AgeDuration, breakdown_duration
from core.bodies import BodyId
from core.ephemeris import EphemerisProvider, default_provider
from core.errors import InvalidInputError
from core.frames import (
    CMBReference,
    DistanceTier,
    FrameDistance,
    FrameVelocity,
    ReferenceFrame,
)
from core.velocity import all_frame_velocities, rectilinear_distance, validate_latitude
from utils.constants import AU_KM, JULIAN_YEAR_SECONDS, TIER_B_SAMPLES_PER_YEAR
from utils.time_utils import DateLike, generate_epochs, parse_date_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorldlineState:
    """Velocities and distances for every frame between birth and target."""

    timestamp: datetime
    birth: datetime
    latitude_deg: float
    duration_seconds: float
    age: AgeDuration
    frames: dict[ReferenceFrame, FrameVelocity]
    distances: dict[ReferenceFrame, FrameDistance]
    tier: DistanceTier

    def velocity(self, frame: Union[ReferenceFrame, str]) -> FrameVelocity:
        return self.frames[ReferenceFrame(frame)]

    def distance(self, frame: Union[ReferenceFrame, str]) -> FrameDistance:
        return self.distances[ReferenceFrame(frame)]


def orbit_path_length_km(
    start: datetime,
    end: datetime,
    provider: EphemerisProvider,
    samples_per_year: int = TIER_B_SAMPLES_PER_YEAR,
) -> float:
    """Length of Earth's heliocentric path between two epochs, in km.

    The path is approximated by chords between evenly spaced samples. The
    sign follows ``end - start``.
    """
    if samples_per_year < 1:
        raise InvalidInputError(
            f"samples_per_year must be >= 1, got {samples_per_year!r}"
        )
    start = parse_date_input(start)
    end = parse_date_input(end)
    if start == end:
        return 0.0

    sign = 1.0 if end > start else -1.0
    first, last = (start, end) if sign > 0 else (end, start)
    years = (last - first).total_seconds() / JULIAN_YEAR_SECONDS
    count = max(2, math.ceil(years * samples_per_year) + 1)
    epochs = generate_epochs(first, last, count)

    batch = getattr(provider, "get_heliocentric_positions", None)
    if callable(batch):
        positions = np.asarray(batch(BodyId.EARTH, epochs))
    else:
        positions = np.array([
            provider.get_heliocentric_state(BodyId.EARTH, epoch).position
            for epoch in epochs
        ])

    chords = np.linalg.norm(np.diff(positions, axis=0), axis=1)
    length_km = float(np.sum(chords)) * AU_KM
    logger.debug(
        "Orbit path over %.3f years from %d samples: %.6e km",
        years, len(epochs), length_km,
    )
    return sign * length_km


def compute_worldline_state(
    birth: DateLike,
    latitude_deg: float,
    target: Optional[DateLike] = None,
    cmb_reference: Union[CMBReference, str] = CMBReference.SSB,
    tier: Union[DistanceTier, str] = DistanceTier.RECTILINEAR,
    provider: Optional[EphemerisProvider] = None,
) -> WorldlineState:
    """Compute the full worldline summary for an observer.

    Args:
        birth: Birth instant or calendar date (dates anchor at 12:00 UTC).
        latitude_deg: Observer latitude in [-90, 90].
        target: End instant; defaults to now.
        cmb_reference: Which CMB dipole to report.
        tier: Path-length strategy.
        provider: Ephemeris source used by the EPHEMERIS tier.

    Returns:
        A WorldlineState with one velocity and one distance per frame.

    Raises:
        InvalidDateError: If a date cannot be parsed.
        InvalidLatitudeError: If the latitude is out of range.
    """
    latitude = validate_latitude(latitude_deg)
    start = parse_date_input(birth)
    end = parse_date_input(target) if target is not None else datetime.now(timezone.utc)
    try:
        tier = DistanceTier(tier)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown distance tier: {tier!r}") from exc

    duration = (end - start).total_seconds()
    if duration < 0:
        logger.warning(
            "Target %s precedes birth %s, reporting a pre-birth state",
            end.isoformat(), start.isoformat(),
        )
    frames = all_frame_velocities(latitude, cmb_reference)
    distances = {
        frame: rectilinear_distance(velocity, duration)
        for frame, velocity in frames.items()
    }

    if tier is DistanceTier.EPHEMERIS:
        provider = provider if provider is not None else default_provider()
        distances[ReferenceFrame.ORBIT] = FrameDistance(
            frame=ReferenceFrame.ORBIT,
            duration_seconds=duration,
            path_length_km=orbit_path_length_km(start, end, provider),
            tier=DistanceTier.EPHEMERIS,
        )

    return WorldlineState(
        timestamp=end,
        birth=start,
        latitude_deg=latitude,
        duration_seconds=duration,
        age=breakdown_duration(duration),
        frames=frames,
        distances=distances,
        tier=tier,
    )
