"""Reference frames and the value types reported for each of them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from core.coordinate_transforms import galactic_to_unit_vector


class ReferenceFrame(str, Enum):
    """Nested frames of motion, innermost first.

    Frames are reported in parallel and never summed: adding speeds across
    frames needs relative orientation data that is not tracked here.
    """

    SPIN = "spin"
    ORBIT = "orbit"
    GALAXY = "galaxy"
    CMB = "cmb"

    @property
    def nesting_level(self) -> int:
        return _NESTING[self]


_NESTING = {
    ReferenceFrame.SPIN: 0,
    ReferenceFrame.ORBIT: 1,
    ReferenceFrame.GALAXY: 2,
    ReferenceFrame.CMB: 3,
}


class CMBReference(str, Enum):
    """Which body's motion relative to the CMB is reported."""

    SSB = "ssb"
    LOCAL_GROUP = "local-group"


class DistanceTier(str, Enum):
    """Path-length strategy.

    RECTILINEAR is velocity x duration. EPHEMERIS sums chords of Earth's
    sampled heliocentric positions for the orbit frame.
    """

    RECTILINEAR = "A"
    EPHEMERIS = "B"


@dataclass(frozen=True, slots=True)
class FrameInfo:
    name: str
    short_name: str
    description: str
    relative_to: str


FRAME_INFO: dict[ReferenceFrame, FrameInfo] = {
    ReferenceFrame.SPIN: FrameInfo(
        "Earth Rotation", "Spin",
        "Speed due to Earth rotating on its axis",
        "Earth surface (inertial frame)",
    ),
    ReferenceFrame.ORBIT: FrameInfo(
        "Heliocentric Orbit", "Orbit",
        "Speed as Earth orbits the Sun",
        "Sun (heliocentric frame)",
    ),
    ReferenceFrame.GALAXY: FrameInfo(
        "Galactic Orbit", "Galaxy",
        "Speed as the Solar System orbits the Milky Way",
        "Milky Way center (galactocentric frame)",
    ),
    ReferenceFrame.CMB: FrameInfo(
        "CMB Rest Frame", "CMB",
        "Speed relative to the cosmic microwave background",
        "Cosmic Microwave Background rest frame",
    ),
}


# --- Frame-specific metadata ---

@dataclass(frozen=True, slots=True)
class SpinMetadata:
    latitude_deg: float
    parallel_radius_km: float


@dataclass(frozen=True, slots=True)
class OrbitMetadata:
    eccentricity: float
    perihelion_velocity_kms: float
    aphelion_velocity_kms: float


@dataclass(frozen=True, slots=True)
class GalaxyMetadata:
    distance_to_galactic_center_ly: float
    orbital_period_years: float


@dataclass(frozen=True, slots=True)
class CMBMetadata:
    reference: CMBReference
    direction_galactic_longitude: float  # degrees
    direction_galactic_latitude: float  # degrees

    @property
    def apex_vector(self) -> np.ndarray:
        """Unit vector towards the dipole apex, galactic frame."""
        return galactic_to_unit_vector(
            self.direction_galactic_longitude, self.direction_galactic_latitude
        )


FrameMetadata = Union[SpinMetadata, OrbitMetadata, GalaxyMetadata, CMBMetadata]


@dataclass(frozen=True, slots=True)
class FrameVelocity:
    """Speed of the observer in one reference frame."""

    frame: ReferenceFrame
    velocity_kms: float
    has_significant_uncertainty: bool
    metadata: FrameMetadata
    uncertainty_kms: Optional[float] = None

    @property
    def info(self) -> FrameInfo:
        return FRAME_INFO[self.frame]


@dataclass(frozen=True, slots=True)
class FrameDistance:
    """Path length traveled in one frame over a duration."""

    frame: ReferenceFrame
    duration_seconds: float
    path_length_km: float
    tier: DistanceTier = DistanceTier.RECTILINEAR
