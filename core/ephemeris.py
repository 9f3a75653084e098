"""Ephemeris provider backed by astropy's built-in solar-system ephemeris.

Planetary theory is delegated to ``astropy.coordinates.get_body_barycentric``
with the ``builtin`` ephemeris (ERFA epv00 for Earth and Sun, plan94 for
the planets, a Meeus series for the Moon). This module only does frame
bookkeeping: differencing barycentric vectors and rotating ICRS/EQJ
vectors into the ecliptic J2000 frame used everywhere downstream.

Nothing is cached between calls; callers that want memoization own it.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol, Sequence, Union, runtime_checkable

import numpy as np
from astropy import units as u
from astropy.coordinates import get_body_barycentric
from erfa import ErfaWarning

from core.bodies import BodyId
from core.coordinate_transforms import ecliptic_longitude_deg, eqj_to_ecliptic
from core.errors import EphemerisError
from core.orientation import BodyOrientation, compute_body_orientation
from utils.time_utils import parse_date_input, to_astropy_time

logger = logging.getLogger(__name__)

SYNODIC_MONTH_DAYS: float = 29.53058867

_ASTROPY_BODY_NAMES: dict[BodyId, str] = {
    BodyId.SUN: "sun",
    BodyId.MERCURY: "mercury",
    BodyId.VENUS: "venus",
    BodyId.EARTH: "earth",
    BodyId.MOON: "moon",
    BodyId.MARS: "mars",
    BodyId.JUPITER: "jupiter",
    BodyId.SATURN: "saturn",
    BodyId.URANUS: "uranus",
    BodyId.NEPTUNE: "neptune",
}


class EphemerisFrame(str, Enum):
    """Axes of a returned state vector."""

    ECLIPJ2000 = "ECLIPJ2000"
    EQJ = "EQJ"


@dataclass(frozen=True, slots=True)
class StateVector:
    """Position of a body relative to a reference body at an epoch."""

    position: np.ndarray  # [x, y, z] AU
    epoch: datetime
    frame: EphemerisFrame
    reference_body: BodyId

    @property
    def distance_au(self) -> float:
        return float(np.linalg.norm(self.position))


@dataclass(frozen=True, slots=True)
class MoonPhaseInfo:
    """Named lunar phase for a phase fraction."""

    phase: float  # [0, 1): 0 new, 0.5 full
    name: str
    illumination: float  # [0, 1]
    age_days: float


# Upper bounds of each named phase, in days since new moon.
_PHASE_NAMES: tuple[tuple[float, str], ...] = (
    (1.85, "New Moon"),
    (5.53, "Waxing Crescent"),
    (9.22, "First Quarter"),
    (12.91, "Waxing Gibbous"),
    (16.61, "Full Moon"),
    (20.30, "Waning Gibbous"),
    (23.99, "Last Quarter"),
    (27.68, "Waning Crescent"),
)


@runtime_checkable
class EphemerisProvider(Protocol):
    """Source of body positions and orientations."""

    def get_heliocentric_state(
        self, body: Union[str, BodyId], epoch: datetime,
        frame: EphemerisFrame = EphemerisFrame.ECLIPJ2000,
    ) -> StateVector: ...

    def get_geocentric_state(
        self, body: Union[str, BodyId], epoch: datetime,
        frame: EphemerisFrame = EphemerisFrame.ECLIPJ2000,
    ) -> StateVector: ...

    def get_body_orientation(
        self, body: Union[str, BodyId], epoch: datetime
    ) -> BodyOrientation: ...

    def moon_phase(self, epoch: datetime) -> float: ...


class AstropyEphemerisProvider:
    """EphemerisProvider over astropy's built-in ephemeris."""

    name = "astropy builtin"
    ephemeris = "builtin"

    def get_heliocentric_state(
        self,
        body: Union[str, BodyId],
        epoch: datetime,
        frame: EphemerisFrame = EphemerisFrame.ECLIPJ2000,
    ) -> StateVector:
        """Position of ``body`` relative to the Sun, in AU."""
        body = BodyId.parse(body)
        epoch = parse_date_input(epoch)
        if body is BodyId.SUN:
            position = np.zeros(3)
        else:
            position = self._relative_eqj(body, BodyId.SUN, epoch)
        return self._state(position, epoch, frame, BodyId.SUN)

    def get_geocentric_state(
        self,
        body: Union[str, BodyId],
        epoch: datetime,
        frame: EphemerisFrame = EphemerisFrame.ECLIPJ2000,
    ) -> StateVector:
        """Position of ``body`` relative to Earth, in AU."""
        body = BodyId.parse(body)
        epoch = parse_date_input(epoch)
        if body is BodyId.EARTH:
            position = np.zeros(3)
        else:
            position = self._relative_eqj(body, BodyId.EARTH, epoch)
        return self._state(position, epoch, frame, BodyId.EARTH)

    def get_heliocentric_positions(
        self,
        body: Union[str, BodyId],
        epochs: Sequence[datetime],
        frame: EphemerisFrame = EphemerisFrame.ECLIPJ2000,
    ) -> np.ndarray:
        """Vectorized heliocentric positions, shape (N, 3) in AU."""
        body = BodyId.parse(body)
        if len(epochs) == 0:
            return np.empty((0, 3))
        if body is BodyId.SUN:
            return np.zeros((len(epochs), 3))
        positions = self._relative_eqj(body, BodyId.SUN, list(epochs)).T
        if EphemerisFrame(frame) is EphemerisFrame.ECLIPJ2000:
            positions = eqj_to_ecliptic(positions)
        return positions

    def get_body_orientation(
        self, body: Union[str, BodyId], epoch: datetime
    ) -> BodyOrientation:
        return compute_body_orientation(body, parse_date_input(epoch))

    def moon_phase(self, epoch: datetime) -> float:
        """Phase fraction from Moon-Sun elongation in ecliptic longitude.

        0 is new moon, 0.5 full moon, approaching 1 the next new moon.
        """
        epoch = parse_date_input(epoch)
        moon = self.get_geocentric_state(BodyId.MOON, epoch).position
        sun = self.get_geocentric_state(BodyId.SUN, epoch).position
        elongation = ecliptic_longitude_deg(moon) - ecliptic_longitude_deg(sun)
        phase = (elongation % 360.0) / 360.0
        return 0.0 if phase >= 1.0 else phase

    # -------------------------------------------------------------------------

    def _state(
        self,
        position_eqj: np.ndarray,
        epoch: datetime,
        frame: EphemerisFrame,
        reference: BodyId,
    ) -> StateVector:
        frame = EphemerisFrame(frame)
        if frame is EphemerisFrame.ECLIPJ2000:
            position = eqj_to_ecliptic(position_eqj)
        else:
            position = np.asarray(position_eqj, dtype=np.float64)
        position.setflags(write=False)
        return StateVector(
            position=position, epoch=epoch, frame=frame, reference_body=reference
        )

    def _relative_eqj(
        self,
        body: BodyId,
        reference: BodyId,
        epoch: Union[datetime, list[datetime]],
    ) -> np.ndarray:
        """``body - reference`` barycentric vectors in AU, EQJ axes."""
        logger.debug("Ephemeris query: %s relative to %s", body, reference)
        try:
            time = to_astropy_time(epoch)
            with warnings.catch_warnings():
                # ERFA flags UTC epochs outside the leap-second table as dubious
                warnings.simplefilter("ignore", ErfaWarning)
                target = get_body_barycentric(
                    _ASTROPY_BODY_NAMES[body], time, ephemeris=self.ephemeris
                )
                origin = get_body_barycentric(
                    _ASTROPY_BODY_NAMES[reference], time, ephemeris=self.ephemeris
                )
            return (target - origin).xyz.to_value(u.au)
        except Exception as exc:
            logger.error(
                "Ephemeris engine failed for %s relative to %s: %s",
                body, reference, exc,
            )
            raise EphemerisError(
                f"Ephemeris lookup failed for {body}: {exc}",
                body=body.value,
                epoch=epoch,
            ) from exc


def describe_moon_phase(phase: float) -> MoonPhaseInfo:
    """Name and illuminated fraction for a phase fraction in [0, 1)."""
    phase = phase % 1.0
    age = phase * SYNODIC_MONTH_DAYS
    name = "New Moon"
    for upper, label in _PHASE_NAMES:
        if age < upper:
            name = label
            break
    illumination = (1.0 - np.cos(2.0 * np.pi * phase)) / 2.0
    return MoonPhaseInfo(
        phase=phase, name=name, illumination=float(illumination), age_days=age
    )


_DEFAULT_PROVIDER: Optional[AstropyEphemerisProvider] = None


def default_provider() -> AstropyEphemerisProvider:
    """Process-wide stateless provider instance."""
    global _DEFAULT_PROVIDER
    if _DEFAULT_PROVIDER is None:
        _DEFAULT_PROVIDER = AstropyEphemerisProvider()
    return _DEFAULT_PROVIDER
