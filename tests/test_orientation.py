from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest
from numpy.testing import assert_allclose

from core.bodies import BodyId
from core.coordinate_transforms import ecliptic_to_eqj
from core.errors import InvalidInputError
from core.orientation import (
    IAU_ROTATION_MODELS,
    compute_body_orientation,
    earth_rotation_angle_deg,
    fallback_orientation,
    normalize_degrees,
    prime_meridian_direction,
)
from utils.time_utils import datetime_to_gmst


@pytest.mark.parametrize("body", list(BodyId))
def test_every_body_has_an_orientation(provider, epochs, body):
    for epoch in epochs:
        orientation = provider.get_body_orientation(body, epoch)
        assert np.linalg.norm(orientation.north_pole) == pytest.approx(1.0)
        assert 0.0 <= orientation.rotation_angle_deg < 360.0


def test_earth_pole_tilted_by_obliquity(j2000):
    orientation = compute_body_orientation(BodyId.EARTH, j2000)
    tilt = math.degrees(math.acos(orientation.north_pole[2]))
    assert tilt == pytest.approx(23.439, abs=0.01)
    # Scene up is the ecliptic pole
    assert orientation.north_pole_scene[1] == pytest.approx(orientation.north_pole[2])


def test_earth_rotation_tracks_gmst(epochs):
    for epoch in epochs:
        expected = normalize_degrees(math.degrees(datetime_to_gmst(epoch)) - 90.0)
        orientation = compute_body_orientation(BodyId.EARTH, epoch)
        assert orientation.rotation_angle_deg == pytest.approx(expected)
        assert earth_rotation_angle_deg(epoch) == pytest.approx(expected)


def test_retrograde_rotators_keep_iau_north(j2000):
    # IAU poles lie north of the invariable plane; retrograde spin shows as a
    # decreasing prime-meridian angle instead
    venus = compute_body_orientation(BodyId.VENUS, j2000)
    uranus = compute_body_orientation(BodyId.URANUS, j2000)
    assert venus.sidereal_period_hours < 0
    assert uranus.sidereal_period_hours < 0
    assert venus.north_pole[2] > 0
    pole_z = math.cos(math.radians(180.0 - 97.77))
    assert uranus.north_pole[2] == pytest.approx(pole_z, abs=0.02)

    later = compute_body_orientation(BodyId.VENUS, j2000 + timedelta(hours=1))
    step = (later.rotation_angle_deg - venus.rotation_angle_deg) % 360.0
    assert step == pytest.approx(360.0 - 1.4813688 / 24.0, abs=1e-6)


def test_moon_follows_iau_model(j2000):
    assert BodyId.MOON in IAU_ROTATION_MODELS
    orientation = compute_body_orientation(BodyId.MOON, j2000)
    # Dominant E1 term of the lunar prime meridian
    expected_w = 38.3213 + 3.5610 * math.sin(math.radians(125.045))
    assert orientation.rotation_angle_deg == pytest.approx(expected_w, abs=0.2)
    # Cassini state: the lunar pole sits about 1.54 deg from the ecliptic pole
    tilt = math.degrees(math.acos(orientation.north_pole[2]))
    assert tilt == pytest.approx(1.54, abs=0.15)


def test_moon_near_side_faces_earth(provider):
    start = datetime(2024, 3, 1, tzinfo=timezone.utc)
    for day in range(0, 30, 3):
        epoch = start + timedelta(days=day)
        to_earth = -provider.get_geocentric_state(BodyId.MOON, epoch).position
        to_earth = to_earth / np.linalg.norm(to_earth)
        meridian = prime_meridian_direction(BodyId.MOON, epoch)
        # optical libration stays within about 8 deg in longitude and 7 in latitude
        angle = math.degrees(math.acos(np.clip(np.dot(meridian, to_earth), -1.0, 1.0)))
        assert angle < 12.0


def test_earth_prime_meridian_tracks_gmst(epochs):
    for epoch in epochs:
        meridian = ecliptic_to_eqj(prime_meridian_direction(BodyId.EARTH, epoch))
        ra = math.atan2(meridian[1], meridian[0]) % (2.0 * math.pi)
        gap = math.remainder(ra - datetime_to_gmst(epoch), 2.0 * math.pi)
        assert abs(gap) < 0.02


def test_missing_model_uses_fallback(j2000):
    orientation = compute_body_orientation(BodyId.MOON, j2000, models={})
    tilt = math.radians(6.68)
    assert_allclose(orientation.north_pole, [0.0, math.sin(tilt), math.cos(tilt)])
    assert orientation.rotation_angle_deg == 0.0
    with pytest.raises(InvalidInputError):
        prime_meridian_direction(BodyId.MOON, j2000, models={})


def test_fallback_advances_with_sidereal_period():
    epoch = datetime(2000, 1, 2, 0, 0, tzinfo=timezone.utc)  # half a day after J2000
    orientation = fallback_orientation(BodyId.MARS, epoch)
    expected = normalize_degrees(360.0 / 24.6229 * 12.0)
    assert orientation.rotation_angle_deg == pytest.approx(expected)


@pytest.mark.parametrize(
    "angle, expected", [(0.0, 0.0), (360.0, 0.0), (-90.0, 270.0), (725.0, 5.0)]
)
def test_normalize_degrees(angle, expected):
    assert normalize_degrees(angle) == pytest.approx(expected)
    assert normalize_degrees(-1e-17) == 0.0
