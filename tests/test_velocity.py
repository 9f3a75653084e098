from __future__ import annotations

import math

import numpy as np
import pytest

from core.coordinate_transforms import parallel_radius
from core.errors import InvalidInputError, InvalidLatitudeError
from core.frames import CMBReference, GalaxyMetadata, OrbitMetadata, ReferenceFrame
from core.velocity import (
    APHELION_VELOCITY_KMS,
    PERIHELION_VELOCITY_KMS,
    all_frame_velocities,
    cmb_velocity,
    frame_velocity,
    galaxy_velocity,
    is_significant_uncertainty,
    orbit_velocity,
    rectilinear_distance,
    spin_velocity,
    spin_velocity_kms,
)

LATITUDES = np.linspace(-90.0, 90.0, 73)


def test_equator_spin_speed():
    assert spin_velocity_kms(0.0) == pytest.approx(0.4651, abs=1e-4)


@pytest.mark.parametrize("lat", [90.0, -90.0, 90, -90])
def test_spin_is_exactly_zero_at_poles(lat):
    assert spin_velocity_kms(lat) == 0.0
    assert parallel_radius(lat) == 0.0


@pytest.mark.parametrize("lat", LATITUDES)
def test_spin_is_symmetric(lat):
    assert spin_velocity_kms(lat) == spin_velocity_kms(-lat)


def test_spin_decreases_towards_pole():
    speeds = [spin_velocity_kms(lat) for lat in np.linspace(0.0, 90.0, 46)]
    assert all(a > b for a, b in zip(speeds, speeds[1:]))


@pytest.mark.parametrize(
    "lat", [90.0001, -90.0001, 180.0, math.nan, math.inf, -math.inf, "45", True, None]
)
def test_invalid_latitude_rejected(lat):
    with pytest.raises(InvalidLatitudeError):
        spin_velocity(lat)
    with pytest.raises(ValueError):
        frame_velocity(ReferenceFrame.ORBIT, lat)


@pytest.mark.parametrize("lat", [-90.0, -33.3, 0.0, 51.5, 90.0])
def test_outer_frames_ignore_latitude(lat):
    frames = all_frame_velocities(lat)
    assert list(frames) == list(ReferenceFrame)
    assert 29.0 < frames[ReferenceFrame.ORBIT].velocity_kms < 31.0
    assert 200.0 < frames[ReferenceFrame.GALAXY].velocity_kms < 250.0
    assert 350.0 < frames[ReferenceFrame.CMB].velocity_kms < 400.0
    assert frames[ReferenceFrame.ORBIT] == orbit_velocity()
    assert frames[ReferenceFrame.GALAXY] == galaxy_velocity()


def test_orbit_metadata_brackets_mean_speed():
    meta = orbit_velocity().metadata
    assert isinstance(meta, OrbitMetadata)
    assert meta.aphelion_velocity_kms < 29.78 < meta.perihelion_velocity_kms
    assert PERIHELION_VELOCITY_KMS == pytest.approx(30.282, abs=0.005)
    assert APHELION_VELOCITY_KMS == pytest.approx(29.287, abs=0.005)
    assert orbit_velocity().has_significant_uncertainty is False


def test_galaxy_has_significant_uncertainty():
    galaxy = galaxy_velocity()
    assert isinstance(galaxy.metadata, GalaxyMetadata)
    assert galaxy.uncertainty_kms == 15.0
    assert galaxy.has_significant_uncertainty is True


def test_cmb_reference_changes_magnitude():
    ssb = cmb_velocity(CMBReference.SSB)
    local = cmb_velocity("local-group")
    assert ssb.velocity_kms == pytest.approx(369.82)
    assert local.velocity_kms == pytest.approx(620.0)
    assert local.uncertainty_kms > ssb.uncertainty_kms
    assert ssb.metadata.direction_galactic_longitude == pytest.approx(264.021)
    with pytest.raises(InvalidInputError):
        cmb_velocity("andromeda")


def test_cmb_apex_vector_points_at_dipole():
    apex = cmb_velocity(CMBReference.SSB).metadata.apex_vector
    assert np.linalg.norm(apex) == pytest.approx(1.0)
    assert apex[2] == pytest.approx(math.sin(math.radians(48.253)))
    assert math.degrees(math.atan2(apex[1], apex[0])) % 360.0 == pytest.approx(264.021)


def test_frame_info_labels():
    frames = all_frame_velocities(0.0)
    assert [v.info.short_name for v in frames.values()] == ["Spin", "Orbit", "Galaxy", "CMB"]


@pytest.mark.parametrize(
    "value, sigma, threshold, expected",
    [
        (220.0, 15.0, 0.0, True),
        (29.78, None, 0.0, False),
        (10.0, 0.0, 0.0, False),
        (220.0, 15.0, 0.1, False),
        (369.82, 0.11, 0.0, True),
    ],
)
def test_is_significant_uncertainty(value, sigma, threshold, expected):
    assert is_significant_uncertainty(value, sigma, threshold) is expected


def test_rectilinear_distance_scales_with_duration():
    velocity = galaxy_velocity()
    one = rectilinear_distance(velocity, 1000.0)
    two = rectilinear_distance(velocity, 2000.0)
    assert two.path_length_km == 2.0 * one.path_length_km
    assert one.path_length_km == 220.0 * 1000.0
    with pytest.raises(InvalidInputError):
        rectilinear_distance(velocity, math.nan)
