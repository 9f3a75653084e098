from __future__ import annotations

import math

import numpy as np
import pytest

from core.bodies import BodyId, body_physical
from core.errors import InvalidInputError, MappingValidationError
from utils.constants import AU_KM
from visualization.scale import (
    DISTANCE_LOG,
    DISTANCE_PIECEWISE,
    RENDER_PRESETS,
    SIZE_MASS_COMPARISON,
    SIZE_NORMALIZED,
    SIZE_PHYSICAL,
    SIZE_VISIBLE,
    ClampedMinimum,
    CustomMetric,
    LinearScale,
    Log10Scale,
    LogCompress,
    NormalizedToJupiter,
    PhysicalSize,
    PiecewiseScale,
    PresetName,
    RelativeToMercury,
    RelativeToSun,
    RenderMapping,
    SizeMetric,
    create_mapping,
    create_physical_mapping,
    create_validated_mapping,
    get_preset,
    map_distance,
    map_position,
    map_radius,
    needs_size_based_offset,
    validate_mapping,
)

AU_GRID = np.linspace(0.0, 120.0, 2401)


def test_linear_distance():
    assert map_distance(2.5, LinearScale(3.0)) == 7.5
    assert map_distance(0.0, LinearScale(3.0)) == 0.0


@pytest.mark.parametrize(
    "scale", [DISTANCE_LOG, DISTANCE_PIECEWISE, Log10Scale(0.1, 10.0)]
)
def test_compressed_scales_are_strictly_increasing(scale):
    assert map_distance(0.0, scale) == 0.0
    mapped = np.array([map_distance(au, scale) for au in AU_GRID])
    assert np.all(np.diff(mapped) > 0)


def test_log10_is_odd():
    assert map_distance(-3.0, DISTANCE_LOG) == -map_distance(3.0, DISTANCE_LOG)


@pytest.mark.parametrize(
    "scale",
    [
        DISTANCE_PIECEWISE,
        PiecewiseScale(0.5, 10.0, 4.0, 1.0),
        PiecewiseScale(35.0, 0.3, 0.2, 8.0),
    ],
)
def test_piecewise_is_continuous_at_seam(scale):
    inner = scale.inner_radius_au
    below = map_distance(inner, scale)
    above = map_distance(math.nextafter(inner, math.inf), scale)
    assert below == inner * scale.inner_scale
    assert above == pytest.approx(below, abs=1e-9)
    assert above >= below


@pytest.mark.parametrize(
    "factory, field",
    [
        (lambda: LinearScale(0.0), "au_to_scene"),
        (lambda: Log10Scale(-1.0, 3.0), "scale"),
        (lambda: PiecewiseScale(2.0, 2.0, math.nan, 2.5), "outer_log_scale"),
        (lambda: PhysicalSize(math.inf), "km_to_scene"),
        (lambda: RelativeToMercury(0.0), "mercury_radius_scene"),
    ],
)
def test_scale_parameters_validated(factory, field):
    with pytest.raises(MappingValidationError) as excinfo:
        factory()
    assert excinfo.value.field == field


def test_physical_radius():
    earth = map_radius(BodyId.EARTH, SIZE_PHYSICAL)
    assert earth == pytest.approx(6371.0 * 3.0 / AU_KM)


def test_relative_sizes_keep_true_ratios():
    sun = RelativeToSun(0.25)
    assert map_radius(BodyId.SUN, sun) == 0.25
    mercury = RelativeToMercury(0.02)
    assert map_radius("Mercury", mercury) == pytest.approx(0.02)
    ratio = map_radius(BodyId.JUPITER, mercury) / map_radius(BodyId.EARTH, mercury)
    assert ratio == pytest.approx(69911.0 / 6371.0)


def test_normalized_sizes_reduce_the_sun():
    assert map_radius(BodyId.JUPITER, SIZE_NORMALIZED) == pytest.approx(0.06)
    sun = map_radius(BodyId.SUN, SIZE_NORMALIZED)
    assert sun == pytest.approx(0.06 * 696340.0 / 69911.0 * 0.3)


def test_clamped_minimum():
    mercury = map_radius(BodyId.MERCURY, SIZE_VISIBLE)
    assert mercury == 0.008
    jupiter = map_radius(BodyId.JUPITER, SIZE_VISIBLE)
    assert jupiter == map_radius(BodyId.JUPITER, SIZE_NORMALIZED)
    nested = ClampedMinimum(0.05, ClampedMinimum(0.01, SIZE_NORMALIZED))
    assert map_radius(BodyId.MOON, nested) == 0.05


def test_custom_metric_mass():
    earth = map_radius(BodyId.EARTH, SIZE_MASS_COMPARISON)
    assert earth == pytest.approx(0.05 * math.log10(1.5) * 1.2)
    assert map_radius(BodyId.JUPITER, SIZE_MASS_COMPARISON) > map_radius(
        BodyId.SATURN, SIZE_MASS_COMPARISON
    )


@pytest.mark.parametrize(
    "metric", [SizeMetric.RADIUS, SizeMetric.DIAMETER, SizeMetric.VOLUME]
)
def test_custom_metric_geometric_metrics_agree(metric):
    # Radius, diameter and cube-rooted volume give the same radius ratio
    scale = CustomMetric(metric, BodyId.EARTH, 0.1)
    expected = 0.1 * 58232.0 / 6371.0
    assert map_radius(BodyId.SATURN, scale) == pytest.approx(expected)


def test_custom_metric_mass_without_compression():
    scale = CustomMetric(SizeMetric.MASS, BodyId.EARTH, 1.0)
    ratio = body_physical(BodyId.JUPITER).mass_kg / body_physical(BodyId.EARTH).mass_kg
    assert map_radius(BodyId.JUPITER, scale) == pytest.approx(ratio ** (1.0 / 3.0))


def test_log_compress_requires_positive_parameters():
    with pytest.raises(MappingValidationError):
        LogCompress(0.0, 1.0)


def test_map_position_preserves_direction():
    vec = np.array([3.0, 4.0, 0.0])
    mapped = map_position(vec, DISTANCE_LOG)
    assert np.linalg.norm(mapped) == pytest.approx(map_distance(5.0, DISTANCE_LOG))
    # ecliptic (x, y, z) -> scene (x, z, -y)
    assert mapped[1] == 0.0
    assert mapped[0] / -mapped[2] == pytest.approx(3.0 / 4.0)
    assert np.array_equal(map_position(np.zeros(3), DISTANCE_LOG), np.zeros(3))


def test_presets():
    assert set(RENDER_PRESETS) == set(PresetName)
    assert get_preset("schoolModel") == RenderMapping(DISTANCE_LOG, SIZE_NORMALIZED)
    assert get_preset(PresetName.EXPLORER).size_scale == SIZE_VISIBLE
    with pytest.raises(InvalidInputError):
        get_preset("fisheye")


@pytest.mark.parametrize("preset", list(PresetName))
def test_every_preset_validates(preset):
    validate_mapping(get_preset(preset))


def test_only_true_sizes_needs_stacking():
    stacked = {p for p in PresetName if needs_size_based_offset(get_preset(p))}
    assert stacked == {PresetName.TRUE_SIZES}
    assert needs_size_based_offset(create_mapping(DISTANCE_PIECEWISE, RelativeToSun(0.25)))


def test_physical_size_requires_linear_distance():
    with pytest.raises(MappingValidationError) as excinfo:
        validate_mapping(RenderMapping(DISTANCE_LOG, SIZE_PHYSICAL))
    assert excinfo.value.field == "distance_scale"


def test_physical_size_must_match_distance_scale():
    with pytest.raises(MappingValidationError) as excinfo:
        create_validated_mapping(LinearScale(3.0), PhysicalSize(3.1 / AU_KM))
    assert excinfo.value.field == "size_scale"


def test_create_physical_mapping():
    mapping = create_physical_mapping(3.0)
    assert mapping == get_preset(PresetName.TRUE_PHYSICAL)
    tiny = create_physical_mapping(1e-6)
    assert tiny.size_scale.km_to_scene == pytest.approx(1e-6 / AU_KM)


def test_non_physical_sizes_skip_distance_check():
    mapping = create_validated_mapping(DISTANCE_LOG, NormalizedToJupiter(0.1))
    assert mapping.size_scale.jupiter_radius_scene == 0.1
