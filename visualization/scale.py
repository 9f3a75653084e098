"""Scale mapping from physical distances and radii to scene units.

Distance and size scales are independent tagged variants. A RenderMapping
pairs one of each; the named presets are the pairings the scene is built
and tested against.

Distance variants:
- LinearScale: au * au_to_scene
- Log10Scale: sign(au) * log10(1 + |au| * scale) * multiplier
- PiecewiseScale: linear up to inner_radius_au, log-compressed beyond,
  offset so the two pieces meet at the seam

Size variants:
- PhysicalSize: radius_km * km_to_scene (true scale; pair with linear)
- RelativeToSun / RelativeToMercury / NormalizedToJupiter: true ratios
  to a reference body with an exaggerated baseline
- ClampedMinimum: another size scale with a visibility floor
- CustomMetric: sphere size from radius, diameter, volume or mass
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

import numpy as np

from core.bodies import BodyId, body_physical
from core.coordinate_transforms import ecliptic_to_scene
from core.errors import InvalidInputError, MappingValidationError
from utils.constants import AU_KM

logger = logging.getLogger(__name__)

# Scene units per AU for the true-physical linear scale.
AU_TO_SCENE: float = 3.0
# Wide enough that Mercury's orbit clears the Sun's exaggerated radius.
AU_TO_SCENE_PLANET_RATIO: float = 20.0

JUPITER_RADIUS_SCENE_NORMALIZED: float = 0.06
MERCURY_RADIUS_SCENE_EXAGGERATED: float = 0.02
MERCURY_RADIUS_SCENE_SCHOLAR: float = 0.025
# School models draw the Sun at about 3x Jupiter instead of 10x.
NORMALIZED_SUN_REDUCTION: float = 0.3
MIN_VISIBLE_RADIUS_SCENE: float = 0.008

_PHYSICAL_TOLERANCE: float = 1e-9


def _require_positive(name: str, value: float) -> None:
    if not (isinstance(value, (int, float)) and math.isfinite(value) and value > 0):
        raise MappingValidationError(
            f"{name} must be a finite positive number, got {value!r}", field=name
        )


# =============================================================================
# Distance Scales
# =============================================================================

@dataclass(frozen=True, slots=True)
class LinearScale:
    au_to_scene: float

    def __post_init__(self) -> None:
        _require_positive("au_to_scene", self.au_to_scene)


@dataclass(frozen=True, slots=True)
class Log10Scale:
    scale: float
    multiplier: float

    def __post_init__(self) -> None:
        _require_positive("scale", self.scale)
        _require_positive("multiplier", self.multiplier)


@dataclass(frozen=True, slots=True)
class PiecewiseScale:
    inner_radius_au: float
    inner_scale: float
    outer_log_scale: float
    outer_multiplier: float

    def __post_init__(self) -> None:
        _require_positive("inner_radius_au", self.inner_radius_au)
        _require_positive("inner_scale", self.inner_scale)
        _require_positive("outer_log_scale", self.outer_log_scale)
        _require_positive("outer_multiplier", self.outer_multiplier)


DistanceScale = Union[LinearScale, Log10Scale, PiecewiseScale]


# =============================================================================
# Size Scales
# =============================================================================

class SizeMetric(str, Enum):
    RADIUS = "radius"
    DIAMETER = "diameter"
    VOLUME = "volume"
    MASS = "mass"


@dataclass(frozen=True, slots=True)
class PhysicalSize:
    km_to_scene: float

    def __post_init__(self) -> None:
        _require_positive("km_to_scene", self.km_to_scene)


@dataclass(frozen=True, slots=True)
class RelativeToSun:
    sun_radius_scene: float

    def __post_init__(self) -> None:
        _require_positive("sun_radius_scene", self.sun_radius_scene)


@dataclass(frozen=True, slots=True)
class RelativeToMercury:
    mercury_radius_scene: float

    def __post_init__(self) -> None:
        _require_positive("mercury_radius_scene", self.mercury_radius_scene)


@dataclass(frozen=True, slots=True)
class NormalizedToJupiter:
    jupiter_radius_scene: float

    def __post_init__(self) -> None:
        _require_positive("jupiter_radius_scene", self.jupiter_radius_scene)


@dataclass(frozen=True, slots=True)
class ClampedMinimum:
    min_radius_scene: float
    base_scale: "SizeScale"

    def __post_init__(self) -> None:
        _require_positive("min_radius_scene", self.min_radius_scene)


@dataclass(frozen=True, slots=True)
class LogCompress:
    scale: float
    multiplier: float

    def __post_init__(self) -> None:
        _require_positive("scale", self.scale)
        _require_positive("multiplier", self.multiplier)


@dataclass(frozen=True, slots=True)
class CustomMetric:
    metric: SizeMetric
    reference_body: BodyId
    reference_radius_scene: float
    log_compress: Optional[LogCompress] = None

    def __post_init__(self) -> None:
        _require_positive("reference_radius_scene", self.reference_radius_scene)


SizeScale = Union[
    PhysicalSize,
    RelativeToSun,
    RelativeToMercury,
    NormalizedToJupiter,
    ClampedMinimum,
    CustomMetric,
]


@dataclass(frozen=True, slots=True)
class RenderMapping:
    distance_scale: DistanceScale
    size_scale: SizeScale


# =============================================================================
# Mapping Functions
# =============================================================================

def map_distance(au: float, scale: DistanceScale) -> float:
    """Map a distance in AU to scene units.

    Log10 and piecewise scales satisfy f(0) = 0 and are strictly
    increasing for au >= 0; piecewise is continuous at its seam.
    """
    if isinstance(scale, LinearScale):
        return au * scale.au_to_scene
    if isinstance(scale, Log10Scale):
        sign = 1.0 if au >= 0 else -1.0
        return sign * math.log10(1.0 + abs(au) * scale.scale) * scale.multiplier
    if isinstance(scale, PiecewiseScale):
        if au <= scale.inner_radius_au:
            return au * scale.inner_scale
        inner = scale.inner_radius_au * scale.inner_scale
        outer = au - scale.inner_radius_au
        return inner + math.log10(1.0 + outer * scale.outer_log_scale) * scale.outer_multiplier
    raise TypeError(f"Unsupported distance scale: {type(scale).__name__}")


def map_radius(body: Union[str, BodyId], scale: SizeScale) -> float:
    """Radius of ``body`` in scene units under ``scale``."""
    body = BodyId.parse(body)
    radius_km = body_physical(body).radius_mean_km

    if isinstance(scale, PhysicalSize):
        return radius_km * scale.km_to_scene
    if isinstance(scale, RelativeToSun):
        return scale.sun_radius_scene * radius_km / body_physical(BodyId.SUN).radius_mean_km
    if isinstance(scale, RelativeToMercury):
        return (
            scale.mercury_radius_scene
            * radius_km / body_physical(BodyId.MERCURY).radius_mean_km
        )
    if isinstance(scale, NormalizedToJupiter):
        size = (
            scale.jupiter_radius_scene
            * radius_km / body_physical(BodyId.JUPITER).radius_mean_km
        )
        if body is BodyId.SUN:
            size *= NORMALIZED_SUN_REDUCTION
        return size
    if isinstance(scale, ClampedMinimum):
        return max(map_radius(body, scale.base_scale), scale.min_radius_scene)
    if isinstance(scale, CustomMetric):
        return _map_custom_metric(body, scale)
    raise TypeError(f"Unsupported size scale: {type(scale).__name__}")


def _metric_value(body: BodyId, metric: SizeMetric) -> float:
    physical = body_physical(body)
    if metric is SizeMetric.RADIUS:
        return physical.radius_mean_km
    if metric is SizeMetric.DIAMETER:
        return 2.0 * physical.radius_mean_km
    if metric is SizeMetric.VOLUME:
        return 4.0 / 3.0 * math.pi * physical.radius_mean_km ** 3
    return physical.mass_kg


def _map_custom_metric(body: BodyId, scale: CustomMetric) -> float:
    metric = SizeMetric(scale.metric)
    ratio = _metric_value(body, metric) / _metric_value(
        BodyId.parse(scale.reference_body), metric
    )
    # Volume and mass map to radius through a cube root
    if metric in (SizeMetric.VOLUME, SizeMetric.MASS):
        ratio = ratio ** (1.0 / 3.0)
    if scale.log_compress is not None:
        ratio = math.log10(1.0 + ratio * scale.log_compress.scale) * scale.log_compress.multiplier
    return scale.reference_radius_scene * ratio


def map_position(position_au: np.ndarray, scale: DistanceScale) -> np.ndarray:
    """Map an ecliptic AU vector to a scene-space vector.

    The direction is preserved and the length goes through map_distance.
    The zero vector maps to the origin.
    """
    position_au = np.asarray(position_au, dtype=np.float64)
    distance_au = float(np.linalg.norm(position_au))
    if distance_au == 0.0:
        return np.zeros(3)
    direction = position_au / distance_au
    return ecliptic_to_scene(direction * map_distance(distance_au, scale))


def needs_size_based_offset(mapping: RenderMapping) -> bool:
    """Whether planets must be stacked outward to avoid overlaps.

    True for exaggerated true-ratio sizes combined with compressed distances.
    """
    exaggerated = isinstance(mapping.size_scale, (RelativeToMercury, RelativeToSun))
    compressed = isinstance(mapping.distance_scale, (Log10Scale, PiecewiseScale))
    return exaggerated and compressed


def is_physical_mapping(mapping: RenderMapping) -> bool:
    return isinstance(mapping.distance_scale, LinearScale) and isinstance(
        mapping.size_scale, PhysicalSize
    )


# =============================================================================
# Presets
# =============================================================================

class PresetName(str, Enum):
    TRUE_PHYSICAL = "truePhysical"
    PLANET_RATIO = "planetRatio"
    SCHOOL_MODEL = "schoolModel"
    TRUE_SIZES = "trueSizes"
    EXPLORER = "explorer"
    MASS_COMPARISON = "massComparison"


DISTANCE_LINEAR = LinearScale(au_to_scene=AU_TO_SCENE)
DISTANCE_LINEAR_RATIO = LinearScale(au_to_scene=AU_TO_SCENE_PLANET_RATIO)
DISTANCE_LOG = Log10Scale(scale=2.0, multiplier=3.0)
DISTANCE_PIECEWISE = PiecewiseScale(
    inner_radius_au=2.0, inner_scale=2.0, outer_log_scale=1.5, outer_multiplier=2.5
)

SIZE_PHYSICAL = PhysicalSize(km_to_scene=AU_TO_SCENE / AU_KM)
SIZE_RATIO_MERCURY = RelativeToMercury(mercury_radius_scene=MERCURY_RADIUS_SCENE_EXAGGERATED)
SIZE_RATIO_SCHOLAR = RelativeToMercury(mercury_radius_scene=MERCURY_RADIUS_SCENE_SCHOLAR)
SIZE_NORMALIZED = NormalizedToJupiter(jupiter_radius_scene=JUPITER_RADIUS_SCENE_NORMALIZED)
SIZE_VISIBLE = ClampedMinimum(
    min_radius_scene=MIN_VISIBLE_RADIUS_SCENE, base_scale=SIZE_NORMALIZED
)
SIZE_MASS_COMPARISON = CustomMetric(
    metric=SizeMetric.MASS,
    reference_body=BodyId.EARTH,
    reference_radius_scene=0.05,
    log_compress=LogCompress(scale=0.5, multiplier=1.2),
)

RENDER_PRESETS: Mapping[PresetName, RenderMapping] = MappingProxyType({
    PresetName.TRUE_PHYSICAL: RenderMapping(DISTANCE_LINEAR, SIZE_PHYSICAL),
    PresetName.PLANET_RATIO: RenderMapping(DISTANCE_LINEAR_RATIO, SIZE_RATIO_MERCURY),
    PresetName.SCHOOL_MODEL: RenderMapping(DISTANCE_LOG, SIZE_NORMALIZED),
    PresetName.TRUE_SIZES: RenderMapping(DISTANCE_LOG, SIZE_RATIO_SCHOLAR),
    PresetName.EXPLORER: RenderMapping(DISTANCE_PIECEWISE, SIZE_VISIBLE),
    PresetName.MASS_COMPARISON: RenderMapping(DISTANCE_LOG, SIZE_MASS_COMPARISON),
})


def parse_preset(name: Union[str, PresetName]) -> PresetName:
    try:
        return PresetName(name)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown preset: {name!r}") from exc


def get_preset(name: Union[str, PresetName]) -> RenderMapping:
    """Render mapping for a named preset."""
    return RENDER_PRESETS[parse_preset(name)]


def resolve_mapping(preset: Union[str, PresetName, RenderMapping]) -> RenderMapping:
    """Accept either a preset name or a ready-made mapping."""
    if isinstance(preset, RenderMapping):
        return preset
    return get_preset(preset)


def create_mapping(distance_scale: DistanceScale, size_scale: SizeScale) -> RenderMapping:
    return RenderMapping(distance_scale=distance_scale, size_scale=size_scale)


def validate_mapping(mapping: RenderMapping) -> None:
    """Check that a mapping is internally consistent.

    A PhysicalSize is only valid with a linear distance scale whose
    ``au_to_scene / AU_KM`` equals its ``km_to_scene``.

    Raises:
        MappingValidationError: If the pairing is not allowed.
    """
    size, distance = mapping.size_scale, mapping.distance_scale
    if not isinstance(size, PhysicalSize):
        return
    if not isinstance(distance, LinearScale):
        raise MappingValidationError(
            "Physical size scale requires a linear distance scale, got "
            f"{type(distance).__name__}",
            field="distance_scale",
        )
    expected = distance.au_to_scene / AU_KM
    relative_error = abs((size.km_to_scene - expected) / expected)
    if relative_error > _PHYSICAL_TOLERANCE:
        raise MappingValidationError(
            f"Physical km_to_scene mismatch: expected {expected:.6e} "
            f"(au_to_scene / AU_KM), got {size.km_to_scene:.6e}",
            field="size_scale",
        )


def create_validated_mapping(
    distance_scale: DistanceScale, size_scale: SizeScale
) -> RenderMapping:
    mapping = create_mapping(distance_scale, size_scale)
    validate_mapping(mapping)
    return mapping


def create_physical_mapping(au_to_scene: float) -> RenderMapping:
    """True-scale mapping with sizes derived from the distance scale."""
    return create_validated_mapping(
        LinearScale(au_to_scene=au_to_scene),
        PhysicalSize(km_to_scene=au_to_scene / AU_KM),
    )
