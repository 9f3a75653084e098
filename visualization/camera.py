"""Semantic camera model.

The camera tracks a focus body and keeps one piece of session state,
``zoom_radii`` (camera distance divided by the target's scene radius).
Switching targets in PRESERVE mode keeps ``zoom_radii`` and the viewing
direction, so Mercury and Jupiter fill the same share of the screen.
FIT_TO_VIEW recomputes the distance from a desired screen coverage.

Transitions run for a fixed wall-clock duration with a quintic
ease-in-out, whatever the distance covered. Each view owns its own
SemanticCamera; instances are not shared between threads.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from core.bodies import BodyId
from core.coordinate_transforms import normalize
from core.errors import InvalidInputError
from utils.constants import (
    BODY_COVERAGE_ADJUSTMENT,
    CAMERA_FAR_MINIMUM,
    CAMERA_FAR_RADIUS_MULTIPLIER,
    CAMERA_FOV_DEGREES,
    CAMERA_INITIAL_ZOOM_RADII,
    CAMERA_MAX_COVERAGE,
    CAMERA_MAX_COVERAGE_PHYSICAL,
    CAMERA_MIN_COVERAGE,
    CAMERA_NEAR_EPSILON,
    CAMERA_NEAR_RADIUS_DIVISOR,
    CAMERA_PHYSICAL_RANGE_BOOST,
    CAMERA_TRANSITION_SECONDS,
    DEFAULT_SCREEN_COVERAGE,
    SCREEN_COVERAGE_BY_PRESET,
)
from visualization.scale import PresetName, parse_preset
from visualization.scene import RenderedBody

logger = logging.getLogger(__name__)

# Slightly above the ecliptic, looking back towards -z.
DEFAULT_VIEW_DIRECTION: np.ndarray = normalize(np.array([0.0, 0.35, 1.0]))

_MIN_FIT_DISTANCE = 0.001
_PHYSICAL_MIN_DISTANCE_FLOOR = 0.0001
_PHYSICAL_MAX_DISTANCE_FLOOR = 85.0
_MIN_DISTANCE_FLOOR = 0.02
_MAX_DISTANCE_FLOOR = 50.0


class TransitionMode(str, Enum):
    PRESERVE = "preserve"
    FIT_TO_VIEW = "fit-to-view"


@dataclass(frozen=True, slots=True)
class FocusTarget:
    """What the camera looks at. Replaced, never mutated, on selection."""

    body: BodyId
    position_scene: np.ndarray
    radius_scene: float
    min_distance: Optional[float] = None

    def __post_init__(self) -> None:
        if not (math.isfinite(self.radius_scene) and self.radius_scene > 0):
            raise InvalidInputError(
                f"Focus radius must be positive, got {self.radius_scene!r}"
            )

    @classmethod
    def from_rendered(cls, rendered: RenderedBody) -> "FocusTarget":
        return cls(
            body=rendered.body,
            position_scene=np.array(rendered.position, dtype=np.float64),
            radius_scene=rendered.radius_scene,
        )


@dataclass(frozen=True, slots=True)
class CameraSemanticState:
    """Per-tick camera summary handed to the renderer."""

    target: BodyId
    zoom_radii: float
    azimuth: float  # rad, atan2(x, z) of the view direction
    polar: float  # rad from +y


@dataclass(frozen=True, slots=True)
class ClipPlanes:
    near: float
    far: float


@dataclass(frozen=True, slots=True)
class DistanceLimits:
    min_distance: float
    max_distance: float

    def clamp(self, distance: float) -> float:
        return min(max(distance, self.min_distance), self.max_distance)


# =============================================================================
# Framing Math
# =============================================================================

def quintic_ease(t: float) -> float:
    """Quintic ease-in-out on [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        return 16.0 * t ** 5
    return 1.0 - (-2.0 * t + 2.0) ** 5 / 2.0


def fit_distance(
    radius: float, coverage: float, fov_deg: float = CAMERA_FOV_DEGREES
) -> float:
    """Distance at which a sphere of ``radius`` spans ``coverage`` of the view."""
    if not 0.0 < coverage <= 1.0:
        raise InvalidInputError(f"Coverage must be in (0, 1], got {coverage!r}")
    half_angle = math.radians(fov_deg) * coverage / 2.0
    return max(radius / math.tan(half_angle), _MIN_FIT_DISTANCE)


def effective_coverage(
    preset: Optional[Union[str, PresetName]], body: Union[str, BodyId]
) -> float:
    """Preset screen coverage divided by the per-body adjustment."""
    key = parse_preset(preset).value if preset is not None else None
    base = SCREEN_COVERAGE_BY_PRESET.get(key, DEFAULT_SCREEN_COVERAGE)
    adjustment = BODY_COVERAGE_ADJUSTMENT.get(BodyId.parse(body).value, 1.0)
    return min(base / adjustment, 1.0)


def clip_planes(radius: float) -> ClipPlanes:
    return ClipPlanes(
        near=max(radius / CAMERA_NEAR_RADIUS_DIVISOR, CAMERA_NEAR_EPSILON),
        far=max(CAMERA_FAR_MINIMUM, radius * CAMERA_FAR_RADIUS_MULTIPLIER),
    )


def distance_limits(
    radius: float,
    preset: Optional[Union[str, PresetName]] = None,
    fov_deg: float = CAMERA_FOV_DEGREES,
) -> DistanceLimits:
    """User zoom limits for a target of ``radius``.

    The closest zoom has the body fill 80% of the view. The farthest has
    it fill 3%, or 1% with 70% extra range on the true-physical preset
    where orbital context matters more.
    """
    closest = fit_distance(radius, CAMERA_MIN_COVERAGE, fov_deg)
    if preset is not None and parse_preset(preset) is PresetName.TRUE_PHYSICAL:
        farthest = fit_distance(radius, CAMERA_MAX_COVERAGE_PHYSICAL, fov_deg)
        return DistanceLimits(
            min_distance=max(closest, _PHYSICAL_MIN_DISTANCE_FLOOR),
            max_distance=max(
                farthest * CAMERA_PHYSICAL_RANGE_BOOST, _PHYSICAL_MAX_DISTANCE_FLOOR
            ),
        )
    farthest = fit_distance(radius, CAMERA_MAX_COVERAGE, fov_deg)
    return DistanceLimits(
        min_distance=max(closest, _MIN_DISTANCE_FLOOR),
        max_distance=max(farthest, _MAX_DISTANCE_FLOOR),
    )


def view_angles(direction: np.ndarray) -> tuple[float, float]:
    """(azimuth, polar) in radians of a target-to-camera direction."""
    d = normalize(direction)
    azimuth = math.atan2(d[0], d[2])
    polar = math.acos(min(max(float(d[1]), -1.0), 1.0))
    return azimuth, polar


# =============================================================================
# Camera State Machine
# =============================================================================

class SemanticCamera:
    """Camera that keeps its zoom, measured in target radii, across targets."""

    def __init__(
        self,
        target: FocusTarget,
        preset: Optional[Union[str, PresetName]] = None,
        zoom_radii: float = CAMERA_INITIAL_ZOOM_RADII,
        direction: Optional[np.ndarray] = None,
        fov_deg: float = CAMERA_FOV_DEGREES,
        transition_seconds: float = CAMERA_TRANSITION_SECONDS,
    ):
        if zoom_radii <= 0:
            raise InvalidInputError(f"zoom_radii must be positive, got {zoom_radii!r}")
        if transition_seconds <= 0:
            raise InvalidInputError(
                f"transition_seconds must be positive, got {transition_seconds!r}"
            )
        self._preset = parse_preset(preset) if preset is not None else None
        self._fov_deg = fov_deg
        self._transition_seconds = transition_seconds

        self._target = target
        self._zoom_radii = float(zoom_radii)
        view = normalize(direction) if direction is not None else DEFAULT_VIEW_DIRECTION
        if not np.any(view):
            view = DEFAULT_VIEW_DIRECTION

        self._look_at = np.array(target.position_scene, dtype=np.float64)
        self._position = self._look_at + view * self._zoom_radii * target.radius_scene

        self._start_position = self._position.copy()
        self._start_look_at = self._look_at.copy()
        self._end_position = self._position.copy()
        self._end_look_at = self._look_at.copy()
        self._progress = 1.0

    # --- Read-only views ---

    @property
    def target(self) -> FocusTarget:
        return self._target

    @property
    def zoom_radii(self) -> float:
        return self._zoom_radii

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def look_at(self) -> np.ndarray:
        return self._look_at.copy()

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self._position - self._look_at))

    @property
    def is_animating(self) -> bool:
        return self._progress < 1.0

    @property
    def clip_planes(self) -> ClipPlanes:
        return clip_planes(self._target.radius_scene)

    @property
    def limits(self) -> DistanceLimits:
        limits = distance_limits(self._target.radius_scene, self._preset, self._fov_deg)
        if self._target.min_distance is not None:
            limits = DistanceLimits(
                min_distance=self._target.min_distance,
                max_distance=max(limits.max_distance, self._target.min_distance),
            )
        return limits

    def state(self) -> CameraSemanticState:
        azimuth, polar = view_angles(self._position - self._look_at)
        return CameraSemanticState(
            target=self._target.body,
            zoom_radii=self._zoom_radii,
            azimuth=azimuth,
            polar=polar,
        )

    # --- Transitions ---

    def retarget(
        self,
        target: FocusTarget,
        mode: Union[TransitionMode, str] = TransitionMode.PRESERVE,
        preset: Optional[Union[str, PresetName]] = None,
    ) -> None:
        """Start a transition to ``target``.

        PRESERVE keeps ``zoom_radii`` and the current viewing direction.
        FIT_TO_VIEW frames the target at the preset's screen coverage and
        recomputes ``zoom_radii`` from the new distance.
        """
        mode = TransitionMode(mode)
        if preset is not None:
            self._preset = parse_preset(preset)

        direction = normalize(self._end_position - self._end_look_at)
        if not np.any(direction):
            direction = DEFAULT_VIEW_DIRECTION

        if mode is TransitionMode.FIT_TO_VIEW:
            coverage = effective_coverage(self._preset, target.body)
            distance = fit_distance(target.radius_scene, coverage, self._fov_deg)
            self._zoom_radii = distance / target.radius_scene
        else:
            distance = self._zoom_radii * target.radius_scene

        logger.debug(
            "Camera %s -> %s (%s), distance %.6g",
            self._target.body, target.body, mode.value, distance,
        )
        self._target = target
        self._start_position = self._position.copy()
        self._start_look_at = self._look_at.copy()
        self._end_look_at = np.array(target.position_scene, dtype=np.float64)
        self._end_position = self._end_look_at + direction * distance
        self._progress = 0.0

    def advance(self, dt: float) -> CameraSemanticState:
        """Step the current transition by ``dt`` seconds."""
        if dt < 0:
            raise InvalidInputError(f"dt must be non-negative, got {dt!r}")
        if self._progress < 1.0:
            self._progress = min(1.0, self._progress + dt / self._transition_seconds)
            if self._progress >= 1.0:
                self._position = self._end_position.copy()
                self._look_at = self._end_look_at.copy()
            else:
                eased = quintic_ease(self._progress)
                self._position = self._start_position + (
                    self._end_position - self._start_position
                ) * eased
                self._look_at = self._start_look_at + (
                    self._end_look_at - self._start_look_at
                ) * eased
        return self.state()

    def zoom_to(self, distance: float) -> float:
        """Move along the view direction to ``distance``, clamped to limits.

        Ends any running transition. Returns the applied distance.
        """
        self._finish()
        applied = self.limits.clamp(distance)
        direction = normalize(self._position - self._look_at)
        if not np.any(direction):
            direction = DEFAULT_VIEW_DIRECTION
        self._position = self._look_at + direction * applied
        self._end_position = self._position.copy()
        self._zoom_radii = applied / self._target.radius_scene
        return applied

    def _finish(self) -> None:
        self._position = self._end_position.copy()
        self._look_at = self._end_look_at.copy()
        self._progress = 1.0
