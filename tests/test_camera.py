from __future__ import annotations

import math

import numpy as np
import pytest

from core.bodies import BodyId
from core.errors import InvalidInputError
from utils.constants import CAMERA_TRANSITION_SECONDS
from visualization.camera import (
    CameraSemanticState,
    FocusTarget,
    SemanticCamera,
    TransitionMode,
    clip_planes,
    distance_limits,
    effective_coverage,
    fit_distance,
    quintic_ease,
)
from visualization.scale import PresetName
from visualization.scene import recenter


def _target(body, radius, position=(0.0, 0.0, 0.0)):
    return FocusTarget(body, np.array(position, dtype=float), radius)


def test_quintic_ease_shape():
    assert quintic_ease(0.0) == 0.0
    assert quintic_ease(0.5) == 0.5
    assert quintic_ease(1.0) == 1.0
    samples = [quintic_ease(t) for t in np.linspace(0.0, 1.0, 101)]
    assert all(a <= b for a, b in zip(samples, samples[1:]))
    for t in (0.1, 0.3, 0.45):
        assert quintic_ease(t) + quintic_ease(1.0 - t) == pytest.approx(1.0)
    assert quintic_ease(0.1) < 0.1


def test_fit_distance():
    distance = fit_distance(1.0, 0.5, fov_deg=50.0)
    assert distance == pytest.approx(1.0 / math.tan(math.radians(50.0) * 0.25))
    assert fit_distance(1e-9, 0.5) == 0.001
    with pytest.raises(InvalidInputError):
        fit_distance(1.0, 0.0)


def test_effective_coverage():
    saturn = effective_coverage(PresetName.SCHOOL_MODEL, BodyId.SATURN)
    assert saturn == pytest.approx(0.55 / 1.4)
    assert effective_coverage(None, "Venus") == pytest.approx(0.35)


@pytest.mark.parametrize(
    "radius, near, far",
    [(1.0, 0.002, 1000.0), (1e-9, 1e-7, 300.0), (0.25, 0.0005, 300.0)],
)
def test_clip_planes(radius, near, far):
    planes = clip_planes(radius)
    assert planes.near == pytest.approx(near)
    assert planes.far == pytest.approx(far)


def test_distance_limits_scale_with_radius():
    small = distance_limits(1.0, PresetName.SCHOOL_MODEL)
    large = distance_limits(10.0, PresetName.SCHOOL_MODEL)
    assert large.min_distance == pytest.approx(small.min_distance * 10.0)
    assert large.max_distance == pytest.approx(small.max_distance * 10.0)
    assert small.min_distance == pytest.approx(fit_distance(1.0, 0.8))
    assert small.max_distance == pytest.approx(fit_distance(1.0, 0.03))


def test_true_physical_limits_allow_wider_range():
    physical = distance_limits(1.0, PresetName.TRUE_PHYSICAL)
    assert physical.max_distance == pytest.approx(fit_distance(1.0, 0.01) * 1.7)
    tiny = distance_limits(1e-6, PresetName.TRUE_PHYSICAL)
    # fit distance bottoms out at 0.001 before the preset floor applies
    assert tiny.min_distance == 0.001
    assert tiny.max_distance == 85.0
    other = distance_limits(1e-6, PresetName.EXPLORER)
    assert (other.min_distance, other.max_distance) == (0.02, 50.0)


@pytest.mark.parametrize(
    "first, second",
    [
        ((BodyId.MERCURY, 0.02), (BodyId.JUPITER, 0.57)),
        ((BodyId.SUN, 0.25), (BodyId.MOON, 0.0178)),
        ((BodyId.EARTH, 1.3e-4), (BodyId.NEPTUNE, 5.0e-4)),
    ],
)
def test_preserve_mode_keeps_zoom_radii(first, second):
    a = _target(*first)
    b = _target(second[0], second[1], position=(3.0, -1.0, 2.0))
    camera = SemanticCamera(a, zoom_radii=12.0)
    before = camera.distance / a.radius_scene

    camera.retarget(b)
    camera.advance(2.0)

    assert not camera.is_animating
    assert camera.distance / b.radius_scene == pytest.approx(before)
    assert camera.zoom_radii == 12.0
    np.testing.assert_allclose(camera.look_at, b.position_scene)


def test_preserve_mode_keeps_view_direction():
    camera = SemanticCamera(
        _target(BodyId.EARTH, 0.1), direction=np.array([1.0, 1.0, 0.0])
    )
    before = camera.state()
    mars = _target(BodyId.MARS, 0.05, position=(4.0, 0.0, 0.0))
    camera.retarget(mars, TransitionMode.PRESERVE)
    after = camera.advance(5.0)
    assert isinstance(after, CameraSemanticState)
    assert after.target is BodyId.MARS
    assert after.azimuth == pytest.approx(before.azimuth)
    assert after.polar == pytest.approx(before.polar)
    assert after.polar == pytest.approx(math.pi / 4)
    assert after.azimuth == pytest.approx(math.pi / 2)


def test_fit_to_view_recomputes_zoom():
    camera = SemanticCamera(_target(BodyId.EARTH, 0.1), preset=PresetName.SCHOOL_MODEL)
    saturn = _target(BodyId.SATURN, 0.05)
    camera.retarget(saturn, TransitionMode.FIT_TO_VIEW)
    camera.advance(10.0)
    expected = fit_distance(0.05, 0.55 / 1.4)
    assert camera.distance == pytest.approx(expected)
    assert camera.zoom_radii == pytest.approx(expected / 0.05)


def test_transition_duration_ignores_distance():
    near = SemanticCamera(_target(BodyId.EARTH, 0.1), transition_seconds=1.2)
    far = SemanticCamera(_target(BodyId.EARTH, 0.1), transition_seconds=1.2)
    near.retarget(_target(BodyId.MOON, 0.03, position=(0.5, 0.0, 0.0)))
    far.retarget(_target(BodyId.NEPTUNE, 0.03, position=(900.0, 0.0, 0.0)))

    near.advance(0.6)
    far.advance(0.6)
    assert near.is_animating and far.is_animating
    # Halfway in time is halfway along the eased path for both
    assert near.look_at[0] == pytest.approx(0.25)
    assert far.look_at[0] == pytest.approx(450.0)

    near.advance(0.7)
    far.advance(0.7)
    assert not near.is_animating and not far.is_animating


def test_zoom_to_clamps_and_updates_zoom_radii():
    camera = SemanticCamera(_target(BodyId.JUPITER, 1.0), preset=PresetName.EXPLORER)
    limits = camera.limits
    assert camera.zoom_to(1e9) == limits.max_distance
    assert camera.zoom_to(0.0) == limits.min_distance
    camera.zoom_to(20.0)
    assert camera.zoom_radii == pytest.approx(20.0)
    assert camera.distance == pytest.approx(20.0)


def test_focus_min_distance_overrides_limits():
    target = FocusTarget(BodyId.EARTH, np.zeros(3), 0.1, min_distance=5.0)
    camera = SemanticCamera(target)
    assert camera.limits.min_distance == 5.0
    assert camera.zoom_to(1.0) == 5.0


def test_invalid_camera_inputs():
    with pytest.raises(InvalidInputError):
        _target(BodyId.EARTH, 0.0)
    camera = SemanticCamera(_target(BodyId.EARTH, 0.1))
    with pytest.raises(InvalidInputError):
        camera.advance(-0.1)
    with pytest.raises(InvalidInputError):
        SemanticCamera(_target(BodyId.EARTH, 0.1), zoom_radii=0.0)


def test_unknown_preset_rejected():
    with pytest.raises(InvalidInputError):
        effective_coverage("bogus", BodyId.EARTH)
    with pytest.raises(InvalidInputError):
        distance_limits(1.0, "bogus")
    with pytest.raises(InvalidInputError):
        SemanticCamera(_target(BodyId.EARTH, 0.1), preset="bogus")
    camera = SemanticCamera(_target(BodyId.EARTH, 0.1))
    with pytest.raises(InvalidInputError):
        camera.retarget(_target(BodyId.MARS, 0.05), preset="bogus")


def test_camera_follows_scene_focus(absolute_scenes, epochs):
    snapshot = absolute_scenes[(PresetName.TRUE_SIZES, epochs[3])]
    mercury = recenter(snapshot, BodyId.MERCURY)
    jupiter = recenter(snapshot, BodyId.JUPITER)
    camera = SemanticCamera(FocusTarget.from_rendered(mercury.body(BodyId.MERCURY)))
    zoom = camera.zoom_radii
    camera.retarget(FocusTarget.from_rendered(jupiter.body(BodyId.JUPITER)))
    camera.advance(CAMERA_TRANSITION_SECONDS)
    radius = jupiter.body(BodyId.JUPITER).radius_scene
    assert camera.distance / radius == pytest.approx(zoom)
    assert camera.clip_planes.near == pytest.approx(max(radius / 500.0, 1e-7))
