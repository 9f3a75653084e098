# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.ephemeris import AstropyEphemerisProvider
from visualization.scale import PresetName
from visualization.scene import absolute_scene

# Five epochs spanning a century, all inside the builtin ephemeris range.
CENTURY_EPOCHS = (
    datetime(1925, 3, 14, 6, 0, tzinfo=timezone.utc),
    datetime(1950, 7, 1, 0, 0, tzinfo=timezone.utc),
    datetime(1975, 11, 20, 18, 30, tzinfo=timezone.utc),
    datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc),
    datetime(2025, 6, 21, 3, 15, tzinfo=timezone.utc),
)


@pytest.fixture(scope="session")
def provider() -> AstropyEphemerisProvider:
    return AstropyEphemerisProvider()


@pytest.fixture(scope="session")
def epochs() -> tuple[datetime, ...]:
    return CENTURY_EPOCHS


@pytest.fixture(scope="session")
def j2000() -> datetime:
    return datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def absolute_scenes(provider):
    """Absolute snapshot per (preset, epoch), computed once per session."""
    return {
        (preset, epoch): absolute_scene(epoch, preset, provider, include_orientation=False)
        for preset in PresetName
        for epoch in CENTURY_EPOCHS
    }
