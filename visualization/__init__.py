"""Scene-space mapping, positions, orbit rings, planet rings, belts and camera."""
