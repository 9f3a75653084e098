"""Physics core: frame velocities, durations, ephemeris, orientation and seasons."""
