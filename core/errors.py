"""Exception hierarchy for the worldline engine.

Invalid inputs fail immediately and are never clamped. Degenerate
geometry is not an error; it is recovered where it occurs.
"""

from __future__ import annotations

from typing import Any, Optional


class WorldlineError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInputError(WorldlineError, ValueError):
    """Raised when a caller supplies a value outside its documented domain."""


class InvalidLatitudeError(InvalidInputError):
    """Raised for a latitude outside [-90, 90] degrees or non-finite."""

    def __init__(self, latitude: Any):
        self.latitude = latitude
        super().__init__(
            f"Latitude must be a finite number in [-90, 90], got {latitude!r}"
        )


class InvalidDateError(InvalidInputError):
    """Raised when a date-like value cannot be parsed."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class MappingValidationError(InvalidInputError):
    """Raised when a distance/size scale pairing is not allowed."""

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message)


class UnknownBodyError(WorldlineError, LookupError):
    """Raised when a body identifier is not in the closed body set."""

    def __init__(self, body: Any):
        self.body = body
        super().__init__(f"Unknown body: {body!r}")


class EphemerisError(WorldlineError):
    """Raised when the underlying ephemeris engine fails."""

    def __init__(
        self, message: str, body: Optional[str] = None, epoch: Any = None
    ):
        self.body = body
        self.epoch = epoch
        super().__init__(message)
