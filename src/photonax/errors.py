"""Exception types raised by photonax.

Coordinate singularities (poles, r -> 0) are handled by clamping and never
raised. Horizon absorption is a terminal state, not an error.
"""
from __future__ import annotations


class PhotonaxError(Exception):
    """Base class for all photonax errors."""


class InvalidParameter(PhotonaxError, ValueError):
    """A physical or numerical parameter is outside its valid range."""


class InvalidInitialConditions(PhotonaxError, ValueError):
    """A launch position/direction pair admits no null geodesic."""
