"""Shared enumerations and array aliases."""
from __future__ import annotations

from enum import Enum

# Phase-space state layout: y = [r, theta, phi, dr, dtheta, dphi]
R, THETA, PHI, DR, DTHETA, DPHI = range(6)


class Dimension(Enum):
    """Dimensionality of a photon's motion.

    ``PLANAR`` photons move in the equatorial plane (theta = pi/2, z = 0);
    ``SPATIAL`` photons move in full 3D.
    """

    PLANAR = "2d"
    SPATIAL = "3d"
