"""Photon state as an immutable Equinox module.

A ``PhotonState`` is a JAX pytree holding the Cartesian position, the
coordinate velocities (dr, dtheta, dphi), the conserved quantities fixed at
launch, the terminal flag and the trajectory history. Stepping returns a
new state; nothing mutates a state in place.
"""
from __future__ import annotations

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array, Float

from ..types import Dimension
from .coordinates import cartesian_to_polar, cartesian_to_spherical


class PhotonState(eqx.Module):
    """Photon travelling along a null geodesic.

    Parameters
    ----------
    position : Float[Array, "3"]
        Cartesian position (black hole at the origin).
    dr, dtheta, dphi : Float[Array, ""]
        Coordinate velocities d/dlambda of r, theta, phi. ``dtheta`` is
        identically zero for planar photons.
    E : Float[Array, ""]
        Conserved energy.
    L : Float[Array, ""]
        Conserved angular momentum: signed ``r^2 dphi`` in 2D, the
        non-negative ``sqrt(L^2)`` in 3D.
    trajectory : Float[Array, "N 3"]
        Past Cartesian positions, launch point first.
    is_done : bool
        True once the photon has been absorbed by the horizon.
    dimension : Dimension
        Planar or spatial motion (static).
    """

    position: Float[Array, "3"]
    dr: Float[Array, ""]
    dtheta: Float[Array, ""]
    dphi: Float[Array, ""]
    E: Float[Array, ""]
    L: Float[Array, ""]
    trajectory: Float[Array, "N 3"]
    is_done: bool = False
    dimension: Dimension = eqx.field(static=True, default=Dimension.SPATIAL)

    @property
    def L_squared(self) -> Float[Array, ""]:
        """Squared conserved angular momentum."""
        return self.L**2

    @property
    def num_points(self) -> int:
        """Number of recorded trajectory points."""
        return self.trajectory.shape[0]

    def phase_state(self) -> Float[Array, "6"]:
        """Phase-space state [r, theta, phi, dr, dtheta, dphi] at the current position."""
        return phase_state(
            self.position, self.dr, self.dtheta, self.dphi, self.dimension
        )


def phase_state(
    position: Float[Array, "3"],
    dr: Float[Array, ""],
    dtheta: Float[Array, ""],
    dphi: Float[Array, ""],
    dimension: Dimension = Dimension.SPATIAL,
) -> Float[Array, "6"]:
    """Recompute [r, theta, phi, dr, dtheta, dphi] from a Cartesian position.

    Angles always come from the position, so phi never accumulates
    unwrapping drift.
    """
    if dimension is Dimension.PLANAR:
        r, phi = cartesian_to_polar(position)
        theta = jnp.full_like(r, jnp.pi / 2)
    else:
        r, theta, phi = cartesian_to_spherical(position)
    return jnp.stack([r, theta, phi, dr, dtheta, dphi])
