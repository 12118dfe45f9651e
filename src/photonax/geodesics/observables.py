"""Post-processing observables for photon states and trajectories.

- null_constraint / null_constraint_residual: conservation check of
  E^2 = dr^2 + f r^2 (dtheta^2 + sin^2(theta) dphi^2)
- angular_momentum: current L from the velocities (compare to photon.L)
- radial_profile: r along the recorded trajectory
- deflection_angle: bending between the first and last trajectory segments

RK4 truncation error makes the residual drift slowly; nothing renormalizes
it during integration.
"""
from __future__ import annotations

import jax.numpy as jnp
from jaxtyping import Array, Float

from ..types import DPHI, DR, DTHETA, R, THETA, Dimension
from .photon import PhotonState


# ---------------------------------------------------------------------------
# Conservation monitoring
# ---------------------------------------------------------------------------


def null_constraint(photon: PhotonState, rs: float) -> Float[Array, ""]:
    """Evaluate dr^2 + f r^2 (dtheta^2 + sin^2(theta) dphi^2).

    Equals E^2 exactly on a null geodesic.
    """
    y = photon.phase_state()
    r = y[R]
    f = 1.0 - rs / r
    angular = y[DTHETA] ** 2 + jnp.sin(y[THETA]) ** 2 * y[DPHI] ** 2
    return y[DR] ** 2 + f * r**2 * angular


def null_constraint_residual(photon: PhotonState, rs: float) -> Float[Array, ""]:
    """Null constraint minus E^2 (zero on an exact null geodesic)."""
    return null_constraint(photon, rs) - photon.E**2


def angular_momentum(photon: PhotonState) -> Float[Array, ""]:
    """Angular momentum implied by the current velocities.

    Signed ``r^2 dphi`` for planar photons, ``r^2 sqrt(dtheta^2 +
    sin^2(theta) dphi^2)`` otherwise. Drift away from ``photon.L``
    measures integration error.
    """
    y = photon.phase_state()
    r = y[R]
    if photon.dimension is Dimension.PLANAR:
        return r**2 * y[DPHI]
    return r**2 * jnp.sqrt(y[DTHETA] ** 2 + jnp.sin(y[THETA]) ** 2 * y[DPHI] ** 2)


# ---------------------------------------------------------------------------
# Trajectory observables
# ---------------------------------------------------------------------------


def radial_profile(photon: PhotonState) -> Float[Array, "N"]:
    """Distance from the black hole at each trajectory point."""
    return jnp.linalg.norm(photon.trajectory, axis=1)


def deflection_angle(photon: PhotonState) -> Float[Array, ""]:
    """Angle in radians between the first and last trajectory segments.

    Needs at least three trajectory points; returns NaN otherwise. For a
    photon that escapes far from the black hole this approaches the total
    light-bending angle.
    """
    traj = photon.trajectory
    if traj.shape[0] < 3:
        return jnp.asarray(jnp.nan)
    first = traj[1] - traj[0]
    last = traj[-1] - traj[-2]
    cos_angle = jnp.dot(first, last) / (jnp.linalg.norm(first) * jnp.linalg.norm(last))
    return jnp.arccos(jnp.clip(cos_angle, -1.0, 1.0))
