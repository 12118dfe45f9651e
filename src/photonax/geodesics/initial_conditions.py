"""Initial conditions for photons launched from a point in a given direction.

The launch direction fixes the angular rates through the coordinate
Jacobian; the radial rate then follows from the null constraint

    E^2 = dr^2 + f(r) L^2 / r^2,      f = 1 - rs/r,
    L^2 = r^4 (dtheta^2 + sin^2(theta) dphi^2)

with E = 1 (only ratios matter for null geodesics). The sign of dr is
taken from the radial component of the launch direction.

A negative radicand means no null geodesic leaves that point with that
direction, and the launch is rejected with ``InvalidInitialConditions``
instead of producing NaN.
"""
from __future__ import annotations

import logging
from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, ArrayLike, Float

from ..errors import InvalidInitialConditions, InvalidParameter
from ..types import Dimension
from .coordinates import cartesian_to_polar, cartesian_to_spherical, project_direction
from .photon import PhotonState

logger = logging.getLogger(__name__)

# Conserved energy of every launched photon.
ENERGY = 1.0


class LaunchResult(NamedTuple):
    """Outcome of a launch: exactly one of ``photon`` or ``error`` is set."""

    photon: PhotonState | None
    error: InvalidInitialConditions | None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> PhotonState:
        """Return the photon, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.photon


def _as_vector(label: str, value: ArrayLike) -> Float[Array, "3"]:
    vec = jnp.asarray(value, dtype=jnp.float64)
    if vec.shape != (3,):
        raise InvalidInitialConditions(f"{label} must be a 3-vector, got shape {vec.shape}")
    if not bool(jnp.all(jnp.isfinite(vec))):
        raise InvalidInitialConditions(f"{label} has non-finite components: {vec}")
    return vec


def launch_photon(
    rs: float,
    position: ArrayLike,
    direction: ArrayLike,
    dimension: Dimension = Dimension.SPATIAL,
) -> PhotonState:
    """Build a photon whose velocities satisfy the null constraint.

    Parameters
    ----------
    rs : float
        Schwarzschild radius.
    position : ArrayLike, shape (3,)
        Cartesian launch point. Planar launches drop the z component.
    direction : ArrayLike, shape (3,)
        Spatial launch velocity in units of c. It is used as given: a unit
        vector always yields a valid photon outside the horizon, longer
        vectors may not. Planar launches drop the z component.
    dimension : Dimension
        Planar (2D) or spatial (3D) photon.

    Returns
    -------
    PhotonState
        Photon with ``is_done=False`` and a one-point trajectory.

    Raises
    ------
    InvalidParameter
        If ``rs`` is not positive.
    InvalidInitialConditions
        If the direction is zero, the launch point is not outside the
        horizon, a spatial launch point lies on the polar axis, or the
        null-constraint radicand is negative.
    """
    if not rs > 0:
        raise InvalidParameter(f"rs must be positive, got {rs!r}")
    position = _as_vector("position", position)
    direction = _as_vector("direction", direction)

    planar = dimension is Dimension.PLANAR
    if planar:
        position = position.at[2].set(0.0)
        direction = direction.at[2].set(0.0)

    if float(jnp.linalg.norm(direction)) == 0.0:
        raise InvalidInitialConditions("launch direction has zero length")

    if planar:
        r0, phi0 = cartesian_to_polar(position)
        theta0 = jnp.asarray(jnp.pi / 2)
    else:
        r0, theta0, phi0 = cartesian_to_spherical(position)
        if float(jnp.hypot(position[0], position[1])) <= 1e-12 * float(r0):
            raise InvalidInitialConditions(
                f"launch point {position} lies on the polar axis where dphi is undefined"
            )

    if float(r0) <= rs:
        raise InvalidInitialConditions(
            f"launch radius r0={float(r0):.6g} is not outside the horizon rs={rs:.6g}"
        )

    v_r, dtheta0, dphi0 = project_direction(jnp.stack([r0, theta0, phi0]), direction)

    E = jnp.asarray(ENERGY)
    if planar:
        dtheta0 = jnp.zeros_like(dphi0)
        L = r0**2 * dphi0
        L_sq = L**2
    else:
        L_sq = r0**4 * (dtheta0**2 + jnp.sin(theta0) ** 2 * dphi0**2)
        L = jnp.sqrt(L_sq)

    f0 = 1.0 - rs / r0
    radicand = E**2 - f0 * L_sq / r0**2
    if float(radicand) < 0.0:
        raise InvalidInitialConditions(
            f"no null geodesic from r0={float(r0):.6g} with direction {direction}: "
            f"radicand {float(radicand):.6g} < 0"
        )

    sign = 1.0 if float(v_r) >= 0.0 else -1.0
    dr0 = sign * jnp.sqrt(radicand)

    logger.debug(
        "Launched %s photon at r0=%.6g (dr=%.6g, dphi=%.6g, L=%.6g)",
        dimension.value, float(r0), float(dr0), float(dphi0), float(L),
    )
    return PhotonState(
        position=position,
        dr=dr0,
        dtheta=dtheta0,
        dphi=dphi0,
        E=E,
        L=L,
        trajectory=position[None, :],
        is_done=False,
        dimension=dimension,
    )


def try_launch_photon(
    rs: float,
    position: ArrayLike,
    direction: ArrayLike,
    dimension: Dimension = Dimension.SPATIAL,
) -> LaunchResult:
    """Like :func:`launch_photon`, but report failure as a value.

    Only ``InvalidInitialConditions`` is captured; other errors propagate.
    """
    try:
        return LaunchResult(launch_photon(rs, position, direction, dimension), None)
    except InvalidInitialConditions as exc:
        return LaunchResult(None, exc)
