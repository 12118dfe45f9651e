"""Null geodesic equations of the Schwarzschild metric.

State vector y = [r, theta, phi, dr, dtheta, dphi] (derivatives with respect
to the affine parameter lambda). With f = 1 - rs/r and the conserved energy
fixing dt/dlambda = E/f, the second-order system is

    r''     = -(rs / 2r^2) f t'^2 + (rs / (2 r^2 f)) r'^2
              + r f theta'^2 + r f sin^2(theta) phi'^2
    theta'' = sin(theta) cos(theta) phi'^2 - (2/r) r' theta'
    phi''   = -2 cot(theta) theta' phi' - (2/r) r' phi'

The planar specialization fixes theta = pi/2, so sin(theta) -> 1,
cot(theta) -> 0 and the theta equation drops out.
"""
from __future__ import annotations

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

from ..types import Dimension


@jaxtyped(typechecker=beartype)
def geodesic_rhs(
    y: Float[Array, "6"],
    E: Float[Array, ""],
    rs: Float[Array, ""],
    dimension: Dimension = Dimension.SPATIAL,
    cot_regularizer: float = 1e-6,
) -> Float[Array, "6"]:
    """Right-hand side dy/dlambda of the first-order geodesic system.

    Parameters
    ----------
    y : Float[Array, "6"]
        Phase-space state [r, theta, phi, dr, dtheta, dphi].
    E : Float[Array, ""]
        Conserved energy.
    rs : Float[Array, ""]
        Schwarzschild radius.
    dimension : Dimension
        ``PLANAR`` uses the equatorial specialization.
    cot_regularizer : float
        Added to sin(theta) in the cot(theta) denominator.

    Returns
    -------
    Float[Array, "6"]
        [dr, dtheta, dphi, r_acc, theta_acc, phi_acc].
    """
    r, theta, _, dr, dtheta, dphi = y

    f = 1.0 - rs / r
    dt = E / f
    half_rs_r2 = rs / (2.0 * r**2)

    if dimension is Dimension.PLANAR:
        r_acc = -half_rs_r2 * f * dt**2 + half_rs_r2 / f * dr**2 + r * f * dphi**2
        phi_acc = -(2.0 / r) * dr * dphi
        zero = jnp.zeros_like(r)
        return jnp.stack([dr, zero, dphi, r_acc, zero, phi_acc])

    sin_t, cos_t = jnp.sin(theta), jnp.cos(theta)
    cot_t = cos_t / (sin_t + cot_regularizer)

    r_acc = (
        -half_rs_r2 * f * dt**2
        + half_rs_r2 / f * dr**2
        + r * f * dtheta**2
        + r * f * sin_t**2 * dphi**2
    )
    theta_acc = sin_t * cos_t * dphi**2 - (2.0 / r) * dr * dtheta
    phi_acc = -2.0 * cot_t * dtheta * dphi - (2.0 / r) * dr * dphi
    return jnp.stack([dr, dtheta, dphi, r_acc, theta_acc, phi_acc])
