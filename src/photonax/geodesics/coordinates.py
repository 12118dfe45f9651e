"""Cartesian <-> spherical/polar conversions.

Conventions:
    r     = sqrt(x^2 + y^2 + z^2)
    theta = acos(z / r)          polar angle in [0, pi]
    phi   = atan2(y, x)          azimuth in (-pi, pi]

The polar (2D) variants work in the equatorial plane with theta fixed at
pi/2 and z = 0.

r = 0 leaves the angles undefined. Radii are floored at ``R_FLOOR`` so the
transforms stay finite; photons never get there in practice because they
are absorbed at the horizon.
"""
from __future__ import annotations

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, Float, jaxtyped

R_FLOOR = 1e-12


# ---------------------------------------------------------------------------
# Spherical (3D)
# ---------------------------------------------------------------------------


@jaxtyped(typechecker=beartype)
def cartesian_to_spherical(xyz: Float[Array, "3"]) -> Float[Array, "3"]:
    """Map ``(x, y, z)`` to ``(r, theta, phi)``."""
    x, y, z = xyz
    r = jnp.maximum(jnp.sqrt(x**2 + y**2 + z**2), R_FLOOR)
    theta = jnp.arccos(jnp.clip(z / r, -1.0, 1.0))
    phi = jnp.arctan2(y, x)
    return jnp.stack([r, theta, phi])


@jaxtyped(typechecker=beartype)
def spherical_to_cartesian(r_theta_phi: Float[Array, "3"]) -> Float[Array, "3"]:
    """Map ``(r, theta, phi)`` to ``(x, y, z)``."""
    r, theta, phi = r_theta_phi
    sin_theta = jnp.sin(theta)
    return jnp.stack([
        r * sin_theta * jnp.cos(phi),
        r * sin_theta * jnp.sin(phi),
        r * jnp.cos(theta),
    ])


# ---------------------------------------------------------------------------
# Polar (2D, equatorial plane)
# ---------------------------------------------------------------------------


@jaxtyped(typechecker=beartype)
def cartesian_to_polar(xyz: Float[Array, "3"]) -> Float[Array, "2"]:
    """Map ``(x, y, z)`` to ``(r, phi)`` in the equatorial plane; z is ignored."""
    x, y, _ = xyz
    r = jnp.maximum(jnp.hypot(x, y), R_FLOOR)
    return jnp.stack([r, jnp.arctan2(y, x)])


@jaxtyped(typechecker=beartype)
def polar_to_cartesian(r_phi: Float[Array, "2"]) -> Float[Array, "3"]:
    """Map ``(r, phi)`` to ``(x, y, 0)``."""
    r, phi = r_phi
    return jnp.stack([r * jnp.cos(phi), r * jnp.sin(phi), jnp.zeros_like(r)])


# ---------------------------------------------------------------------------
# Direction projection (coordinate Jacobian)
# ---------------------------------------------------------------------------


@jaxtyped(typechecker=beartype)
def project_direction(
    r_theta_phi: Float[Array, "3"],
    direction: Float[Array, "3"],
) -> Float[Array, "3"]:
    """Project a Cartesian direction onto the local spherical basis.

    Returns ``(v_r, dtheta, dphi)``, where ``v_r`` is the radial component
    of the direction and the angular rates follow from the inverse
    coordinate Jacobian:

        dphi   = (-dx sin(phi) + dy cos(phi)) / (r sin(theta))
        dtheta = (dx cos(theta) cos(phi) + dy cos(theta) sin(phi)
                  - dz sin(theta)) / r

    ``dphi`` is non-finite on the polar axis (sin(theta) = 0); callers
    must reject that case.
    """
    r, theta, phi = r_theta_phi
    dx, dy, dz = direction
    sin_t, cos_t = jnp.sin(theta), jnp.cos(theta)
    sin_p, cos_p = jnp.sin(phi), jnp.cos(phi)

    v_r = dx * sin_t * cos_p + dy * sin_t * sin_p + dz * cos_t
    dtheta = (dx * cos_t * cos_p + dy * cos_t * sin_p - dz * sin_t) / r
    dphi = (-dx * sin_p + dy * cos_p) / (r * sin_t)
    return jnp.stack([v_r, dtheta, dphi])
