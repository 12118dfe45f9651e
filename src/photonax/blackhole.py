"""Static Schwarzschild black hole.

The black hole is a fixed gravitational source. Its only derived quantity is
the Schwarzschild radius

    rs = 2 G M / c^2

which is the sole input the geodesic integrator needs.
"""
from __future__ import annotations

import math

import equinox as eqx
import jax.numpy as jnp
import sympy as sp
from jaxtyping import Array, Float

from .errors import InvalidParameter


class BlackHole(eqx.Module):
    """Non-rotating, uncharged black hole.

    Parameters
    ----------
    mass : float
        Mass M (> 0).
    position : Float[Array, "3"]
        Fixed Cartesian position (default origin). Informational only: the
        integrator works in coordinates centred on the black hole.
    gravitational_constant : float
        G (default 1, geometric units).
    light_speed : float
        c (default 1, geometric units).

    Raises
    ------
    InvalidParameter
        If mass, G or c is not a positive finite number.
    """

    mass: float = eqx.field(static=True)
    position: Float[Array, "3"] = eqx.field(
        default_factory=lambda: jnp.zeros(3), converter=jnp.asarray
    )
    gravitational_constant: float = eqx.field(static=True, default=1.0)
    light_speed: float = eqx.field(static=True, default=1.0)

    def __check_init__(self) -> None:
        for label, value in (
            ("mass", self.mass),
            ("gravitational_constant", self.gravitational_constant),
            ("light_speed", self.light_speed),
        ):
            if not (math.isfinite(value) and value > 0):
                raise InvalidParameter(f"{label} must be positive and finite, got {value!r}")
        if self.position.shape != (3,):
            raise InvalidParameter(
                f"position must be a 3-vector, got shape {self.position.shape}"
            )

    @property
    def rs(self) -> float:
        """Schwarzschild radius 2 G M / c^2."""
        return 2.0 * self.gravitational_constant * self.mass / self.light_speed**2

    def symbolic_metric(self) -> tuple[list[sp.Symbol], sp.Matrix]:
        """Return the Schwarzschild line element in (t, r, theta, phi).

        Signature (-+++), with ``rs`` kept symbolic so callers can substitute
        ``self.rs`` or keep it general.

        Returns
        -------
        tuple[list[sp.Symbol], sp.Matrix]
            Coordinate symbols ``[t, r, theta, phi]`` and the (4, 4) metric.
        """
        t, r, theta, phi = sp.symbols("t r theta phi")
        rs = sp.Symbol("r_s", positive=True)
        f = 1 - rs / r

        g = sp.Matrix([
            [-f, 0, 0, 0],
            [0, 1 / f, 0, 0],
            [0, 0, r**2, 0],
            [0, 0, 0, r**2 * sp.sin(theta) ** 2],
        ])
        return [t, r, theta, phi], g
