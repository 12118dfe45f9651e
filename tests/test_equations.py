"""Tests for the Schwarzschild null geodesic right-hand side.

The hand-written accelerations are cross-checked against Christoffel
symbols derived symbolically with SymPy from the metric.
"""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
import sympy as sp

from photonax import BlackHole, Dimension
from photonax.geodesics import geodesic_rhs


def _symbolic_accelerations(r0, theta0, dr0, dtheta0, dphi0, E0, rs0):
    """a^mu = -Gamma^mu_ab v^a v^b for mu in (r, theta, phi), with t' = E / f."""
    coords, g = BlackHole(mass=1.0).symbolic_metric()
    rs = sp.Symbol("r_s", positive=True)
    g_inv = g.inv()

    def christoffel(a, b, c):
        return sp.Rational(1, 2) * sum(
            g_inv[a, d]
            * (sp.diff(g[d, c], coords[b]) + sp.diff(g[d, b], coords[c]) - sp.diff(g[b, c], coords[d]))
            for d in range(4)
        )

    f0 = 1.0 - rs0 / r0
    v = [E0 / f0, dr0, dtheta0, dphi0]
    subs = {coords[1]: r0, coords[2]: theta0, rs: rs0}
    acc = []
    for mu in (1, 2, 3):
        total = sum(
            christoffel(mu, a, b).subs(subs) * v[a] * v[b]
            for a in range(4)
            for b in range(4)
        )
        acc.append(-float(total))
    return np.array(acc)


class TestAgainstChristoffelSymbols:
    @pytest.mark.parametrize(
        "r, theta, dr, dtheta, dphi",
        [
            (7.3, 1.1, -0.6, 0.03, 0.05),
            (3.5, 0.4, 0.2, -0.1, 0.12),
            (25.0, 2.6, -0.9, 0.002, -0.01),
        ],
    )
    def test_spatial_accelerations(self, r, theta, dr, dtheta, dphi):
        E, rs = 1.0, 2.0
        y = jnp.array([r, theta, 0.3, dr, dtheta, dphi])
        out = geodesic_rhs(y, jnp.asarray(E), jnp.asarray(rs), Dimension.SPATIAL, 0.0)

        np.testing.assert_allclose(out[:3], [dr, dtheta, dphi], rtol=1e-15)
        expected = _symbolic_accelerations(r, theta, dr, dtheta, dphi, E, rs)
        np.testing.assert_allclose(out[3:], expected, rtol=1e-10, atol=1e-14)


class TestPlanarSpecialization:
    def test_matches_spatial_on_equator(self):
        y = jnp.array([6.0, jnp.pi / 2, 1.0, -0.4, 0.0, 0.03])
        E, rs = jnp.asarray(1.0), jnp.asarray(2.0)
        planar = geodesic_rhs(y, E, rs, Dimension.PLANAR)
        spatial = geodesic_rhs(y, E, rs, Dimension.SPATIAL)
        np.testing.assert_allclose(planar, spatial, atol=1e-15)

    def test_theta_components_vanish(self):
        y = jnp.array([6.0, jnp.pi / 2, 1.0, -0.4, 0.0, 0.03])
        out = geodesic_rhs(y, jnp.asarray(1.0), jnp.asarray(2.0), Dimension.PLANAR)
        assert float(out[1]) == 0.0
        assert float(out[4]) == 0.0


class TestPhysicalLimits:
    def test_radial_null_ray_is_unaccelerated(self):
        """With L = 0 and dr^2 = E^2 the radial acceleration cancels exactly."""
        y = jnp.array([5.0, 1.0, 0.2, -1.0, 0.0, 0.0])
        out = geodesic_rhs(y, jnp.asarray(1.0), jnp.asarray(2.0))
        np.testing.assert_allclose(out[3:], 0.0, atol=1e-14)

    def test_flat_space_circle_limit(self):
        """rs = 0 reduces to flat space: r'' = r dphi^2 on the equator."""
        y = jnp.array([4.0, jnp.pi / 2, 0.0, 0.0, 0.0, 0.25])
        out = geodesic_rhs(y, jnp.asarray(1.0), jnp.asarray(0.0), Dimension.PLANAR)
        np.testing.assert_allclose(out[3], 4.0 * 0.25**2, rtol=1e-15)

    def test_pole_regularized(self):
        """cot(theta) at theta = 0 stays finite with the regularizer."""
        y = jnp.array([5.0, 0.0, 0.0, -0.5, 0.1, 0.1])
        out = geodesic_rhs(y, jnp.asarray(1.0), jnp.asarray(2.0), Dimension.SPATIAL, 1e-6)
        assert jnp.all(jnp.isfinite(out))


class TestJAXCompatibility:
    def test_jit_and_vmap(self):
        states = jnp.array([
            [6.0, 1.0, 0.0, -0.5, 0.01, 0.02],
            [9.0, 2.0, 1.0, 0.3, -0.02, 0.01],
        ])

        @jax.jit
        def batched(ys):
            return jax.vmap(lambda y: geodesic_rhs(y, jnp.asarray(1.0), jnp.asarray(2.0)))(ys)

        out = batched(states)
        assert out.shape == (2, 6)
        assert out.dtype == jnp.float64
        np.testing.assert_allclose(out[1], geodesic_rhs(states[1], jnp.asarray(1.0), jnp.asarray(2.0)))
