"""Tests for Cartesian <-> spherical/polar transforms."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from photonax.geodesics import (
    cartesian_to_polar,
    cartesian_to_spherical,
    polar_to_cartesian,
    project_direction,
    spherical_to_cartesian,
)


class TestSphericalKnownValues:
    def test_x_axis(self):
        r, theta, phi = cartesian_to_spherical(jnp.array([2.0, 0.0, 0.0]))
        np.testing.assert_allclose([r, theta, phi], [2.0, np.pi / 2, 0.0], atol=1e-15)

    def test_z_axis(self):
        r, theta, _ = cartesian_to_spherical(jnp.array([0.0, 0.0, -3.0]))
        np.testing.assert_allclose([r, theta], [3.0, np.pi], atol=1e-15)

    def test_phi_range(self):
        _, _, phi = cartesian_to_spherical(jnp.array([-1.0, -1e-12, 0.0]))
        assert -np.pi < float(phi) < -np.pi / 2

    def test_origin_is_finite(self):
        """r = 0 is floored instead of dividing by zero."""
        out = cartesian_to_spherical(jnp.zeros(3))
        assert jnp.all(jnp.isfinite(out))


class TestRoundTrip:
    """Cartesian -> spherical -> Cartesian reproduces the point."""

    def test_spherical_round_trip(self):
        rng = np.random.default_rng(0)
        r = rng.uniform(1e-3, 1e3, 200)
        theta = rng.uniform(1e-6, np.pi - 1e-6, 200)
        phi = rng.uniform(-np.pi, np.pi, 200)
        points = jnp.asarray(
            np.stack([r * np.sin(theta) * np.cos(phi), r * np.sin(theta) * np.sin(phi), r * np.cos(theta)], axis=1)
        )

        back = jax.vmap(lambda p: spherical_to_cartesian(cartesian_to_spherical(p)))(points)
        np.testing.assert_allclose(back, points, rtol=1e-12, atol=1e-12 * float(jnp.max(jnp.abs(points))))

    def test_spherical_angles_round_trip(self):
        sph = jnp.array([5.0, 0.7, -2.1])
        np.testing.assert_allclose(cartesian_to_spherical(spherical_to_cartesian(sph)), sph, rtol=1e-13)

    def test_polar_round_trip(self):
        point = jnp.array([-3.0, 4.0, 0.0])
        r_phi = cartesian_to_polar(point)
        np.testing.assert_allclose(r_phi[0], 5.0, rtol=1e-15)
        np.testing.assert_allclose(polar_to_cartesian(r_phi), point, atol=1e-14)

    def test_polar_ignores_z(self):
        np.testing.assert_allclose(
            cartesian_to_polar(jnp.array([1.0, 1.0, 7.0])),
            cartesian_to_polar(jnp.array([1.0, 1.0, 0.0])),
        )

    def test_polar_to_cartesian_z_exactly_zero(self):
        assert float(polar_to_cartesian(jnp.array([3.0, 1.234]))[2]) == 0.0


class TestProjectDirection:
    """Cartesian direction -> (v_r, dtheta, dphi) via the coordinate Jacobian."""

    def test_radial_direction(self):
        position = jnp.array([1.0, 2.0, 2.0])
        sph = cartesian_to_spherical(position)
        v_r, dtheta, dphi = project_direction(sph, -position / 3.0)
        np.testing.assert_allclose(v_r, -1.0, rtol=1e-14)
        np.testing.assert_allclose([dtheta, dphi], [0.0, 0.0], atol=1e-15)

    def test_azimuthal_direction(self):
        """+y at (r, 0, 0) in the equatorial plane is pure dphi = 1/r."""
        sph = cartesian_to_spherical(jnp.array([4.0, 0.0, 0.0]))
        v_r, dtheta, dphi = project_direction(sph, jnp.array([0.0, 1.0, 0.0]))
        np.testing.assert_allclose([v_r, dtheta, dphi], [0.0, 0.0, 0.25], atol=1e-15)

    def test_polar_direction(self):
        """-z at (r, 0, 0) increases theta: dtheta = 1/r."""
        sph = cartesian_to_spherical(jnp.array([4.0, 0.0, 0.0]))
        v_r, dtheta, dphi = project_direction(sph, jnp.array([0.0, 0.0, -1.0]))
        np.testing.assert_allclose([v_r, dtheta, dphi], [0.0, 0.25, 0.0], atol=1e-15)

    def test_matches_autodiff_jacobian(self):
        """Angular rates equal d(theta, phi)/dx . direction."""
        position = jnp.array([1.3, -0.4, 2.2])
        direction = jnp.array([0.2, 0.9, -0.3])
        jac = jax.jacfwd(cartesian_to_spherical)(position)
        expected = jac @ direction
        v_r, dtheta, dphi = project_direction(cartesian_to_spherical(position), direction)
        np.testing.assert_allclose([v_r, dtheta, dphi], expected, rtol=1e-12)

    def test_rejects_wrong_shape(self):
        with pytest.raises((TypeError, ValueError)):
            cartesian_to_spherical(jnp.zeros(4))
