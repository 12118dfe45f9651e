"""Shared test fixtures for the photonax test suite.

Float64 enforcement is verified at import time: the 1e-9 null-constraint
tolerances below are meaningless in float32.
"""

import jax.numpy as jnp
import pytest

import photonax  # noqa: F401  (enables x64)
from photonax import BlackHole, Dimension, IntegratorConfig, launch_photon

# ---------------------------------------------------------------------------
# Float64 enforcement check fails LOUD if x64 is not enabled
# ---------------------------------------------------------------------------
_probe = jnp.array(1.0)
assert _probe.dtype == jnp.float64, (
    f"JAX float64 not enabled!  Got dtype={_probe.dtype}.  "
    "Ensure jax.config.update('jax_enable_x64', True) runs before any JAX import."
)


# ---------------------------------------------------------------------------
# Black hole and config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def black_hole() -> BlackHole:
    """Unit-mass black hole in geometric units (rs = 2)."""
    return BlackHole(mass=1.0)


@pytest.fixture
def rs(black_hole: BlackHole) -> float:
    return black_hole.rs


@pytest.fixture
def integrator_config() -> IntegratorConfig:
    return IntegratorConfig()


# ---------------------------------------------------------------------------
# Photon fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def radial_planar_photon(rs: float):
    """Planar photon falling straight in from r0 = 30.05."""
    return launch_photon(
        rs, jnp.array([30.05, 0.0, 0.0]), jnp.array([-1.0, 0.0, 0.0]), Dimension.PLANAR
    )


@pytest.fixture
def radial_spatial_photon(rs: float):
    """3D photon falling straight in along the (1, 1, 1) diagonal."""
    position = jnp.array([10.0, 10.0, 10.0])
    return launch_photon(rs, position, -position / jnp.linalg.norm(position))


@pytest.fixture
def grazing_planar_photon(rs: float):
    """Planar photon from r0 = 30 with impact parameter 1 (captured)."""
    b = 1.0
    return launch_photon(
        rs,
        jnp.array([jnp.sqrt(30.0**2 - b**2), b, 0.0]),
        jnp.array([-1.0, 0.0, 0.0]),
        Dimension.PLANAR,
    )


@pytest.fixture
def deflected_planar_photon(rs: float):
    """Planar photon from x = 30 with impact parameter 10 (escapes)."""
    return launch_photon(
        rs, jnp.array([30.0, 10.0, 0.0]), jnp.array([-1.0, 0.0, 0.0]), Dimension.PLANAR
    )
