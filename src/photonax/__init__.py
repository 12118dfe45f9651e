"""Null geodesic integration around a Schwarzschild black hole.

Traces photon trajectories with a fixed-step RK4 scheme for visualizing
gravitational light bending.

Units: geometric (G = c = 1) unless a config says otherwise.
"""

# Float64 enforcement - must happen before any JAX imports that might
# create arrays with default float32 precision.
import jax
jax.config.update("jax_enable_x64", True)

from .blackhole import BlackHole
from .config import IntegratorConfig, SimulationConfig
from .errors import InvalidInitialConditions, InvalidParameter, PhotonaxError
from .geodesics import Dimension, PhotonState, launch_photon, step_photon
from .simulation import Simulation

__version__ = "0.1.0"

__all__ = [
    "BlackHole",
    "Dimension",
    "IntegratorConfig",
    "InvalidInitialConditions",
    "InvalidParameter",
    "PhotonState",
    "PhotonaxError",
    "Simulation",
    "SimulationConfig",
    "launch_photon",
    "step_photon",
]
