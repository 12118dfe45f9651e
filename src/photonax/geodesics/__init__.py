"""Null geodesic integration in Schwarzschild spacetime.

Provides the Cartesian/spherical coordinate transforms, the geodesic
right-hand side, launch (initial condition) helpers, the fixed-step RK4
stepper with horizon and pole guards, a Diffrax whole-path tracer, and
conservation/trajectory observables.
"""
from __future__ import annotations

from ..types import Dimension
from .coordinates import (
    cartesian_to_polar,
    cartesian_to_spherical,
    polar_to_cartesian,
    project_direction,
    spherical_to_cartesian,
)
from .equations import geodesic_rhs
from .initial_conditions import (
    ENERGY,
    LaunchResult,
    launch_photon,
    try_launch_photon,
)
from .integrator import (
    ClassicRK4,
    PhotonPath,
    clamp_theta,
    reflect_pole_crossing,
    rk4_step,
    state_to_cartesian,
    step_photon,
    trace_photon,
)
from .observables import (
    angular_momentum,
    deflection_angle,
    null_constraint,
    null_constraint_residual,
    radial_profile,
)
from .photon import PhotonState, phase_state

__all__ = [
    # Coordinates
    "cartesian_to_polar",
    "cartesian_to_spherical",
    "polar_to_cartesian",
    "project_direction",
    "spherical_to_cartesian",
    # Equations and stepping
    "ClassicRK4",
    "Dimension",
    "PhotonPath",
    "clamp_theta",
    "reflect_pole_crossing",
    "geodesic_rhs",
    "rk4_step",
    "state_to_cartesian",
    "step_photon",
    "trace_photon",
    # Photons
    "ENERGY",
    "LaunchResult",
    "PhotonState",
    "launch_photon",
    "phase_state",
    "try_launch_photon",
    # Observables
    "angular_momentum",
    "deflection_angle",
    "null_constraint",
    "null_constraint_residual",
    "radial_profile",
]
