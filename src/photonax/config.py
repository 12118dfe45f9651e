"""Simulation and integrator configuration as static Equinox modules.

All fields are static (pure metadata, no dynamic JAX arrays), so a config
can be closed over inside ``jax.jit``-compiled functions. The epsilon
constants are tuning parameters, not physical constants.
"""
from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from typing import Any

import equinox as eqx

from .errors import InvalidParameter
from .types import Dimension


def _require_positive(label: str, value: float) -> None:
    if not (math.isfinite(value) and value > 0):
        raise InvalidParameter(f"{label} must be positive and finite, got {value!r}")


def _check_keys(label: str, data: Mapping[str, Any], cls: type) -> None:
    unknown = set(data) - {f.name for f in dataclasses.fields(cls)}
    if unknown:
        raise InvalidParameter(f"Unknown {label} keys: {sorted(unknown)}")


# ---------------------------------------------------------------------------
# IntegratorConfig
# ---------------------------------------------------------------------------


class IntegratorConfig(eqx.Module):
    """Numerical guards used by the RK4 stepper.

    Parameters
    ----------
    theta_epsilon : float
        theta is clamped to ``[eps, pi - eps]`` before every step.
    horizon_epsilon : float
        A photon with ``r <= rs + horizon_epsilon`` is absorbed. Chosen
        empirically to stop before the ``1/f`` blow-up at the horizon.
    cot_regularizer : float
        ``cot(theta)`` is evaluated as ``cos / (sin + cot_regularizer)``.
    """

    theta_epsilon: float = eqx.field(static=True, default=1e-6)
    horizon_epsilon: float = eqx.field(static=True, default=0.1)
    cot_regularizer: float = eqx.field(static=True, default=1e-6)

    def __check_init__(self) -> None:
        _require_positive("theta_epsilon", self.theta_epsilon)
        if self.theta_epsilon >= math.pi / 2:
            raise InvalidParameter(
                f"theta_epsilon must be below pi/2, got {self.theta_epsilon!r}"
            )
        if not (math.isfinite(self.horizon_epsilon) and self.horizon_epsilon >= 0):
            raise InvalidParameter(
                f"horizon_epsilon must be non-negative, got {self.horizon_epsilon!r}"
            )
        _require_positive("cot_regularizer", self.cot_regularizer)


# ---------------------------------------------------------------------------
# SimulationConfig
# ---------------------------------------------------------------------------


class SimulationConfig(eqx.Module):
    """Named scalar parameters of a light-bending run.

    Parameters
    ----------
    black_hole_mass : float
        Mass M of the black hole.
    light_speed : float
        c (1 in geometric units).
    gravitational_constant : float
        G (1 in geometric units).
    step_size : float
        Affine-parameter step per tick.
    number_of_photons : int
        Photons launched by :meth:`Simulation.populate`.
    dimension : Dimension
        Planar (2D) or spatial (3D) motion.
    launch_distance : float
        Launch plane offset along +x, in units of rs.
    launch_spread : float
        Width of the launch square (or segment in 2D), in units of rs.
    launch_direction : tuple of float
        Launch direction, normalized by the emitter.
    seed : int
        Seed for the ``jax.random`` key used by the emitter.
    integrator : IntegratorConfig
        Numerical guards.
    """

    black_hole_mass: float = eqx.field(static=True, default=1.0)
    light_speed: float = eqx.field(static=True, default=1.0)
    gravitational_constant: float = eqx.field(static=True, default=1.0)
    step_size: float = eqx.field(static=True, default=0.1)
    number_of_photons: int = eqx.field(static=True, default=50)
    dimension: Dimension = eqx.field(static=True, default=Dimension.SPATIAL)
    launch_distance: float = eqx.field(static=True, default=10.0)
    launch_spread: float = eqx.field(static=True, default=25.0)
    launch_direction: tuple = eqx.field(static=True, default=(-1.0, -0.1, 0.1))
    seed: int = eqx.field(static=True, default=0)
    integrator: IntegratorConfig = eqx.field(default_factory=IntegratorConfig)

    def __check_init__(self) -> None:
        _require_positive("black_hole_mass", self.black_hole_mass)
        _require_positive("light_speed", self.light_speed)
        _require_positive("gravitational_constant", self.gravitational_constant)
        _require_positive("step_size", self.step_size)
        _require_positive("launch_distance", self.launch_distance)
        if not (math.isfinite(self.launch_spread) and self.launch_spread >= 0):
            raise InvalidParameter(
                f"launch_spread must be non-negative, got {self.launch_spread!r}"
            )
        if not isinstance(self.number_of_photons, int) or self.number_of_photons < 0:
            raise InvalidParameter(
                f"number_of_photons must be a non-negative int, got {self.number_of_photons!r}"
            )
        if len(self.launch_direction) != 3:
            raise InvalidParameter(
                f"launch_direction must have 3 components, got {self.launch_direction!r}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationConfig:
        """Build a config from a plain mapping (e.g. parsed JSON).

        Unknown keys, top-level or under ``integrator``, raise
        ``InvalidParameter``. ``dimension`` accepts
        ``"2d"``/``"3d"``; ``integrator`` accepts a nested mapping.
        """
        _check_keys("config", data, cls)

        kwargs = dict(data)
        if "dimension" in kwargs and not isinstance(kwargs["dimension"], Dimension):
            try:
                kwargs["dimension"] = Dimension(kwargs["dimension"])
            except ValueError as exc:
                raise InvalidParameter(
                    f"dimension must be '2d' or '3d', got {kwargs['dimension']!r}"
                ) from exc
        if "launch_direction" in kwargs:
            kwargs["launch_direction"] = tuple(float(c) for c in kwargs["launch_direction"])
        if isinstance(kwargs.get("integrator"), Mapping):
            _check_keys("integrator config", kwargs["integrator"], IntegratorConfig)
            kwargs["integrator"] = IntegratorConfig(**kwargs["integrator"])
        return cls(**kwargs)
