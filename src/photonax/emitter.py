"""Photon emitters: batches of launch points and directions.

``emit_photons`` scatters launch points uniformly over a square (a segment
in 2D) of side ``launch_spread * rs`` centred on the x-axis at
``x = launch_distance * rs``, all sharing ``config.launch_direction``.
``impact_parameter_fan`` launches parallel rays at chosen impact parameters.

Launches that fail are returned as failed ``LaunchResult`` values so the
caller can skip them without losing the batch.
"""
from __future__ import annotations

from collections.abc import Sequence

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float, PRNGKeyArray

from .config import SimulationConfig
from .errors import InvalidParameter
from .geodesics.initial_conditions import LaunchResult, try_launch_photon
from .types import Dimension


def _unit_direction(direction: Sequence[float], dimension: Dimension) -> Float[Array, "3"]:
    d = jnp.asarray(direction, dtype=jnp.float64)
    if dimension is Dimension.PLANAR:
        d = d.at[2].set(0.0)
    norm = jnp.linalg.norm(d)
    if float(norm) == 0.0:
        raise InvalidParameter(f"launch direction {tuple(direction)} has no usable component")
    return d / norm


def emission_points(
    key: PRNGKeyArray,
    rs: float,
    config: SimulationConfig,
) -> tuple[Float[Array, "N 3"], Float[Array, "N 3"]]:
    """Draw launch positions and directions for ``config.number_of_photons`` photons.

    Returns
    -------
    tuple[Float[Array, "N 3"], Float[Array, "N 3"]]
        Launch positions and (normalized) launch directions.
    """
    n = config.number_of_photons
    x0 = config.launch_distance * rs
    half = 0.5 * config.launch_spread * rs

    key_y, key_z = jax.random.split(key)
    y0 = jax.random.uniform(key_y, (n,), minval=-half, maxval=half)
    if config.dimension is Dimension.PLANAR:
        z0 = jnp.zeros(n)
    else:
        z0 = jax.random.uniform(key_z, (n,), minval=-half, maxval=half)

    positions = jnp.stack([jnp.full(n, x0), y0, z0], axis=1)
    direction = _unit_direction(config.launch_direction, config.dimension)
    directions = jnp.broadcast_to(direction, (n, 3))
    return positions, directions


def emit_photons(
    key: PRNGKeyArray,
    rs: float,
    config: SimulationConfig,
) -> list[LaunchResult]:
    """Launch a random batch of photons; one ``LaunchResult`` per photon."""
    positions, directions = emission_points(key, rs, config)
    return [
        try_launch_photon(rs, position, direction, config.dimension)
        for position, direction in zip(positions, directions)
    ]


def impact_parameter_fan(
    rs: float,
    impact_parameters: Sequence[float],
    distance: float,
    dimension: Dimension = Dimension.PLANAR,
) -> list[LaunchResult]:
    """Launch rays travelling in -x from ``x = distance`` offset by ``y = b``.

    Far from the black hole ``b`` is the impact parameter; rays with
    ``b`` below ``(3 sqrt(3) / 2) rs`` are captured.
    """
    direction = jnp.array([-1.0, 0.0, 0.0])
    return [
        try_launch_photon(rs, jnp.array([distance, b, 0.0]), direction, dimension)
        for b in impact_parameters
    ]
