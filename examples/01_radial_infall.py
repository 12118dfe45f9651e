"""Radial infall sanity check.

A photon launched straight at the black hole has zero angular momentum, so
it must fall in along a straight line: theta and phi stay fixed and the
radial velocity stays at -E until the horizon guard absorbs it.
"""

import jax.numpy as jnp

from photonax import BlackHole, launch_photon, step_photon
from photonax.geodesics import null_constraint_residual

black_hole = BlackHole(mass=1.0)
rs = black_hole.rs

position = jnp.array([10.0, 10.0, 10.0])
direction = -position / jnp.linalg.norm(position)
photon = launch_photon(rs, position, direction)

print("Radial infall")
print("=" * 40)
print(f"rs = {rs}, r0 = {float(jnp.linalg.norm(position)):.4f}, L = {float(photon.L):.2e}")

steps = 0
while not photon.is_done and steps < 1000:
    photon = step_photon(photon, rs, 0.1)
    steps += 1

r_final = float(jnp.linalg.norm(photon.position))
unit0 = position / jnp.linalg.norm(position)
units = photon.trajectory / jnp.linalg.norm(photon.trajectory, axis=1, keepdims=True)
drift = jnp.max(jnp.abs(units - unit0))
print(f"Absorbed after {photon.num_points - 1} steps at r = {r_final:.4f}")
print(f"Max angular drift of unit position vector: {float(drift):.2e}")
print(f"Null constraint residual: {float(null_constraint_residual(photon, rs)):.2e}")

assert photon.is_done
assert float(drift) < 1e-9
