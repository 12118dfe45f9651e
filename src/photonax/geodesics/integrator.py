"""Fixed-step RK4 integration of photon null geodesics.

Each step:

1. recomputes the spherical phase state from the photon's Cartesian position,
2. clamps theta away from the poles,
3. absorbs the photon if it is within ``horizon_epsilon`` of the horizon,
4. advances the state by one classic 4-stage RK4 step,
5. converts back to Cartesian and appends the new point to the trajectory.

If a step carries theta through a pole, dtheta is flipped so the photon
crosses the axis instead of being pushed back towards it.

A step whose RK4 stages evaluate at ``r = rs`` produces non-finite values;
the photon is then absorbed without advancing.

Stepping is pure: ``step_photon`` returns a new ``PhotonState``. There is no
step-size control, so a step that is too large relative to the local
curvature can jump across the horizon band without triggering absorption.

``trace_photon`` integrates a whole path in one call via Diffrax, using the
same vector field and a classic RK4 Butcher tableau by default.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import ClassVar, NamedTuple

import diffrax
import equinox as eqx
import jax
import jax.numpy as jnp
import numpy as np
import optimistix as optx
from jaxtyping import Array, Float

from ..config import IntegratorConfig
from ..errors import InvalidParameter
from ..types import DPHI, DR, DTHETA, PHI, R, THETA, Dimension
from .coordinates import polar_to_cartesian, spherical_to_cartesian
from .equations import geodesic_rhs
from .photon import PhotonState, phase_state

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure numerical kernels
# ---------------------------------------------------------------------------


def clamp_theta(y: Float[Array, "6"], theta_epsilon: float) -> Float[Array, "6"]:
    """Clamp theta to ``[eps, pi - eps]``."""
    return y.at[THETA].set(jnp.clip(y[THETA], theta_epsilon, jnp.pi - theta_epsilon))


def reflect_pole_crossing(y: Float[Array, "6"]) -> Float[Array, "6"]:
    """Flip dtheta if theta left ``(0, pi)`` during a step.

    The next step rebuilds theta and phi from the Cartesian position, which
    puts the state in the mirrored chart (theta -> |theta| or 2 pi - theta,
    phi -> phi + pi). In that chart the photon moves away from the axis, so
    dtheta changes sign while dr and dphi carry over unchanged.
    """
    crossed = (y[THETA] < 0.0) | (y[THETA] > jnp.pi)
    return y.at[DTHETA].set(jnp.where(crossed, -y[DTHETA], y[DTHETA]))


def state_to_cartesian(
    y: Float[Array, "6"], dimension: Dimension = Dimension.SPATIAL
) -> Float[Array, "3"]:
    """Cartesian position of a phase-space state."""
    if dimension is Dimension.PLANAR:
        return polar_to_cartesian(jnp.stack([y[R], y[PHI]]))
    return spherical_to_cartesian(y[:3])


@partial(jax.jit, static_argnames=("dimension", "cot_regularizer"))
def rk4_step(
    y: Float[Array, "6"],
    E: Float[Array, ""],
    rs: Float[Array, ""],
    step_size: Float[Array, ""],
    dimension: Dimension = Dimension.SPATIAL,
    cot_regularizer: float = 1e-6,
) -> Float[Array, "6"]:
    """Advance the phase state by one classic RK4 step.

        k1 = G(y)
        k2 = G(y + k1 h/2)
        k3 = G(y + k2 h/2)
        k4 = G(y + k3 h)
        y' = y + (h/6)(k1 + 2 k2 + 2 k3 + k4)
    """
    def rhs(state: Float[Array, "6"]) -> Float[Array, "6"]:
        return geodesic_rhs(state, E, rs, dimension, cot_regularizer)

    h = step_size
    k1 = rhs(y)
    k2 = rhs(y + 0.5 * h * k1)
    k3 = rhs(y + 0.5 * h * k2)
    k4 = rhs(y + h * k3)
    return y + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


@partial(jax.jit, static_argnames=("dimension", "theta_epsilon", "cot_regularizer"))
def _advance(
    position: Float[Array, "3"],
    velocities: Float[Array, "3"],
    E: Float[Array, ""],
    rs: Float[Array, ""],
    step_size: Float[Array, ""],
    dimension: Dimension,
    theta_epsilon: float,
    cot_regularizer: float,
) -> tuple[Float[Array, "6"], Float[Array, "6"], Float[Array, "3"]]:
    """Clamped current state, RK4-advanced state, and its Cartesian position."""
    y = phase_state(position, velocities[0], velocities[1], velocities[2], dimension)
    y = clamp_theta(y, theta_epsilon)
    y_new = rk4_step(y, E, rs, step_size, dimension, cot_regularizer)
    return y, reflect_pole_crossing(y_new), state_to_cartesian(y_new, dimension)


def _check_step_size(step_size: float) -> None:
    if not step_size > 0:
        raise InvalidParameter(f"step_size must be positive, got {step_size!r}")


# ---------------------------------------------------------------------------
# Single step
# ---------------------------------------------------------------------------


def step_photon(
    photon: PhotonState,
    rs: float,
    step_size: float,
    config: IntegratorConfig | None = None,
) -> PhotonState:
    """Advance a photon by one affine-parameter step.

    Parameters
    ----------
    photon : PhotonState
        Current state. Returned unchanged if already done.
    rs : float
        Schwarzschild radius.
    step_size : float
        Affine-parameter increment (> 0).
    config : IntegratorConfig or None
        Numerical guards (defaults if None).

    Returns
    -------
    PhotonState
        The advanced photon with one more trajectory point, or the same
        photon flagged ``is_done`` if it reached the horizon band.

    Raises
    ------
    InvalidParameter
        If ``step_size`` is not positive.
    """
    _check_step_size(step_size)
    if photon.is_done:
        return photon
    config = IntegratorConfig() if config is None else config

    velocities = jnp.stack([photon.dr, photon.dtheta, photon.dphi])
    y, y_new, position = _advance(
        photon.position,
        velocities,
        photon.E,
        jnp.asarray(rs, dtype=jnp.float64),
        jnp.asarray(step_size, dtype=jnp.float64),
        photon.dimension,
        config.theta_epsilon,
        config.cot_regularizer,
    )

    r = float(y[R])
    if r <= rs + config.horizon_epsilon:
        logger.debug(
            "Photon absorbed at r=%.6g (rs=%.6g) after %d points",
            r, rs, photon.num_points,
        )
        return eqx.tree_at(lambda p: p.is_done, photon, True)

    # A stage landed exactly on r = rs (f = 0): treat as absorbed
    if not bool(jnp.all(jnp.isfinite(y_new))):
        logger.debug("Non-finite RK4 stage from r=%.6g (rs=%.6g); absorbing", r, rs)
        return eqx.tree_at(lambda p: p.is_done, photon, True)

    return eqx.tree_at(
        lambda p: (p.position, p.dr, p.dtheta, p.dphi, p.trajectory),
        photon,
        (
            position,
            y_new[DR],
            y_new[DTHETA],
            y_new[DPHI],
            jnp.concatenate([photon.trajectory, position[None, :]], axis=0),
        ),
    )


# ---------------------------------------------------------------------------
# Whole-path integration via Diffrax
# ---------------------------------------------------------------------------

_rk4_tableau = diffrax.ButcherTableau(
    c=np.array([0.5, 0.5, 1.0]),
    b_sol=np.array([1 / 6, 1 / 3, 1 / 3, 1 / 6]),
    b_error=np.zeros(4),
    a_lower=(
        np.array([0.5]),
        np.array([0.0, 0.5]),
        np.array([0.0, 0.0, 1.0]),
    ),
)


class ClassicRK4(diffrax.AbstractERK):
    """Classic 4-stage, 4th-order Runge-Kutta method for Diffrax.

    Same update as :func:`rk4_step`. It has no embedded error estimate, so it
    is only meant for ``diffrax.ConstantStepSize``.
    """

    tableau: ClassVar[diffrax.ButcherTableau] = _rk4_tableau
    interpolation_cls: ClassVar = diffrax.ThirdOrderHermitePolynomialInterpolation.from_k

    def order(self, terms):
        return 4


class PhotonPath(NamedTuple):
    """Result of :func:`trace_photon`.

    Attributes
    ----------
    ts : Float[Array, "N"]
        Affine parameter at each saved point.
    states : Float[Array, "N 6"]
        Phase-space states [r, theta, phi, dr, dtheta, dphi].
    positions : Float[Array, "N 3"]
        Cartesian positions.
    absorbed : bool
        True if the path ended on the horizon band.
    """

    ts: Float[Array, "N"]
    states: Float[Array, "N 6"]
    positions: Float[Array, "N 3"]
    absorbed: bool


def trace_photon(
    photon: PhotonState,
    rs: float,
    step_size: float,
    num_steps: int,
    config: IntegratorConfig | None = None,
    *,
    solver: diffrax.AbstractSolver | None = None,
) -> PhotonPath:
    """Integrate a photon for up to ``num_steps`` fixed steps in one call.

    Uses Diffrax with a classic RK4 tableau and a constant step size by default,
    and a horizon event at ``r = rs + horizon_epsilon`` located with an
    optimistix Newton root finder. Unlike :func:`step_photon` the angles are
    integrated continuously rather than re-derived from Cartesian positions
    every step, and theta is only clamped at the start.

    Parameters
    ----------
    photon : PhotonState
        Starting state.
    rs : float
        Schwarzschild radius.
    step_size : float
        Affine-parameter step (> 0).
    num_steps : int
        Maximum number of steps.
    config : IntegratorConfig or None
        Numerical guards (defaults if None).
    solver : diffrax.AbstractSolver or None
        Override the fixed-step RK4 solver.

    Returns
    -------
    PhotonPath
        Saved states, starting point included.
    """
    _check_step_size(step_size)
    if num_steps < 1:
        raise InvalidParameter(f"num_steps must be >= 1, got {num_steps!r}")
    config = IntegratorConfig() if config is None else config
    dimension = photon.dimension

    y0 = clamp_theta(photon.phase_state(), config.theta_epsilon)
    horizon = rs + config.horizon_epsilon
    if photon.is_done or float(y0[R]) <= horizon:
        return PhotonPath(
            ts=jnp.zeros(1),
            states=y0[None, :],
            positions=photon.position[None, :],
            absorbed=True,
        )

    def vector_field(t: Float[Array, ""], y: Float[Array, "6"], args: tuple) -> Float[Array, "6"]:
        E, rs_ = args
        return geodesic_rhs(y, E, rs_, dimension, config.cot_regularizer)

    def horizon_cond(t: Float[Array, ""], y: Float[Array, "6"], args: tuple, **kwargs: object) -> Float[Array, ""]:
        return y[R] - horizon

    event = diffrax.Event(
        cond_fn=horizon_cond, root_finder=optx.Newton(rtol=1e-8, atol=1e-8)
    )

    sol = diffrax.diffeqsolve(
        diffrax.ODETerm(vector_field),
        ClassicRK4() if solver is None else solver,
        t0=0.0,
        t1=num_steps * step_size,
        dt0=step_size,
        y0=y0,
        args=(photon.E, jnp.asarray(rs, dtype=jnp.float64)),
        saveat=diffrax.SaveAt(t0=True, steps=True),
        stepsize_controller=diffrax.ConstantStepSize(),
        max_steps=num_steps + 1,
        throw=False,
        event=event,
    )

    # Unused step slots are padded with inf
    keep = jnp.isfinite(sol.ts)
    ts = sol.ts[keep]
    states = sol.ys[keep]
    positions = jax.vmap(lambda y: state_to_cartesian(y, dimension))(states)

    absorbed = bool(sol.event_mask) if sol.event_mask is not None else False
    if absorbed:
        logger.debug("Traced photon absorbed at lambda=%.6g", float(ts[-1]))
    return PhotonPath(ts=ts, states=states, positions=positions, absorbed=absorbed)
