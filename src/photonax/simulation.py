"""Simulation driver: an indexed store of photon states stepped once per tick.

The driver owns the only mutable state in the package, a mapping from photon
index to the latest immutable ``PhotonState``. Each tick replaces every live
photon's state with ``step_photon`` of it. Photons are independent, so the
order of stepping within a tick does not matter.

There is no internal iteration bound: a photon on a (numerically) bound orbit
never finishes, so ``run`` always takes ``max_ticks``.
"""
from __future__ import annotations

import logging

import jax
import numpy as np
from jaxtyping import ArrayLike, PRNGKeyArray

from .blackhole import BlackHole
from .config import SimulationConfig
from .emitter import emit_photons
from .geodesics.initial_conditions import try_launch_photon
from .geodesics.integrator import step_photon
from .geodesics.photon import PhotonState

logger = logging.getLogger(__name__)


class Simulation:
    """Light-bending simulation around a single black hole.

    Parameters
    ----------
    config : SimulationConfig or None
        Run parameters (defaults if None).
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = SimulationConfig() if config is None else config
        self.black_hole = BlackHole(
            mass=self.config.black_hole_mass,
            gravitational_constant=self.config.gravitational_constant,
            light_speed=self.config.light_speed,
        )
        self.photons: dict[int, PhotonState] = {}
        self.ticks = 0
        self._next_index = 0

    @property
    def rs(self) -> float:
        return self.black_hole.rs

    @property
    def live(self) -> list[int]:
        """Indices of photons still in flight."""
        return [i for i, p in self.photons.items() if not p.is_done]

    @property
    def done(self) -> list[int]:
        """Indices of photons absorbed by the horizon."""
        return [i for i, p in self.photons.items() if p.is_done]

    # -- population -------------------------------------------------------

    def spawn(self, position: ArrayLike, direction: ArrayLike) -> int | None:
        """Launch one photon; return its index, or None if the launch failed."""
        result = try_launch_photon(self.rs, position, direction, self.config.dimension)
        if not result.ok:
            logger.warning("Skipping photon: %s", result.error)
            return None
        return self._store(result.photon)

    def populate(self, key: PRNGKeyArray | None = None) -> list[int]:
        """Launch ``config.number_of_photons`` photons from the emitter.

        Failed launches are logged and skipped; the rest of the batch is
        kept. Returns the indices of the stored photons.
        """
        if key is None:
            key = jax.random.PRNGKey(self.config.seed)
        indices = []
        for n, result in enumerate(emit_photons(key, self.rs, self.config)):
            if not result.ok:
                logger.warning("Skipping emitted photon %d: %s", n, result.error)
                continue
            indices.append(self._store(result.photon))
        logger.info(
            "Populated %d of %d photons (rs=%.6g)",
            len(indices), self.config.number_of_photons, self.rs,
        )
        return indices

    def _store(self, photon: PhotonState) -> int:
        index = self._next_index
        self.photons[index] = photon
        self._next_index += 1
        return index

    # -- stepping ---------------------------------------------------------

    def tick(self) -> int:
        """Step every live photon once. Returns the number still live afterwards."""
        for index in self.live:
            self.photons[index] = step_photon(
                self.photons[index],
                self.rs,
                self.config.step_size,
                self.config.integrator,
            )
        self.ticks += 1
        return len(self.live)

    def run(self, max_ticks: int) -> int:
        """Tick until no photon is live or ``max_ticks`` ticks have run.

        Returns the number of ticks executed by this call.
        """
        executed = 0
        while executed < max_ticks and self.live:
            self.tick()
            executed += 1
        logger.info(
            "Ran %d ticks: %d absorbed, %d still live",
            executed, len(self.done), len(self.live),
        )
        return executed

    # -- output -----------------------------------------------------------

    def trajectories(self) -> dict[int, np.ndarray]:
        """Trajectory of every photon as a host (N, 3) array."""
        return {i: np.asarray(p.trajectory) for i, p in self.photons.items()}
