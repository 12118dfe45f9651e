"""Light bending around a Schwarzschild black hole.

Launches a batch of photons from the emitter plane, steps them with the
fixed-step RK4 integrator until they are absorbed or the tick budget runs
out, and writes:

- ``trajectories.npz``: one (N, 3) array per photon (key ``photon_<i>``)
- ``summary.json``: configuration, absorption counts, null-constraint drift
- ``trajectories.pdf``: projected paths (unless ``--no-plot``)

Usage
-----
Default 3D run::

    python scripts/run_simulation.py

Planar run with 20 photons and a finer step::

    python scripts/run_simulation.py --dimension 2d --photons 20 --step-size 0.05

Load parameters from JSON (command-line flags override it)::

    python scripts/run_simulation.py --config run.json

Show help::

    python scripts/run_simulation.py --help
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import time

import numpy as np

from photonax import Simulation, SimulationConfig
from photonax.geodesics import null_constraint_residual
from photonax.visualization import plot_trajectories

RESULTS_DIR = "results/"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Schwarzschild light-bending simulation")
    parser.add_argument("--config", type=str, default=None, help="JSON file of SimulationConfig fields")
    parser.add_argument("--mass", type=float, default=None, help="Black hole mass (default: 1)")
    parser.add_argument("--light-speed", type=float, default=None, help="Speed of light c (default: 1)")
    parser.add_argument("--grav-constant", type=float, default=None, help="Gravitational constant G (default: 1)")
    parser.add_argument("--step-size", type=float, default=None, help="Affine-parameter step (default: 0.1)")
    parser.add_argument("--photons", type=int, default=None, help="Number of photons (default: 50)")
    parser.add_argument("--dimension", choices=["2d", "3d"], default=None, help="Planar or spatial motion")
    parser.add_argument("--seed", type=int, default=None, help="Emitter random seed (default: 0)")
    parser.add_argument("--horizon-epsilon", type=float, default=None, help="Absorption margin above rs (default: 0.1)")
    parser.add_argument("--max-ticks", type=int, default=2000, help="Tick budget (default: 2000)")
    parser.add_argument("--output", type=str, default=RESULTS_DIR, help="Output directory")
    parser.add_argument("--no-plot", action="store_true", help="Skip the trajectory figure")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args()


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Merge the optional JSON config with command-line overrides."""
    data: dict[str, object] = {}
    if args.config is not None:
        with open(args.config) as fh:
            data.update(json.load(fh))

    overrides = {
        "black_hole_mass": args.mass,
        "light_speed": args.light_speed,
        "gravitational_constant": args.grav_constant,
        "step_size": args.step_size,
        "number_of_photons": args.photons,
        "dimension": args.dimension,
        "seed": args.seed,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if args.horizon_epsilon is not None:
        integrator = dict(data.get("integrator", {}))
        integrator["horizon_epsilon"] = args.horizon_epsilon
        data["integrator"] = integrator
    return SimulationConfig.from_dict(data)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    config = build_config(args)
    os.makedirs(args.output, exist_ok=True)

    sim = Simulation(config)
    sim.populate()

    print(f"rs = {sim.rs:.6g}, {len(sim.photons)} photons, dimension {config.dimension.value}")
    t0 = time.time()
    ticks = sim.run(args.max_ticks)
    elapsed = time.time() - t0
    print(f"{ticks} ticks in {elapsed:.1f}s: {len(sim.done)} absorbed, {len(sim.live)} live")

    trajectories = sim.trajectories()
    np.savez(
        os.path.join(args.output, "trajectories.npz"),
        **{f"photon_{i}": traj for i, traj in trajectories.items()},
    )

    residuals = [
        abs(float(null_constraint_residual(p, sim.rs))) for p in sim.photons.values()
    ]
    summary = {
        "rs": sim.rs,
        "step_size": config.step_size,
        "dimension": config.dimension.value,
        "photons": len(sim.photons),
        "absorbed": sim.done,
        "live": sim.live,
        "ticks": ticks,
        "max_null_constraint_residual": max(residuals, default=0.0),
        "elapsed_s": elapsed,
    }
    with open(os.path.join(args.output, "summary.json"), "w") as fh:
        json.dump(summary, fh, indent=2)

    if not args.no_plot:
        plot_trajectories(
            trajectories,
            sim.rs,
            absorbed=set(sim.done),
            title=f"{len(sim.done)}/{len(sim.photons)} photons absorbed",
            save_path=os.path.join(args.output, "trajectories.pdf"),
        )
    print(f"Results written to {args.output}")


if __name__ == "__main__":
    main()
