"""Planar light bending for a fan of impact parameters.

Rays start at x = 30 travelling in -x. Rays with impact parameter below
the critical value (3 sqrt(3) / 2) rs are captured; the rest are deflected,
more strongly the closer they pass.
"""

import numpy as np

from photonax import BlackHole, step_photon
from photonax.emitter import impact_parameter_fan
from photonax.geodesics import deflection_angle
from photonax.visualization import plot_trajectories

rs = BlackHole(mass=1.0).rs
b_critical = 1.5 * np.sqrt(3.0) * rs
impact_parameters = np.linspace(1.0, 15.0, 15)

photons = [result.unwrap() for result in impact_parameter_fan(rs, impact_parameters, 30.0)]

for _ in range(800):
    photons = [step_photon(p, rs, 0.1) for p in photons]

print(f"Critical impact parameter: {b_critical:.4f}")
print(f"{'b':>6} {'absorbed':>9} {'deflection [rad]':>17}")
for b, p in zip(impact_parameters, photons):
    bend = "-" if p.is_done else f"{float(deflection_angle(p)):.4f}"
    print(f"{b:6.2f} {str(p.is_done):>9} {bend:>17}")

plot_trajectories(
    {i: np.asarray(p.trajectory) for i, p in enumerate(photons)},
    rs,
    absorbed={i for i, p in enumerate(photons) if p.is_done},
    extent=32.0,
    save_path="light_bending_fan.pdf",
)
