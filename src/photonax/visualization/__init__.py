"""Matplotlib figures for photon trajectories."""
from __future__ import annotations

from .trajectory_plots import plot_radial_profile, plot_trajectories

__all__ = ["plot_radial_profile", "plot_trajectories"]
