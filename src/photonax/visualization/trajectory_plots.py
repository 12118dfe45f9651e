"""Photon trajectory figures.

- plot_trajectories: projected photon paths with the horizon disc
- plot_radial_profile: distance from the black hole against step index

Both accept an optional ``ax`` for subplot embedding and an optional
``save_path`` for direct export.
"""
from __future__ import annotations

from collections.abc import Mapping

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle
from numpy.typing import NDArray

from ._style import ABSORBED_COLOR, COLORS, DOUBLE_COL, SINGLE_COL, apply_style

apply_style()

_PLANES = {"xy": (0, 1), "xz": (0, 2), "yz": (1, 2)}


def _save_or_return(fig: plt.Figure, save_path: str | None) -> plt.Figure:
    """Save figure if save_path given, otherwise return for interactive use."""
    if save_path is not None:
        fig.savefig(save_path)
        plt.close(fig)
    return fig


def plot_trajectories(
    trajectories: Mapping[int, NDArray],
    rs: float,
    *,
    absorbed: set[int] | None = None,
    plane: str = "xy",
    extent: float | None = None,
    title: str | None = None,
    save_path: str | None = None,
    ax: plt.Axes | None = None,
) -> plt.Figure:
    """Plot photon paths projected onto a coordinate plane.

    Parameters
    ----------
    trajectories : mapping of int -> NDArray, shape (N, 3)
        Cartesian trajectory per photon index.
    rs : float
        Schwarzschild radius, drawn as a filled disc at the origin.
    absorbed : set of int or None
        Indices drawn in grey as captured photons.
    plane : {"xy", "xz", "yz"}
        Projection plane.
    extent : float or None
        Half-width of the square view; fitted to the data if None.
    title : str or None
        Optional figure title.
    save_path : str or None
        If given, save the figure to this path.
    ax : matplotlib Axes or None
        If given, plot on this axes.

    Returns
    -------
    matplotlib Figure
    """
    if plane not in _PLANES:
        raise ValueError(f"Unknown plane: {plane!r}. Use one of {sorted(_PLANES)}.")
    i, j = _PLANES[plane]
    absorbed = absorbed or set()

    own_fig = ax is None
    if own_fig:
        fig, ax = plt.subplots(1, 1, figsize=(DOUBLE_COL, DOUBLE_COL))
    else:
        fig = ax.get_figure()

    for n, (index, traj) in enumerate(sorted(trajectories.items())):
        traj = np.asarray(traj)
        color = ABSORBED_COLOR if index in absorbed else COLORS[n % len(COLORS)]
        ax.plot(traj[:, i], traj[:, j], color=color, alpha=0.85)

    ax.add_patch(Circle((0.0, 0.0), rs, color="black", zorder=3))

    if extent is None and trajectories:
        extent = 1.05 * max(float(np.max(np.abs(np.asarray(t)))) for t in trajectories.values())
    if extent:
        ax.set_xlim(-extent, extent)
        ax.set_ylim(-extent, extent)
    ax.set_aspect("equal")
    ax.set_xlabel(f"${plane[0]}$")
    ax.set_ylabel(f"${plane[1]}$")
    if title:
        ax.set_title(title)

    if own_fig:
        fig.tight_layout(pad=0.5)

    return _save_or_return(fig, save_path)


def plot_radial_profile(
    radii: NDArray,
    rs: float,
    *,
    horizon_epsilon: float = 0.0,
    title: str | None = None,
    save_path: str | None = None,
    ax: plt.Axes | None = None,
) -> plt.Figure:
    """Plot distance from the black hole against step index.

    The horizon and the absorption threshold ``rs + horizon_epsilon`` are
    drawn as horizontal lines.
    """
    r = np.asarray(radii)

    own_fig = ax is None
    if own_fig:
        fig, ax = plt.subplots(1, 1, figsize=(SINGLE_COL, 0.75 * SINGLE_COL))
    else:
        fig = ax.get_figure()

    ax.plot(np.arange(len(r)), r, color=COLORS[0])
    ax.axhline(rs, color="black", linewidth=0.7, label="$r_s$")
    if horizon_epsilon > 0:
        ax.axhline(rs + horizon_epsilon, color="gray", linestyle="--",
                   linewidth=0.7, label="absorption")
    ax.set_xlabel("step")
    ax.set_ylabel("$r$")
    ax.legend(loc="best")
    if title:
        ax.set_title(title)

    if own_fig:
        fig.tight_layout(pad=0.5)

    return _save_or_return(fig, save_path)
