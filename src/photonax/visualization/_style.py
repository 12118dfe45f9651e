"""Shared matplotlib style for trajectory figures.

- Computer Modern fonts via ``text.usetex`` when LaTeX is on PATH (mathtext
  fallback otherwise)
- single-column (3.39") and double-column (6.69") figure widths
- colour-blind safe palette
"""
from __future__ import annotations

import shutil

import matplotlib.pyplot as plt


def _latex_available() -> bool:
    """Check whether ``latex`` and ``dvipng`` are on PATH."""
    return shutil.which("latex") is not None and shutil.which("dvipng") is not None


USE_TEX: bool = _latex_available()

SINGLE_COL: float = 3.39   # inches
DOUBLE_COL: float = 6.69   # inches

STYLE_PARAMS: dict[str, object] = {
    "text.usetex": USE_TEX,
    "font.family": "serif",
    "font.serif": ["Computer Modern Roman", "DejaVu Serif"],
    "font.size": 10,
    "axes.labelsize": 11,
    "axes.titlesize": 11,
    "legend.fontsize": 9,
    "figure.dpi": 150,
    "savefig.dpi": 300,
    "savefig.bbox": "tight",
    "lines.linewidth": 0.9,
    "xtick.direction": "in",
    "ytick.direction": "in",
    "xtick.top": True,
    "ytick.right": True,
}

COLORS: list[str] = [
    "#0072B2",  # blue
    "#D55E00",  # vermilion
    "#009E73",  # green
    "#CC79A7",  # pink
    "#E69F00",  # amber
    "#56B4E9",  # sky blue
]

# Absorbed photons are drawn in this colour regardless of palette.
ABSORBED_COLOR: str = "#555555"


def apply_style() -> None:
    """Apply the package matplotlib style."""
    plt.rcParams.update(STYLE_PARAMS)
