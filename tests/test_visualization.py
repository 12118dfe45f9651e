"""Smoke tests for the trajectory figures."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from photonax.visualization import plot_radial_profile, plot_trajectories


@pytest.fixture
def trajectories():
    t = np.linspace(0.0, 1.0, 20)
    return {
        0: np.stack([10.0 - 8.0 * t, 2.0 * t, np.zeros_like(t)], axis=1),
        1: np.stack([10.0 - 15.0 * t, 5.0 + t, t], axis=1),
    }


class TestPlotTrajectories:
    def test_returns_figure(self, trajectories):
        fig = plot_trajectories(trajectories, 2.0, absorbed={0}, title="bending")
        assert isinstance(fig, plt.Figure)
        ax = fig.axes[0]
        assert len(ax.lines) == 2
        assert len(ax.patches) == 1
        plt.close(fig)

    @pytest.mark.parametrize("plane", ["xy", "xz", "yz"])
    def test_planes(self, trajectories, plane):
        fig = plot_trajectories(trajectories, 2.0, plane=plane, extent=20.0)
        assert fig.axes[0].get_xlim() == (-20.0, 20.0)
        plt.close(fig)

    def test_unknown_plane(self, trajectories):
        with pytest.raises(ValueError, match="Unknown plane"):
            plot_trajectories(trajectories, 2.0, plane="rz")

    def test_existing_axes(self, trajectories):
        fig, (left, right) = plt.subplots(1, 2)
        out = plot_trajectories(trajectories, 2.0, ax=right)
        assert out is fig
        assert len(right.lines) == 2
        assert len(left.lines) == 0
        plt.close(fig)

    def test_empty_mapping(self):
        fig = plot_trajectories({}, 2.0)
        assert len(fig.axes[0].patches) == 1
        plt.close(fig)

    def test_save(self, trajectories, tmp_path):
        path = tmp_path / "paths.png"
        plot_trajectories(trajectories, 2.0, save_path=str(path))
        assert path.exists() and path.stat().st_size > 0


class TestPlotRadialProfile:
    def test_threshold_line(self):
        fig = plot_radial_profile(np.linspace(10.0, 2.1, 30), 2.0, horizon_epsilon=0.1)
        ax = fig.axes[0]
        # profile + horizon + absorption threshold
        assert len(ax.lines) == 3
        plt.close(fig)

    def test_save(self, tmp_path):
        path = tmp_path / "radius.png"
        plot_radial_profile(np.linspace(10.0, 2.1, 30), 2.0, save_path=str(path))
        assert path.exists()
