"""Smoke tests for rungait.plotting."""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

from conftest import make_running_samples
from rungait.analysis import analyze_samples
from rungait.plotting import plot_angles, plot_phase_summary


@pytest.fixture
def analysis():
    return analyze_samples(make_running_samples(), fps=30.0)


class TestPlotAngles:

    def test_returns_figure(self, analysis):
        fig = plot_angles(analysis)
        assert isinstance(fig, plt.Figure)
        assert len(fig.axes) == 3
        plt.close(fig)

    def test_single_joint_without_phases(self, analysis):
        fig = plot_angles(analysis, joints=["knee"], phases=False)
        assert len(fig.axes) == 1
        plt.close(fig)

    def test_saves_png(self, analysis, tmp_path):
        fig = plot_angles(analysis)
        path = tmp_path / "angles.png"
        fig.savefig(path)
        plt.close(fig)
        assert path.stat().st_size > 0

    def test_too_short_clip_still_plots(self):
        short = analyze_samples(make_running_samples(n_frames=20), fps=30.0)
        fig = plot_angles(short)
        plt.close(fig)

    def test_no_samples(self):
        empty = analyze_samples([], fps=30.0)
        with pytest.raises(ValueError, match="No samples"):
            plot_angles(empty)


class TestPlotPhaseSummary:

    def test_returns_figure(self, analysis):
        fig = plot_phase_summary(analysis)
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_undefined_joint(self):
        analysis = analyze_samples(make_running_samples(ankle=float("nan")), fps=30.0)
        fig = plot_phase_summary(analysis)
        plt.close(fig)

    def test_requires_cycle(self):
        short = analyze_samples(make_running_samples(n_frames=20), fps=30.0)
        with pytest.raises(ValueError, match="phase summary"):
            plot_phase_summary(short)
