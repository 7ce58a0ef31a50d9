"""Gait visualization with matplotlib.

All functions return ``matplotlib.figure.Figure`` objects for saving or
display.

Functions
---------
plot_angles
    Joint angle time series with the phases of each cycle shaded.
plot_phase_summary
    Phase x joint matrix of median angles for the first cycle.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import matplotlib
if matplotlib.get_backend() == "":
    matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .constants import JOINT_LABELS, JOINTS, PHASE_NAMES
from .schema import GaitAnalysis

logger = logging.getLogger(__name__)

# Color scheme
_JOINT_COLORS = {
    "hip": "#22d3ee",
    "knee": "#f97316",
    "ankle": "#a855f7",
}

_PHASE_COLORS = dict(zip(PHASE_NAMES, plt.get_cmap("tab10").colors))


def plot_angles(
    analysis: GaitAnalysis,
    joints: Optional[Sequence[str]] = None,
    phases: bool = True,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Plot smoothed joint angle time series.

    Parameters
    ----------
    analysis : GaitAnalysis
        Output of :func:`rungait.analysis.analyze_samples`.
    joints : sequence of str, optional
        Joints to plot (default: hip, knee, ankle).
    phases : bool, optional
        Shade the phase segments of every detected cycle (default True).
    figsize : tuple, optional
        Figure size ``(width, height)`` in inches.

    Returns
    -------
    matplotlib.figure.Figure

    Raises
    ------
    ValueError
        If *analysis* holds no samples.
    """
    if not analysis.samples:
        raise ValueError("No samples in analysis.")
    if joints is None:
        joints = JOINTS

    n_plots = len(joints)
    if figsize is None:
        figsize = (12, 2.5 * n_plots)

    fig, axes = plt.subplots(n_plots, 1, figsize=figsize, sharex=True)
    if n_plots == 1:
        axes = [axes]

    time = np.array([s.t for s in analysis.samples])
    last_t = time[-1]

    for ax, joint in zip(axes, joints):
        values = np.array([getattr(s, joint) for s in analysis.samples], dtype=float)
        ax.plot(time, values, color=_JOINT_COLORS.get(joint, "black"), linewidth=1.2,
                label=JOINT_LABELS.get(joint, joint))

        if phases:
            for cycle in analysis.cycles:
                for seg in cycle.phases:
                    if seg.n_frames == 0:
                        continue
                    t0 = time[seg.start_idx]
                    t1 = time[seg.end_idx] if seg.end_idx < len(time) else last_t
                    ax.axvspan(t0, t1, color=_PHASE_COLORS[seg.name], alpha=0.12, linewidth=0)
                ax.axvline(time[cycle.start_idx], color="black", alpha=0.4, linewidth=0.6)

        ax.set_ylabel("Angle (deg)")
        ax.set_title(JOINT_LABELS.get(joint, joint))
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel("Time (s)")
    fig.tight_layout()
    return fig


def plot_phase_summary(
    analysis: GaitAnalysis,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Plot the per-phase median angles of the first cycle as a matrix.

    Phases without data are drawn blank and annotated with a dash.

    Raises
    ------
    ValueError
        If *analysis* has no phase summary (no complete cycle).
    """
    if not analysis.phase_summary:
        raise ValueError("No phase summary in analysis. The clip has no complete cycle.")

    stats = analysis.phase_summary
    matrix = np.array([
        [np.nan if getattr(s, joint) is None else getattr(s, joint) for s in stats]
        for joint in JOINTS
    ], dtype=float)

    if figsize is None:
        figsize = (1.1 * len(stats) + 2, 3)
    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(np.ma.masked_invalid(matrix), cmap="viridis", aspect="auto")

    ax.set_xticks(range(len(stats)))
    ax.set_xticklabels([s.phase for s in stats])
    ax.set_yticks(range(len(JOINTS)))
    ax.set_yticklabels([JOINT_LABELS[j] for j in JOINTS])

    for r in range(matrix.shape[0]):
        for c in range(matrix.shape[1]):
            v = matrix[r, c]
            ax.text(c, r, "-" if np.isnan(v) else f"{v:.1f}",
                    ha="center", va="center", fontsize=8, color="white")

    fig.colorbar(im, ax=ax, label="Median angle (deg)")
    ax.set_title("Median joint angle per phase (first cycle)")
    fig.tight_layout()
    return fig
