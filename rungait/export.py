"""Export gait analysis results to tabular formats.

Functions
---------
to_dataframe
    Convert samples, cycles, phases or phase stats to pandas DataFrames.
export_csv
    Write the analysis tables to CSV files.
"""

import logging
from pathlib import Path

import pandas as pd

from .schema import GaitAnalysis

logger = logging.getLogger(__name__)

_SAMPLE_COLUMNS = ["frame_idx", "t", "hip", "knee", "ankle", "side", "y_ankle"]
_CYCLE_COLUMNS = ["cycle_id", "side", "start_idx", "end_idx", "start_time", "end_time", "duration"]
_PHASE_COLUMNS = ["cycle_id", "phase", "start_idx", "end_idx", "n_frames"]
_STAT_COLUMNS = ["phase", "hip", "knee", "ankle"]


def to_dataframe(analysis: GaitAnalysis, what: str = "samples") -> "pd.DataFrame | dict":
    """Convert a GaitAnalysis to pandas DataFrame(s).

    Parameters
    ----------
    analysis : GaitAnalysis
        Output of :func:`rungait.analysis.analyze_samples`.
    what : str, optional
        What to convert:
        - ``"samples"`` : smoothed angles per sample.
        - ``"cycles"`` : one row per gait cycle.
        - ``"phases"`` : one row per phase segment of every cycle.
        - ``"phase_summary"`` : per-phase medians of the first cycle.
        - ``"all"`` : dict of all four DataFrames.

    Returns
    -------
    pd.DataFrame or dict of pd.DataFrame

    Raises
    ------
    ValueError
        If *what* is not one of the recognized values.
    """
    valid_whats = ("samples", "cycles", "phases", "phase_summary", "all")
    if what not in valid_whats:
        raise ValueError(f"what must be one of {valid_whats}, got {what!r}")

    def _samples_df():
        rows = [{"frame_idx": i, **s.to_dict()} for i, s in enumerate(analysis.samples)]
        return pd.DataFrame(rows, columns=_SAMPLE_COLUMNS)

    def _cycles_df():
        rows = []
        for cid, c in enumerate(analysis.cycles):
            d = c.to_dict()
            d.pop("phases")
            rows.append({"cycle_id": cid, **d})
        return pd.DataFrame(rows, columns=_CYCLE_COLUMNS)

    def _phases_df():
        rows = []
        for cid, c in enumerate(analysis.cycles):
            for p in c.phases:
                rows.append({
                    "cycle_id": cid,
                    "phase": p.name,
                    "start_idx": p.start_idx,
                    "end_idx": p.end_idx,
                    "n_frames": p.n_frames,
                })
        return pd.DataFrame(rows, columns=_PHASE_COLUMNS)

    def _stats_df():
        rows = [s.to_dict() for s in analysis.phase_summary]
        return pd.DataFrame(rows, columns=_STAT_COLUMNS)

    if what == "samples":
        return _samples_df()
    elif what == "cycles":
        return _cycles_df()
    elif what == "phases":
        return _phases_df()
    elif what == "phase_summary":
        return _stats_df()
    else:  # "all"
        return {
            "samples": _samples_df(),
            "cycles": _cycles_df(),
            "phases": _phases_df(),
            "phase_summary": _stats_df(),
        }


def export_csv(analysis: GaitAnalysis, output_dir: str, prefix: str = "") -> list:
    """Export a GaitAnalysis to CSV files.

    Creates ``samples.csv``, ``cycles.csv``, ``phases.csv`` and
    ``phase_summary.csv`` in *output_dir*. Tables with no rows are
    skipped.

    Parameters
    ----------
    analysis : GaitAnalysis
        Analysis result.
    output_dir : str
        Directory path for output files. Created if it does not exist.
    prefix : str, optional
        Filename prefix (e.g. ``"runner01_"``).

    Returns
    -------
    list of str
        Paths to all created CSV files.

    Raises
    ------
    TypeError
        If *analysis* is not a GaitAnalysis.
    """
    if not isinstance(analysis, GaitAnalysis):
        raise TypeError("analysis must be a GaitAnalysis")
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    created = []

    for name, df in to_dataframe(analysis, what="all").items():
        if df.empty:
            continue
        path = out / f"{prefix}{name}.csv"
        df.to_csv(path, index=False, float_format="%.3f")
        created.append(str(path))

    logger.info(f"Exported {len(created)} CSV files to {output_dir}")
    return created
