"""Temporal smoothing of per-joint angle series.

Each smoother is a function ``(series, window) -> np.ndarray`` that
returns a new array of the same length. Smoothers are registered in
:data:`SMOOTHERS` and can be extended via :func:`register_smoother`.

Smoothers available:

    - ``moving_mean`` (default): centered moving average over the
      ``±window // 2`` neighbourhood of each sample.
    - ``median``: centered rolling median over the same neighbourhood,
      for spike removal.
      Ref: Pagnon D, Domalain M, Reveret L. Pose2Sim: An end-to-end
      workflow for 3D markerless kinematics. J Open Source Softw.
      2022;7(77):4362. doi:10.21105/joss.04362

Both share the same rules:

    - Near the ends the neighbourhood shrinks instead of being padded,
      so boundary samples are not pulled toward zero.
    - ``NaN`` samples (undefined angles) are left out of each window;
      a window with no defined sample yields ``NaN``.
    - ``window=1`` is the identity.

General filtering reference for human motion:
    Winter DA, Sidwall HG, Hobson DA. Measurement and reduction of
    noise in kinematics of locomotion. J Biomech. 1974;7(2):157-159.
    doi:10.1016/0021-9290(74)90056-6
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Sequence

import numpy as np
import pandas as pd

from .schema import FrameSample

logger = logging.getLogger(__name__)

_SMOOTHED_FIELDS = ("hip", "knee", "ankle", "y_ankle")


def _rolling(series: Sequence[float], window: int) -> "pd.core.window.Rolling":
    """Centered rolling window of span ``2 * (window // 2) + 1``."""
    window = int(window)
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    s = pd.Series(np.asarray(series, dtype=float))
    span = 2 * (window // 2) + 1
    return s.rolling(span, min_periods=1, center=True)


def smooth(series: Sequence[float], window: int = 5) -> np.ndarray:
    """Centered moving average with shrinking edges and NaN skipping.

    Parameters
    ----------
    series : sequence of float
        Input samples; ``NaN`` marks an undefined sample.
    window : int, optional
        Window size (default 5, i.e. ±2 samples). Even sizes use the
        same ``±window // 2`` neighbourhood as the next odd size.

    Returns
    -------
    np.ndarray
        Smoothed series, same length as *series*.

    Raises
    ------
    ValueError
        If *window* is smaller than 1.
    """
    if int(window) == 1:
        return np.array(series, dtype=float)
    return _rolling(series, window).mean().to_numpy()


def smooth_median(series: Sequence[float], window: int = 5) -> np.ndarray:
    """Centered rolling median with shrinking edges and NaN skipping."""
    if int(window) == 1:
        return np.array(series, dtype=float)
    return _rolling(series, window).median().to_numpy()


# ── Registry ─────────────────────────────────────────────────────────


SMOOTHERS: Dict[str, Callable] = {
    "moving_mean": smooth,
    "median": smooth_median,
}


def register_smoother(name: str, func: Callable):
    """Register a custom smoother.

    The function must accept ``(series, window)`` and return an array
    of the same length.
    """
    SMOOTHERS[name] = func


def list_smoothers() -> list:
    """Return available smoother names."""
    return list(SMOOTHERS.keys())


def smooth_samples(
    samples: Sequence[FrameSample],
    window: int = 5,
    method: str = "moving_mean",
) -> List[FrameSample]:
    """Smooth hip, knee, ankle and y_ankle across a sample sequence.

    Parameters
    ----------
    samples : sequence of FrameSample
        Captured samples in chronological order.
    window : int, optional
        Smoothing window (default 5).
    method : str, optional
        Registered smoother name (default ``"moving_mean"``).

    Returns
    -------
    list of FrameSample
        New samples; the input is left untouched.

    Raises
    ------
    ValueError
        If *method* is unknown or *window* is invalid.
    """
    if method not in SMOOTHERS:
        available = ", ".join(SMOOTHERS.keys())
        raise ValueError(f"Unknown smoother: {method}. Available: {available}")
    if not samples:
        return []

    func = SMOOTHERS[method]
    smoothed = {
        name: func([getattr(s, name) for s in samples], window)
        for name in _SMOOTHED_FIELDS
    }
    logger.debug(f"Smoothed {len(samples)} samples with {method} (window={window})")
    return [
        replace(s, **{name: float(smoothed[name][i]) for name in _SMOOTHED_FIELDS})
        for i, s in enumerate(samples)
    ]
