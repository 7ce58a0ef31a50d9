"""Per-phase joint angle statistics.

The representative value of a joint in a phase is the median of the
samples in that phase's index range: robust to the occasional
mis-detected frame that survives smoothing.

Median convention for an even number of values: the **upper** of the
two middle values (``sorted(values)[n // 2]``). This keeps reported
clinical values identical to those produced by the existing
browser-side analysis. ``[10, 20]`` gives ``20``.

Undefined samples (``NaN`` / ``None``) are ignored; a phase with no
defined sample yields ``None`` ("no data") rather than raising.

Functions
---------
median
    Upper-middle median, ``None`` for empty input.
basic_stats
    Min, max, mean, peak and range of a value list.
summarize_phase
    Median of one joint over one PhaseSegment.
summarize_cycle
    PhaseStat list for every phase of a cycle.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .constants import JOINTS
from .schema import FrameSample, GaitCycle, PhaseSegment, PhaseStat

logger = logging.getLogger(__name__)


def _defined(values: Sequence[Optional[float]]) -> List[float]:
    """Drop None and NaN entries."""
    out = []
    for v in values:
        if v is None:
            continue
        v = float(v)
        if math.isnan(v):
            continue
        out.append(v)
    return out


def median(values: Sequence[Optional[float]]) -> Optional[float]:
    """Median with upper-middle tie-break for even counts.

    Parameters
    ----------
    values : sequence of float
        Values; ``None`` and ``NaN`` are ignored.

    Returns
    -------
    float or None
        Middle value of the sorted defined values (the upper of the two
        middle values when their count is even), or ``None`` when no
        value is defined.
    """
    vals = sorted(_defined(values))
    if not vals:
        return None
    return vals[len(vals) // 2]


def basic_stats(values: Sequence[Optional[float]]) -> dict:
    """Min, max, mean, peak and range of the defined values.

    ``peak`` is the extreme with the largest magnitude. All fields are
    ``NaN`` for empty input.
    """
    vals = np.asarray(_defined(values), dtype=float)
    if len(vals) == 0:
        nan = float("nan")
        return {"min": nan, "max": nan, "mean": nan, "peak": nan, "range": nan}
    vmin = float(np.min(vals))
    vmax = float(np.max(vals))
    return {
        "min": vmin,
        "max": vmax,
        "mean": float(np.mean(vals)),
        "peak": vmin if abs(vmin) > abs(vmax) else vmax,
        "range": vmax - vmin,
    }


def summarize_phase(
    samples: Sequence[FrameSample],
    segment: PhaseSegment,
    joint: str,
) -> Optional[float]:
    """Median angle of *joint* over the samples of *segment*.

    Returns ``None`` when the segment is empty or all its values are
    undefined.
    """
    if joint not in JOINTS:
        raise ValueError(f"joint must be one of {JOINTS}, got {joint!r}")
    seg = samples[segment.start_idx:segment.end_idx]
    return median([getattr(s, joint) for s in seg])


def summarize_cycle(samples: Sequence[FrameSample], cycle: GaitCycle) -> List[PhaseStat]:
    """Per-phase, per-joint medians for one cycle."""
    stats = []
    for segment in cycle.phases:
        values = {joint: summarize_phase(samples, segment, joint) for joint in JOINTS}
        stats.append(PhaseStat(phase=segment.name, **values))
        if segment.n_frames == 0:
            logger.debug(f"Phase {segment.name} of cycle {cycle.start_idx} is empty")
    return stats
