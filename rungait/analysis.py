"""Gait analysis orchestrator.

Runs the post-capture stages on a complete FrameSample sequence, in a
single synchronous pass:

    smooth (per joint) -> detect strikes -> pair into cycles
    -> segment phases -> per-phase medians of the first cycle

Functions
---------
analyze_samples
    Run the full post-capture pipeline and return a GaitAnalysis.
"""

import logging
from typing import Optional, Sequence

from .config import get_config
from .cycles import detect_cycles, detect_foot_strikes
from .filters import smooth_samples
from .phases import PercentBoundaryTable, PhaseBoundaryPolicy
from .schema import FrameSample, GaitAnalysis
from .summary import summarize_cycle

logger = logging.getLogger(__name__)

TOO_SHORT_MESSAGE = "Clip too short to find a full gait cycle"


def analyze_samples(
    samples: Sequence[FrameSample],
    fps: Optional[float] = None,
    window: Optional[int] = None,
    policy: Optional[PhaseBoundaryPolicy] = None,
    config: Optional[dict] = None,
) -> GaitAnalysis:
    """Turn a captured FrameSample sequence into cycles and phase stats.

    Parameters
    ----------
    samples : sequence of FrameSample
        Captured samples in chronological order (angles already
        computed per frame).
    fps : float, optional
        Capture frame rate in Hz (default from config, 30).
    window : int, optional
        Smoothing window (default from config, 5).
    policy : PhaseBoundaryPolicy, optional
        Phase boundary policy. Defaults to a
        :class:`~rungait.phases.PercentBoundaryTable` built from the
        config's phase table.
    config : dict, optional
        Partial configuration merged onto ``DEFAULT_CONFIG``.

    Returns
    -------
    GaitAnalysis
        Cycles, strikes, smoothed samples and the first complete
        cycle's PhaseStats. With fewer than two strikes the result has
        ``status="too_short"`` and no cycles.

    Raises
    ------
    TypeError
        If *samples* contains something other than FrameSample.
    ValueError
        If *fps* is not positive or the smoothing settings are invalid.
    """
    cfg = get_config(config)
    smooth_cfg = cfg["smoothing"]
    cycle_cfg = cfg["cycles"]

    if fps is None:
        fps = cfg["capture"]["fps"]
    fps = float(fps)
    if fps <= 0:
        raise ValueError(f"fps must be > 0, got {fps}")
    if window is None:
        window = smooth_cfg["window"]
    if policy is None:
        policy = PercentBoundaryTable(cfg["phases"]["table"])

    samples = list(samples)
    for s in samples:
        if not isinstance(s, FrameSample):
            raise TypeError(f"samples must be FrameSample instances, got {type(s).__name__}")

    side = samples[0].side if samples else cfg["capture"]["side"]
    logger.info(f"Analyzing {len(samples)} samples at {fps:.1f} fps ({side} side)")

    smoothed = smooth_samples(samples, window=window, method=smooth_cfg["method"])

    strikes = detect_foot_strikes(
        [s.y_ankle for s in smoothed],
        fps,
        max_cadence=cycle_cfg["max_cadence"],
        min_prominence=cycle_cfg["min_prominence"],
        prominence_ratio=cycle_cfg["prominence_ratio"],
        extremum=cycle_cfg["extremum"],
    ) if smoothed else []

    cycles = detect_cycles(
        smoothed,
        fps,
        policy=policy,
        strikes=strikes,
        min_cadence=cycle_cfg["min_cadence"],
    )

    if not cycles:
        logger.warning(TOO_SHORT_MESSAGE)
        return GaitAnalysis(
            fps=fps,
            side=side,
            strikes=tuple(strikes),
            cycles=(),
            phase_summary=(),
            samples=tuple(smoothed),
            status="too_short",
            message=TOO_SHORT_MESSAGE,
        )

    phase_summary = summarize_cycle(smoothed, cycles[0])
    return GaitAnalysis(
        fps=fps,
        side=side,
        strikes=tuple(strikes),
        cycles=tuple(cycles),
        phase_summary=tuple(phase_summary),
        samples=tuple(smoothed),
        status="ok",
        message=f"{len(cycles)} complete gait cycle(s) found",
    )
