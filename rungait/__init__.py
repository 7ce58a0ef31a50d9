"""rungait -- Running gait analysis from side-view video.

Quick start::

    import asyncio
    from rungait import CaptureSession, VideoFrameSource, get_extractor, analyze_samples

    with VideoFrameSource("run.mp4") as src, get_extractor("mediapipe") as pose:
        session = CaptureSession(src, pose, fps=30.0, start=2.0, end=6.0, side="left")
        samples = asyncio.run(session.collect())
    analysis = analyze_samples(samples, fps=30.0)
    for stat in analysis.phase_summary:
        print(stat.phase, stat.hip, stat.knee, stat.ankle)

Analysis of saved samples::

    from rungait import load_samples, analyze_samples, save_json
    samples, fps = load_samples("samples.json")
    analysis = analyze_samples(samples, fps=fps)
    save_json(analysis, "result.json")

Export and figures::

    from rungait import export_csv, plot_angles
    export_csv(analysis, "./output")
    plot_angles(analysis).savefig("angles.png")
"""

__version__ = "0.1.0"

from .schema import (
    FrameSample,
    PhaseSegment,
    GaitCycle,
    PhaseStat,
    GaitAnalysis,
    save_json,
    load_json,
    load_samples,
    samples_from_records,
)
from .angles import angle_deg, frame_angles, sample_from_landmarks
from .filters import smooth, smooth_median, smooth_samples, list_smoothers, register_smoother
from .cycles import detect_foot_strikes, detect_cycles
from .phases import PhaseBoundaryPolicy, PercentBoundaryTable, segment_cycle
from .summary import median, basic_stats, summarize_phase, summarize_cycle
from .analysis import analyze_samples
from .capture import CaptureSession
from .video import VideoFrameSource
from .models import get_extractor, list_models, register_extractor
from .config import DEFAULT_CONFIG, get_config, load_config, save_config
from .export import export_csv, to_dataframe
from .plotting import plot_angles, plot_phase_summary

__all__ = [
    # Data model
    "FrameSample",
    "PhaseSegment",
    "GaitCycle",
    "PhaseStat",
    "GaitAnalysis",
    "save_json",
    "load_json",
    "load_samples",
    "samples_from_records",
    # Angles
    "angle_deg",
    "frame_angles",
    "sample_from_landmarks",
    # Smoothing
    "smooth",
    "smooth_median",
    "smooth_samples",
    "list_smoothers",
    "register_smoother",
    # Cycles and phases
    "detect_foot_strikes",
    "detect_cycles",
    "PhaseBoundaryPolicy",
    "PercentBoundaryTable",
    "segment_cycle",
    # Summary
    "median",
    "basic_stats",
    "summarize_phase",
    "summarize_cycle",
    "analyze_samples",
    # Capture
    "CaptureSession",
    "VideoFrameSource",
    "get_extractor",
    "list_models",
    "register_extractor",
    # Config
    "DEFAULT_CONFIG",
    "get_config",
    "load_config",
    "save_config",
    # Export / plotting
    "export_csv",
    "to_dataframe",
    "plot_angles",
    "plot_phase_summary",
]
