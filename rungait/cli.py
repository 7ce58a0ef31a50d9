"""Command-line interface for rungait.

Provides subcommands for video-based running gait analysis:

    rungait run clip.mp4 --start 2.0 --end 6.0 --side left --output result.json
    rungait analyze samples.json --csv --output-dir ./plots
    rungait info result.json
"""

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from importlib.metadata import version as pkg_version, PackageNotFoundError


def _get_version() -> str:
    """Return package version without importing the full rungait package."""
    try:
        return pkg_version("rungait")
    except PackageNotFoundError:
        return "0.0.0+local"


def _setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_cli_config(args) -> dict:
    from .config import get_config, load_config

    path = getattr(args, "config", None)
    return load_config(path) if path else get_config()


def _print_summary(analysis):
    print(f"Status: {analysis.status} ({analysis.message})")
    print(f"Strikes: {len(analysis.strikes)}, cycles: {analysis.n_cycles}")
    for i, c in enumerate(analysis.cycles):
        print(f"  cycle {i}: frames {c.start_idx}-{c.end_idx}, {c.duration:.2f}s")
    if analysis.phase_summary:
        print(f"{'Phase':<6} {'Hip':>7} {'Knee':>7} {'Ankle':>7}")
        for s in analysis.phase_summary:
            cells = ["-" if v is None else f"{v:.1f}" for v in (s.hip, s.knee, s.ankle)]
            print(f"{s.phase:<6} {cells[0]:>7} {cells[1]:>7} {cells[2]:>7}")


def _write_outputs(analysis, args, default_stem: Path):
    from . import save_json

    output = args.output or str(default_stem.parent / f"{default_stem.stem}.rungait.json")
    save_json(analysis, output)
    print(f"Saved to {output}")

    if getattr(args, "csv", False):
        from .export import export_csv

        out_dir = getattr(args, "output_dir", None) or str(Path(output).parent)
        files = export_csv(analysis, out_dir, prefix=f"{default_stem.stem}_")
        print(f"CSV: {len(files)} files written to {out_dir}")


def cmd_run(args):
    """Run full pipeline: capture -> smooth -> cycles -> phases -> summary."""
    from . import CaptureSession, VideoFrameSource, analyze_samples, get_extractor

    cfg = _load_cli_config(args)
    cap_cfg = cfg["capture"]
    fps = args.fps if args.fps is not None else cap_cfg["fps"]
    side = args.side or cap_cfg["side"]
    max_frames = args.max_frames if args.max_frames is not None else cap_cfg["max_frames"]
    max_clip = cap_cfg["max_clip_seconds"]

    t0 = time.time()
    with VideoFrameSource(args.video) as source, get_extractor(args.model or cap_cfg["model"]) as extractor:
        end = args.end
        if end is None and max_clip is not None:
            # Without an explicit end, trim to the longest supported clip.
            end = min(source.duration, args.start + max_clip)

        session = CaptureSession(
            source,
            extractor,
            fps=fps,
            start=args.start,
            end=end,
            side=side,
            max_frames=max_frames,
            max_clip_seconds=max_clip,
        )
        print(f"Capturing {len(session.frame_indices())} frames with {extractor.name}...")
        try:
            samples = asyncio.run(session.collect())
        except KeyboardInterrupt:
            session.cancel()
            raise
    print(f"  {session.n_detected}/{session.n_requested} frames with a pose")

    analysis = analyze_samples(samples, fps=fps, window=args.window, config=cfg)
    print(f"Done in {time.time() - t0:.1f}s")
    _print_summary(analysis)
    _write_outputs(analysis, args, Path(args.video))


def cmd_analyze(args):
    """Analyze a JSON file of captured samples."""
    from . import analyze_samples, load_samples

    cfg = _load_cli_config(args)
    samples, file_fps = load_samples(args.json_file)
    fps = args.fps or file_fps
    print(f"Loaded {len(samples)} samples from {args.json_file}")

    analysis = analyze_samples(samples, fps=fps, window=args.window, config=cfg)
    _print_summary(analysis)
    _write_outputs(analysis, args, Path(args.json_file))

    if args.plots and analysis.samples:
        from .plotting import plot_angles, plot_phase_summary
        import matplotlib.pyplot as plt

        out_dir = Path(args.output_dir or Path(args.json_file).parent)
        out_dir.mkdir(parents=True, exist_ok=True)
        stem = Path(args.json_file).stem
        fig = plot_angles(analysis)
        fig.savefig(out_dir / f"{stem}_angles.png", dpi=120)
        plt.close(fig)
        if analysis.phase_summary:
            fig = plot_phase_summary(analysis)
            fig.savefig(out_dir / f"{stem}_phases.png", dpi=120)
            plt.close(fig)
        print(f"Plots saved to {out_dir}")


def cmd_info(args):
    """Display info about a rungait JSON file."""
    from . import load_json

    data = load_json(args.json_file)

    series = data.get("time_series", [])
    print(f"FPS: {data.get('fps', '?')}, Side: {data.get('side', '?')}")
    print(f"Samples: {len(series)}")
    if series:
        print(f"Time: {series[0].get('t', 0):.2f}-{series[-1].get('t', 0):.2f}s")

    status = data.get("status")
    if status is None:
        print("Analysis: none")
        return
    print(f"Status: {status} ({data.get('message', '')})")
    print(f"Strikes: {len(data.get('strikes', []))}, cycles: {len(data.get('cycles', []))}")
    for s in data.get("phase_summary", []):
        print(f"  {s.get('phase')}: hip={s.get('hip')}, knee={s.get('knee')}, ankle={s.get('ankle')}")


def main():
    parser = argparse.ArgumentParser(
        prog="rungait",
        description="Running gait analysis from side-view video",
    )
    parser.add_argument("--version", action="version", version=f"rungait {_get_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # run (full pipeline)
    p_run = sub.add_parser("run", help="Capture a clip and analyze it")
    p_run.add_argument("video", help="Path to video file")
    p_run.add_argument("-m", "--model", help="Pose model (default: mediapipe)")
    p_run.add_argument("-o", "--output", help="Output JSON path (default: video.rungait.json)")
    p_run.add_argument("--start", type=float, default=0.0, help="Clip start in seconds (default: 0)")
    p_run.add_argument("--end", type=float, help="Clip end in seconds (default: start + 10s)")
    p_run.add_argument("--side", choices=["left", "right"], help="Leg to measure (default: left)")
    p_run.add_argument("--fps", type=float, help="Capture rate in Hz (default: 30)")
    p_run.add_argument("--max-frames", type=int, help="Max frames to capture")
    p_run.add_argument("--window", type=int, help="Smoothing window in samples (default: 5)")
    p_run.add_argument("--config", help="Config file (JSON/YAML)")
    p_run.add_argument("--csv", action="store_true", help="Also export CSV files")
    p_run.set_defaults(func=cmd_run)

    # analyze
    p_analyze = sub.add_parser("analyze", help="Analyze a JSON file of captured samples")
    p_analyze.add_argument("json_file", help="JSON file with a 'time_series' list")
    p_analyze.add_argument("-o", "--output", help="Output JSON path")
    p_analyze.add_argument("--output-dir", help="Directory for CSV files and plots")
    p_analyze.add_argument("--fps", type=float, help="Override the file's frame rate")
    p_analyze.add_argument("--window", type=int, help="Smoothing window in samples (default: 5)")
    p_analyze.add_argument("--config", help="Config file (JSON/YAML)")
    p_analyze.add_argument("--csv", action="store_true", help="Export CSV files")
    p_analyze.add_argument("--plots", action="store_true", help="Save angle and phase plots")
    p_analyze.set_defaults(func=cmd_analyze)

    # info
    p_info = sub.add_parser("info", help="Show info about a rungait JSON file")
    p_info.add_argument("json_file", help="Path to rungait JSON file")
    p_info.set_defaults(func=cmd_info)

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Missing dependency: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
