"""Data model for rungait and its JSON representation.

All records are frozen dataclasses: a capture loop appends
:class:`FrameSample` objects, and every later stage derives new
records from them without mutating anything.

Undefined angles are carried as ``NaN`` inside the pipeline and
serialized as ``null`` (``None``) in plain-data output.

Classes
-------
FrameSample
    One analyzed video frame (angles + vertical ankle position).
PhaseSegment
    One named phase of a gait cycle, as a half-open index range.
GaitCycle
    One stride from a foot strike to the next, with its eight phases.
PhaseStat
    Median hip/knee/ankle angle for one phase.
GaitAnalysis
    Complete pipeline output for one clip.

Functions
---------
save_json
    Save a dict (or an object with ``to_dict``) to a JSON file.
load_json
    Load a JSON file and check it is a dict.
load_samples
    Load a FrameSample sequence from a JSON file.
samples_from_records
    Build FrameSamples from plain dicts.
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

import numpy as np


def _convert_numpy(obj: Any) -> Any:
    """Recursively convert numpy types (and NaN) to JSON-safe Python types."""
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        value = float(obj)
        return None if math.isnan(value) else value
    if isinstance(obj, np.ndarray):
        return [_convert_numpy(v) for v in obj.tolist()]
    if isinstance(obj, dict):
        return {k: _convert_numpy(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_convert_numpy(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    return obj


def _as_float(value: Any) -> float:
    """Read an angle/position value, mapping ``None`` to NaN."""
    if value is None:
        return float("nan")
    return float(value)


@dataclass(frozen=True)
class FrameSample:
    """One successfully analyzed video frame.

    Attributes:
        t: Timestamp in seconds. Increasing, but frames whose landmark
            detection failed are dropped, so spacing may be uneven.
        hip: Hip angle in degrees (NaN when undefined).
        knee: Knee angle in degrees (NaN when undefined).
        ankle: Ankle angle in degrees (NaN when undefined).
        side: ``"left"`` or ``"right"``.
        y_ankle: Normalized vertical ankle position (image convention,
            grows downward). Only used for cycle detection.
    """

    t: float
    hip: float
    knee: float
    ankle: float
    side: str
    y_ankle: float

    def to_dict(self) -> dict:
        return _convert_numpy({
            "t": self.t,
            "hip": self.hip,
            "knee": self.knee,
            "ankle": self.ankle,
            "side": self.side,
            "y_ankle": self.y_ankle,
        })

    @classmethod
    def from_dict(cls, record: dict) -> "FrameSample":
        """Build a sample from a plain dict.

        Accepts ``y_ankle`` or the camelCase ``yAnkle`` key used by
        browser-side captures.
        """
        y = record.get("y_ankle", record.get("yAnkle"))
        return cls(
            t=float(record["t"]),
            hip=_as_float(record.get("hip")),
            knee=_as_float(record.get("knee")),
            ankle=_as_float(record.get("ankle")),
            side=record.get("side", "left"),
            y_ankle=_as_float(y),
        )


@dataclass(frozen=True)
class PhaseSegment:
    """A named phase covering samples ``[start_idx, end_idx)``."""

    name: str
    start_idx: int
    end_idx: int

    @property
    def n_frames(self) -> int:
        return self.end_idx - self.start_idx

    def to_dict(self) -> dict:
        return {"name": self.name, "start_idx": self.start_idx, "end_idx": self.end_idx}


@dataclass(frozen=True)
class GaitCycle:
    """One stride covering samples ``[start_idx, end_idx)``.

    The phases are contiguous, non-overlapping, and their union is
    exactly the cycle's own range.
    """

    start_idx: int
    end_idx: int
    side: str
    phases: Tuple[PhaseSegment, ...] = ()
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def n_frames(self) -> int:
        return self.end_idx - self.start_idx

    @property
    def duration(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    def phase(self, name: str) -> PhaseSegment:
        """Return the segment called *name*."""
        for seg in self.phases:
            if seg.name == name:
                return seg
        raise KeyError(f"No phase named {name!r} in cycle")

    def to_dict(self) -> dict:
        duration = self.duration
        return {
            "start_idx": self.start_idx,
            "end_idx": self.end_idx,
            "side": self.side,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": round(duration, 4) if duration is not None else None,
            "phases": [p.to_dict() for p in self.phases],
        }


@dataclass(frozen=True)
class PhaseStat:
    """Per-joint representative angle for one phase (``None`` = no data)."""

    phase: str
    hip: Optional[float]
    knee: Optional[float]
    ankle: Optional[float]

    def to_dict(self) -> dict:
        return _convert_numpy({
            "phase": self.phase,
            "hip": self.hip,
            "knee": self.knee,
            "ankle": self.ankle,
        })


@dataclass(frozen=True)
class GaitAnalysis:
    """Full result of :func:`rungait.analysis.analyze_samples`.

    ``status`` is ``"ok"`` when at least one complete cycle was found,
    ``"too_short"`` otherwise. A short clip is a normal outcome and is
    reported here rather than raised.
    """

    fps: float
    side: str
    strikes: Tuple[int, ...]
    cycles: Tuple[GaitCycle, ...]
    phase_summary: Tuple[PhaseStat, ...]
    samples: Tuple[FrameSample, ...] = field(default=(), repr=False)
    status: str = "ok"
    message: str = ""

    @property
    def n_cycles(self) -> int:
        return len(self.cycles)

    def to_dict(self, include_samples: bool = True) -> dict:
        out = {
            "fps": self.fps,
            "side": self.side,
            "status": self.status,
            "message": self.message,
            "strikes": list(self.strikes),
            "cycles": [c.to_dict() for c in self.cycles],
            "phase_summary": [s.to_dict() for s in self.phase_summary],
        }
        if include_samples:
            out["time_series"] = [s.to_dict() for s in self.samples]
        return out


def samples_from_records(records: Iterable[dict]) -> List[FrameSample]:
    """Build a FrameSample list from plain dict records."""
    return [FrameSample.from_dict(r) for r in records]


def save_json(data: Any, path: Union[str, Path], indent: int = 2) -> None:
    """Save data to a JSON file.

    Objects exposing ``to_dict()`` (e.g. :class:`GaitAnalysis`) are
    converted first; numpy types and NaN are converted to builtins.

    Parameters
    ----------
    data : dict or object with ``to_dict``
        Payload to write.
    path : str or Path
        Output file path. Parent directories are created if needed.
    indent : int, optional
        JSON indentation level (default 2).
    """
    if hasattr(data, "to_dict"):
        data = data.to_dict()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    converted = _convert_numpy(data)
    with open(path, "w") as f:
        json.dump(converted, f, indent=indent, ensure_ascii=False)


def load_json(path: Union[str, Path]) -> dict:
    """Load a JSON file whose root must be a dict.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the JSON root is not a dict.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("JSON root must be a dict")
    return data


def load_samples(path: Union[str, Path]) -> Tuple[List[FrameSample], Optional[float]]:
    """Load a FrameSample sequence from a JSON file.

    The file holds a ``time_series`` list (as written by
    :func:`save_json` for a :class:`GaitAnalysis` or by a capture run)
    and optionally an ``fps`` value.

    Returns
    -------
    tuple
        ``(samples, fps)``; *fps* is ``None`` when the file has none.

    Raises
    ------
    ValueError
        If the file has no ``time_series`` list.
    """
    data = load_json(path)
    records = data.get("time_series")
    if not isinstance(records, list):
        raise ValueError("Missing 'time_series' list in JSON")
    fps = data.get("fps")
    return samples_from_records(records), (float(fps) if fps is not None else None)
