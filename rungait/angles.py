"""Joint angle computation from pose landmarks.

All angles are classical 3-point interior angles, in degrees, in the
closed range [0, 180]:

    - Knee: angle at the knee between hip and ankle.
    - Hip: angle at the hip between shoulder and knee.
    - Ankle: angle at the ankle between knee and a virtual point
      placed straight below the ankle (image y grows downward).

    Ref: Kadaba MP, Ramakrishnan HK, Wootten ME. Measurement of
    lower extremity kinematics during level walking. J Orthop Res.
    1990;8(3):383-392. doi:10.1002/jor.1100080310

Degenerate geometry (coincident points) and missing landmarks give
``NaN`` rather than an exception, so the smoothing and median stages
can skip those samples.
"""

import logging
from typing import Optional

import numpy as np

from .constants import ANKLE_REFERENCE_OFFSET, SIDE_LANDMARKS, SIDES
from .schema import FrameSample

logger = logging.getLogger(__name__)


# ── Geometry helpers ─────────────────────────────────────────────────


def _as_point(p) -> np.ndarray:
    """Convert a point to a 3-vector (z defaults to 0).

    Accepts sequences ``(x, y)`` / ``(x, y, z)`` and objects or dicts
    with ``x``, ``y`` and optional ``z`` fields (MediaPipe landmarks).
    """
    if isinstance(p, dict):
        coords = [p.get("x"), p.get("y"), p.get("z", 0.0)]
    elif hasattr(p, "x") and hasattr(p, "y"):
        coords = [p.x, p.y, getattr(p, "z", 0.0)]
    else:
        coords = list(p)
        if len(coords) == 2:
            coords.append(0.0)
        elif len(coords) != 3:
            raise ValueError(f"Point must have 2 or 3 coordinates, got {len(coords)}")
    return np.array([np.nan if c is None else c for c in coords], dtype=float)


def _angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    """Angle between two vectors in degrees [0, 180]."""
    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if not (n1 >= 1e-10 and n2 >= 1e-10):
        return float("nan")
    cos_a = np.clip(np.dot(v1, v2) / (n1 * n2), -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_a)))


def angle_deg(a, b, c) -> float:
    """Interior angle at vertex *b* formed by points *a*, *b*, *c*.

    Parameters
    ----------
    a, b, c : sequence or point-like
        2D or 3D points.

    Returns
    -------
    float
        Angle in degrees in [0, 180], or ``NaN`` when either arm has
        zero length or a coordinate is missing.
    """
    pb = _as_point(b)
    return _angle_between(_as_point(a) - pb, _as_point(c) - pb)


# ── Per-frame angles ─────────────────────────────────────────────────


def _landmark(landmarks: np.ndarray, idx: int) -> Optional[np.ndarray]:
    """Return the (x, y[, z]) of landmark *idx*, or None if missing."""
    if idx >= len(landmarks):
        return None
    row = np.asarray(landmarks[idx], dtype=float)
    # Columns beyond x, y are visibility for extractor output; only
    # position is used.
    xy = row[:2]
    if np.any(np.isnan(xy)):
        return None
    return xy


def frame_angles(landmarks, side: str = "left") -> dict:
    """Compute hip, knee and ankle angles for one frame.

    Parameters
    ----------
    landmarks : array-like, shape (33, >=2)
        MediaPipe-33 landmarks as ``[x, y, ...]`` rows in normalized
        image coordinates.
    side : {'left', 'right'}
        Which leg to measure.

    Returns
    -------
    dict
        Keys ``hip``, ``knee``, ``ankle`` (degrees or NaN) and
        ``y_ankle`` (normalized vertical ankle position or NaN).
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    landmarks = np.asarray(landmarks, dtype=float)
    idx = SIDE_LANDMARKS[side]

    shoulder = _landmark(landmarks, idx["shoulder"])
    hip = _landmark(landmarks, idx["hip"])
    knee = _landmark(landmarks, idx["knee"])
    ankle = _landmark(landmarks, idx["ankle"])

    nan = float("nan")
    result = {"hip": nan, "knee": nan, "ankle": nan, "y_ankle": nan}

    if hip is not None and knee is not None and ankle is not None:
        result["knee"] = angle_deg(hip, knee, ankle)
    if shoulder is not None and hip is not None and knee is not None:
        result["hip"] = angle_deg(shoulder, hip, knee)
    if knee is not None and ankle is not None:
        below = ankle + np.array([0.0, ANKLE_REFERENCE_OFFSET])
        result["ankle"] = angle_deg(knee, ankle, below)
    if ankle is not None:
        result["y_ankle"] = float(ankle[1])
    return result


def sample_from_landmarks(landmarks, t: float, side: str = "left") -> Optional[FrameSample]:
    """Build a :class:`FrameSample` from one frame's landmarks.

    Returns ``None`` when *landmarks* is ``None`` (no pose detected), so
    the capture loop omits the frame instead of recording a corrupt
    sample.
    """
    if landmarks is None:
        return None
    angles = frame_angles(landmarks, side)
    return FrameSample(
        t=float(t),
        hip=angles["hip"],
        knee=angles["knee"],
        ankle=angles["ankle"],
        side=side,
        y_ankle=angles["y_ankle"],
    )
