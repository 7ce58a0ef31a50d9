"""Shared test fixtures for rungait test suite.

Provides synthetic running data generators and fake capture
collaborators (frame source, pose extractor) used across test modules.
"""

import math

import numpy as np
import pytest

from rungait.constants import SIDE_LANDMARKS
from rungait.models.base import BasePoseExtractor
from rungait.schema import FrameSample


def ankle_height(i, period=30, offset=15, base=0.8, amp=0.05):
    """Vertical ankle position at frame *i*; lowest on screen at strikes.

    Maxima (foot strikes) fall on ``offset + k * period``.
    """
    return base + amp * math.cos(2 * math.pi * (i - offset) / period)


def make_running_samples(n_frames=90, fps=30.0, period=30, offset=15, side="left",
                         hip=None, knee=None, ankle=None):
    """Create a FrameSample sequence of a steady runner.

    With the defaults, strikes fall on frames 15, 45 and 75 (two full
    cycles of 30 frames). Angle arguments are callables ``f(i)`` or
    constants; defaults are hip 150, knee ``100 + i`` and ankle 90.
    """
    def _value(spec, i, default):
        if spec is None:
            return default(i)
        return spec(i) if callable(spec) else float(spec)

    samples = []
    for i in range(n_frames):
        samples.append(FrameSample(
            t=i / fps,
            hip=_value(hip, i, lambda _: 150.0),
            knee=_value(knee, i, lambda k: 100.0 + k),
            ankle=_value(ankle, i, lambda _: 90.0),
            side=side,
            y_ankle=ankle_height(i, period, offset),
        ))
    return samples


def make_landmarks(shoulder=(0.50, 0.25), hip=(0.50, 0.50), knee=(0.50, 0.65),
                   ankle=(0.50, 0.80), side="left"):
    """Create a (33, 3) MediaPipe landmark array for one leg.

    Landmarks not used by the leg are placed at the image center; the
    visibility column is 1.0.
    """
    lm = np.full((33, 3), 0.5)
    lm[:, 2] = 1.0
    idx = SIDE_LANDMARKS[side]
    for name, point in (("shoulder", shoulder), ("hip", hip), ("knee", knee), ("ankle", ankle)):
        lm[idx[name], :2] = point
    return lm


def running_landmarks(t, fps=30.0, side="left"):
    """Landmarks of a runner whose ankle bottoms out on frames 15, 45, 75..."""
    i = t * fps
    y = ankle_height(i)
    knee_x = 0.50 + 0.03 * math.sin(2 * math.pi * i / 30)
    return make_landmarks(knee=(knee_x, 0.65), ankle=(0.50, y), side=side)


class FakeFrameSource:
    """In-memory frame source; frames listed in *missing* fail to decode."""

    def __init__(self, duration=1.0, missing=()):
        self.duration = duration
        self.missing = set(missing)
        self.requested = []

    def read_at(self, t):
        self.requested.append(t)
        if round(t * 30) in self.missing:
            return None
        frame = np.zeros((4, 4, 3), dtype=np.uint8)
        frame[0, 0, 0] = round(t * 30) % 256
        return frame

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakePoseExtractor(BasePoseExtractor):
    """Pose extractor returning synthetic running landmarks.

    Frames listed in *no_pose* return ``None``. *on_detect* is called
    with the timestamp after each detection.
    """

    name = "fake"
    n_landmarks = 33

    def __init__(self, no_pose=(), on_detect=None, landmarks_fn=running_landmarks):
        self.no_pose = set(no_pose)
        self.on_detect = on_detect
        self.landmarks_fn = landmarks_fn
        self.n_calls = 0

    def process_frame(self, frame_rgb):
        return make_landmarks()

    async def detect(self, frame_rgb, timestamp):
        self.n_calls += 1
        result = None
        if round(timestamp * 30) not in self.no_pose:
            result = self.landmarks_fn(timestamp)
        if self.on_detect is not None:
            self.on_detect(timestamp)
        return result


@pytest.fixture
def running_samples():
    return make_running_samples()


@pytest.fixture
def ready_extractor():
    extractor = FakePoseExtractor()
    extractor.setup()
    yield extractor
    extractor.teardown()
