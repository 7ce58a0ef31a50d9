"""Pull-based frame capture.

A :class:`CaptureSession` turns a video clip into FrameSamples one frame
at a time. The consumer pulls samples from the async iterator returned
by :meth:`CaptureSession.frames`; each pull seeks to the next
timestamp, reads one frame, awaits pose detection and computes the
joint angles. Nothing runs ahead of the consumer, so samples arrive in
strict chronological order and only one decoded frame is held.

Frames whose seek fails or where the model finds no pose are skipped.

Cancellation is an explicit flag on the session (:meth:`cancel`,
:attr:`cancelled`), checked between frames and after each detection.
The detection call in flight always completes before the loop stops.

Example::

    with get_extractor("mediapipe") as extractor, VideoFrameSource(path) as src:
        session = CaptureSession(src, extractor, fps=30.0, end=4.0)
        samples = asyncio.run(session.collect())
"""

import logging
import math
from typing import AsyncIterator, Callable, List, Optional

from .angles import sample_from_landmarks
from .constants import SIDES
from .models.base import BasePoseExtractor
from .schema import FrameSample

logger = logging.getLogger(__name__)


class CaptureSession:
    """Sequential, cancellable capture of FrameSamples from a clip.

    Parameters
    ----------
    source : object
        Frame source with a ``duration`` attribute (seconds) and a
        ``read_at(t)`` method returning an RGB frame or ``None``
        (e.g. :class:`~rungait.video.VideoFrameSource`).
    extractor : BasePoseExtractor
        Initialized pose service, owned by the caller.
    fps : float, optional
        Sampling rate of the capture in Hz (default 30).
    start, end : float, optional
        Clip range in seconds (default: whole video).
    side : {'left', 'right'}
        Leg to measure (default ``"left"``).
    max_frames : int, optional
        Stop after this many samples have been produced.
    max_clip_seconds : float, optional
        Longest accepted clip (default 10 s); ``None`` disables the check.
    progress_callback : callable, optional
        Callback ``fn(float)`` receiving progress from 0.0 to 1.0.

    Raises
    ------
    ValueError
        If the clip range, side or fps is invalid.
    """

    def __init__(
        self,
        source,
        extractor: BasePoseExtractor,
        fps: float = 30.0,
        start: float = 0.0,
        end: Optional[float] = None,
        side: str = "left",
        max_frames: Optional[int] = None,
        max_clip_seconds: Optional[float] = 10.0,
        progress_callback: Optional[Callable[[float], None]] = None,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        if side not in SIDES:
            raise ValueError(f"side must be one of {SIDES}, got {side!r}")

        duration = float(source.duration)
        start = max(0.0, float(start))
        end = duration if end is None else min(duration, float(end))
        if end <= start:
            raise ValueError(f"Invalid clip range: start={start:.2f}s, end={end:.2f}s")
        if max_clip_seconds is not None and end - start > max_clip_seconds:
            raise ValueError(
                f"Clip is {end - start:.1f}s long; at most {max_clip_seconds:.1f}s is supported"
            )

        self.source = source
        self.extractor = extractor
        self.fps = float(fps)
        self.start = start
        self.end = end
        self.side = side
        self.max_frames = max_frames
        self.progress_callback = progress_callback

        self._cancelled = False
        self.n_requested = 0
        self.n_detected = 0

    # ── Cancellation ─────────────────────────────────────────────────

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        """Ask the capture loop to stop before the next frame."""
        if not self._cancelled:
            logger.info("Capture cancelled")
        self._cancelled = True

    # ── Frame schedule ───────────────────────────────────────────────

    def frame_indices(self) -> range:
        """Frame indices covered by the clip at the capture rate."""
        first = int(math.floor(self.start * self.fps))
        last = int(math.floor(self.end * self.fps))
        total = int(math.floor(float(self.source.duration) * self.fps))
        last = min(last, total - 1)
        return range(first, max(first, last + 1))

    def _report(self, done: int, total: int):
        if self.progress_callback is not None and total > 0:
            self.progress_callback(min(1.0, done / total))

    # ── Capture ──────────────────────────────────────────────────────

    async def frames(self) -> AsyncIterator[FrameSample]:
        """Yield one FrameSample per successfully analyzed frame.

        Raises
        ------
        RuntimeError
            If the pose extractor has not been initialized.
        """
        if not self.extractor.is_ready:
            raise RuntimeError("Pose extractor not initialized. Call setup() first.")

        indices = self.frame_indices()
        total = len(indices)
        logger.info(
            f"Capturing {total} frames ({self.start:.2f}-{self.end:.2f}s @ {self.fps:.1f}fps, "
            f"{self.side} side)"
        )

        for done, i in enumerate(indices, start=1):
            if self._cancelled:
                break
            if self.max_frames is not None and self.n_detected >= self.max_frames:
                logger.info(f"Reached max_frames={self.max_frames}")
                break

            t = i / self.fps
            self.n_requested += 1
            frame = self.source.read_at(t)
            if frame is None:
                self._report(done, total)
                continue

            landmarks = await self.extractor.detect(frame, t)
            if self._cancelled:
                break

            sample = sample_from_landmarks(landmarks, t, self.side)
            self._report(done, total)
            if sample is None:
                continue

            self.n_detected += 1
            yield sample

        logger.info(
            f"Captured {self.n_detected}/{self.n_requested} frames with a detected pose"
        )

    async def collect(self) -> List[FrameSample]:
        """Pull every sample into a list (respecting cancel/max_frames)."""
        return [sample async for sample in self.frames()]
