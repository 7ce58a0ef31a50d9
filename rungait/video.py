"""Video frame access by timestamp.

:class:`VideoFrameSource` wraps an OpenCV capture and returns one RGB
frame per requested timestamp. The capture session seeks to each
timestamp in turn, so only one decoded frame is alive at a time.

A failed seek or decode returns ``None``; the capture loop then skips
that frame rather than recording a corrupt sample.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class VideoFrameSource:
    """Seekable RGB frame reader backed by ``cv2.VideoCapture``.

    Parameters
    ----------
    video_path : str or Path
        Path to a video file (mp4, mov, avi).

    Raises
    ------
    FileNotFoundError
        If the video file does not exist (raised by :meth:`open`).
    ValueError
        If the video cannot be opened by OpenCV.
    """

    def __init__(self, video_path: Union[str, Path]):
        self.video_path = str(video_path)
        self._cap = None
        self.fps = 0.0
        self.width = 0
        self.height = 0
        self.n_frames = 0

    @property
    def duration(self) -> float:
        return self.n_frames / self.fps if self.fps > 0 else 0.0

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> "VideoFrameSource":
        if not Path(self.video_path).exists():
            raise FileNotFoundError(f"Video not found: {self.video_path}")
        cap = cv2.VideoCapture(self.video_path)
        if not cap.isOpened():
            raise ValueError(f"Cannot open video: {self.video_path}")
        self._cap = cap
        self.fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self.width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.n_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        logger.info(
            f"Opened {self.video_path}: {self.width}x{self.height} "
            f"@ {self.fps:.1f}fps, {self.duration:.2f}s"
        )
        return self

    def close(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def read_at(self, t: float) -> Optional[np.ndarray]:
        """Return the RGB frame at *t* seconds, or None on failure."""
        if self._cap is None:
            raise RuntimeError("Video source is not open. Call open() first.")
        if not self._cap.set(cv2.CAP_PROP_POS_MSEC, float(t) * 1000.0):
            logger.debug(f"Seek to {t:.3f}s failed")
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            logger.debug(f"No frame decoded at {t:.3f}s")
            return None
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
