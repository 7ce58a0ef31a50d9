"""MediaPipe Pose extractor (33 landmarks).

Uses the MediaPipe Tasks API (PoseLandmarker) in VIDEO running mode.
Falls back to legacy mp.solutions.pose if available.
"""

import os
import logging
import numpy as np
from typing import Optional
from .base import BasePoseExtractor
from ..constants import MP_LANDMARK_NAMES

logger = logging.getLogger(__name__)

# Default model path (downloaded on first use)
_DEFAULT_MODEL_DIR = os.path.join(os.path.expanduser("~"), ".rungait", "models")
_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/pose_landmarker/pose_landmarker_full/float16/latest/pose_landmarker_full.task"


def _ensure_model(model_path: str = None) -> str:
    """Download the pose landmarker model if needed."""
    if model_path and os.path.exists(model_path):
        return model_path

    default_path = os.path.join(_DEFAULT_MODEL_DIR, "pose_landmarker_full.task")
    if os.path.exists(default_path):
        return default_path

    os.makedirs(_DEFAULT_MODEL_DIR, exist_ok=True)
    logger.info(f"Downloading MediaPipe pose model to {default_path}...")
    import shutil
    import tempfile
    import urllib.request

    tmp_fd, tmp_path = tempfile.mkstemp(dir=_DEFAULT_MODEL_DIR)
    try:
        os.close(tmp_fd)
        resp = urllib.request.urlopen(_MODEL_URL, timeout=300)
        with open(tmp_path, "wb") as out:
            shutil.copyfileobj(resp, out)
        os.replace(tmp_path, default_path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info(f"Downloaded ({os.path.getsize(default_path)} bytes)")
    return default_path


class MediaPipePoseExtractor(BasePoseExtractor):
    """Google MediaPipe Pose - 33 full-body landmarks.

    The full model is downloaded automatically on first use. Detection
    confidences follow the browser capture defaults (0.5).
    """

    name = "mediapipe"
    landmark_names = MP_LANDMARK_NAMES
    n_landmarks = 33

    def __init__(self, model_path: str = None,
                 min_detection_confidence: float = 0.5,
                 min_presence_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5):
        self.model_path = model_path
        self.min_detection_confidence = min_detection_confidence
        self.min_presence_confidence = min_presence_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self._landmarker = None
        self._legacy_pose = None
        self._last_timestamp_ms = -1

    def setup(self):
        try:
            from mediapipe.tasks.python.vision import (
                PoseLandmarker, PoseLandmarkerOptions, RunningMode,
            )
            from mediapipe.tasks.python import BaseOptions
        except ImportError:
            self._setup_legacy()
            return

        resolved_path = _ensure_model(self.model_path)
        options = PoseLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=resolved_path),
            running_mode=RunningMode.VIDEO,
            num_poses=1,
            min_pose_detection_confidence=self.min_detection_confidence,
            min_pose_presence_confidence=self.min_presence_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
            output_segmentation_masks=False,
        )
        self._landmarker = PoseLandmarker.create_from_options(options)
        self._last_timestamp_ms = -1
        self._ready = True
        logger.info("MediaPipe PoseLandmarker (Tasks API) initialized")

    def _setup_legacy(self):
        logger.warning("MediaPipe Tasks API unavailable, trying legacy API...")
        try:
            import mediapipe as mp
            self._legacy_pose = mp.solutions.pose.Pose(
                static_image_mode=False,
                model_complexity=1,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
            )
        except (ImportError, AttributeError):
            raise ImportError(
                "MediaPipe not installed. Install with: pip install rungait[mediapipe]"
            )
        self._ready = True
        logger.info("MediaPipe legacy Pose initialized")

    def teardown(self):
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        if self._legacy_pose is not None:
            self._legacy_pose.close()
            self._legacy_pose = None
        self._ready = False

    async def detect(self, frame_rgb: np.ndarray, timestamp: float) -> Optional[np.ndarray]:
        if not self._ready:
            raise RuntimeError("Extractor not initialized. Call setup() first.")
        if self._legacy_pose is not None:
            return self._process_legacy(frame_rgb)
        return self._process_tasks(frame_rgb, int(round(timestamp * 1000)))

    def process_frame(self, frame_rgb: np.ndarray) -> Optional[np.ndarray]:
        if not self._ready:
            raise RuntimeError("Extractor not initialized. Call setup() first.")
        if self._legacy_pose is not None:
            return self._process_legacy(frame_rgb)
        return self._process_tasks(frame_rgb, self._last_timestamp_ms + 1)

    def _process_tasks(self, frame_rgb: np.ndarray, timestamp_ms: int) -> Optional[np.ndarray]:
        """Process using the Tasks API."""
        import mediapipe as mp

        # Timestamps must be strictly increasing (in ms)
        timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.pose_landmarks:
            return None

        lm_list = result.pose_landmarks[0]
        return np.array([
            [lm.x, lm.y, lm.visibility]
            for lm in lm_list
        ])

    def _process_legacy(self, frame_rgb: np.ndarray) -> Optional[np.ndarray]:
        """Process using legacy solutions API."""
        results = self._legacy_pose.process(frame_rgb)
        if not results.pose_landmarks:
            return None
        return np.array([
            [lm.x, lm.y, lm.visibility]
            for lm in results.pose_landmarks.landmark
        ])
