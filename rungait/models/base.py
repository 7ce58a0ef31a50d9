"""Base class for pose extractors.

An extractor is a caller-owned service object: the caller creates it,
calls :meth:`BasePoseExtractor.setup` before the first frame and
:meth:`BasePoseExtractor.teardown` when done (or uses it as a context
manager). Nothing is cached at module level, so tests can pass a fake
extractor straight to the capture session.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class BasePoseExtractor(ABC):
    """Abstract base class for all pose extractors.

    Subclasses must implement process_frame() which takes an RGB frame
    and returns landmarks as a numpy array.
    """

    name: str = "Base"
    landmark_names: List[str] = []
    n_landmarks: int = 0

    _ready: bool = False

    @abstractmethod
    def process_frame(self, frame_rgb: np.ndarray) -> Optional[np.ndarray]:
        """Process a single RGB frame and return landmarks.

        Args:
            frame_rgb: RGB image as numpy array (H, W, 3).

        Returns:
            Array of shape (N, 3) with [x_normalized, y_normalized, visibility]
            where x and y are in [0, 1] relative to image dimensions.
            Returns None if no pose detected.
        """

    async def detect(self, frame_rgb: np.ndarray, timestamp: float) -> Optional[np.ndarray]:
        """Awaitable detection used by the capture loop.

        The default runs :meth:`process_frame` inline; *timestamp* (in
        seconds) is available to video-mode backends that need it.
        """
        return self.process_frame(frame_rgb)

    def setup(self):
        """Initialize the model. Called before processing starts."""
        self._ready = True

    def teardown(self):
        """Release model resources. Called after processing ends."""
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.teardown()
        return False
