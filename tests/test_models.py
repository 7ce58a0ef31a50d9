"""Tests for the pose extractor registry and base lifecycle."""

import asyncio

import numpy as np
import pytest

from conftest import FakePoseExtractor, make_landmarks
from rungait import models
from rungait.models import get_extractor, list_models, register_extractor


@pytest.fixture
def registry(monkeypatch):
    list_models()
    monkeypatch.setattr(models, "EXTRACTORS", dict(models.EXTRACTORS))
    return models.EXTRACTORS


class TestRegistry:

    def test_mediapipe_listed(self):
        assert "mediapipe" in list_models()

    def test_unknown_model(self):
        with pytest.raises(ValueError, match="Unknown model"):
            get_extractor("openpose")

    def test_register_and_get(self, registry):
        register_extractor("fake", "conftest.FakePoseExtractor")
        extractor = get_extractor("fake", no_pose={1})
        assert isinstance(extractor, FakePoseExtractor)
        assert extractor.no_pose == {1}
        assert not extractor.is_ready

    def test_missing_dependency_hint(self, registry):
        register_extractor("ghost", "rungait_missing_backend.GhostExtractor")
        with pytest.raises(ImportError, match=r"pip install rungait\[ghost\]"):
            get_extractor("ghost")


class TestLifecycle:

    def test_context_manager(self):
        extractor = FakePoseExtractor()
        assert not extractor.is_ready
        with extractor as ready:
            assert ready is extractor
            assert extractor.is_ready
        assert not extractor.is_ready

    def test_default_detect_uses_process_frame(self):
        class Static(FakePoseExtractor):
            detect = models.BasePoseExtractor.detect

        extractor = Static()
        result = asyncio.run(extractor.detect(np.zeros((4, 4, 3), dtype=np.uint8), 0.0))
        np.testing.assert_array_equal(result, make_landmarks())


class TestMediaPipeExtractor:

    def test_detect_requires_setup(self):
        from rungait.models.mediapipe import MediaPipePoseExtractor

        extractor = MediaPipePoseExtractor()
        assert extractor.name == "mediapipe"
        with pytest.raises(RuntimeError, match="not initialized"):
            asyncio.run(extractor.detect(np.zeros((4, 4, 3), dtype=np.uint8), 0.0))
