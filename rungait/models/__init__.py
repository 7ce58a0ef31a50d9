"""Pose estimation model registry."""

from .base import BasePoseExtractor

EXTRACTORS = {}


def _register_lazy():
    """Register extractors with lazy imports to avoid heavy dependencies at import time."""
    global EXTRACTORS
    if EXTRACTORS:
        return EXTRACTORS

    EXTRACTORS["mediapipe"] = "rungait.models.mediapipe.MediaPipePoseExtractor"
    return EXTRACTORS


def register_extractor(name: str, class_path: str):
    """Register a pose extractor by dotted class path."""
    _register_lazy()
    EXTRACTORS[name] = class_path


def get_extractor(name: str, **kwargs) -> BasePoseExtractor:
    """Get a pose extractor by name.

    The returned extractor is not initialized; the caller owns it and
    must call ``setup()``/``teardown()`` (or use it in a ``with`` block).

    Args:
        name: Model name (e.g. mediapipe)
        **kwargs: Passed to the extractor constructor

    Returns:
        Instantiated pose extractor

    Raises:
        ValueError: If model name is not recognized
        ImportError: If required dependencies are not installed
    """
    _register_lazy()

    if name not in EXTRACTORS:
        available = ", ".join(sorted(EXTRACTORS.keys()))
        raise ValueError(f"Unknown model '{name}'. Available: {available}")

    class_path = EXTRACTORS[name]
    module_path, class_name = class_path.rsplit(".", 1)

    import importlib
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ImportError(
            f"Model '{name}' requires additional dependencies. "
            f"Install with: pip install rungait[{name.split('-')[0]}]\n"
            f"Original error: {e}"
        ) from e

    cls = getattr(module, class_name)
    return cls(**kwargs)


def list_models():
    """List available model names."""
    _register_lazy()
    return sorted(EXTRACTORS.keys())


__all__ = ["get_extractor", "list_models", "register_extractor", "BasePoseExtractor"]
