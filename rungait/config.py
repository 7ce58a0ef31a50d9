"""Pipeline configuration management.

Supports JSON and YAML config files for reproducible analyses.
Configuration is merged against ``DEFAULT_CONFIG`` so partial
overrides work seamlessly.

Functions
---------
load_config
    Load pipeline config from a JSON or YAML file.
save_config
    Save pipeline config to a JSON or YAML file.

Attributes
----------
DEFAULT_CONFIG : dict
    Default configuration values for all pipeline stages.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "capture": {
        "model": "mediapipe",
        "fps": 30.0,
        "side": "left",
        "max_frames": None,
        "max_clip_seconds": 10.0,
    },
    "smoothing": {
        "method": "moving_mean",
        "window": 5,
    },
    "cycles": {
        "min_cadence": 60.0,
        "max_cadence": 220.0,
        "min_prominence": 0.005,
        "prominence_ratio": 0.2,
        "extremum": "max",
    },
    "phases": {
        "table": [
            ["IC", 0.02],
            ["LR", 0.12],
            ["MS", 0.35],
            ["TS", 0.50],
            ["PSw", 0.62],
            ["ISw", 0.75],
            ["MidSw", 0.87],
            ["TSw", 1.00],
        ],
    },
}


def get_config(config: Optional[dict] = None) -> dict:
    """Return *config* merged onto a copy of ``DEFAULT_CONFIG``."""
    base = copy.deepcopy(DEFAULT_CONFIG)
    if not config:
        return base
    return _deep_merge(base, config)


def load_config(path: Union[str, Path]) -> dict:
    """Load pipeline config from a JSON or YAML file.

    The loaded configuration is merged against ``DEFAULT_CONFIG``
    so partial overrides work correctly.

    Parameters
    ----------
    path : str or Path
        Path to config file (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    dict
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the config file does not exist.
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    ValueError
        If the file content is not a dict.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path) as f:
            cfg = yaml.safe_load(f)
    else:
        with open(path) as f:
            cfg = json.load(f)

    if not isinstance(cfg, dict):
        raise ValueError("Config must be a dict")

    merged = get_config(cfg)
    logger.info(f"Loaded config from {path}")
    return merged


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Save pipeline config to a JSON or YAML file.

    Parameters
    ----------
    config : dict
        Configuration dictionary.
    path : str or Path
        Output file path (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    str
        Path to the saved file.

    Raises
    ------
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    else:
        with open(path, "w") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved config to {path}")
    return str(path)


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result
