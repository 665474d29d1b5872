"""Run configuration management.

Supports JSON and YAML config files for reproducible batch runs.
Configuration is merged against ``DEFAULT_CONFIG`` so partial
overrides work seamlessly.

Only I/O and reporting options are configurable. The analysis
thresholds are fixed in :mod:`thrustgait.constants` and are never read
from a config file.

Functions
---------
load_config
    Load run config from a JSON or YAML file.
save_config
    Save run config to a JSON or YAML file.

Attributes
----------
DEFAULT_CONFIG : dict
    Default configuration values.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "export": {
        "csv": False,
        "summary_json": True,
        "include_waveforms": True,
        "prefix": "",
    },
    "batch": {
        "pattern": "*.json",
        "continue_on_error": True,
    },
}


def load_config(path: Union[str, Path]) -> dict:
    """Load run config from a JSON or YAML file.

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

    merged = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), cfg)
    logger.info(f"Loaded config from {path}")
    return merged


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Save run config to a JSON or YAML file.

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
