"""Frame and result JSON formats for thrustgait.

Frames arrive from an external pose estimator as a list of dicts::

    {"timestamp": 1033.3,
     "landmarks": [{"x": .., "y": .., "z": .., "visibility": ..}, ...],
     "world_landmarks": [...]}

``landmarks`` is indexed by MediaPipe landmark index, or keyed by
landmark name (``"LEFT_HIP"``) for data coming from pivot-style JSON.

Functions
---------
get_landmark
    Look up one landmark in a frame, by name.
normalize_frames
    Normalize frame dicts from the accepted input variants.
load_frames
    Load a frame sequence from a JSON file.
save_json
    Save a dict or list to JSON with numpy type conversion.
load_json
    Load an analysis result JSON file.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from .constants import MP_NAME_TO_INDEX

logger = logging.getLogger(__name__)


def _convert_numpy(obj: Any) -> Any:
    """Recursively convert numpy types to Python types for JSON serialization."""
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, dict):
        return {k: _convert_numpy(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_convert_numpy(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    return obj


def _valid_coord(value) -> bool:
    if value is None:
        return False
    try:
        return not math.isnan(float(value))
    except (TypeError, ValueError):
        return False


def get_landmark(frame: dict, name: str) -> Optional[dict]:
    """Return landmark *name* of *frame*, or None if it is missing.

    A landmark is missing when it is absent, ``None``, or its ``x``/``y``
    coordinate is absent, ``None`` or NaN.
    """
    landmarks = frame.get("landmarks")
    if not landmarks:
        return None

    if isinstance(landmarks, dict):
        lm = landmarks.get(name)
    else:
        idx = MP_NAME_TO_INDEX[name]
        lm = landmarks[idx] if idx < len(landmarks) else None

    if lm is None:
        return None
    if not (_valid_coord(lm.get("x")) and _valid_coord(lm.get("y"))):
        return None
    return lm


def normalize_frames(frames: list) -> list:
    """Normalize frame dicts to the canonical layout.

    Accepts camelCase ``worldLandmarks`` and pivot-style ``time_s``
    (seconds) and returns new frame dicts with ``world_landmarks`` and
    ``timestamp`` (milliseconds). The input list is left untouched.

    Raises
    ------
    TypeError
        If *frames* is not a list or a frame is not a dict.
    ValueError
        If a frame carries neither ``timestamp`` nor ``time_s``.
    """
    if not isinstance(frames, (list, tuple)):
        raise TypeError("frames must be a list")

    out = []
    for i, f in enumerate(frames):
        if not isinstance(f, dict):
            raise TypeError(f"Frame {i} must be a dict")
        frame = dict(f)
        if "worldLandmarks" in frame:
            frame.setdefault("world_landmarks", frame.pop("worldLandmarks"))
        if frame.get("timestamp") is None:
            if frame.get("time_s") is None:
                raise ValueError(f"Frame {i} has no timestamp")
            frame["timestamp"] = float(frame["time_s"]) * 1000.0
        frame.setdefault("landmarks", [])
        frame.setdefault("world_landmarks", [])
        out.append(frame)
    return out


def load_frames(path: Union[str, Path]) -> list:
    """Load a frame sequence from a JSON file.

    The file holds either a list of frames or a dict with a ``frames``
    key (e.g. a pose-extraction pivot file).

    Parameters
    ----------
    path : str or Path
        Path to JSON file.

    Returns
    -------
    list of dict
        Normalized frames (see :func:`normalize_frames`).

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the JSON content holds no frame list.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        content = json.load(f)

    if isinstance(content, dict):
        if "frames" not in content:
            raise ValueError("Missing 'frames' key in JSON")
        content = content["frames"]
    if not isinstance(content, list):
        raise ValueError("JSON frames must be a list")

    frames = normalize_frames(content)
    logger.info(f"Loaded {len(frames)} frames from {path}")
    return frames


def save_json(data: Union[dict, list], path: Union[str, Path], indent: int = 2) -> None:
    """Save a result dict (or frame list) to file.

    Automatically converts numpy types to Python builtins before
    serialization.

    Parameters
    ----------
    data : dict or list
        Object to serialize.
    path : str or Path
        Output file path. Parent directories are created if needed.
    indent : int, optional
        JSON indentation level (default 2).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    converted = _convert_numpy(data)
    with open(path, "w") as f:
        json.dump(converted, f, indent=indent, ensure_ascii=False)


def load_json(path: Union[str, Path]) -> dict:
    """Load and validate an analysis result JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the content is not an analysis result.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("JSON root must be a dict")
    for key in ("stance_phases", "gait_cycles", "lateral_thrust"):
        if key not in data:
            raise ValueError(f"Missing '{key}' key in JSON")

    return data
