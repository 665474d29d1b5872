"""Signal preprocessing: landmark series extraction, velocity, smoothing.

Turns a frame sequence into the 1D per-limb signals consumed by the
stance detector. All functions are pure; inputs are never modified.

Missing landmarks are substituted with 0.0 rather than interpolated or
dropped, so the series always have one sample per frame. A dropout
therefore shows up as a sudden jump towards the top of the image.

Functions
---------
extract_landmark_series
    One coordinate of one landmark across all frames.
extract_limb_signals
    Ankle and knee vertical series for one side.
compute_velocity
    Frame-to-frame first difference.
smooth_signal
    Centered moving average with truncated edges.
frames_to_dataframe
    Wide DataFrame of lower-limb landmark coordinates.
"""

import logging
import math

import numpy as np
import pandas as pd

from .constants import LIMB_LANDMARKS, SIDES, SMOOTHING_WINDOW
from .schema import get_landmark

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to *ndigits* decimals with halves rounded up (toward +inf).

    Unlike the built-in ``round``, ties never go to the even neighbour.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def extract_landmark_series(frames: list, name: str, coord: str = "y") -> np.ndarray:
    """Extract a single coordinate time series for a landmark.

    Missing landmarks yield 0.0 for that frame.
    """
    values = []
    n_missing = 0
    for f in frames:
        lm = get_landmark(f, name)
        if lm is None:
            n_missing += 1
            values.append(0.0)
        else:
            values.append(float(lm[coord]))
    if n_missing:
        logger.debug(f"{name}: {n_missing}/{len(frames)} frames missing, substituted with 0")
    return np.array(values, dtype=float)


def extract_limb_signals(frames: list, side: str) -> dict:
    """Extract the ankle and knee vertical series of one side.

    Returns
    -------
    dict
        Keys ``ankle_y`` and ``knee_y`` (np.ndarray, one value per frame).
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    names = LIMB_LANDMARKS[side]
    return {
        "ankle_y": extract_landmark_series(frames, names["ankle"], "y"),
        "knee_y": extract_landmark_series(frames, names["knee"], "y"),
    }


def compute_velocity(series) -> np.ndarray:
    """First difference with a leading zero: v[0] = 0, v[i] = y[i] - y[i-1]."""
    arr = np.asarray(series, dtype=float)
    if arr.size == 0:
        return arr.copy()
    return np.diff(arr, prepend=arr[0])


def smooth_signal(series, window: int = SMOOTHING_WINDOW) -> np.ndarray:
    """Centered moving average.

    Edge samples average over the truncated window (the first and last
    ``window // 2`` samples use fewer neighbours) instead of padding.
    """
    arr = np.asarray(series, dtype=float)
    if arr.size == 0:
        return arr.copy()
    s = pd.Series(arr)
    return s.rolling(int(window), min_periods=1, center=True).mean().to_numpy(float)


def frames_to_dataframe(frames: list) -> pd.DataFrame:
    """Convert frames to a DataFrame with hip/knee/ankle ``_x`` / ``_y`` columns.

    Missing landmarks are NaN here so gaps stay visible when exporting.
    """
    rows = []
    for i, f in enumerate(frames):
        row = {"frame_idx": i, "timestamp": f.get("timestamp")}
        for side in SIDES:
            for name in LIMB_LANDMARKS[side].values():
                lm = get_landmark(f, name)
                row[f"{name}_x"] = float(lm["x"]) if lm is not None else np.nan
                row[f"{name}_y"] = float(lm["y"]) if lm is not None else np.nan
                row[f"{name}_visibility"] = (
                    lm.get("visibility", 1.0) if lm is not None else 0.0
                )
        rows.append(row)
    return pd.DataFrame(rows)
