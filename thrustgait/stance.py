"""Stance-phase detection with a fixed threshold and hysteresis.

Each limb is scanned independently by a two-state machine
(SWING / STANCE) over its smoothed ankle vertical position and its raw
ankle velocity:

    SWING  -> STANCE  when y > T + h and |v| < v_still
    STANCE -> SWING   when y < T - h or  |v| >= v_still

A stance interval is kept only if it lasts at least ``MIN_STANCE_FRAMES``
frames. T is a fixed constant, never estimated from the trial.

Functions
---------
detect_limb_stance
    Run the state machine on the signals of one limb.
detect_stance_phases
    Detect stance phases for both limbs of a trial.
"""

import logging
from enum import Enum
from typing import List

import numpy as np

from .constants import (
    MIN_STANCE_FRAMES,
    SIDES,
    STANCE_HYSTERESIS,
    STANCE_THRESHOLD,
    STILLNESS_VELOCITY,
)
from .preprocess import compute_velocity, extract_limb_signals, smooth_signal

logger = logging.getLogger(__name__)


class LimbState(Enum):
    """State of one limb during the stance scan."""
    SWING = "swing"
    STANCE = "stance"


def _is_still(velocity: float) -> bool:
    return abs(velocity) < STILLNESS_VELOCITY


def detect_limb_stance(
    ankle_y_smooth,
    velocity,
    side: str,
) -> List[dict]:
    """Detect stance intervals for one limb.

    Parameters
    ----------
    ankle_y_smooth : array-like
        Smoothed ankle vertical position (normalized, y down).
    velocity : array-like
        Frame-to-frame ankle velocity, same length.
    side : {'left', 'right'}
        Limb label copied into each phase.

    Returns
    -------
    list of dict
        ``{"side", "start_frame", "end_frame"}`` with inclusive bounds,
        in ascending order and never overlapping.
    """
    y = np.asarray(ankle_y_smooth, dtype=float)
    v = np.asarray(velocity, dtype=float)
    if len(y) != len(v):
        raise ValueError("ankle_y_smooth and velocity must have the same length")

    upper = STANCE_THRESHOLD + STANCE_HYSTERESIS
    lower = STANCE_THRESHOLD - STANCE_HYSTERESIS

    phases = []
    state = LimbState.SWING
    stance_start = 0

    for i in range(len(y)):
        still = _is_still(v[i])
        if state is LimbState.SWING:
            if y[i] > upper and still:
                state = LimbState.STANCE
                stance_start = i
        elif y[i] < lower or not still:
            state = LimbState.SWING
            if i - stance_start >= MIN_STANCE_FRAMES:
                phases.append({"side": side, "start_frame": stance_start, "end_frame": i - 1})

    if state is LimbState.STANCE and len(y) - stance_start >= MIN_STANCE_FRAMES:
        phases.append({"side": side, "start_frame": stance_start, "end_frame": len(y) - 1})

    return phases


def detect_stance_phases(frames: list) -> List[dict]:
    """Detect stance phases for both limbs of a trial.

    Velocity is taken from the raw ankle series; thresholds apply to the
    smoothed series.

    Parameters
    ----------
    frames : list of dict
        Frame sequence (see :mod:`thrustgait.schema`).

    Returns
    -------
    list of dict
        Stance phases of both sides sorted by ``start_frame``.
    """
    logger.debug(
        f"Stance detection: threshold={STANCE_THRESHOLD}, "
        f"hysteresis={STANCE_HYSTERESIS}, still<{STILLNESS_VELOCITY}, "
        f"min_duration={MIN_STANCE_FRAMES} frames"
    )

    phases = []
    counts = {}
    for side in SIDES:
        ankle_y = extract_limb_signals(frames, side)["ankle_y"]
        side_phases = detect_limb_stance(smooth_signal(ankle_y), compute_velocity(ankle_y), side)
        counts[side] = len(side_phases)
        phases.extend(side_phases)

    logger.info(f"Detected {len(phases)} stance phases: L={counts['left']}, R={counts['right']}")
    return sorted(phases, key=lambda p: p["start_frame"])
