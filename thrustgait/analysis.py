"""Gait analysis: trial aggregation, multi-trial summary, session comparison.

Functions
---------
analyze_gait
    Run the full pipeline on one trial (main entry point).
summarize_trials
    Average thrust metrics over repeated trials of one recording.
compare_sessions
    Change in thrust metrics between two analysed sessions.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from .constants import (
    AMPLITUDE_CHANGE_TOLERANCE_CM,
    ASYMMETRY_CHANGE_TOLERANCE_PCT,
    MIN_TRIAL_FRAMES,
)
from .cycles import segment_cycles
from .preprocess import round_half_up
from .stance import detect_stance_phases
from .thrust import calculate_lateral_thrust

logger = logging.getLogger(__name__)


def analyze_gait(frames: list) -> Optional[dict]:
    """Analyze one walking trial.

    Detects stance phases, derives gait cycles from them and computes
    the lateral knee thrust restricted to stance frames.

    Parameters
    ----------
    frames : list of dict
        Frame sequence with ``timestamp`` (ms) and ``landmarks``.

    Returns
    -------
    dict or None
        ``{"stance_phases", "gait_cycles", "lateral_thrust",
        "total_frames", "duration"}`` with ``duration`` in seconds, or
        None when fewer than ``MIN_TRIAL_FRAMES`` frames are given
        (insufficient data).

    Raises
    ------
    TypeError
        If *frames* is not a list.
    """
    if not isinstance(frames, (list, tuple)):
        raise TypeError("frames must be a list")
    if len(frames) < MIN_TRIAL_FRAMES:
        logger.info(
            f"Insufficient data: {len(frames)} frames, "
            f"at least {MIN_TRIAL_FRAMES} required"
        )
        return None

    stance_phases = detect_stance_phases(frames)
    gait_cycles = segment_cycles(stance_phases)
    lateral_thrust = calculate_lateral_thrust(frames, stance_phases)
    duration = (float(frames[-1]["timestamp"]) - float(frames[0]["timestamp"])) / 1000

    return {
        "stance_phases": stance_phases,
        "gait_cycles": gait_cycles,
        "lateral_thrust": lateral_thrust,
        "total_frames": len(frames),
        "duration": duration,
    }


def summarize_trials(results: List[Optional[dict]]) -> dict:
    """Summarize repeated analyses of the same walk.

    Trials that yielded no result (None) are skipped. The best trial is
    the one with the most frames, the first one on ties.

    Parameters
    ----------
    results : list of dict or None
        Outputs of :func:`analyze_gait`.

    Returns
    -------
    dict
        ``n_trials``, ``best_trial_index`` (index into *results*) and
        ``averages`` with ``left_amplitude``, ``right_amplitude`` and
        ``asymmetry_percent``.

    Raises
    ------
    TypeError
        If *results* is not a list.
    ValueError
        If no trial produced a result.
    """
    if not isinstance(results, list):
        raise TypeError("results must be a list of analyze_gait() outputs")

    valid = [(i, r) for i, r in enumerate(results) if r is not None]
    if not valid:
        raise ValueError("No trial produced an analysis result")

    best_index = valid[0][0]
    for i, r in valid:
        if r["total_frames"] > results[best_index]["total_frames"]:
            best_index = i

    left = [r["lateral_thrust"]["left_knee"]["amplitude"] for _, r in valid]
    right = [r["lateral_thrust"]["right_knee"]["amplitude"] for _, r in valid]
    asym = [r["lateral_thrust"]["asymmetry_percent"] for _, r in valid]

    summary = {
        "n_trials": len(valid),
        "best_trial_index": best_index,
        "averages": {
            "left_amplitude": float(np.mean(left)),
            "right_amplitude": float(np.mean(right)),
            "asymmetry_percent": float(np.mean(asym)),
        },
    }
    logger.info(
        f"Summarized {len(valid)}/{len(results)} trials, best trial {best_index}: "
        f"L={summary['averages']['left_amplitude']:.2f} cm, "
        f"R={summary['averages']['right_amplitude']:.2f} cm"
    )
    return summary


def _trend(diff: float) -> str:
    if abs(diff) < AMPLITUDE_CHANGE_TOLERANCE_CM:
        return "no_change"
    return "increased" if diff > 0 else "decreased"


def _change_percent(before: float, after: float) -> float:
    return (after - before) / (before or 1) * 100


def compare_sessions(before: dict, after: dict) -> Dict[str, object]:
    """Compare the lateral thrust of two analysed sessions.

    Differences are ``after - before``; change percentages are relative
    to the earlier session (or to 1 cm when it measured 0).

    Parameters
    ----------
    before, after : dict
        Outputs of :func:`analyze_gait`, oldest first.

    Returns
    -------
    dict
        Per-knee ``*_diff``, ``*_change_percent`` and ``*_trend``
        (``"no_change"`` below 0.5 cm, else ``"increased"`` /
        ``"decreased"``), plus ``asymmetry_diff`` and
        ``asymmetry_changed`` (True when it moved by more than 5 points).

    Raises
    ------
    TypeError
        If either session is not a dict.
    """
    if not isinstance(before, dict) or not isinstance(after, dict):
        raise TypeError("sessions must be analysis result dicts")

    lt_before = before["lateral_thrust"]
    lt_after = after["lateral_thrust"]

    comparison = {}
    for knee in ("right_knee", "left_knee"):
        a0 = lt_before[knee]["amplitude"]
        a1 = lt_after[knee]["amplitude"]
        diff = round_half_up(a1 - a0, 1)
        comparison[f"{knee}_diff"] = diff
        comparison[f"{knee}_change_percent"] = _change_percent(a0, a1)
        comparison[f"{knee}_trend"] = _trend(diff)

    asym_diff = lt_after["asymmetry_percent"] - lt_before["asymmetry_percent"]
    comparison["asymmetry_diff"] = asym_diff
    comparison["asymmetry_changed"] = abs(asym_diff) > ASYMMETRY_CHANGE_TOLERANCE_PCT
    return comparison
