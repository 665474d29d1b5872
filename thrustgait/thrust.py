"""Lateral knee thrust during stance.

Lateral thrust is approximated per frame as the perpendicular distance of
the knee from the hip-ankle line in the image plane::

    d = |(A - H) x (H - K)| / |A - H|

with H, K, A the hip, knee and ankle points. The distance is scaled by
``THRUST_CM_PER_UNIT`` (100) to approximate centimeters, which assumes
the normalized frame spans about one meter. Absolute values are
therefore relative, not metrologically exact.

Only stance frames contribute: the limb must bear weight for the knee
deviation to reflect joint loading. Swing frames are kept in the
waveform as zeros so it stays frame-aligned for display.

Severity uses the fixed amplitude cutoffs: < 2 cm low, < 4 cm moderate,
otherwise high.

Functions
---------
perpendicular_distance
    Knee distance to the hip-ankle line (normalized units).
classify_severity
    Map an amplitude (cm) to a severity level.
asymmetry_percent
    Left/right amplitude difference relative to the larger side.
compute_thrust_metrics
    Waveform, amplitude and severity for one limb.
calculate_lateral_thrust
    Metrics for both limbs plus asymmetry.
"""

import bisect
import logging
import math
from typing import Iterable, List

from .constants import (
    LIMB_LANDMARKS,
    SEVERITY_HIGH_CM,
    SEVERITY_MODERATE_CM,
    SIDES,
    THRUST_CM_PER_UNIT,
)
from .preprocess import round_half_up
from .schema import get_landmark

logger = logging.getLogger(__name__)


class StanceMask:
    """Read-only set of stance frames backed by sorted closed intervals."""

    def __init__(self, phases: Iterable[dict]):
        intervals = sorted((p["start_frame"], p["end_frame"]) for p in phases)
        self._starts = [s for s, _ in intervals]
        self._ends = [e for _, e in intervals]

    def __contains__(self, frame: int) -> bool:
        i = bisect.bisect_right(self._starts, frame) - 1
        return i >= 0 and frame <= self._ends[i]

    def __len__(self) -> int:
        return sum(e - s + 1 for s, e in zip(self._starts, self._ends))


def perpendicular_distance(hip: dict, knee: dict, ankle: dict) -> float:
    """Distance from *knee* to the line through *hip* and *ankle*.

    Returns 0.0 when hip and ankle coincide.
    """
    dx = ankle["x"] - hip["x"]
    dy = ankle["y"] - hip["y"]
    length = math.hypot(dx, dy)
    if length == 0:
        return 0.0
    cross = dx * (hip["y"] - knee["y"]) - (hip["x"] - knee["x"]) * dy
    return abs(cross) / length


def classify_severity(amplitude: float) -> str:
    """Severity level for a thrust amplitude in cm."""
    if amplitude < SEVERITY_MODERATE_CM:
        return "low"
    if amplitude < SEVERITY_HIGH_CM:
        return "moderate"
    return "high"


def asymmetry_percent(left_amplitude: float, right_amplitude: float) -> int:
    """|L - R| / max(L, R) * 100, rounded. Returns 0 if both are 0."""
    largest = max(left_amplitude, right_amplitude)
    if largest <= 0:
        return 0
    return int(round_half_up(abs(left_amplitude - right_amplitude) / largest * 100))


def compute_thrust_metrics(frames: list, stance_phases: List[dict], side: str) -> dict:
    """Compute the lateral thrust metrics of one limb.

    Parameters
    ----------
    frames : list of dict
        Frame sequence.
    stance_phases : list of dict
        Stance phases; only those of *side* are used.
    side : {'left', 'right'}
        Limb to analyze.

    Returns
    -------
    dict
        ``amplitude`` and ``max_displacement`` (cm, 1 decimal),
        frame-aligned ``waveform`` and ``time_points`` (ms), and
        ``severity``.
    """
    names = LIMB_LANDMARKS[side]
    phases = [p for p in stance_phases if p["side"] == side]
    mask = StanceMask(phases)

    waveform = []
    time_points = []
    n_missing = 0
    n_stance = 0

    for i, frame in enumerate(frames):
        hip = get_landmark(frame, names["hip"])
        knee = get_landmark(frame, names["knee"])
        ankle = get_landmark(frame, names["ankle"])
        time_points.append(float(frame["timestamp"]))

        if hip is None or knee is None or ankle is None:
            n_missing += 1
            waveform.append(0.0)
            continue

        if i in mask:
            waveform.append(perpendicular_distance(hip, knee, ankle) * THRUST_CM_PER_UNIT)
            n_stance += 1
        else:
            waveform.append(0.0)

    if n_missing:
        logger.warning(f"{side}: {n_missing}/{len(frames)} frames missing hip/knee/ankle landmarks")

    amplitude = 0.0
    max_displacement = 0.0
    for p in phases:
        values = [
            w for w in waveform[p["start_frame"]:p["end_frame"] + 1]
            if w > 0
        ]
        if not values:
            continue
        lo, hi = min(values), max(values)
        amplitude = max(amplitude, hi - lo)
        max_displacement = max(max_displacement, abs(lo), abs(hi))

    severity = classify_severity(amplitude)
    logger.debug(f"{side}: {n_stance} stance frames / {len(frames)}, {len(phases)} stance phases")

    return {
        "amplitude": round_half_up(amplitude, 1),
        "max_displacement": round_half_up(max_displacement, 1),
        "waveform": waveform,
        "time_points": time_points,
        "severity": severity,
    }


def calculate_lateral_thrust(frames: list, stance_phases: List[dict]) -> dict:
    """Lateral thrust metrics for both knees and their asymmetry.

    Returns
    -------
    dict
        ``left_knee``, ``right_knee`` (see :func:`compute_thrust_metrics`)
        and ``asymmetry_percent`` (int).
    """
    metrics = {side: compute_thrust_metrics(frames, stance_phases, side) for side in SIDES}
    left, right = metrics["left"], metrics["right"]

    result = {
        "left_knee": left,
        "right_knee": right,
        "asymmetry_percent": asymmetry_percent(left["amplitude"], right["amplitude"]),
    }
    logger.info(
        f"Lateral thrust: L={left['amplitude']} cm ({left['severity']}), "
        f"R={right['amplitude']} cm ({right['severity']}), "
        f"asymmetry={result['asymmetry_percent']}%"
    )
    return result
