"""Gait cycle segmentation and 8-phase subdivision.

A gait cycle runs from one stance onset (initial contact) to the next
stance onset of the same limb. Each cycle is divided into the eight
Rancho Los Amigos sub-phases by fixed percentages of its duration:

    IC 0-2, LR 2-12, MSt 12-31, TSt 31-50,
    PSw 50-62, ISw 62-75, MSw 75-87, TSw 87-100 (%)

    Ref: Perry J, Burnfield JM. Gait Analysis: Normal and
    Pathological Function. 2nd ed. SLACK Incorporated; 2010.

The subdivision is purely proportional: the detected stance end (toe
off) is not used to stretch the stance sub-phases.

Functions
---------
subdivide_cycle
    Split one cycle into its eight sub-phases.
segment_cycles
    Build all gait cycles from a set of stance phases.
"""

import logging
from typing import List

from .constants import GAIT_PHASES, MIN_CYCLE_FRAMES, SIDES
from .preprocess import round_half_up

logger = logging.getLogger(__name__)


def subdivide_cycle(start_frame: int, end_frame: int, side: str) -> List[dict]:
    """Split the cycle ``[start_frame, end_frame]`` into 8 gait phases.

    Each boundary frame is ``round(start + duration * pct / 100)``, so
    consecutive phases share their boundary frame and the phases cover
    the cycle without gaps.
    """
    duration = end_frame - start_frame
    phases = []
    for phase_type, start_pct, end_pct in GAIT_PHASES:
        phases.append({
            "side": side,
            "type": phase_type,
            "start_frame": int(round_half_up(start_frame + duration * start_pct / 100)),
            "end_frame": int(round_half_up(start_frame + duration * end_pct / 100)),
            "start_percent": start_pct,
            "end_percent": end_pct,
        })
    return phases


def segment_cycles(stance_phases: List[dict]) -> List[dict]:
    """Build gait cycles from consecutive stance phases of each limb.

    Parameters
    ----------
    stance_phases : list of dict
        Output of :func:`thrustgait.stance.detect_stance_phases`.

    Returns
    -------
    list of dict
        Cycles ``{"cycle_id", "side", "start_frame", "end_frame",
        "phases"}`` sorted by ``start_frame``. Cycles shorter than
        ``MIN_CYCLE_FRAMES`` are discarded.
    """
    cycles = []

    for side in SIDES:
        stances = sorted(
            (p for p in stance_phases if p["side"] == side),
            key=lambda p: p["start_frame"],
        )
        if len(stances) < 2:
            logger.info(f"Not enough stance phases for {side} side ({len(stances)})")
            continue

        for current, nxt in zip(stances, stances[1:]):
            start_frame = current["start_frame"]
            end_frame = nxt["start_frame"]
            if end_frame - start_frame < MIN_CYCLE_FRAMES:
                logger.debug(f"Cycle {side} {start_frame}-{end_frame} rejected: too short")
                continue

            cycles.append({
                "side": side,
                "start_frame": start_frame,
                "end_frame": end_frame,
                "phases": subdivide_cycle(start_frame, end_frame, side),
            })

    cycles.sort(key=lambda c: c["start_frame"])
    cycles = [{"cycle_id": i, **c} for i, c in enumerate(cycles)]

    n_left = sum(1 for c in cycles if c["side"] == "left")
    logger.info(f"Segmented {len(cycles)} gait cycles: L={n_left}, R={len(cycles) - n_left}")
    return cycles
