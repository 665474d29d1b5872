"""Export analysis results to tabular and summary formats.

Functions
---------
to_dataframe
    Convert parts of an analysis result to pandas DataFrames.
export_csv
    Write stance phases, gait phases and thrust waveforms to CSV.
export_summary_json
    Write a compact JSON summary without the waveforms.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

_STANCE_COLUMNS = ["side", "start_frame", "end_frame", "n_frames"]
_CYCLE_COLUMNS = ["cycle_id", "side", "start_frame", "end_frame", "n_frames"]
_PHASE_COLUMNS = ["cycle_id", "side", "type", "start_frame", "end_frame",
                  "start_percent", "end_percent"]
_THRUST_COLUMNS = ["frame_idx", "time_ms", "left_knee_cm", "right_knee_cm"]


def to_dataframe(result: dict, what: str = "stance") -> "pd.DataFrame | dict":
    """Convert an analysis result to pandas DataFrame(s).

    Parameters
    ----------
    result : dict
        Output of :func:`thrustgait.analyze_gait`.
    what : str, optional
        What to convert:
        - ``"stance"`` : one row per stance phase.
        - ``"cycles"`` : one row per gait cycle.
        - ``"phases"`` : one row per gait sub-phase.
        - ``"thrust"`` : frame-aligned thrust waveforms of both knees.
        - ``"all"`` : dict of all four DataFrames.

    Raises
    ------
    ValueError
        If *what* is not one of the recognized values.
    """
    valid_whats = ("stance", "cycles", "phases", "thrust", "all")
    if what not in valid_whats:
        raise ValueError(f"what must be one of {valid_whats}, got {what!r}")

    def _stance_df():
        rows = [{
            "side": p["side"],
            "start_frame": p["start_frame"],
            "end_frame": p["end_frame"],
            "n_frames": p["end_frame"] - p["start_frame"] + 1,
        } for p in result.get("stance_phases", [])]
        return pd.DataFrame(rows, columns=_STANCE_COLUMNS)

    def _cycles_df():
        rows = [{
            "cycle_id": c["cycle_id"],
            "side": c["side"],
            "start_frame": c["start_frame"],
            "end_frame": c["end_frame"],
            "n_frames": c["end_frame"] - c["start_frame"],
        } for c in result.get("gait_cycles", [])]
        return pd.DataFrame(rows, columns=_CYCLE_COLUMNS)

    def _phases_df():
        rows = []
        for c in result.get("gait_cycles", []):
            for ph in c["phases"]:
                rows.append({"cycle_id": c["cycle_id"], **ph})
        return pd.DataFrame(rows, columns=_PHASE_COLUMNS)

    def _thrust_df():
        lt = result.get("lateral_thrust", {})
        left = lt.get("left_knee", {})
        right = lt.get("right_knee", {})
        time_points = left.get("time_points", [])
        return pd.DataFrame({
            "frame_idx": range(len(time_points)),
            "time_ms": time_points,
            "left_knee_cm": left.get("waveform", []),
            "right_knee_cm": right.get("waveform", []),
        }, columns=_THRUST_COLUMNS)

    if what == "stance":
        return _stance_df()
    elif what == "cycles":
        return _cycles_df()
    elif what == "phases":
        return _phases_df()
    elif what == "thrust":
        return _thrust_df()
    else:  # "all"
        return {
            "stance": _stance_df(),
            "cycles": _cycles_df(),
            "phases": _phases_df(),
            "thrust": _thrust_df(),
        }


def export_csv(
    result: dict,
    output_dir: str,
    prefix: str = "",
    include_waveforms: bool = True,
) -> list:
    """Export an analysis result to CSV files.

    Creates ``stance.csv``, ``cycles.csv``, ``phases.csv`` and (unless
    disabled) ``thrust.csv`` in *output_dir*. Empty tables are still
    written with their header so downstream readers see a fixed layout.

    Parameters
    ----------
    result : dict
        Output of :func:`thrustgait.analyze_gait`.
    output_dir : str
        Directory path for output files. Created if it does not exist.
    prefix : str, optional
        Filename prefix (e.g. ``"patient01_"``).
    include_waveforms : bool, optional
        Also write the frame-aligned thrust waveforms (default True).

    Returns
    -------
    list of str
        Paths to all created CSV files.

    Raises
    ------
    TypeError
        If *result* is not a dict.
    """
    if not isinstance(result, dict):
        raise TypeError("result must be a dict")
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    tables = to_dataframe(result, what="all")
    if not include_waveforms:
        tables.pop("thrust")

    created = []
    for name, df in tables.items():
        path = out / f"{prefix}{name}.csv"
        df.to_csv(path, index=False, float_format="%.3f")
        created.append(str(path))

    logger.info(f"Exported {len(created)} CSV files to {output_dir}")
    return created


def export_summary_json(
    result: dict,
    output_path: str,
    source: Optional[str] = None,
) -> str:
    """Export a compact JSON summary of the key thrust metrics.

    Parameters
    ----------
    result : dict
        Output of :func:`thrustgait.analyze_gait`.
    output_path : str
        Output JSON file path.
    source : str, optional
        Name of the input the result was computed from.

    Returns
    -------
    str
        Path to the created JSON file.
    """
    from . import __version__

    lt = result["lateral_thrust"]
    stance = result.get("stance_phases", [])
    cycles = result.get("gait_cycles", [])

    def _knee(m):
        return {
            "amplitude_cm": m["amplitude"],
            "max_displacement_cm": m["max_displacement"],
            "severity": m["severity"],
        }

    summary = {
        "metadata": {
            "version": __version__,
            "date": datetime.now().isoformat(),
            "source": source or "",
        },
        "trial": {
            "total_frames": result["total_frames"],
            "duration_s": result["duration"],
        },
        "stance_phases": {
            "n_left": sum(1 for p in stance if p["side"] == "left"),
            "n_right": sum(1 for p in stance if p["side"] == "right"),
        },
        "gait_cycles": {
            "n_left": sum(1 for c in cycles if c["side"] == "left"),
            "n_right": sum(1 for c in cycles if c["side"] == "right"),
        },
        "lateral_thrust": {
            "left_knee": _knee(lt["left_knee"]),
            "right_knee": _knee(lt["right_knee"]),
            "asymmetry_percent": lt["asymmetry_percent"],
        },
    }

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=2, default=str)

    logger.info(f"Exported summary JSON: {path}")
    return str(path)
