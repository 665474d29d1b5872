"""thrustgait -- Stance, gait-cycle and lateral knee thrust analysis.

Works on per-frame 2D pose landmarks (MediaPipe Pose layout) captured
during a walking trial and produces a heuristic screening summary, not
a diagnostic measurement.

Quick start::

    from thrustgait import load_frames, analyze_gait, save_json
    frames = load_frames("trial.json")
    result = analyze_gait(frames)      # None if fewer than 30 frames
    save_json(result, "trial_result.json")

Step by step::

    from thrustgait import detect_stance_phases, segment_cycles, calculate_lateral_thrust
    stance = detect_stance_phases(frames)
    cycles = segment_cycles(stance)
    thrust = calculate_lateral_thrust(frames, stance)

Repeated trials and follow-up sessions::

    from thrustgait import summarize_trials, compare_sessions
    summary = summarize_trials([analyze_gait(f) for f in trials])
    change = compare_sessions(baseline_result, followup_result)

Export::

    from thrustgait import export_csv, to_dataframe
    export_csv(result, "./output", prefix="patient01_")
    df = to_dataframe(result, what="thrust")
"""

__version__ = "0.1.0"

from .preprocess import (
    extract_landmark_series,
    extract_limb_signals,
    compute_velocity,
    smooth_signal,
    frames_to_dataframe,
)
from .stance import LimbState, detect_limb_stance, detect_stance_phases
from .cycles import subdivide_cycle, segment_cycles
from .thrust import (
    StanceMask,
    perpendicular_distance,
    classify_severity,
    asymmetry_percent,
    compute_thrust_metrics,
    calculate_lateral_thrust,
)
from .analysis import analyze_gait, summarize_trials, compare_sessions
from .schema import get_landmark, normalize_frames, load_frames, load_json, save_json
from .export import to_dataframe, export_csv, export_summary_json
from .config import load_config, save_config, DEFAULT_CONFIG

__all__ = [
    # Core pipeline
    "analyze_gait",
    "detect_stance_phases",
    "segment_cycles",
    "calculate_lateral_thrust",
    # Building blocks
    "extract_landmark_series",
    "extract_limb_signals",
    "compute_velocity",
    "smooth_signal",
    "frames_to_dataframe",
    "LimbState",
    "detect_limb_stance",
    "subdivide_cycle",
    "StanceMask",
    "perpendicular_distance",
    "classify_severity",
    "asymmetry_percent",
    "compute_thrust_metrics",
    # Multi-trial / sessions
    "summarize_trials",
    "compare_sessions",
    # Schema
    "get_landmark",
    "normalize_frames",
    "load_frames",
    "load_json",
    "save_json",
    # Export
    "to_dataframe",
    "export_csv",
    "export_summary_json",
    # Config
    "load_config",
    "save_config",
    "DEFAULT_CONFIG",
    # Meta
    "__version__",
]
