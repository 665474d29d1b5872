"""End-to-end pipeline tests: frames file -> analysis -> exports."""

import json

import pytest

from conftest import make_walking_frames

import thrustgait
from thrustgait import (
    analyze_gait,
    compare_sessions,
    export_csv,
    load_frames,
    load_json,
    save_json,
    summarize_trials,
    to_dataframe,
)


def _bump(amount, at=12):
    """Knee 1 cm lateral, ``amount`` at one mid-stance frame per stride."""
    return lambda i: amount if i % 30 == at else 0.01


def test_public_api():
    for name in thrustgait.__all__:
        assert hasattr(thrustgait, name)
    assert isinstance(thrustgait.__version__, str)


def test_full_pipeline(tmp_path):
    path = tmp_path / "walk.json"
    path.write_text(json.dumps(make_walking_frames(
        left_knee_offset=_bump(0.035),
        right_knee_offset=_bump(0.07, at=27),
    )))

    frames = load_frames(path)
    result = analyze_gait(frames)

    lt = result["lateral_thrust"]
    assert lt["left_knee"]["amplitude"] == pytest.approx(2.5)
    assert lt["left_knee"]["severity"] == "moderate"
    assert lt["right_knee"]["amplitude"] == pytest.approx(6.0)
    assert lt["right_knee"]["max_displacement"] == pytest.approx(7.0)
    assert lt["right_knee"]["severity"] == "high"
    # |2.5 - 6| / 6
    assert lt["asymmetry_percent"] == 58

    left_cycles = [c for c in result["gait_cycles"] if c["side"] == "left"]
    assert [(c["start_frame"], c["end_frame"]) for c in left_cycles] == [
        (7, 37), (37, 67), (67, 97), (97, 127),
    ]
    right_cycles = [c for c in result["gait_cycles"] if c["side"] == "right"]
    assert [c["start_frame"] for c in right_cycles] == [22, 52, 82, 112]

    save_json(result, tmp_path / "result.json")
    reloaded = load_json(tmp_path / "result.json")
    assert reloaded["lateral_thrust"]["asymmetry_percent"] == 58

    files = export_csv(reloaded, str(tmp_path / "csv"))
    assert len(files) == 4
    assert len(to_dataframe(reloaded, what="thrust")) == 150


def test_stance_phases_match_planted_blocks():
    result = analyze_gait(make_walking_frames())
    left = [(p["start_frame"], p["end_frame"])
            for p in result["stance_phases"] if p["side"] == "left"]
    assert left == [(7, 18), (37, 48), (67, 78), (97, 108), (127, 138)]
    right = [(p["start_frame"], p["end_frame"])
             for p in result["stance_phases"] if p["side"] == "right"]
    assert right[0] == (22, 33)
    assert right[-1] == (142, 149)


def test_follow_up_session():
    before = [analyze_gait(make_walking_frames(left_knee_offset=_bump(0.06)))
              for _ in range(3)]
    after = analyze_gait(make_walking_frames(left_knee_offset=_bump(0.03)))

    summary = summarize_trials(before)
    assert summary["averages"]["left_amplitude"] == pytest.approx(5.0)
    assert summary["best_trial_index"] == 0

    cmp = compare_sessions(before[summary["best_trial_index"]], after)
    assert cmp["left_knee_diff"] == pytest.approx(-3.0)
    assert cmp["left_knee_trend"] == "decreased"
    assert cmp["left_knee_change_percent"] == pytest.approx(-60.0)
    assert cmp["right_knee_trend"] == "no_change"
    assert cmp["asymmetry_changed"] is False
