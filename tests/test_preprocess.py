"""Tests for landmark series extraction, velocity and smoothing."""

import numpy as np
import pytest

from conftest import make_frames, LEFT_ANKLE

from thrustgait.preprocess import (
    compute_velocity,
    extract_landmark_series,
    extract_limb_signals,
    frames_to_dataframe,
    round_half_up,
    smooth_signal,
)


def test_velocity_first_sample_is_zero():
    v = compute_velocity([0.5, 0.6, 0.55, 0.55])
    np.testing.assert_allclose(v, [0.0, 0.1, -0.05, 0.0], atol=1e-12)


def test_velocity_empty():
    assert compute_velocity([]).size == 0


def test_smooth_constant_signal_unchanged():
    out = smooth_signal(np.full(10, 0.42))
    np.testing.assert_allclose(out, 0.42)


def test_smooth_truncated_edges():
    """Edge frames average over the available samples only."""
    x = np.arange(10, dtype=float)
    out = smooth_signal(x, window=5)
    assert out[0] == pytest.approx(np.mean([0, 1, 2]))
    assert out[1] == pytest.approx(np.mean([0, 1, 2, 3]))
    assert out[5] == pytest.approx(np.mean([3, 4, 5, 6, 7]))
    assert out[8] == pytest.approx(np.mean([6, 7, 8, 9]))
    assert out[9] == pytest.approx(np.mean([7, 8, 9]))
    assert len(out) == len(x)


def test_smooth_does_not_modify_input():
    x = np.array([0.0, 1.0, 0.0, 1.0, 0.0])
    smooth_signal(x)
    np.testing.assert_array_equal(x, [0.0, 1.0, 0.0, 1.0, 0.0])


def test_extract_limb_signals_values():
    frames = make_frames(5, left_ankle_y=0.7, right_ankle_y=0.3)
    left = extract_limb_signals(frames, "left")
    right = extract_limb_signals(frames, "right")
    np.testing.assert_allclose(left["ankle_y"], 0.7)
    np.testing.assert_allclose(right["ankle_y"], 0.3)
    # knee sits halfway between hip (0.40) and ankle
    np.testing.assert_allclose(left["knee_y"], 0.55)


def test_extract_limb_signals_bad_side():
    with pytest.raises(ValueError):
        extract_limb_signals(make_frames(3), "middle")


def test_missing_landmark_becomes_zero():
    """Missing landmarks are substituted with 0 and the frame is kept."""
    frames = make_frames(4, left_ankle_y=0.7)
    frames[1]["landmarks"][LEFT_ANKLE] = None
    frames[2]["landmarks"][LEFT_ANKLE] = {"x": 0.4, "y": float("nan"), "visibility": 0.0}
    series = extract_landmark_series(frames, "LEFT_ANKLE", "y")
    np.testing.assert_allclose(series, [0.7, 0.0, 0.0, 0.7])


def test_short_landmark_list_treated_as_missing():
    frames = [{"timestamp": 0.0, "landmarks": [{"x": 0.1, "y": 0.1}] * 10}]
    series = extract_landmark_series(frames, "LEFT_ANKLE", "y")
    np.testing.assert_allclose(series, [0.0])


def test_name_keyed_landmarks_supported():
    frames = [{"timestamp": 0.0, "landmarks": {"LEFT_ANKLE": {"x": 0.4, "y": 0.66}}}]
    series = extract_landmark_series(frames, "LEFT_ANKLE", "y")
    np.testing.assert_allclose(series, [0.66])


def test_frames_to_dataframe_columns():
    frames = make_frames(6)
    df = frames_to_dataframe(frames)
    assert len(df) == 6
    for col in ("frame_idx", "timestamp", "LEFT_HIP_x", "RIGHT_ANKLE_y", "LEFT_KNEE_visibility"):
        assert col in df.columns


def test_frames_to_dataframe_missing_is_nan():
    frames = make_frames(3)
    frames[0]["landmarks"][LEFT_ANKLE] = None
    df = frames_to_dataframe(frames)
    assert np.isnan(df["LEFT_ANKLE_y"].iloc[0])


@pytest.mark.parametrize("value,ndigits,expected", [
    (2.5, 0, 3.0),
    (3.5, 0, 4.0),
    (1.25, 1, 1.3),
    (0.04, 1, 0.0),
])
def test_round_half_up(value, ndigits, expected):
    assert round_half_up(value, ndigits) == pytest.approx(expected)
