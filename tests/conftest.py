"""Shared test fixtures for thrustgait test suite.

Provides synthetic landmark frame generators. In all generators the hip
and ankle of a side share the same x, so the hip-ankle line is vertical
and the knee's lateral thrust equals its x offset from that line
(offset 0.01 -> 1.0 cm).
"""

import numpy as np
import pytest

N_LANDMARKS = 33
LEFT_HIP, RIGHT_HIP = 23, 24
LEFT_KNEE, RIGHT_KNEE = 25, 26
LEFT_ANKLE, RIGHT_ANKLE = 27, 28

HIP_Y = 0.40
LEFT_X = 0.45
RIGHT_X = 0.55


def _per_frame(value, n_frames):
    """Broadcast a scalar, sequence or callable(i) to a per-frame list."""
    if callable(value):
        return [float(value(i)) for i in range(n_frames)]
    if np.isscalar(value):
        return [float(value)] * n_frames
    values = list(value)
    assert len(values) == n_frames
    return [float(v) for v in values]


def _lm(x, y, visibility=1.0):
    return {"x": x, "y": y, "z": 0.0, "visibility": visibility}


def make_frames(
    n_frames,
    fps=30.0,
    left_ankle_y=0.50,
    right_ankle_y=0.50,
    left_knee_offset=0.0,
    right_knee_offset=0.0,
):
    """Create MediaPipe-indexed frames with controllable ankle height and knee offset.

    Each of the four signal arguments can be a scalar, a per-frame
    sequence or a callable taking the frame index.
    """
    l_ank = _per_frame(left_ankle_y, n_frames)
    r_ank = _per_frame(right_ankle_y, n_frames)
    l_off = _per_frame(left_knee_offset, n_frames)
    r_off = _per_frame(right_knee_offset, n_frames)

    frames = []
    for i in range(n_frames):
        landmarks = [_lm(0.5, 0.5) for _ in range(N_LANDMARKS)]
        landmarks[LEFT_HIP] = _lm(LEFT_X, HIP_Y)
        landmarks[RIGHT_HIP] = _lm(RIGHT_X, HIP_Y)
        landmarks[LEFT_ANKLE] = _lm(LEFT_X, l_ank[i])
        landmarks[RIGHT_ANKLE] = _lm(RIGHT_X, r_ank[i])
        landmarks[LEFT_KNEE] = _lm(LEFT_X + l_off[i], (HIP_Y + l_ank[i]) / 2)
        landmarks[RIGHT_KNEE] = _lm(RIGHT_X + r_off[i], (HIP_Y + r_ank[i]) / 2)
        frames.append({
            "timestamp": i * 1000.0 / fps,
            "landmarks": landmarks,
            "world_landmarks": [],
        })
    return frames


def step_profile(i):
    """Left ankle: swing 0-19, planted 20-40, swing 41-59."""
    return 0.65 if 20 <= i <= 40 else 0.45


def make_step_trial(left_knee_offset=0.0, right_knee_offset=0.0):
    """60-frame trial with one left stance (frames ~20-40) and no right stance."""
    return make_frames(
        60,
        left_ankle_y=step_profile,
        right_ankle_y=0.50,
        left_knee_offset=left_knee_offset,
        right_knee_offset=right_knee_offset,
    )


def square_gait(offset, period=30, stance_frames=15):
    """Ankle height profile alternating planted (0.65) and lifted (0.45)."""
    def _y(i):
        return 0.65 if (i - offset) % period < stance_frames else 0.45
    return _y


def make_walking_frames(n_frames=150, fps=30.0, left_knee_offset=0.0, right_knee_offset=0.0):
    """Walking trial with 30-frame strides, right limb half a stride behind.

    Left stance blocks start at frames 5, 35, 65, ...; right at 20, 50, 80, ...
    """
    return make_frames(
        n_frames,
        fps=fps,
        left_ankle_y=square_gait(5),
        right_ankle_y=square_gait(20),
        left_knee_offset=left_knee_offset,
        right_knee_offset=right_knee_offset,
    )


@pytest.fixture
def step_trial():
    return make_step_trial()


@pytest.fixture
def walking_frames():
    return make_walking_frames()
