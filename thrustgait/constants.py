"""Landmark definitions and fixed calibration constants.

Every threshold used by the stance detector, the cycle subdivider and the
lateral-thrust calculator lives here. None of them is exposed as a
function parameter or a config option.
"""

# ── MediaPipe Pose landmarks (33) ────────────────────────────────────

MP_LANDMARK_NAMES = [
    'NOSE', 'LEFT_EYE_INNER', 'LEFT_EYE', 'LEFT_EYE_OUTER',
    'RIGHT_EYE_INNER', 'RIGHT_EYE', 'RIGHT_EYE_OUTER',
    'LEFT_EAR', 'RIGHT_EAR', 'MOUTH_LEFT', 'MOUTH_RIGHT',
    'LEFT_SHOULDER', 'RIGHT_SHOULDER', 'LEFT_ELBOW', 'RIGHT_ELBOW',
    'LEFT_WRIST', 'RIGHT_WRIST', 'LEFT_PINKY', 'RIGHT_PINKY',
    'LEFT_INDEX', 'RIGHT_INDEX', 'LEFT_THUMB', 'RIGHT_THUMB',
    'LEFT_HIP', 'RIGHT_HIP', 'LEFT_KNEE', 'RIGHT_KNEE',
    'LEFT_ANKLE', 'RIGHT_ANKLE', 'LEFT_HEEL', 'RIGHT_HEEL',
    'LEFT_FOOT_INDEX', 'RIGHT_FOOT_INDEX'
]

MP_NAME_TO_INDEX = {name: i for i, name in enumerate(MP_LANDMARK_NAMES)}

SIDES = ("left", "right")

# Landmarks read by the pipeline, per side
LIMB_LANDMARKS = {
    "left": {"hip": "LEFT_HIP", "knee": "LEFT_KNEE", "ankle": "LEFT_ANKLE"},
    "right": {"hip": "RIGHT_HIP", "knee": "RIGHT_KNEE", "ankle": "RIGHT_ANKLE"},
}

# ── Trial gate ───────────────────────────────────────────────────────

# ~1 s at 30 fps
MIN_TRIAL_FRAMES = 30

# ── Signal preprocessing ─────────────────────────────────────────────

SMOOTHING_WINDOW = 5

# ── Stance detection ─────────────────────────────────────────────────

# Normalized image coordinates, y grows downward: ankle low on screen = stance
STANCE_THRESHOLD = 0.60
STANCE_HYSTERESIS = 0.025
# Normalized units per frame
STILLNESS_VELOCITY = 0.012
MIN_STANCE_FRAMES = 6

# ── Gait cycle subdivision ───────────────────────────────────────────

MIN_CYCLE_FRAMES = 10

# Rancho Los Amigos sub-phases: (type, start %, end %)
# Ref: Perry J, Burnfield JM. Gait Analysis: Normal and Pathological
# Function. 2nd ed. SLACK Incorporated; 2010.
GAIT_PHASES = [
    ("IC", 0, 2),      # Initial Contact
    ("LR", 2, 12),     # Loading Response
    ("MSt", 12, 31),   # Mid Stance
    ("TSt", 31, 50),   # Terminal Stance
    ("PSw", 50, 62),   # Pre-Swing
    ("ISw", 62, 75),   # Initial Swing
    ("MSw", 75, 87),   # Mid Swing
    ("TSw", 87, 100),  # Terminal Swing
]

GAIT_PHASE_TYPES = [p[0] for p in GAIT_PHASES]

# ── Lateral thrust ───────────────────────────────────────────────────

# Normalized frame assumed to span ~1 m: approximate, not calibrated
THRUST_CM_PER_UNIT = 100.0

# Amplitude cutoffs in cm: normal < 2, abnormal >= 4
SEVERITY_MODERATE_CM = 2.0
SEVERITY_HIGH_CM = 4.0

# ── Session comparison ───────────────────────────────────────────────

# Amplitude change (cm) below which two sessions count as unchanged
AMPLITUDE_CHANGE_TOLERANCE_CM = 0.5
# Asymmetry change (percentage points) above which it is reported
ASYMMETRY_CHANGE_TOLERANCE_PCT = 5
