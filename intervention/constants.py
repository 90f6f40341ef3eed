"""
Shared constants for the intervention detector.

Single place to change paths, tuning defaults, landmark indices and the
Berg Balance Scale item catalogue.
"""

# Paths (relative to project root)
CONFIG_PATH = "config/intervention.json"
EVENTS_LOG_PATH = "logs/intervention_events.jsonl"
HAND_LANDMARKER_MODEL = "models/hand_landmarker.task"
POSE_LANDMARKER_MODEL = "models/pose_landmarker_lite.task"

# Tuning defaults (overridable via DetectionConfig)
FRAME_SKIP_DEFAULT = 5            # send 1 in N frames to the hand model
CONFIRM_THRESHOLD_DEFAULT = 3     # consecutive positive checks (~0.5 s at 1/5 sampling)
MATCH_DIST_DEFAULT = 0.08         # wrist-to-wrist distance for "patient hand" (normalized)
BODY_MARGIN_DEFAULT = 0.15        # body box grows by 15% of its width/height per side

# Hand model options
MAX_NUM_HANDS_DEFAULT = 4         # patient (2) + at least one assisting hand
MIN_DETECTION_CONF_DEFAULT = 0.5
MIN_PRESENCE_CONF_DEFAULT = 0.5
MIN_TRACKING_CONF_DEFAULT = 0.5
WARMUP_IMAGE_SIZE = 64            # blank square pushed through the model on init

# Environment variable prefix for config overrides (see config.load_config)
ENV_PREFIX = "INTERVENTION_"

# Pose landmark indices (33-point MediaPipe Pose model)
POSE_LANDMARK_COUNT = 33
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_ANKLE = 27
RIGHT_ANKLE = 28

BODY_BOX_INDICES = (
    LEFT_SHOULDER, RIGHT_SHOULDER,
    LEFT_HIP, RIGHT_HIP,
    LEFT_KNEE, RIGHT_KNEE,
    LEFT_ANKLE, RIGHT_ANKLE,
)

# Hand landmark indices (21-point MediaPipe Hands model)
HAND_LANDMARK_COUNT = 21
HAND_WRIST = 0

# A patient has two hands; a third visible hand is the first sign of help
MIN_HANDS_FOR_INTERVENTION = 3

# --- Score caps (zero-based item indices) ---
ZERO_CAP_ITEMS = frozenset({7, 8, 9, 10, 13})
STEP_COUNT_ITEM = 11              # alternate foot on stool
HOLD_DURATION_ITEM = 12           # tandem stance
STEP_COUNT_MIN_FOR_ONE = 2        # steps completed → cap at 1 instead of 0
HOLD_SECONDS_MIN_FOR_ONE = 15     # seconds held → cap at 1 instead of 0
INTERVENTION_SUFFIX = " (intervention detected)"

# Berg Balance Scale items, zero-based
BBS_ITEM_NAMES = [
    "Sitting to standing",
    "Standing unsupported",
    "Sitting unsupported",
    "Standing to sitting",
    "Transfers",
    "Standing with eyes closed",
    "Standing with feet together",
    "Reaching forward with outstretched arm",
    "Retrieving object from floor",
    "Turning to look behind",
    "Turning 360 degrees",
    "Placing alternate foot on stool",
    "Standing with one foot in front",
    "Standing on one foot",
]
BBS_MAX_ITEM_SCORE = 4

# Event types written to the events log
EVENT_SESSION_READY = "SESSION_READY"
EVENT_INIT_FAILED = "INIT_FAILED"
EVENT_CONFIRMED = "INTERVENTION_CONFIRMED"
EVENT_CLEARED = "INTERVENTION_CLEARED"
EVENT_SCORE_CAPPED = "SCORE_CAPPED"
EVENT_ITEM_RESET = "ITEM_RESET"
EVENT_SESSION_DESTROYED = "SESSION_DESTROYED"

# Session status values
STATUS_IDLE = "IDLE"
STATUS_INITIALIZING = "INITIALIZING"
STATUS_READY = "READY"
STATUS_UNAVAILABLE = "UNAVAILABLE"
STATUS_CLOSED = "CLOSED"

# Streamlit session state keys
KEY_INTERVENTION_SESSION = "intervention_session"
