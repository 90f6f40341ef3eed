"""Synthetic landmark fixtures and a fake hand tracker."""

import pytest

from intervention.config import DetectionConfig
from intervention.constants import (
    HAND_LANDMARK_COUNT,
    LEFT_ANKLE,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    POSE_LANDMARK_COUNT,
    RIGHT_ANKLE,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
)
from intervention.landmarks import Landmark
from intervention.session import InterventionSession

# Standing patient, arms slightly out. Expanded body box:
# left 0.37, right 0.63, top 0.21, bottom 0.99
PATIENT_LEFT_WRIST = (0.35, 0.55)
PATIENT_RIGHT_WRIST = (0.65, 0.55)
THERAPIST_ON_HIP = (0.5, 0.6)
BYSTANDER = (0.9, 0.15)


def make_pose(overrides=None):
    """33-entry pose list. overrides: {index: (x, y) or None}."""
    pose = [None] * POSE_LANDMARK_COUNT
    points = {
        LEFT_SHOULDER: (0.4, 0.3), RIGHT_SHOULDER: (0.6, 0.3),
        LEFT_WRIST: PATIENT_LEFT_WRIST, RIGHT_WRIST: PATIENT_RIGHT_WRIST,
        LEFT_HIP: (0.42, 0.55), RIGHT_HIP: (0.58, 0.55),
        LEFT_KNEE: (0.43, 0.72), RIGHT_KNEE: (0.57, 0.72),
        LEFT_ANKLE: (0.44, 0.9), RIGHT_ANKLE: (0.56, 0.9),
    }
    points.update(overrides or {})
    for idx, xy in points.items():
        pose[idx] = None if xy is None else Landmark(*xy)
    return pose


def make_hand(x, y):
    """21 landmarks with the wrist at (x, y) and the fingers just above it."""
    hand = [Landmark(x, y)]
    for i in range(1, HAND_LANDMARK_COUNT):
        hand.append(Landmark(x + 0.002 * (i % 5), y - 0.004 * (i // 5 + 1)))
    return hand


def patient_hands():
    return [make_hand(*PATIENT_LEFT_WRIST), make_hand(*PATIENT_RIGHT_WRIST)]


def assisted_hands():
    return patient_hands() + [make_hand(*THERAPIST_ON_HIP)]


class FakeTracker:
    """HandTracker stand-in: records calls, delivers results on demand."""

    def __init__(self, fail_configure=False, fail_send=False, fail_close=False):
        self.fail_configure = fail_configure
        self.fail_send = fail_send
        self.fail_close = fail_close
        self.options = None
        self.sent = []
        self.closed = 0
        self._callback = None

    def on_result(self, callback):
        self._callback = callback

    def configure(self, options):
        if self.fail_configure:
            raise FileNotFoundError("models/hand_landmarker.task")
        self.options = options

    def send(self, image, timestamp_ms):
        if self.fail_send:
            raise RuntimeError("send failed")
        self.sent.append((image, timestamp_ms))

    def close(self):
        self.closed += 1
        if self.fail_close:
            raise RuntimeError("close failed")

    def emit(self, hands):
        self._callback(hands)


@pytest.fixture
def pose():
    return make_pose()


@pytest.fixture
def config(tmp_path):
    return DetectionConfig(events_log_path=str(tmp_path / "events.jsonl"))


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def session(config, tracker):
    s = InterventionSession(config, tracker_factory=lambda: tracker)
    s.initialize(block=True)
    yield s
    s.destroy()
