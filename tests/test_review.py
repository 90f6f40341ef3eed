import json
from types import SimpleNamespace

import numpy as np
import pytest

from conftest import FakeTracker
from intervention import review
from intervention.constants import EVENT_SESSION_DESTROYED, EVENT_SESSION_READY
from intervention.logger import read_events


class FakeCapture:
    def __init__(self, frames=2):
        self.frames = frames
        self.released = False

    def isOpened(self):
        return True

    def get(self, prop):
        return 10.0

    def read(self):
        if self.frames == 0:
            return False, None
        self.frames -= 1
        return True, np.zeros((8, 8, 3), np.uint8)

    def release(self):
        self.released = True


@pytest.fixture
def setup(monkeypatch, tmp_path):
    events = tmp_path / "events.jsonl"
    config_path = tmp_path / "intervention.json"
    config_path.write_text(json.dumps({"events_log_path": str(events)}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    tracker = FakeTracker()
    capture = FakeCapture()
    monkeypatch.setattr(review, "MediaPipeHandTracker", lambda input_bgr=False: tracker)
    monkeypatch.setattr(review.cv2, "VideoCapture", lambda path: capture)
    args = review.build_parser().parse_args(
        ["--video", "item.mp4", "--config", str(config_path), "--item", "12", "--score", "3"]
    )
    return SimpleNamespace(args=args, tracker=tracker, capture=capture, events=events)


def _event_types(path):
    return [e["type"] for e in read_events(path=path)]


def test_pose_model_failure_still_destroys_session(setup, monkeypatch):
    def missing_model(model_path=None):
        raise FileNotFoundError(model_path)

    monkeypatch.setattr(review, "MediaPipePoseProvider", missing_model)
    with pytest.raises(FileNotFoundError):
        review.review(setup.args)

    assert setup.tracker.closed == 1
    assert setup.capture.released
    types = _event_types(setup.events)
    assert EVENT_SESSION_READY in types
    assert types[-1] == EVENT_SESSION_DESTROYED


def test_review_runs_frames_and_scores(setup, monkeypatch, capsys):
    class StillPose:
        def __init__(self, model_path=None):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def infer(self, frame, ts):
            return None

    monkeypatch.setattr(review, "MediaPipePoseProvider", StillPose)
    assert review.review(setup.args) == 0

    out = capsys.readouterr().out
    assert "Frames: 2" in out
    assert "score 3 -> 3" in out
    assert setup.tracker.closed == 1
    assert setup.capture.released
    assert _event_types(setup.events)[-1] == EVENT_SESSION_DESTROYED
