import sys
from types import SimpleNamespace

import numpy as np
import pytest

from intervention import state
from intervention.constants import KEY_INTERVENTION_SESSION
from intervention.hands import MediaPipeHandTracker, hands_from_result
from intervention.landmarks import Landmark
from intervention.pose import pose_from_result
from intervention.session import InterventionSession


def _lm(x, y, z=0.0):
    return SimpleNamespace(x=x, y=y, z=z)


# ── result conversion ──────────────────────────────────────────────────────

def test_hands_from_result():
    result = SimpleNamespace(hand_landmarks=[[_lm(0.1, 0.2)] * 21, [_lm(0.5, 0.5, -0.1)] * 21])
    hands = hands_from_result(result)
    assert len(hands) == 2
    assert hands[0][0] == Landmark(0.1, 0.2)
    assert hands[1][20] == Landmark(0.5, 0.5, -0.1)


def test_hands_from_empty_result():
    assert hands_from_result(None) == []
    assert hands_from_result(SimpleNamespace(hand_landmarks=[])) == []
    assert hands_from_result(SimpleNamespace()) == []


def test_pose_from_result_pads_to_33():
    result = SimpleNamespace(pose_landmarks=[[_lm(0.5, 0.5)] * 20])
    pose = pose_from_result(result)
    assert len(pose) == 33
    assert pose[19] == Landmark(0.5, 0.5)
    assert pose[20] is None


def test_pose_from_result_without_person():
    assert pose_from_result(None) is None
    assert pose_from_result(SimpleNamespace(pose_landmarks=[])) is None


# ── MediaPipe tracker ──────────────────────────────────────────────────────

def test_send_before_configure_raises():
    with pytest.raises(RuntimeError):
        MediaPipeHandTracker().send(np.zeros((4, 4, 3), np.uint8), 0)


def test_close_without_configure_is_noop():
    MediaPipeHandTracker().close()


def test_configure_missing_model(tmp_path):
    pytest.importorskip("mediapipe")
    with pytest.raises(FileNotFoundError):
        MediaPipeHandTracker().configure({"model_path": str(tmp_path / "missing.task")})


def test_missing_model_leaves_session_unavailable(tmp_path, config):
    pytest.importorskip("mediapipe")
    cfg = config.model_copy(update={"hand_model_path": str(tmp_path / "missing.task")})
    s = InterventionSession(cfg)
    s.initialize(block=True)
    assert s.status == "UNAVAILABLE"
    s.destroy()


def test_delivery_converts_and_forwards():
    received = []
    tracker = MediaPipeHandTracker()
    tracker.on_result(received.append)
    tracker._deliver(SimpleNamespace(hand_landmarks=[[_lm(0.3, 0.3)] * 21]), None, 0)
    assert received[0][0][0] == Landmark(0.3, 0.3)


# ── streamlit hosting ──────────────────────────────────────────────────────

@pytest.fixture
def fake_streamlit(monkeypatch, tmp_path):
    # destroy() writes its event under cwd
    monkeypatch.chdir(tmp_path)
    st = SimpleNamespace(session_state={})
    monkeypatch.setitem(sys.modules, "streamlit", st)
    return st


def test_get_session_is_per_browser_session(fake_streamlit):
    first = state.get_session()
    assert state.get_session() is first
    assert fake_streamlit.session_state[KEY_INTERVENTION_SESSION] is first

    fake_streamlit.session_state = {}
    assert state.get_session() is not first


def test_end_session_destroys(fake_streamlit):
    s = state.get_session()
    state.end_session()
    assert s.status == "CLOSED"
    assert KEY_INTERVENTION_SESSION not in fake_streamlit.session_state
    state.end_session()
