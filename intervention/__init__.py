"""
Therapist intervention detection for Berg Balance Scale assessments.

- constants: paths, tuning defaults, landmark indices, BBS item catalogue
- config: DetectionConfig (pydantic), JSON file + INTERVENTION_* env overrides
- landmarks: Landmark value type, tolerant coercion of model output
- scheduler: FrameScheduler, send 1 in N frames to the hand model
- body_box: margin-expanded patient body box from pose landmarks
- matcher: patient vs. third-party hands by wrist distance
- debounce: InterventionDebouncer, consecutive-frame confirmation
- scoring: ScoreResult, per-item intervention score caps
- mailbox: single-slot last-write-wins result holder
- hands: HandTracker interface, MediaPipe HandLandmarker (LIVE_STREAM)
- pose: MediaPipe PoseLandmarker provider
- session: InterventionSession, lifecycle, per-frame check, scoring
- state: one InterventionSession per Streamlit browser session
- logger: log_event, read_events for logs/intervention_events.jsonl
- review: offline CLI that replays a recorded item through a session
"""
from intervention.config import DetectionConfig, load_config
from intervention.scoring import ScoreResult, apply_score_cap
from intervention.session import InterventionCheck, InterventionSession

__all__ = [
    "DetectionConfig",
    "InterventionCheck",
    "InterventionSession",
    "ScoreResult",
    "apply_score_cap",
    "load_config",
]
