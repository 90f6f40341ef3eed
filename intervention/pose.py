"""
Pose provider: MediaPipe PoseLandmarker → 33 normalized landmarks per frame.

The detector only needs a landmark list with fixed index semantics (see
intervention.constants), so any pose backend that produces one will do.
This is the MediaPipe Tasks one used by the review tool.
"""

from pathlib import Path
from typing import Any

import cv2
import numpy as np

from intervention.constants import POSE_LANDMARK_COUNT, POSE_LANDMARKER_MODEL
from intervention.landmarks import Landmark, to_landmark_list

PoseLandmarks = list[Landmark | None]


def pose_from_result(result: Any) -> PoseLandmarks | None:
    """
    First detected person from a PoseLandmarkerResult, padded to 33 entries.

    Returns None when no person was found.
    """
    if result is None:
        return None
    people = getattr(result, "pose_landmarks", None) or []
    if not people:
        return None
    lms = to_landmark_list(people[0])[:POSE_LANDMARK_COUNT]
    lms.extend([None] * (POSE_LANDMARK_COUNT - len(lms)))
    return lms


class MediaPipePoseProvider:
    """
    PoseLandmarker in VIDEO mode. Frames are BGR (OpenCV default) unless
    input_bgr=False.
    """

    def __init__(
        self,
        model_path: str = POSE_LANDMARKER_MODEL,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        input_bgr: bool = True,
    ) -> None:
        try:
            from mediapipe.tasks.python import BaseOptions
            from mediapipe.tasks.python.vision import (
                PoseLandmarker,
                PoseLandmarkerOptions,
                RunningMode,
            )
        except Exception as e:
            raise RuntimeError(
                "MediaPipe is not installed. Install it with: pip install mediapipe"
            ) from e

        if not Path(model_path).exists():
            raise FileNotFoundError(f"Pose landmarker model not found: {model_path}")

        options = PoseLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(model_path)),
            running_mode=RunningMode.VIDEO,
            num_poses=1,
            min_pose_detection_confidence=float(min_detection_confidence),
            min_tracking_confidence=float(min_tracking_confidence),
        )
        self._landmarker = PoseLandmarker.create_from_options(options)
        self.input_bgr = input_bgr
        self._last_ts = -1

    def infer(self, frame: np.ndarray, timestamp_ms: int) -> PoseLandmarks | None:
        import mediapipe as mp

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB) if self.input_bgr else frame
        ts = max(int(timestamp_ms), self._last_ts + 1)
        self._last_ts = ts
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb))
        return pose_from_result(self._landmarker.detect_for_video(mp_image, ts))

    def close(self) -> None:
        try:
            if self._landmarker:
                self._landmarker.close()
        except Exception:
            pass

    def __enter__(self) -> "MediaPipePoseProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
