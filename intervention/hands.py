"""
MediaPipe Hands integration: the hand-tracking backend behind a small interface.

Uses the MediaPipe Tasks API (HandLandmarker) in LIVE_STREAM mode:
`detect_async()` returns immediately and results come back on MediaPipe's
own thread through a callback. That is what keeps frame submission from
blocking the caller's per-frame loop.

The session never imports MediaPipe directly. It is handed a tracker
factory and talks to the tracker through `HandTracker`:

  configure(options)   load the model (may raise; the session catches it)
  send(image, ts_ms)   submit one frame, non-blocking
  on_result(callback)  register the receiver for lists of hands
  close()              release the model

Each delivered hand is a list of 21 `Landmark`s in normalized coordinates
(index 0 = wrist), so the matcher works the same on real and synthetic
input.
"""

from pathlib import Path
from typing import Any, Callable, Protocol

import cv2
import numpy as np

from intervention.constants import HAND_LANDMARKER_MODEL
from intervention.landmarks import Landmark, to_landmark_list

Hands = list[list[Landmark | None]]
ResultCallback = Callable[[Hands], None]


class HandTracker(Protocol):
    def configure(self, options: dict[str, Any]) -> None: ...

    def send(self, image: Any, timestamp_ms: int) -> None: ...

    def on_result(self, callback: ResultCallback) -> None: ...

    def close(self) -> None: ...


def hands_from_result(result: Any) -> Hands:
    """
    Convert a HandLandmarkerResult (or anything with .hand_landmarks) to Hands.

    Returns an empty list for None or a result with no hands.
    """
    if result is None:
        return []
    hand_lms = getattr(result, "hand_landmarks", None) or []
    return [to_landmark_list(hand) for hand in hand_lms]


class MediaPipeHandTracker:
    """
    HandTracker backed by MediaPipe HandLandmarker (LIVE_STREAM).

    Frames are RGB uint8 arrays unless `input_bgr=True`, in which case they
    are converted from OpenCV's BGR order first.
    """

    def __init__(self, input_bgr: bool = False):
        self.input_bgr = input_bgr
        self._landmarker: Any = None
        self._callback: ResultCallback | None = None
        self._last_ts = -1

    def on_result(self, callback: ResultCallback) -> None:
        self._callback = callback

    def configure(self, options: dict[str, Any]) -> None:
        from mediapipe.tasks.python import BaseOptions
        from mediapipe.tasks.python.vision import (
            HandLandmarker,
            HandLandmarkerOptions,
            RunningMode,
        )

        model_path = Path(options.get("model_path") or HAND_LANDMARKER_MODEL)
        if not model_path.exists():
            raise FileNotFoundError(f"Hand landmarker model not found: {model_path}")

        mp_options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(model_path)),
            running_mode=RunningMode.LIVE_STREAM,
            num_hands=int(options.get("max_num_hands", 4)),
            min_hand_detection_confidence=float(options.get("min_detection_confidence", 0.5)),
            min_hand_presence_confidence=float(options.get("min_presence_confidence", 0.5)),
            min_tracking_confidence=float(options.get("min_tracking_confidence", 0.5)),
            result_callback=self._deliver,
        )
        self._landmarker = HandLandmarker.create_from_options(mp_options)
        self._last_ts = -1

    def _deliver(self, result: Any, output_image: Any, timestamp_ms: int) -> None:
        if self._callback is not None:
            self._callback(hands_from_result(result))

    def send(self, image: Any, timestamp_ms: int) -> None:
        if self._landmarker is None:
            raise RuntimeError("HandLandmarker is not configured")
        import mediapipe as mp

        frame = np.asarray(image)
        if self.input_bgr:
            frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        frame = np.ascontiguousarray(frame, dtype=np.uint8)

        # LIVE_STREAM requires strictly increasing timestamps
        ts = max(int(timestamp_ms), self._last_ts + 1)
        self._last_ts = ts
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame)
        self._landmarker.detect_async(mp_image, ts)

    def close(self) -> None:
        if self._landmarker is not None:
            landmarker, self._landmarker = self._landmarker, None
            landmarker.close()
