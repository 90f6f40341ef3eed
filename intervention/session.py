"""
InterventionSession: one assessment session's hand-tracking state and lifecycle.

================================================================================
HOW THIS SCRIPT WORKS (for studying)
================================================================================

One session object per assessment, owned by the caller. Nothing lives in
module globals, so two sessions never share counters or results and a new
session always starts clean.

  LIFECYCLE:
  - initialize(): loads the hand tracker on a background thread. Calling it
    again while loading or once ready does nothing. If loading fails the
    session goes UNAVAILABLE: every check reports "not detected" and the
    assessment carries on without intervention detection.
  - begin_item(i) / reset(): clear counters and the last result at an item
    boundary. The tracker stays loaded.
  - destroy(): close the tracker and drop all state. Safe to call twice.

  PER FRAME (caller's video loop):
  1. submit_frame(frame): every frame_skip-th frame goes to the tracker.
     The tracker answers later, on its own thread, into the mailbox.
  2. check_intervention(pose_landmarks): read the newest hand result from
     the mailbox, classify hands against the pose (matcher.py), feed the
     debouncer, return InterventionCheck(detected, hand_count,
     extra_hands_near_body).

  SCORING (caller, at the end of an item):
  - apply_score_cap(score, item_index, item_data): the pure cap rule.
  - score_item(score, item_data): caps only if intervention was confirmed
    at some point during the current item, and logs the change.

  STATUS: IDLE → INITIALIZING → READY | UNAVAILABLE; destroy() → CLOSED.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from intervention.config import DetectionConfig
from intervention.constants import (
    BBS_ITEM_NAMES,
    EVENT_CLEARED,
    EVENT_CONFIRMED,
    EVENT_INIT_FAILED,
    EVENT_ITEM_RESET,
    EVENT_SCORE_CAPPED,
    EVENT_SESSION_DESTROYED,
    EVENT_SESSION_READY,
    STATUS_CLOSED,
    STATUS_IDLE,
    STATUS_INITIALIZING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
    WARMUP_IMAGE_SIZE,
)
from intervention.debounce import InterventionDebouncer
from intervention.hands import Hands, HandTracker, MediaPipeHandTracker
from intervention.logger import log_event
from intervention.mailbox import ResultMailbox
from intervention.matcher import match_hands
from intervention.scheduler import FrameScheduler
from intervention.scoring import ScoreResult, apply_score_cap

logger = logging.getLogger(__name__)

TrackerFactory = Callable[[], HandTracker]


@dataclass(frozen=True)
class InterventionCheck:
    detected: bool = False
    hand_count: int = 0
    extra_hands_near_body: int = 0


def _close_quietly(tracker: HandTracker | None) -> None:
    if tracker is None:
        return
    try:
        tracker.close()
    except Exception:
        pass


class InterventionSession:
    """Caller-owned intervention detection session."""

    def __init__(
        self,
        config: DetectionConfig | None = None,
        tracker_factory: TrackerFactory | None = None,
    ):
        self.config = config or DetectionConfig()
        self._tracker_factory = tracker_factory or MediaPipeHandTracker

        self._lock = threading.Lock()
        self._status = STATUS_IDLE
        self._tracker: HandTracker | None = None
        self._loader: threading.Thread | None = None
        # bumped by destroy() so a loader that finishes late discards its tracker
        self._generation = 0
        self._clock_start = time.monotonic()

        self.mailbox: ResultMailbox[Hands] = ResultMailbox()
        self.scheduler = FrameScheduler(self.config.frame_skip)
        self.debouncer = InterventionDebouncer(self.config.confirm_threshold)

        self.item_index: int | None = None
        self._was_detected = False
        self._confirmed_this_item = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        return self._status

    @property
    def available(self) -> bool:
        return self._status == STATUS_READY

    @property
    def confirmed_this_item(self) -> bool:
        """True if `detected` was reported at any point since the last reset()."""
        return self._confirmed_this_item

    def initialize(self, block: bool = False) -> None:
        """
        Load the hand tracker in the background. No-op while loading or ready.
        block=True waits for loading to finish (used by tools and tests).
        """
        with self._lock:
            if self._status not in (STATUS_INITIALIZING, STATUS_READY):
                self._status = STATUS_INITIALIZING
                self._loader = threading.Thread(
                    target=self._load, args=(self._generation,), daemon=True,
                )
                self._loader.start()
            loader = self._loader

        if block and loader is not None:
            loader.join()

    def _load(self, generation: int) -> None:
        tracker: HandTracker | None = None
        try:
            tracker = self._tracker_factory()
            tracker.on_result(self._on_hands)
            tracker.configure(self.config.tracker_options())
        except Exception as e:
            logger.warning("Hand tracking unavailable: %s", e)
            _close_quietly(tracker)
            with self._lock:
                if generation == self._generation:
                    self._status = STATUS_UNAVAILABLE
            self._emit(EVENT_INIT_FAILED, {"error": str(e)})
            return

        self._warm_up(tracker)

        with self._lock:
            installed = generation == self._generation
            if installed:
                self._tracker = tracker
                self._status = STATUS_READY
        if not installed:
            _close_quietly(tracker)
            return
        logger.info("Hand tracking ready")
        self._emit(EVENT_SESSION_READY, {"config": self.config.model_dump()})

    def _warm_up(self, tracker: HandTracker) -> None:
        blank = np.zeros((WARMUP_IMAGE_SIZE, WARMUP_IMAGE_SIZE, 3), dtype=np.uint8)
        try:
            tracker.send(blank, self._now_ms())
        except Exception as e:
            logger.debug("Warm-up frame failed: %s", e)

    def reset(self) -> None:
        """Clear counters and the last result. The tracker stays loaded."""
        self.mailbox.clear()
        self.scheduler.reset()
        self.debouncer.reset()
        self._was_detected = False
        self._confirmed_this_item = False

    def begin_item(self, item_index: int) -> None:
        self.reset()
        self.item_index = item_index
        self._emit(EVENT_ITEM_RESET, {"item_name": _item_name(item_index)})

    def destroy(self) -> None:
        """Release the tracker and all state. Safe to call more than once."""
        with self._lock:
            self._generation += 1
            tracker, self._tracker = self._tracker, None
            was_closed = self._status == STATUS_CLOSED
            self._status = STATUS_CLOSED
        _close_quietly(tracker)
        self.reset()
        if not was_closed:
            self._emit(EVENT_SESSION_DESTROYED, {})
        self.item_index = None

    def __enter__(self) -> "InterventionSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    # ------------------------------------------------------------------
    # Per-frame
    # ------------------------------------------------------------------

    def _now_ms(self) -> int:
        return int((time.monotonic() - self._clock_start) * 1000)

    def _on_hands(self, hands: Hands) -> None:
        if self._status == STATUS_CLOSED:
            return
        self.mailbox.put(hands)

    def submit_frame(self, frame: Any, timestamp_ms: int | None = None) -> bool:
        """
        Hand the frame to the tracker if it is due. Never blocks on inference
        and never raises; returns True when the frame was submitted.
        """
        tracker = self._tracker
        if tracker is None or self._status != STATUS_READY:
            return False
        if not self.scheduler.tick():
            return False
        try:
            tracker.send(frame, self._now_ms() if timestamp_ms is None else timestamp_ms)
        except Exception as e:
            logger.debug("Frame submission dropped: %s", e)
            return False
        return True

    def check_intervention(self, pose_landmarks: Sequence[Any] | None) -> InterventionCheck:
        """
        Classify the latest hand result against this frame's pose and update
        the debounce streak. Never raises; on any internal error the streak
        resets and the result is "not detected".
        """
        try:
            match = match_hands(
                self.mailbox.peek(),
                pose_landmarks,
                match_dist=self.config.match_dist,
                body_margin=self.config.body_margin,
            )
        except Exception:
            logger.exception("Intervention check failed")
            self.debouncer.reset()
            self._note_transition(False, 0)
            return InterventionCheck()

        detected = self.debouncer.update(match.extra_hands_near_body > 0)
        self._note_transition(detected, match.extra_hands_near_body)
        return InterventionCheck(
            detected=detected,
            hand_count=match.hand_count,
            extra_hands_near_body=match.extra_hands_near_body,
        )

    def _note_transition(self, detected: bool, extra: int) -> None:
        if detected and not self._was_detected:
            self._confirmed_this_item = True
            self._emit(EVENT_CONFIRMED, {
                "extra_hands_near_body": extra,
                "consecutive": self.debouncer.consecutive,
            })
        elif self._was_detected and not detected:
            self._emit(EVENT_CLEARED, {})
        self._was_detected = detected

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    @staticmethod
    def apply_score_cap(
        score_result: ScoreResult | None,
        item_index: int,
        item_data: Mapping[str, Any] | None = None,
    ) -> ScoreResult | None:
        return apply_score_cap(score_result, item_index, item_data)

    def score_item(
        self,
        score_result: ScoreResult | None,
        item_data: Mapping[str, Any] | None = None,
    ) -> ScoreResult | None:
        """Cap the current item's score if intervention was confirmed during it."""
        if not self._confirmed_this_item or self.item_index is None:
            return score_result
        capped = apply_score_cap(score_result, self.item_index, item_data)
        if capped is not score_result:
            self._emit(EVENT_SCORE_CAPPED, {
                "item_name": _item_name(self.item_index),
                "score_before": score_result.score,
                "score_after": capped.score,
                "reason": capped.reason,
            })
        return capped

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, event_type: str, payload: dict[str, Any]) -> None:
        path = self.config.events_log_path
        if not path:
            return
        try:
            log_event(event_type, payload, item_index=self.item_index, path=path)
        except OSError as e:
            logger.warning("Could not write %s event: %s", event_type, e)


def _item_name(item_index: int | None) -> str | None:
    if item_index is None or not 0 <= item_index < len(BBS_ITEM_NAMES):
        return None
    return BBS_ITEM_NAMES[item_index]
