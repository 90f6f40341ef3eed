"""
Hand ownership: patient hands vs. third-party hands.

HOW THIS WORKS

The hand model finds every hand in view but does not know whose they are.
The pose model knows where the patient's wrists are (pose landmarks 15 and
16). A detected hand whose wrist (hand landmark 0) lies within `match_dist`
of either patient wrist belongs to the patient; any other hand belongs to
someone else. Third-party hands only matter when they are inside the
patient's expanded body box (see body_box.py): a therapist standing nearby
is fine, a therapist holding the patient's hip is not.

With 2 or fewer hands in view there is nothing to check: the patient alone
accounts for two.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

from intervention.body_box import BodyBoundingBox, estimate_body_box
from intervention.constants import (
    BODY_MARGIN_DEFAULT,
    HAND_WRIST,
    LEFT_WRIST,
    MATCH_DIST_DEFAULT,
    MIN_HANDS_FOR_INTERVENTION,
    RIGHT_WRIST,
)
from intervention.landmarks import Landmark, distance, landmark_at


@dataclass(frozen=True)
class HandMatch:
    """Per-frame classification result."""

    hand_count: int = 0
    extra_hands_near_body: int = 0
    patient_hands: int = 0
    third_party_hands: int = 0
    body_box: BodyBoundingBox | None = None
    # wrist positions of third-party hands inside the box, for overlays/logs
    intruding_wrists: tuple[Landmark, ...] = field(default_factory=tuple)

    @property
    def checked(self) -> bool:
        """False when the frame was skipped (missing input or too few hands)."""
        return self.hand_count >= MIN_HANDS_FOR_INTERVENTION and self.body_box is not None


def _hand_count(hands: Sequence[Any] | None) -> int:
    if hands is None:
        return 0
    try:
        return len(hands)
    except TypeError:
        return 0


def nearest_patient_wrist_dist(
    wrist: Landmark,
    pose_landmarks: Sequence[Any] | None,
) -> float:
    """Distance to the closer patient wrist; inf if neither is visible."""
    dists = []
    for idx in (LEFT_WRIST, RIGHT_WRIST):
        pose_wrist = landmark_at(pose_landmarks, idx)
        if pose_wrist is not None:
            dists.append(distance(wrist, pose_wrist))
    return min(dists, default=float("inf"))


def is_patient_hand(
    wrist: Landmark,
    pose_landmarks: Sequence[Any] | None,
    match_dist: float = MATCH_DIST_DEFAULT,
) -> bool:
    return nearest_patient_wrist_dist(wrist, pose_landmarks) < match_dist


def match_hands(
    hands: Sequence[Any] | None,
    pose_landmarks: Sequence[Any] | None,
    match_dist: float = MATCH_DIST_DEFAULT,
    body_margin: float = BODY_MARGIN_DEFAULT,
) -> HandMatch:
    """
    Classify hands for one frame.

    Args:
        hands: sequence of hands, each a 21-landmark sequence (index 0 = wrist).
        pose_landmarks: 33-landmark pose sequence; entries may be None.

    Returns a HandMatch. extra_hands_near_body counts hands that match
    neither patient wrist and whose wrist is inside the expanded body box.
    Hands without a usable wrist are counted in hand_count only.
    """
    hand_count = _hand_count(hands)
    if pose_landmarks is None or hand_count < MIN_HANDS_FOR_INTERVENTION:
        return HandMatch(hand_count=hand_count)

    box = estimate_body_box(pose_landmarks, body_margin)

    patient = 0
    third_party = 0
    intruding: list[Landmark] = []
    for hand in hands:
        wrist = landmark_at(hand, HAND_WRIST)
        if wrist is None:
            continue
        if is_patient_hand(wrist, pose_landmarks, match_dist):
            patient += 1
            continue
        third_party += 1
        if box is not None and box.contains(wrist.x, wrist.y):
            intruding.append(wrist)

    return HandMatch(
        hand_count=hand_count,
        extra_hands_near_body=len(intruding),
        patient_hands=patient,
        third_party_hands=third_party,
        body_box=box,
        intruding_wrists=tuple(intruding),
    )
