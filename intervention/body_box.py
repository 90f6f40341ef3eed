"""
Patient body bounding box from pose landmarks.

The box spans shoulders, hips, knees and ankles (arms excluded so a
patient reaching out does not stretch it) and is then grown by a margin
fraction of its own size so a hand steadying the patient's side still lands
inside.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from intervention.constants import BODY_BOX_INDICES, BODY_MARGIN_DEFAULT
from intervention.landmarks import landmark_at


@dataclass(frozen=True)
class BodyBoundingBox:
    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, x: float, y: float) -> bool:
        """Inclusive on all four edges."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom


def estimate_body_box(
    pose_landmarks: Sequence[Any] | None,
    margin: float = BODY_MARGIN_DEFAULT,
) -> BodyBoundingBox | None:
    """
    Compute the margin-expanded body box.

    Missing or malformed landmarks are skipped, never read as zero. Returns
    None when fewer than 2 body landmarks are usable: no containment is
    possible for that frame.
    """
    points = [landmark_at(pose_landmarks, idx) for idx in BODY_BOX_INDICES]
    points = [p for p in points if p is not None]
    if len(points) < 2:
        return None

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)

    pad_x = (max_x - min_x) * margin
    pad_y = (max_y - min_y) * margin
    return BodyBoundingBox(
        left=min_x - pad_x,
        right=max_x + pad_x,
        top=min_y - pad_y,
        bottom=max_y + pad_y,
    )
