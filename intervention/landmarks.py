"""
Landmark value type and tolerant coercion helpers.

Pose and hand models hand back landmarks in several shapes: MediaPipe
NormalizedLandmark objects, dicts decoded from JSON fixtures, plain
(x, y[, z]) tuples, or rows of an (n, 3) NumPy array. Everything downstream
works on `Landmark`, and anything that cannot be read as a finite point
becomes None so callers can skip it.
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


@dataclass(frozen=True)
class Landmark:
    """A keypoint in normalized [0, 1] frame coordinates."""

    x: float
    y: float
    z: float = 0.0


def _finite(v: Any) -> float | None:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def _is_point_sequence(obj: Any) -> bool:
    if isinstance(obj, np.ndarray):
        return obj.ndim == 1 and obj.size >= 2
    return isinstance(obj, (list, tuple)) and len(obj) >= 2


def to_landmark(obj: Any) -> Landmark | None:
    """
    Coerce one landmark-like value to a Landmark.

    Accepts Landmark, objects with .x/.y(/.z) attributes, mappings with
    "x"/"y"(/"z") keys, and (x, y[, z]) lists, tuples or 1-D arrays.
    Returns None for None or anything without two finite coordinates.
    """
    if obj is None:
        return None
    if isinstance(obj, Landmark):
        return obj
    if isinstance(obj, dict):
        raw = (obj.get("x"), obj.get("y"), obj.get("z", 0.0))
    elif hasattr(obj, "x") and hasattr(obj, "y"):
        raw = (obj.x, obj.y, getattr(obj, "z", 0.0))
    elif _is_point_sequence(obj):
        raw = (obj[0], obj[1], obj[2] if len(obj) > 2 else 0.0)
    else:
        return None

    x = _finite(raw[0])
    y = _finite(raw[1])
    if x is None or y is None:
        return None
    z = _finite(raw[2])
    return Landmark(x=x, y=y, z=z if z is not None else 0.0)


def landmark_at(landmarks: Sequence[Any] | None, idx: int) -> Landmark | None:
    """Return landmarks[idx] as a Landmark, or None if absent/malformed."""
    if landmarks is None:
        return None
    try:
        return to_landmark(landmarks[idx])
    except (IndexError, KeyError, TypeError):
        return None


def to_landmark_list(landmarks: Sequence[Any] | None) -> list[Landmark | None]:
    """Coerce a whole landmark sequence; entries that fail coercion become None."""
    if landmarks is None:
        return []
    try:
        return [to_landmark(lm) for lm in landmarks]
    except TypeError:
        return []


def distance(a: Landmark, b: Landmark) -> float:
    """Euclidean distance in the x/y image plane."""
    return math.hypot(a.x - b.x, a.y - b.y)
