"""
Score caps for items scored under therapist intervention.

Berg Balance Scale items are scored 0-4 on how independently the patient
performs them. When a therapist is confirmed to have physically helped,
the item score is capped:

  Items (zero-based)   Rule
  7, 8, 9, 10, 13      cap at 0
  11                   cap at 1 if step_count >= 2, else 0
  12                   cap at 1 if hold_duration >= 15 (s), else 0
  any other            unchanged

Caps only ever lower a score and never touch one already at or below the
cap, so applying a cap twice gives the same result as applying it once.
Callers decide *whether* intervention happened; this module only decides
what it costs.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from intervention.constants import (
    HOLD_DURATION_ITEM,
    HOLD_SECONDS_MIN_FOR_ONE,
    INTERVENTION_SUFFIX,
    STEP_COUNT_ITEM,
    STEP_COUNT_MIN_FOR_ONE,
    ZERO_CAP_ITEMS,
)

# snake_case keys first; camelCase accepted from JSON item payloads
_STEP_COUNT_KEYS = ("step_count", "stepCount")
_HOLD_DURATION_KEYS = ("hold_duration", "holdDuration")


@dataclass(frozen=True)
class ScoreResult:
    score: int
    reason: str = ""


def _item_value(item_data: Mapping[str, Any] | None, keys: tuple[str, ...]) -> float | None:
    if not item_data:
        return None
    for key in keys:
        if key in item_data and item_data[key] is not None:
            try:
                return float(item_data[key])
            except (TypeError, ValueError):
                return None
    return None


def _meets(value: float | None, minimum: float) -> bool:
    return value is not None and value >= minimum


def cap_for_item(item_index: int, item_data: Mapping[str, Any] | None = None) -> int | None:
    """Return the intervention cap for an item, or None if the item has no rule."""
    if item_index in ZERO_CAP_ITEMS:
        return 0
    if item_index == STEP_COUNT_ITEM:
        steps = _item_value(item_data, _STEP_COUNT_KEYS)
        return 1 if _meets(steps, STEP_COUNT_MIN_FOR_ONE) else 0
    if item_index == HOLD_DURATION_ITEM:
        held = _item_value(item_data, _HOLD_DURATION_KEYS)
        return 1 if _meets(held, HOLD_SECONDS_MIN_FOR_ONE) else 0
    return None


def apply_score_cap(
    score_result: ScoreResult | None,
    item_index: int,
    item_data: Mapping[str, Any] | None = None,
) -> ScoreResult | None:
    """
    Apply the intervention cap for `item_index`.

    Returns the input object unchanged when there is nothing to cap (no rule
    for the item, score already at or below the cap, or score_result None).
    Otherwise returns a new ScoreResult with the cap and an annotated reason.
    Call only once intervention is confirmed; no detection happens here.
    """
    if score_result is None:
        return score_result

    cap = cap_for_item(item_index, item_data)
    if cap is None or score_result.score <= cap:
        return score_result
    return ScoreResult(score=cap, reason=score_result.reason + INTERVENTION_SUFFIX)
