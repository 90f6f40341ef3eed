"""
Event logging: append intervention events to a JSON Lines file and read them back.

================================================================================
HOW THIS SCRIPT WORKS (for studying)
================================================================================

Everything that matters for auditing a scored assessment (session ready,
model failed to load, intervention confirmed/cleared, score capped, item
reset) is written as one JSON object per line, by default in
logs/intervention_events.jsonl. A reviewer can later see exactly when and
on which item a cap was applied.

  EVENT RECORD SHAPE:
  Every record has: timestamp (ISO UTC), type, item_index, plus whatever
  extra fields were in the payload (e.g. extra_hands_near_body, score_before).
  - type: see EVENT_* in intervention.constants
  - item_index: zero-based BBS item, or None outside an item

  FUNCTIONS:
  - log_event(event_type, payload, item_index=None, path=None): appends one
    line. Creates the parent directory if needed.
  - read_events(limit=None, path=None): parses each line as JSON, returns a
    list of dicts. Unparseable lines are skipped.

  FILE LOCATION:
  Relative paths resolve against the current working directory (usually the
  project root).
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from intervention.constants import EVENTS_LOG_PATH


def _log_path(path: str | Path | None = None) -> Path:
    p = Path(path or EVENTS_LOG_PATH)
    if not p.is_absolute():
        p = Path.cwd() / p
    return p


def log_event(
    event_type: str,
    payload: dict[str, Any],
    item_index: int | None = None,
    path: str | Path | None = None,
) -> None:
    """
    Append one event to the events log.
    payload is merged into the record (timestamp, type, item_index added).
    """
    p = _log_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    record = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "type": event_type,
        "item_index": item_index,
        **payload,
    }
    with open(p, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")


def read_events(limit: int | None = None, path: str | Path | None = None) -> list[dict]:
    """
    Read events from the events log.
    If limit is set, return only the last limit lines.
    """
    p = _log_path(path)
    if not p.exists():
        return []
    lines = p.read_text(encoding="utf-8").strip().split("\n")
    lines = [ln for ln in lines if ln]
    if limit is not None:
        lines = lines[-limit:] if limit > 0 else []
    out = []
    for ln in lines:
        try:
            out.append(json.loads(ln))
        except json.JSONDecodeError:
            continue
    return out
