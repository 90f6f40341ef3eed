"""
Detection configuration: defaults, JSON config file, environment overrides.

HOW THIS WORKS

`DetectionConfig` holds every tunable the session reads. Defaults come from
intervention.constants. `load_config()` layers, lowest to highest:

  1. field defaults
  2. a JSON file (config/intervention.json by default; missing file is fine)
  3. INTERVENTION_<FIELD> environment variables, with a .env file loaded
     through python-dotenv (real environment wins over .env)

Values are validated by pydantic; a bad value fails loudly at startup
rather than silently skewing detection mid-assessment.
"""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from intervention.constants import (
    BODY_MARGIN_DEFAULT,
    CONFIG_PATH,
    CONFIRM_THRESHOLD_DEFAULT,
    ENV_PREFIX,
    EVENTS_LOG_PATH,
    FRAME_SKIP_DEFAULT,
    HAND_LANDMARKER_MODEL,
    MATCH_DIST_DEFAULT,
    MAX_NUM_HANDS_DEFAULT,
    MIN_DETECTION_CONF_DEFAULT,
    MIN_PRESENCE_CONF_DEFAULT,
    MIN_TRACKING_CONF_DEFAULT,
    POSE_LANDMARKER_MODEL,
)


class DetectionConfig(BaseModel):
    frame_skip: int = Field(FRAME_SKIP_DEFAULT, ge=1)
    confirm_threshold: int = Field(CONFIRM_THRESHOLD_DEFAULT, ge=1)
    match_dist: float = Field(MATCH_DIST_DEFAULT, gt=0)
    body_margin: float = Field(BODY_MARGIN_DEFAULT, ge=0)

    max_num_hands: int = Field(MAX_NUM_HANDS_DEFAULT, ge=1)
    min_detection_confidence: float = Field(MIN_DETECTION_CONF_DEFAULT, ge=0, le=1)
    min_presence_confidence: float = Field(MIN_PRESENCE_CONF_DEFAULT, ge=0, le=1)
    min_tracking_confidence: float = Field(MIN_TRACKING_CONF_DEFAULT, ge=0, le=1)

    hand_model_path: str = HAND_LANDMARKER_MODEL
    pose_model_path: str = POSE_LANDMARKER_MODEL
    # None disables the JSONL events log
    events_log_path: str | None = EVENTS_LOG_PATH

    def tracker_options(self) -> dict[str, Any]:
        """Options passed to HandTracker.configure()."""
        return {
            "model_path": self.hand_model_path,
            "max_num_hands": self.max_num_hands,
            "min_detection_confidence": self.min_detection_confidence,
            "min_presence_confidence": self.min_presence_confidence,
            "min_tracking_confidence": self.min_tracking_confidence,
        }


def _read_json(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.is_absolute():
        p = Path.cwd() / p
    if not p.exists():
        return {}
    with open(p, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {p}")
    return data


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect INTERVENTION_<FIELD> values for known fields."""
    environ = os.environ if environ is None else environ
    out: dict[str, Any] = {}
    for name in DetectionConfig.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            value = environ[key]
            out[name] = None if (name == "events_log_path" and value == "") else value
    return out


def load_config(
    path: str | Path | None = CONFIG_PATH,
    environ: dict[str, str] | None = None,
) -> DetectionConfig:
    """
    Build a DetectionConfig from file + environment.

    Pass path=None to skip the file. Raises pydantic.ValidationError on
    invalid values and json.JSONDecodeError on a malformed file.
    """
    if environ is None:
        load_dotenv()
    data: dict[str, Any] = _read_json(path) if path else {}
    data.update(env_overrides(environ))
    return DetectionConfig.model_validate(data)
