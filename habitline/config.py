"""
Centralized configuration for habitline.

All values that vary by deployment belong here.
Override via environment variables where marked.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from habitline import paths

if TYPE_CHECKING:
    from habitline.timeline.grid import TimelineGridConfig

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("HABITLINE_LOG_LEVEL", "INFO")
"""Root log level used by configure_logging()."""

_log_json_env = os.environ.get("HABITLINE_LOG_JSON")
LOG_JSON: bool | None = None if _log_json_env is None else _env_flag("HABITLINE_LOG_JSON", "0")
"""JSON log output. None means auto-detect (JSON when stderr is not a TTY)."""

# ============================================================
# Engine
# ============================================================

STRICT_INVARIANTS: bool = _env_flag("HABITLINE_STRICT_INVARIANTS", "1")
"""Re-check the no-overlap and counter-bound invariants after every mutation."""

# ============================================================
# API
# ============================================================

API_HOST: str = os.environ.get("HABITLINE_API_HOST", "127.0.0.1")
API_PORT: int = int(os.environ.get("HABITLINE_API_PORT", "8430"))

# ============================================================
# Timeline
# ============================================================

DEFAULT_TIMELINE = {
    "start_hour": 6,
    "end_hour": 24,
    "pixels_per_hour": 80,
    "snap_interval_minutes": 15,
}


def load_timeline_config(path: str | None = None) -> "TimelineGridConfig":
    """
    Load the timeline grid configuration from YAML.

    Expected shape:
        timeline:
          start_hour: 6
          end_hour: 24
          pixels_per_hour: 80
          snap_interval_minutes: 15

    Missing keys fall back to DEFAULT_TIMELINE. With no explicit path and no
    config file on disk, the defaults are returned as-is.

    Raises:
        FileNotFoundError if an explicit path (argument or env var) doesn't exist.
        yaml.YAMLError if the file is invalid YAML.
        ValueError if the 'timeline' key is missing or values are out of range.
    """
    from habitline.timeline.grid import TimelineGridConfig

    if path:
        config_path: Path | None = Path(path)
    else:
        config_path = paths.timeline_config_path()

    if config_path is None:
        logger.info("No timeline config found, using defaults")
        return TimelineGridConfig(**DEFAULT_TIMELINE)

    if not config_path.exists():
        raise FileNotFoundError(f"Timeline config not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("timeline"), dict):
        raise ValueError("timeline config must have a 'timeline' mapping")

    section = data["timeline"]
    unknown = set(section) - set(DEFAULT_TIMELINE)
    if unknown:
        logger.warning(f"Ignoring unknown timeline keys: {sorted(unknown)}")

    values = {}
    for key, default in DEFAULT_TIMELINE.items():
        raw = section.get(key, default)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ValueError(f"timeline.{key} must be a number, got {raw!r}")
        values[key] = raw

    if values["snap_interval_minutes"] != int(values["snap_interval_minutes"]):
        raise ValueError("timeline.snap_interval_minutes must be a whole number of minutes")
    values["snap_interval_minutes"] = int(values["snap_interval_minutes"])

    logger.debug(f"Loaded timeline config from {config_path}: {values}")
    return TimelineGridConfig(**values)
