from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "HABITLINE_HOME"
APP_ENV_TIMELINE_CONFIG = "HABITLINE_TIMELINE_CONFIG"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains habitline/, api/, config/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for habitline.
    Override with HABITLINE_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".habitline").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def timeline_config_path() -> Path | None:
    """
    Timeline YAML path.

    Resolution order:
    1. HABITLINE_TIMELINE_CONFIG env var (explicit override, must exist)
    2. $HABITLINE_HOME/config/timeline.yaml
    3. <project_root>/config/timeline.yaml (shipped default)

    Returns None when neither (2) nor (3) exists.
    """
    if os.environ.get(APP_ENV_TIMELINE_CONFIG):
        return Path(os.environ[APP_ENV_TIMELINE_CONFIG]).expanduser().resolve()

    user_config = app_home() / "config" / "timeline.yaml"
    if user_config.exists():
        return user_config

    shipped = project_root() / "config" / "timeline.yaml"
    if shipped.exists():
        return shipped
    return None
