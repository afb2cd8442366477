import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from collector.commons.types import Settings

DEFAULT_SETTINGS_PATH = "collector/configs/settings.yaml"

ENV_BASE_URL = "COLLECTOR_API_BASE_URL"
ENV_PARTY_ID = "COLLECTOR_PARTY_ID"


def resource_path(relative_path: str) -> str:
    """Ruta absoluta a un recurso, tanto empaquetado con PyInstaller como en desarrollo."""
    if hasattr(sys, "_MEIPASS"):
        base_path = sys._MEIPASS
    else:
        base_path = os.path.abspath(".")
    return os.path.join(base_path, relative_path)


def trim_trailing_slash(value: str) -> str:
    return re.sub(r"/+$", "", value)


def _env_value(env: Mapping[str, str], key: str) -> Optional[str]:
    value = (env.get(key) or "").strip()
    return value or None


def load_raw_cfg(path: str = DEFAULT_SETTINGS_PATH) -> Dict[str, Any]:
    config_path = Path(resource_path(path))
    if not config_path.exists():
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(
    path: str = DEFAULT_SETTINGS_PATH, env: Optional[Mapping[str, str]] = None
) -> Settings:
    """Load settings.yaml and apply environment overrides.

    A missing file falls back to the model defaults; blank env values are ignored.
    """
    env = os.environ if env is None else env
    settings = Settings.model_validate(load_raw_cfg(path))

    base_url = _env_value(env, ENV_BASE_URL) or settings.api.base_url
    party_id = _env_value(env, ENV_PARTY_ID) or settings.collector.party_id

    return settings.model_copy(
        update={
            "api": settings.api.model_copy(update={"base_url": trim_trailing_slash(base_url)}),
            "collector": settings.collector.model_copy(update={"party_id": party_id}),
        }
    )
