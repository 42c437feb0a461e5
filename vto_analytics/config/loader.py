import yaml
import copy
from pathlib import Path
from typing import Optional

from .defaults import DEFAULT_CONFIG


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


# -------------------------------------------------
# MAIN CONFIG LOADER
# -------------------------------------------------
def load_config(path: Optional[str] = None) -> dict:
    """
    Load and merge user config with defaults.

    Rules:
    - Defaults always fill fields the user omits
    - Nested sections merge key by key
    - dataset / thresholds / export sections are OPTIONAL
    """

    # -------------------------------------------------
    # 1. Load user config (if provided)
    # -------------------------------------------------
    user_config = {}

    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

        if not isinstance(user_config, dict):
            raise ValueError("Config file must contain a YAML dictionary")

    # -------------------------------------------------
    # 2. Merge with defaults
    # -------------------------------------------------
    config = _merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

    config.setdefault("metadata", {})

    return config
