"""Notification preferences.

The config file is a JSON object of boolean toggles. It is read with
yaml.safe_load, which accepts JSON as-is. Loading never fails: a missing or
broken file yields the defaults.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "focus-notify"
CONFIG_FILE_NAME = "config.json"

# File key (camelCase, as written by users) -> dataclass field
_KEY_MAP = {
    "suppressWhenFocused": "suppress_when_focused",
    "notifyOnError": "notify_on_error",
    "notifyOnPermission": "notify_on_permission",
    "notifyOnQuestion": "notify_on_question",
    "notifyChildSessions": "notify_child_sessions",
}


@dataclass(frozen=True)
class NotifyConfig:
    """Immutable notification preferences, shared by every event handler."""

    suppress_when_focused: bool = True
    notify_on_error: bool = True
    notify_on_permission: bool = True
    notify_on_question: bool = True
    notify_child_sessions: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotifyConfig":
        """Build a config from a parsed file, keeping defaults for bad values."""
        defaults = cls()
        values: dict[str, bool] = {}
        for key, field_name in _KEY_MAP.items():
            if key not in data:
                continue
            value = data[key]
            if isinstance(value, bool):
                values[field_name] = value
            else:
                logger.warning(
                    f"Ignoring non-boolean value for {key!r}: {value!r} "
                    f"(using {getattr(defaults, field_name)})"
                )
        return cls(**values)

    def to_dict(self) -> dict[str, bool]:
        """Serialize back to the file's camelCase keys."""
        by_field = asdict(self)
        return {key: by_field[field_name] for key, field_name in _KEY_MAP.items()}


def get_default_config_path() -> Path:
    """Get the per-user config file path."""
    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return config_home / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(config_path: Path | None = None) -> NotifyConfig:
    """Load config from file or use defaults."""
    if config_path is None:
        config_path = get_default_config_path()

    if not config_path.exists():
        logger.info(f"No config file at {config_path}, using defaults")
        return NotifyConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except Exception as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return NotifyConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config at {config_path} is not an object, using defaults")
        return NotifyConfig()

    logger.info(f"Loaded config from {config_path}")
    return NotifyConfig.from_dict(data)


_config: NotifyConfig | None = None


def get_config(config_path: Path | None = None) -> NotifyConfig:
    """Return the process-wide config, loading it on first use.

    Later calls return the same object; the path argument only matters the
    first time.
    """
    global _config
    if _config is None:
        _config = load_config(config_path)
    return _config
