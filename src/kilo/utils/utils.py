# kilo/utils/utils.py
"""
kilo.utils.utils.py
===================

Configuration helpers for the kilo editor.

Key functionalities include:
- Automatic User Configuration: creates `config.toml` and `.env` templates in
  `~/.config/kilo` on first run.
- Robust Configuration Loading: starts from the built-in defaults and
  recursively merges the user's `config.toml` over them.
- Value Coercion: numeric settings read from user files are validated and fall
  back to the defaults when they are missing or nonsensical.

The editor can always start, even when the user files are missing or corrupt,
because the embedded defaults are the base of every merge.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("kilo")

# --- Constants ---
KILO_VERSION = "0.1.0"
CONFIG_DIR_NAME = "kilo"

ENV_TEMPLATE = """# Environment switches for kilo.
# Set to 1 to write every decoded key to keytrace.log.
KILO_KEYTRACE=
# Overrides [logging] file_level (DEBUG, INFO, WARNING, ...).
KILO_LOG_LEVEL=
"""

# Hardcoded defaults; the user's config.toml is merged on top of these.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_stop": 8,
        "quit_times": 3,
        "message_timeout": 5,
    },
    "terminal": {
        "read_timeout_ms": 100,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
        "handle_up": "up",
        "handle_down": "down",
        "handle_left": "left",
        "handle_right": "right",
        "handle_home": "home",
        "handle_end": "end",
        "handle_page_up": "pageup",
        "handle_page_down": "pagedown",
        "handle_enter": "enter",
        "handle_backspace": ["backspace", "ctrl+h"],
        "handle_delete": "del",
        "redraw": ["ctrl+l", "esc"],
    },
    "logging": {
        "file_level": "INFO",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns `~/.config/kilo`, the home of config.toml, .env and the log."""
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/kilo` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with open(user_config_path, "w", encoding="utf-8") as f:
                toml.dump(DEFAULT_CONFIG, f)
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except OSError as e:
        logger.error(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = _drop_misshapen_sections(toml.load(user_config_path))
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def _drop_misshapen_sections(user_config: Dict[str, Any]) -> Dict[str, Any]:
    """Removes user values that replace a default table with a non-table."""
    cleaned = {}
    for section, value in user_config.items():
        if isinstance(DEFAULT_CONFIG.get(section), dict) and not isinstance(value, dict):
            logger.error(f"Config section [{section}] must be a table, got {value!r}; using defaults.")
            continue
        cleaned[section] = value
    return cleaned


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    The result shares no mutable values with either argument.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def get_int_setting(
    config: Dict[str, Any], section: str, key: str, minimum: int = 0
) -> int:
    """
    Reads an integer setting, falling back to DEFAULT_CONFIG on bad values.

    Args:
        config: The merged application configuration.
        section: Table name, e.g. ``"editor"``.
        key: Setting name inside the table.
        minimum: Smallest accepted value; anything below it is rejected.

    Returns:
        The configured value, or the built-in default.
    """
    default = DEFAULT_CONFIG[section][key]
    table = config.get(section)
    raw = table.get(key, default) if isinstance(table, dict) else default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value {raw!r} for [{section}] {key}; using {default}.")
        return default
    if value < minimum:
        logger.warning(f"Value {value} for [{section}] {key} is below {minimum}; using {default}.")
        return default
    return value
