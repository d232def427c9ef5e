"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores settings that must be known before opening the DB (db_folder,
log_level) plus the name of the category carry-over pays into.
Config lives in ~/.budget_tracker/config.json, or under $BUDGET_TRACKER_HOME
when that is set.
"""
import json
import os
from pathlib import Path

DEFAULTS = {
    "db_folder": None,
    "log_level": "INFO",
    "savings_category": "Savings",
}


def config_dir() -> Path:
    override = os.environ.get("BUDGET_TRACKER_HOME")
    if override:
        return Path(override)
    return Path.home() / ".budget_tracker"


def config_file() -> Path:
    return config_dir() / "config.json"


def load_config() -> dict:
    """Returns {} on a missing or corrupt file; never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = config_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_setting(key: str):
    """Return a config value, falling back to DEFAULTS."""
    return load_config().get(key, DEFAULTS.get(key))


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return get_setting("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_log_level() -> str:
    return str(get_setting("log_level")).upper()


def get_savings_category() -> str:
    name = get_setting("savings_category")
    return name.strip() if isinstance(name, str) and name.strip() else DEFAULTS["savings_category"]
