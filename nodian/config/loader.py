# nodian/config/loader.py
import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from loguru import logger

from .schema import AppConfig
from .paths import get_user_config_file
from ..core.fileio import atomic_write_text

_cached_config: Optional[AppConfig] = None

def _quarantine(config_path: Path) -> None:
    # Keep the unreadable file for the user instead of overwriting it later
    backup_path = config_path.with_suffix(".json.corrupted")
    try:
        backup_path.unlink(missing_ok=True)
        config_path.rename(backup_path)
        logger.info(f"Moved unreadable config aside: {backup_path}")
    except OSError as backup_err:
        logger.error(f"Could not move unreadable config {config_path} aside: {backup_err}")

def _read_user_settings(config_path: Path) -> Dict[str, Any]:
    """Returns the raw settings object from the config file, or {} when unusable."""
    if not config_path.exists():
        logger.info("No user config found, using defaults.")
        return {}
    logger.info(f"Reading user config: {config_path}")
    try:
        raw = json.loads(config_path.read_text(encoding='utf-8'))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.error(f"User config {config_path} is unreadable: {e}")
        _quarantine(config_path)
        return {}
    if not isinstance(raw, dict):
        logger.error(f"User config {config_path} is not a JSON object, ignoring it.")
        return {}
    return raw

def load_config() -> AppConfig:
    """Loads the user configuration once; anything invalid yields the defaults."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    settings = _read_user_settings(get_user_config_file())
    try:
        config = AppConfig(**settings)
    except ValidationError as e:
        logger.error(f"Invalid settings in user config: {e}")
        logger.warning("Using default configuration.")
        config = AppConfig()
    logger.debug(f"Effective configuration: {config.model_dump(mode='json')}")
    _cached_config = config
    return config

def save_config(config: AppConfig) -> None:
    """Writes `config` to the user config file, replacing it atomically."""
    config_path = get_user_config_file()
    try:
        atomic_write_text(config_path, config.model_dump_json(indent=4), suffix=".json")
    except OSError as e:
        logger.error(f"Could not write config {config_path}: {e}")
        raise
    logger.info(f"Configuration written to {config_path}")

def get_config() -> AppConfig:
    """Cached configuration, loaded on first use."""
    return _cached_config if _cached_config is not None else load_config()

def reset_config_cache() -> None:
    """Forgets the cached configuration so the next get_config() reloads it."""
    global _cached_config
    _cached_config = None
