# nodian/config/paths.py
import sys
import os
from pathlib import Path

APP_NAME = "Nodian"

def get_user_data_dir() -> Path:
    """Per-user data directory, created on demand.

    Windows: %APPDATA%\\Nodian. Elsewhere: $XDG_DATA_HOME/nodian, or
    ~/.local/share/nodian when the variable is unset.
    """
    if sys.platform == "win32":
        root = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        data_dir = Path(root) / APP_NAME
    else:
        root = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
        data_dir = Path(root) / APP_NAME.lower()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir

def get_user_config_file() -> Path:
    return get_user_data_dir() / "config.json"

def get_user_log_dir() -> Path:
    log_dir = get_user_data_dir() / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir
