import os
import sys

from .config import load_config
from .constants import APP_NAME, DB_FILENAME


def _user_data_dir():
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA") or os.path.join(os.path.expanduser("~"), "AppData", "Roaming")
        return os.path.join(base, APP_NAME)
    if sys.platform == "darwin":
        return os.path.join(os.path.expanduser("~"), "Library", "Application Support", APP_NAME)
    base = os.environ.get("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, APP_NAME.lower())


def get_data_dir(config=None):
    # Development builds keep the database beside the program.
    config = config or load_config()
    if config.get("dev_mode"):
        data_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    else:
        data_dir = _user_data_dir()
    os.makedirs(data_dir, exist_ok=True)
    return data_dir


def get_db_path(config=None):
    config = config or load_config()
    if config.get("db_path"):
        return os.path.abspath(os.path.expanduser(config["db_path"]))
    return os.path.join(get_data_dir(config), DB_FILENAME)
