import logging
import os

logger = logging.getLogger("Inkwell")

ENV_PREFIX = "INKWELL_"

DEFAULT_CONFIG = {
    "dev_mode": False,
    "db_path": "",
    "host": "127.0.0.1",
    "port": 8765,
    "seed_presets": True,
    "suggestion_limit": 10,
    "log_level": "INFO",
}

_ENV_KEYS = {
    "dev_mode": "DEV",
    "db_path": "DB_PATH",
    "host": "HOST",
    "port": "PORT",
    "seed_presets": "SEED_PRESETS",
    "suggestion_limit": "SUGGESTION_LIMIT",
    "log_level": "LOG_LEVEL",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _to_bool(value, default=False):
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in _TRUE_VALUES


def _to_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_config(config: dict) -> dict:
    merged = {**DEFAULT_CONFIG, **(config or {})}
    out = dict(merged)
    out["dev_mode"] = _to_bool(merged.get("dev_mode"))
    out["seed_presets"] = _to_bool(merged.get("seed_presets"), default=True)
    out["db_path"] = str(merged.get("db_path") or "").strip()
    out["host"] = str(merged.get("host") or DEFAULT_CONFIG["host"]).strip()
    port = _to_int(merged.get("port"), DEFAULT_CONFIG["port"])
    out["port"] = port if 0 < port < 65536 else DEFAULT_CONFIG["port"]
    out["suggestion_limit"] = max(1, min(100, _to_int(merged.get("suggestion_limit"), 10)))
    level = str(merged.get("log_level") or "").strip().upper()
    if level not in _LOG_LEVELS:
        if level:
            logger.warning("Unknown log level %r, using INFO", level)
        level = "INFO"
    out["log_level"] = level
    return out


def load_config(environ=None) -> dict:
    """Build the application config from defaults and INKWELL_* variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for key, suffix in _ENV_KEYS.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value is not None and value != "":
            overrides[key] = value
    return normalize_config(overrides)
