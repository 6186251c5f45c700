"""Configuration loading from CLI args, env vars, and an optional YAML file."""

import logging
import os
from dataclasses import dataclass

import yaml

from src.transport import Mode, parse_mode

logger = logging.getLogger(__name__)

HTTP_PORT = 8080
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class InvalidLogLevelError(ValueError):
    """Raised for a log level name outside LOG_LEVELS."""

    def __init__(self, level: str):
        super().__init__(f"log level \"{level}\" not supported (choose from {', '.join(LOG_LEVELS)})")
        self.level = level


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    logfile: str = "log.txt"
    mode: Mode = Mode.HTTP
    host: str = "0.0.0.0"
    port: int = HTTP_PORT
    fsync: bool = False
    log_level: str = "INFO"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def _pick(cli_value, env_key: str, yaml_data: dict, yaml_key: str, default):
    # CLI flag > env var > YAML > default
    if cli_value is not None:
        return cli_value
    if env_key in os.environ:
        return os.environ[env_key]
    if yaml_key in yaml_data:
        return yaml_data[yaml_key]
    return default


def load_config(cli_args=None, yaml_data: dict | None = None) -> Config:
    """Build Config from CLI args, env vars, and parsed YAML data.

    Raises UnsupportedModeError when the selected mode has no transport, and
    InvalidLogLevelError for an unknown log level.
    """
    yaml_data = yaml_data or {}
    log_level = str(_pick(None, "LOG_LEVEL", yaml_data, "log_level", Config.log_level)).strip().upper()
    if log_level not in LOG_LEVELS:
        raise InvalidLogLevelError(log_level)
    logfile = getattr(cli_args, "logfile", None)
    mode = getattr(cli_args, "mode", None)

    return Config(
        logfile=str(_pick(logfile, "LOG_FILE", yaml_data, "logfile", Config.logfile)),
        mode=parse_mode(_pick(mode, "SERVER_MODE", yaml_data, "mode", Config.mode.value)),
        host=str(_pick(None, "SERVER_HOST", yaml_data, "host", Config.host)),
        fsync=_parse_bool(_pick(None, "LOG_FSYNC", yaml_data, "fsync", Config.fsync)),
        log_level=log_level,
    )
