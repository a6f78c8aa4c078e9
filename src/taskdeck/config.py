"""Configuration management for taskdeck."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TASKDECK_HOME = Path(os.environ.get("TASKDECK_HOME", Path.home() / "taskdeck"))
CONFIG_FILE = TASKDECK_HOME / "config" / "taskdeck.conf"
DATA_DIR = TASKDECK_HOME / "data"

BACKENDS = ("file", "remote")


@dataclass
class Config:
    """taskdeck configuration."""

    backend: str = "file"
    data_dir: str = ""
    api_base_url: str = ""
    api_token: str = ""
    api_timeout: float = 10.0
    timezone: str = ""
    retry_attempts: int = 3
    retry_delay: float = 0.5
    default_priority: int = 3

    @property
    def data_path(self) -> Path:
        """Directory holding tasks.json and projects.json for the file backend."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_number(key: str, value: str, cast, default):
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskdeck.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "backend":
                if value.lower() in BACKENDS:
                    config.backend = value.lower()
                else:
                    logger.warning(f"Unknown BACKEND {value!r}, using {config.backend}")
            case "data_dir":
                config.data_dir = value
            case "api_base_url":
                config.api_base_url = value
            case "api_token":
                config.api_token = value
            case "api_timeout":
                config.api_timeout = _parse_number(key, value, float, config.api_timeout)
            case "timezone":
                config.timezone = value
            case "retry_attempts":
                config.retry_attempts = max(1, _parse_number(key, value, int, config.retry_attempts))
            case "retry_delay":
                config.retry_delay = _parse_number(key, value, float, config.retry_delay)
            case "default_priority":
                priority = _parse_number(key, value, int, config.default_priority)
                if priority in (1, 2, 3):
                    config.default_priority = priority
                else:
                    logger.warning(f"DEFAULT_PRIORITY must be 1, 2 or 3, got {priority}")

    return config
