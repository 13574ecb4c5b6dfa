"""Configuration management for taskdeck."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TASKDECK_HOME = Path(os.environ.get("TASKDECK_HOME", Path.home() / "taskdeck"))
CONFIG_FILE = TASKDECK_HOME / "config" / "taskdeck.conf"
DATA_DIR = TASKDECK_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """taskdeck configuration."""

    data_dir: str = ""
    storage_key: str = "tasks"
    history_key: str = "history"
    timezone: str = "UTC"
    default_sort: str = "created"
    reminder_lead_minutes: int = 60
    clamp_past_reminders: bool = True
    recur_on_create: bool = False
    watch_interval_seconds: int = 5

    @property
    def reminder_lead_time(self) -> timedelta:
        return timedelta(minutes=self.reminder_lead_minutes)

    @property
    def resolved_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    @property
    def tz(self) -> tzinfo:
        if not self.timezone or self.timezone.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using UTC")
            return timezone.utc


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}")
    return default


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}")
        return default


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from taskdeck.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "storage_key":
                config.storage_key = value or config.storage_key
            case "history_key":
                config.history_key = value or config.history_key
            case "timezone":
                config.timezone = value
            case "default_sort":
                config.default_sort = value
            case "reminder_lead_minutes":
                config.reminder_lead_minutes = _parse_int(key, value, config.reminder_lead_minutes)
            case "clamp_past_reminders":
                config.clamp_past_reminders = _parse_bool(key, value, config.clamp_past_reminders)
            case "recur_on_create":
                config.recur_on_create = _parse_bool(key, value, config.recur_on_create)
            case "watch_interval_seconds":
                config.watch_interval_seconds = _parse_int(key, value, config.watch_interval_seconds)
            case _:
                logger.debug(f"Ignoring unknown config key {key.upper()}")

    return config
