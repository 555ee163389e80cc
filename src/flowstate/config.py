"""Configuration management for Flowstate."""

import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

FLOWSTATE_HOME = Path(os.environ.get("FLOWSTATE_HOME", Path.home() / "flowstate"))
CONFIG_FILE = FLOWSTATE_HOME / "config" / "flowstate.conf"
DATA_DIR = FLOWSTATE_HOME / "data"

NOTIFICATION_MODES = ("auto", "banner")


@dataclass
class Config:
    """Flowstate configuration."""

    data_dir: str = ""
    default_list: str = "Inbox"
    reminder_interval_minutes: int = 60
    notifications: str = "auto"
    timezone: str = ""
    # Telegram push notifications
    telegram_bot_token: str = ""
    telegram_chat_ids: list[int] = field(default_factory=list)

    @property
    def data_path(self) -> Path:
        """Resolved data directory."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    def today(self) -> date:
        """Current date in the configured timezone, or local time if none is set."""
        if not self.timezone:
            return date.today()
        try:
            return datetime.now(ZoneInfo(self.timezone)).date()
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown TIMEZONE {self.timezone!r}, using local time")
            return date.today()


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from flowstate.conf file."""
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
            case "data_dir":
                config.data_dir = value
            case "default_list":
                if value:
                    config.default_list = value
            case "reminder_interval_minutes":
                try:
                    minutes = int(value)
                except ValueError:
                    logger.warning(f"Invalid REMINDER_INTERVAL_MINUTES: {value}")
                    continue
                if minutes < 1:
                    logger.warning(f"REMINDER_INTERVAL_MINUTES must be positive, got {minutes}")
                    continue
                config.reminder_interval_minutes = minutes
            case "notifications":
                if value.lower() not in NOTIFICATION_MODES:
                    logger.warning(f"Unknown NOTIFICATIONS mode: {value}")
                    continue
                config.notifications = value.lower()
            case "timezone":
                config.timezone = value
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_chat_ids":
                try:
                    config.telegram_chat_ids = [int(c.strip()) for c in value.split(",") if c.strip()]
                except ValueError:
                    logger.warning(f"Invalid TELEGRAM_CHAT_IDS: {value}")

    return config
