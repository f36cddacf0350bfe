"""Configuration management from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from subminder.utils.constants import (
    NOTIFICATION_TTL_SECONDS,
    REMINDER_WINDOW_DAYS,
    SWEEP_INTERVAL_SECONDS,
)

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    OWNER_CHAT_ID: int = int(os.getenv("OWNER_CHAT_ID", "0") or "0")

    # Database
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/subminder.db"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Engine
    SWEEP_INTERVAL_SECONDS: int = int(
        os.getenv("SWEEP_INTERVAL_SECONDS", str(SWEEP_INTERVAL_SECONDS))
    )
    REMINDER_WINDOW_DAYS: int = int(os.getenv("REMINDER_WINDOW_DAYS", str(REMINDER_WINDOW_DAYS)))
    NOTIFICATION_TTL_SECONDS: int = int(
        os.getenv("NOTIFICATION_TTL_SECONDS", str(NOTIFICATION_TTL_SECONDS))
    )

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.TELEGRAM_BOT_TOKEN:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        if not cls.OWNER_CHAT_ID:
            raise ValueError("OWNER_CHAT_ID environment variable is required")

        if cls.SWEEP_INTERVAL_SECONDS <= 0:
            raise ValueError("SWEEP_INTERVAL_SECONDS must be positive")

        if cls.REMINDER_WINDOW_DAYS < 0:
            raise ValueError("REMINDER_WINDOW_DAYS must not be negative")

        # Ensure database directory exists
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
