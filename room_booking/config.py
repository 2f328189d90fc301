"""
Конфигурация приложения.

Значения читаются из переменных окружения (и файла .env, если он есть).
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

ENV_PREFIX = "ROOM_BOOKING_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


class Settings(BaseModel):
    """Настройки приложения."""

    data_file: Optional[Path] = None  # None - хранить комнаты в памяти
    log_level: str = "INFO"
    notifications_enabled: bool = True
    use_utc: bool = False

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        """Создает настройки из переменных окружения."""
        load_dotenv(find_dotenv(usecwd=True))

        data_file = os.getenv(ENV_PREFIX + "DATA_FILE")
        return cls(
            data_file=Path(data_file) if data_file else None,
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", "INFO"),
            notifications_enabled=_env_flag("NOTIFICATIONS_ENABLED", True),
            use_utc=_env_flag("USE_UTC", False),
        )
