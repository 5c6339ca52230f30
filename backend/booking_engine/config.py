"""
Конфигурация приложения
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    """Настройки приложения"""

    # Database
    DATABASE_URL: str = "sqlite:///./studio_calendar.db"

    # Часовой пояс студий (все расчёты "сегодня/эта неделя" в нём)
    TIMEZONE: str = "Europe/Istanbul"

    # Calendar Settings
    DEFAULT_DAY_CUTOFF_HOUR: int = 4  # до 04:00 ночь относится к предыдущему дню
    DEFAULT_SESSION_MINUTES: int = 60  # длительность поиска по умолчанию

    # Статистика
    COMPARE_MONTHS_SPAN: int = 12  # сколько месяцев назад/вперёд в сравнении

    # Development
    DEBUG: bool = False

    class Config:
        # Путь к .env относительно корня проекта
        env_file = Path(__file__).resolve().parent.parent.parent / ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Получить настройки приложения (с кешированием)"""
    return Settings()
