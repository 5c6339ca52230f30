"""
Подключение к базе данных (PostgreSQL или SQLite)
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from .config import get_settings

settings = get_settings()


def build_engine(database_url: str, echo: bool = False):
    """
    Создать движок для DATABASE_URL
    "sqlite://" (в памяти) - одно соединение на весь процесс
    """
    if database_url.startswith("sqlite"):
        # SQLite - для локальной разработки и тестов
        options = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)

    # PostgreSQL - для продакшена
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=echo
    )


# Создание движка базы данных
engine = build_engine(settings.DATABASE_URL, settings.DEBUG)

# Создание фабрики сессий
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Базовый класс для моделей
Base = declarative_base()


def get_db():
    """
    Генератор сессии базы данных
    Использование:
        for db in get_db():
            StudioCalendarService(db).calendar_summary(studio_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Создание всех таблиц, определенных в моделях
    bind - другой движок (по умолчанию engine из настроек)
    """
    from . import models  # noqa: F401  регистрирует таблицы в Base.metadata

    Base.metadata.create_all(bind=bind or engine)
