"""
Скрипт инициализации базы данных
Создаёт таблицы календаря студий
Запустить из backend/: python init_db.py
"""
import logging

from booking_engine.config import get_settings
from booking_engine.database import get_db, init_db
from booking_engine.models import Studio

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


if __name__ == "__main__":
    settings = get_settings()
    logger.info(f"Создание таблиц в {settings.DATABASE_URL}...")
    init_db()
    for db in get_db():
        logger.info(f"Таблицы созданы! Студий в базе: {db.query(Studio).count()}")
