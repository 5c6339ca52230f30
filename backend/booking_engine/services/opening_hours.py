"""
Часы работы студии по дням недели
"""
import json
import logging
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import ValidationError

from ..schemas import OpeningHours, OpenRange

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

DAY_NAMES = ["Pzt", "Sal", "Çar", "Per", "Cum", "Cmt", "Paz"]

# Дефолтный профиль: все дни 09:00-21:00
DEFAULT_OPENING_HOURS = [
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Пн
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Вт
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Ср
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Чт
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Пт
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Сб
    {"open": True, "openTime": "09:00", "closeTime": "21:00"},  # Вс
]


def default_opening_hours() -> List[OpeningHours]:
    """Дефолтное расписание (7 дней)"""
    return [OpeningHours.model_validate(day) for day in DEFAULT_OPENING_HOURS]


def weekday_index(day: Union[date, datetime]) -> int:
    """
    Индекс дня недели: понедельник = 0, воскресенье = 6
    Время суток на результат не влияет
    """
    return day.weekday()


def parse_time_minutes(value) -> Optional[int]:
    """
    "HH:MM" -> минуты от полуночи
    Возвращает None для некорректной строки
    """
    if not isinstance(value, str) or ":" not in value:
        return None
    hours, _, minutes = value.strip().partition(":")
    try:
        h, m = int(hours), int(minutes)
    except ValueError:
        return None
    if h < 0 or h > 23 or m < 0 or m > 59:
        return None
    return h * 60 + m


def minutes_to_time(minutes: int) -> str:
    """Минуты (в т.ч. > 1440) -> "HH:MM" по модулю суток"""
    safe = int(minutes) % MINUTES_PER_DAY
    return f"{safe // 60:02d}:{safe % 60:02d}"


def _parse_entry(entry) -> Optional[OpeningHours]:
    if isinstance(entry, OpeningHours):
        return entry
    if not isinstance(entry, dict):
        return None
    if not isinstance(entry.get("openTime", entry.get("open_time")), str):
        return None
    if not isinstance(entry.get("closeTime", entry.get("close_time")), str):
        return None
    try:
        return OpeningHours.model_validate(entry)
    except ValidationError:
        return None


def normalize_opening_hours(raw) -> List[OpeningHours]:
    """
    Привести расписание к 7 корректным дням
    Принимает None, JSON-строку, список dict или OpeningHours.
    Если это не ровно 7 корректных записей - возвращает дефолтное расписание.
    Никогда не выбрасывает исключений.
    """
    value = raw
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            logger.warning("Расписание не является корректным JSON, используем дефолтное")
            return default_opening_hours()

    if not isinstance(value, (list, tuple)) or len(value) != 7:
        if value is not None:
            logger.warning(f"Расписание должно содержать 7 дней, получено: {value!r:.80}")
        return default_opening_hours()

    days = [_parse_entry(entry) for entry in value]
    if any(day is None for day in days):
        logger.warning("Расписание содержит некорректные дни, используем дефолтное")
        return default_opening_hours()

    return days


def open_range_for_day(day: Union[date, datetime], opening_hours: List[OpeningHours]) -> Optional[OpenRange]:
    """Рабочий интервал для даты (по её дню недели)"""
    return open_range_for_weekday(weekday_index(day), opening_hours)


def open_range_for_weekday(index: int, opening_hours: List[OpeningHours]) -> Optional[OpenRange]:
    """
    Рабочий интервал для дня недели (понедельник = 0)
    None - если день закрыт или время не распознано.
    Если закрытие <= открытия, к концу прибавляются сутки.
    """
    if index < 0 or index >= len(opening_hours):
        return None
    info = opening_hours[index]
    if not info or not info.open:
        return None

    start = parse_time_minutes(info.open_time)
    end = parse_time_minutes(info.close_time)
    if start is None or end is None:
        return None

    if end <= start:
        end += MINUTES_PER_DAY
    return OpenRange(start=start, end=end)


def opening_minutes_for_weekday(opening_hours: List[OpeningHours], weekday: int) -> Optional[int]:
    """Минута открытия для дня недели (None если выходной)"""
    if weekday < 0 or weekday >= len(opening_hours):
        return None
    info = opening_hours[weekday]
    if not info.open:
        return None
    return parse_time_minutes(info.open_time)


def week_schedule(opening_hours: List[OpeningHours]) -> List[dict]:
    """
    Недельное расписание для отображения
    """
    days = normalize_opening_hours(opening_hours)
    result = []
    for day_num, info in enumerate(days):
        result.append({
            "day_of_week": day_num,
            "day_name": DAY_NAMES[day_num],
            "start_time": info.open_time,
            "end_time": info.close_time,
            "is_open": info.open,
            "open_range": open_range_for_weekday(day_num, days),
        })
    return result
