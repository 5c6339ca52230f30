"""
Бизнес-день: ночные часы до cutoff относятся к предыдущей дате
"""
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CUTOFF_HOUR = 4


def resolve_timezone(value: Union[str, tzinfo, None]) -> Optional[tzinfo]:
    """
    Строка "Europe/Istanbul" -> ZoneInfo
    Неизвестная зона - None (расчёт в "наивном" локальном времени)
    """
    if value is None or isinstance(value, tzinfo):
        return value
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Неизвестный часовой пояс: {value!r}")
        return None


def to_local(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Перевести момент в локальное время студии
    Aware-моменты конвертируются в tz, naive считаются уже локальными.
    """
    if tz is None:
        return instant
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def reference_timezone(tz: Optional[tzinfo], *instants) -> Optional[tzinfo]:
    """
    Часовой пояс для сравнения моментов
    tz, если задан; иначе пояс первого aware-момента, чтобы naive и aware
    (и полночь date) приводились к одному поясу. Всё naive - None.
    """
    if tz is not None:
        return tz
    for instant in instants:
        if isinstance(instant, datetime) and instant.tzinfo is not None:
            return instant.tzinfo
    return None


def day_start(day: Union[date, datetime], tz: Optional[tzinfo] = None) -> datetime:
    """Полночь календарной даты"""
    if isinstance(day, datetime):
        local = to_local(day, tz)
        return datetime.combine(local.date(), time(), tzinfo=local.tzinfo)
    return datetime.combine(day, time(), tzinfo=tz)


def normalize_cutoff_hour(value) -> int:
    """Час смены бизнес-дня: 0-23, по умолчанию 4"""
    if value is None or isinstance(value, bool):
        return DEFAULT_CUTOFF_HOUR
    try:
        hour = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Некорректный час смены дня: {value!r}, используем {DEFAULT_CUTOFF_HOUR}")
        return DEFAULT_CUTOFF_HOUR
    return min(23, max(0, hour))


def business_date(instant: datetime, cutoff_hour: int, tz: Optional[tzinfo] = None) -> date:
    """
    Дата бизнес-дня для момента
    Если локальный час < cutoff_hour - это ещё предыдущий день
    """
    local = to_local(instant, tz)
    current = local.date()
    if local.hour < cutoff_hour:
        current -= timedelta(days=1)
    return current


def business_day_start(instant: datetime, cutoff_hour: int, tz: Optional[tzinfo] = None) -> datetime:
    """
    Полночь даты бизнес-дня, к которому относится момент
    Пример: cutoff=4, 01:30 5-го числа -> 00:00 4-го числа
    """
    local = to_local(instant, tz)
    return datetime.combine(business_date(local, cutoff_hour), time(), tzinfo=local.tzinfo)


def minutes_between(start: datetime, end: datetime) -> float:
    """Длительность в минутах (может быть отрицательной)"""
    return (end - start).total_seconds() / 60


def minutes_since(base: datetime, instant: datetime) -> float:
    """Минуты от начала бизнес-дня до момента"""
    return minutes_between(base, instant)


def at_minutes(base: datetime, minutes: float) -> datetime:
    """Момент base + minutes"""
    return base + timedelta(minutes=minutes)
