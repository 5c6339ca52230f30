"""
Периоды для статистики: неделя, месяц, сравнение месяцев
Текущее время всегда передаётся явно
"""
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple

from .business_day import day_start, to_local

MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


def current_time(tz: Optional[tzinfo] = None, now: Optional[datetime] = None) -> datetime:
    """
    "Сейчас" в часовом поясе студии
    now можно передать явно (тесты, пересчёт на дату)
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return to_local(now, tz)


def start_of_week(value: datetime) -> datetime:
    """Понедельник 00:00 недели, в которую попадает value"""
    monday = value.date() - timedelta(days=value.weekday())
    return day_start(monday, value.tzinfo)


def week_range(value: datetime) -> Tuple[datetime, datetime]:
    """[понедельник, следующий понедельник)"""
    start = start_of_week(value)
    return start, start + timedelta(days=7)


def start_of_month(value: datetime) -> datetime:
    """1-е число месяца 00:00"""
    return day_start(value.date().replace(day=1), value.tzinfo)


def next_month(value: datetime) -> datetime:
    """1-е число следующего месяца 00:00"""
    first = value.date().replace(day=1)
    if first.month == 12:
        following = first.replace(year=first.year + 1, month=1)
    else:
        following = first.replace(month=first.month + 1)
    return day_start(following, value.tzinfo)


def month_range(value: datetime) -> Tuple[datetime, datetime]:
    """[1-е число, 1-е число следующего месяца)"""
    return start_of_month(value), next_month(value)


def month_key(value: date) -> str:
    """Ключ месяца "YYYY-MM" """
    return f"{value.year:04d}-{value.month:02d}"


def parse_month_key(value: Optional[str], fallback: datetime) -> datetime:
    """
    "YYYY-MM" -> начало месяца
    Некорректный ключ - начало месяца fallback
    """
    if not value:
        return start_of_month(fallback)
    match = MONTH_KEY_RE.match(value.strip())
    if not match:
        return start_of_month(fallback)
    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12 or year < 1:
        return start_of_month(fallback)
    return day_start(date(year, month, 1), fallback.tzinfo)


def shift_months(value: datetime, offset: int) -> datetime:
    """Начало месяца, сдвинутого на offset месяцев"""
    index = value.year * 12 + (value.month - 1) + offset
    return day_start(date(index // 12, index % 12 + 1, 1), value.tzinfo)


def month_options(now: datetime, span: int = 12) -> List[str]:
    """Ключи месяцев от now-span до now+span (для выбора в сравнении)"""
    return [month_key(shift_months(now, offset)) for offset in range(-span, span + 1)]
