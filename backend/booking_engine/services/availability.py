"""
Проверка доступности комнаты на интервал времени
"""
import logging
from collections import defaultdict
from datetime import date, datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from ..schemas import OpeningHours, StudioContext, RoomId
from .blocking import blocking_entries
from .business_day import business_day_start, day_start, minutes_since, reference_timezone, resolve_timezone, to_local
from .opening_hours import open_range_for_day

logger = logging.getLogger(__name__)


def as_local_instant(value, tz: Optional[tzinfo] = None) -> datetime:
    """datetime -> локальное время, date -> локальная полночь"""
    if isinstance(value, datetime):
        return to_local(value, tz)
    if isinstance(value, date):
        return day_start(value, tz)
    raise TypeError(f"Ожидается date или datetime, получено {type(value).__name__}")


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Пересечение полуоткрытых интервалов [start, end)"""
    return start_a < end_b and end_a > start_b


def is_within_opening_hours(
    start_at: datetime,
    end_at: datetime,
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    tz: Optional[tzinfo] = None
) -> bool:
    """
    Целиком ли интервал попадает в рабочие часы бизнес-дня начала
    """
    tz = reference_timezone(tz, start_at, end_at)
    start_at = to_local(start_at, tz)
    end_at = to_local(end_at, tz)
    if end_at <= start_at:
        return False

    business_start = business_day_start(start_at, cutoff_hour)
    open_range = open_range_for_day(business_start, opening_hours)
    if not open_range:
        return False

    start_minutes = minutes_since(business_start, start_at)
    end_minutes = minutes_since(business_start, end_at)
    return start_minutes >= open_range.start and end_minutes <= open_range.end


def has_conflict(start_at: datetime, end_at: datetime, intervals: Iterable, tz: Optional[tzinfo] = None) -> bool:
    """
    Пересекается ли интервал хотя бы с одной блокировкой
    Блокировки нулевой/отрицательной длины игнорируются
    """
    intervals = list(intervals)
    tz = reference_timezone(tz, start_at, end_at, *[interval.start_at for interval in intervals])
    start_at = to_local(start_at, tz)
    end_at = to_local(end_at, tz)
    for interval in intervals:
        block_start = to_local(interval.start_at, tz)
        block_end = to_local(interval.end_at, tz)
        if block_end <= block_start:
            continue
        if overlaps(block_start, block_end, start_at, end_at):
            return True
    return False


def is_available(
    start_at: datetime,
    end_at: datetime,
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    blocking_intervals: Iterable,
    tz: Optional[tzinfo] = None
) -> bool:
    """
    Можно ли забронировать комнату на [start_at, end_at)
    1. интервал в рабочих часах бизнес-дня
    2. нет пересечений с блокирующими интервалами комнаты
    Пустой или перевёрнутый интервал - недоступен.
    """
    blocking_intervals = list(blocking_intervals)
    tz = reference_timezone(tz, start_at, end_at, *[interval.start_at for interval in blocking_intervals])
    if to_local(end_at, tz) <= to_local(start_at, tz):
        return False

    if not is_within_opening_hours(start_at, end_at, opening_hours, cutoff_hour, tz):
        return False

    if has_conflict(start_at, end_at, blocking_intervals, tz):
        return False

    return True


def group_blocks_by_room(blocks: Iterable) -> Dict[RoomId, list]:
    """Сгруппировать блокирующие записи по комнатам"""
    by_room = defaultdict(list)
    for block in blocking_entries(blocks):
        by_room[block.room_id].append(block)
    return by_room


def available_room_ids(
    room_ids: Sequence[RoomId],
    blocks: Iterable,
    start_at: datetime,
    end_at: datetime,
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    tz: Optional[tzinfo] = None
) -> List[RoomId]:
    """
    Свободные комнаты студии на интервал
    Блоки загружаются один раз на студию и делятся по комнатам
    """
    blocks = list(blocks)
    tz = reference_timezone(tz, start_at, end_at, *[block.start_at for block in blocks])
    if not is_within_opening_hours(start_at, end_at, opening_hours, cutoff_hour, tz):
        return []

    by_room = group_blocks_by_room(blocks)
    return [
        room_id for room_id in room_ids
        if is_available(start_at, end_at, opening_hours, cutoff_hour, by_room.get(room_id, []), tz)
    ]


def find_available_studios(
    studios: Iterable[StudioContext],
    blocks: Iterable,
    start_at: datetime,
    end_at: datetime,
    tz: Optional[tzinfo] = None
) -> List[RoomId]:
    """
    Поиск студий, где хотя бы одна комната свободна на интервал
    tz применяется к студиям без собственного часового пояса
    """
    blocks = list(blocks)
    result = []
    for studio in studios:
        studio_tz = resolve_timezone(studio.timezone) or tz
        free = available_room_ids(
            studio.room_ids,
            blocks,
            start_at,
            end_at,
            studio.opening_hours,
            studio.cutoff_hour,
            studio_tz
        )
        if free:
            result.append(studio.id)

    logger.debug(f"Свободные студии на {start_at}-{end_at}: {len(result)}")
    return result
