"""
Happy hour: шаблоны скидок по дням недели
Владелец рисует слот на примерной неделе, а скидка повторяется каждую неделю.
"""
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Union

from ..schemas import HappyHourDay, HappyHourInstance, HappyHourSlot, HappyHourTemplate, OpeningHours, RoomId
from .availability import as_local_instant, overlaps
from .business_day import at_minutes, business_day_start, day_start, minutes_since, reference_timezone, to_local
from .opening_hours import (
    MINUTES_PER_DAY,
    minutes_to_time,
    opening_minutes_for_weekday,
    parse_time_minutes,
)

logger = logging.getLogger(__name__)

FALLBACK_END_TIME = "22:00"


def slot_template(slot: HappyHourSlot, cutoff_hour: int, tz: Optional[tzinfo] = None) -> HappyHourTemplate:
    """
    Сырой слот -> шаблон относительно начала его бизнес-дня
    Если конец <= начала, окно переходит через полночь (+1440)
    """
    tz = reference_timezone(tz, slot.start_at, slot.end_at)
    start_at = to_local(slot.start_at, tz)
    end_at = to_local(slot.end_at, tz)
    business_start = business_day_start(start_at, cutoff_hour)

    start_minutes = round(minutes_since(business_start, start_at))
    end_minutes = round(minutes_since(business_start, end_at))
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY

    return HappyHourTemplate(
        weekday=business_start.weekday(),
        start_minutes=start_minutes,
        end_minutes=end_minutes
    )


def build_templates(
    raw_slots: Iterable[HappyHourSlot],
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    tz: Optional[tzinfo] = None,
    opening_anchored: bool = False
) -> Dict[RoomId, List[HappyHourTemplate]]:
    """
    Построить шаблоны happy hour по комнатам
    Слоты с одинаковыми (комната, день недели, начало) сливаются,
    остаётся самое длинное окно.
    opening_anchored=True - учитывать только слоты, начинающиеся
    ровно в час открытия (недельный редактор "скидка с открытия до ...").
    """
    merged: Dict[RoomId, Dict[tuple, HappyHourTemplate]] = {}

    for slot in raw_slots:
        template = slot_template(slot, cutoff_hour, tz)

        if opening_anchored:
            open_minutes = opening_minutes_for_weekday(opening_hours, template.weekday)
            if open_minutes is None or template.start_minutes != open_minutes:
                continue

        by_key = merged.setdefault(slot.room_id, {})
        key = (template.weekday, template.start_minutes)
        existing = by_key.get(key)
        if existing is None or template.end_minutes > existing.end_minutes:
            by_key[key] = template

    result = {room_id: list(by_key.values()) for room_id, by_key in merged.items()}
    logger.debug(f"Шаблоны happy hour: {sum(len(items) for items in result.values())} для {len(result)} комнат")
    return result


def _days_between(range_start: datetime, range_end: datetime):
    current = range_start.date()
    last = range_end.date()
    while current <= last:
        yield current
        current += timedelta(days=1)


def expand_templates(
    templates_by_room: Dict[RoomId, List[HappyHourTemplate]],
    range_start: Union[date, datetime],
    range_end: Union[date, datetime],
    tz: Optional[tzinfo] = None,
    clip: bool = False
) -> Dict[RoomId, List[HappyHourInstance]]:
    """
    Развернуть шаблоны в конкретные окна для каждого дня [range_start, range_end]
    clip=True - оставить только окна, пересекающие [range_start, range_end)
    """
    tz = reference_timezone(tz, range_start, range_end)
    start = as_local_instant(range_start, tz)
    end = as_local_instant(range_end, tz)

    result: Dict[RoomId, List[HappyHourInstance]] = {}
    for room_id, templates in templates_by_room.items():
        instances = []
        for current in _days_between(start, end):
            base = day_start(current, start.tzinfo)
            for template in templates:
                if template.weekday != current.weekday():
                    continue
                slot_start = at_minutes(base, template.start_minutes)
                slot_end = at_minutes(base, template.end_minutes)
                if clip and not overlaps(slot_start, slot_end, start, end):
                    continue
                instances.append(HappyHourInstance(room_id=room_id, start_at=slot_start, end_at=slot_end))
        result[room_id] = instances
    return result


def build_happy_hour_days(
    raw_slots: Iterable[HappyHourSlot],
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    tz: Optional[tzinfo] = None
) -> List[HappyHourDay]:
    """
    Недельная настройка happy hour (7 дней)
    День включён, если есть слот от открытия; end_time - самое позднее окончание.
    Для выключенного дня end_time = время закрытия (или 22:00).
    """
    latest_end: Dict[int, int] = {}
    for slot in raw_slots:
        template = slot_template(slot, cutoff_hour, tz)
        open_minutes = opening_minutes_for_weekday(opening_hours, template.weekday)
        if open_minutes is None or template.start_minutes != open_minutes:
            continue
        current = latest_end.get(template.weekday)
        if current is None or template.end_minutes > current:
            latest_end[template.weekday] = template.end_minutes

    days = []
    for weekday in range(7):
        info = opening_hours[weekday] if weekday < len(opening_hours) else None
        open_minutes = opening_minutes_for_weekday(opening_hours, weekday)
        end_minutes = latest_end.get(weekday)
        enabled = open_minutes is not None and end_minutes is not None
        if enabled:
            end_time = minutes_to_time(end_minutes)
        else:
            end_time = info.close_time if info and info.close_time else FALLBACK_END_TIME
        days.append(HappyHourDay(weekday=weekday, enabled=enabled, end_time=end_time))
    return days


def schedule_to_slots(
    room_id: RoomId,
    days: Iterable[HappyHourDay],
    opening_hours: List[OpeningHours],
    week_start: Union[date, datetime],
    tz: Optional[tzinfo] = None
) -> List[HappyHourSlot]:
    """
    Сохранённая недельная настройка -> сырые слоты на неделю week_start
    Слот начинается в час открытия дня и длится до end_time
    (end_time <= открытия - до следующего дня).
    """
    monday = day_start(week_start, tz)
    slots = []
    for day in days:
        if not day.enabled:
            continue
        info = opening_hours[day.weekday] if day.weekday < len(opening_hours) else None
        open_minutes = parse_time_minutes(info.open_time if info else "09:00") or 0
        end_minutes = parse_time_minutes(day.end_time) or 0
        if end_minutes <= open_minutes:
            end_minutes += MINUTES_PER_DAY

        base = monday + timedelta(days=day.weekday)
        slots.append(HappyHourSlot(
            room_id=room_id,
            start_at=at_minutes(base, open_minutes),
            end_at=at_minutes(base, end_minutes)
        ))
    return slots


def find_equivalent_slots(
    slot: HappyHourSlot,
    existing: Iterable[HappyHourSlot],
    cutoff_hour: int,
    tz: Optional[tzinfo] = None
) -> List[HappyHourSlot]:
    """
    Слоты той же комнаты с тем же днём недели, началом и длительностью
    (повторное нажатие на слот в редакторе выключает его)
    """
    target = slot_template(slot, cutoff_hour, tz)
    matches = []
    for candidate in existing:
        if candidate.room_id != slot.room_id:
            continue
        template = slot_template(candidate, cutoff_hour, tz)
        if (
            template.weekday == target.weekday
            and template.start_minutes == target.start_minutes
            and template.end_minutes - template.start_minutes == target.end_minutes - target.start_minutes
        ):
            matches.append(candidate)
    return matches


def happy_minutes_for_interval(
    templates: Iterable[HappyHourTemplate],
    weekday: int,
    start_minutes: float,
    end_minutes: float
) -> float:
    """
    Сколько минут интервала бизнес-дня попадает в окна happy hour
    Пересечения с несколькими окнами суммируются
    """
    total = 0.0
    for template in templates:
        if template.weekday != weekday:
            continue
        overlap_start = max(start_minutes, template.start_minutes)
        overlap_end = min(end_minutes, template.end_minutes)
        if overlap_end > overlap_start:
            total += overlap_end - overlap_start
    return total
