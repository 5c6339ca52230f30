"""
Загрузка (доля занятого времени) и оценка выручки студии
Все функции чистые: на вход - уже загруженные данные, на выход - числа.
"""
import logging
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Union

from ..schemas import (
    CalendarBlock,
    CalendarSummary,
    HappyHourSlot,
    HappyHourTemplate,
    MonthComparison,
    OpeningHours,
    ReservationStats,
    RoomId,
    RoomPricing,
    RoomStats,
    StudioContext,
)
from .availability import as_local_instant
from .blocking import blocking_entries
from .business_day import (
    business_day_start,
    minutes_between,
    minutes_since,
    reference_timezone,
    resolve_timezone,
    to_local,
)
from .happy_hour import build_templates, happy_minutes_for_interval
from .opening_hours import open_range_for_day
from .periods import current_time, month_key, month_range, next_month, parse_month_key, week_range
from .pricing import effective_rate, happy_hour_rate

logger = logging.getLogger(__name__)

Instant = Union[date, datetime]


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ==================== Occupancy ====================

def total_open_minutes(
    opening_hours: List[OpeningHours],
    range_start: Instant,
    range_end: Instant,
    room_count: int = 1,
    tz: Optional[tzinfo] = None
) -> int:
    """
    Суммарное рабочее время дней внутри [range_start, range_end)
    Для всей студии умножается на количество комнат
    """
    tz = reference_timezone(tz, range_start, range_end)
    cursor = as_local_instant(range_start, tz)
    end = as_local_instant(range_end, tz)

    minutes = 0
    while cursor < end:
        open_range = open_range_for_day(cursor, opening_hours)
        if open_range:
            minutes += open_range.minutes
        cursor += timedelta(days=1)
    return minutes * room_count


def block_open_minutes(
    block,
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    range_start: Instant,
    range_end: Instant,
    tz: Optional[tzinfo] = None
) -> float:
    """
    Минуты блока внутри диапазона и внутри рабочих часов его бизнес-дня
    """
    tz = reference_timezone(tz, block.start_at, block.end_at, range_start, range_end)
    range_start = as_local_instant(range_start, tz)
    range_end = as_local_instant(range_end, tz)
    clamped_start = max(to_local(block.start_at, tz), range_start)
    clamped_end = min(to_local(block.end_at, tz), range_end)
    if clamped_end <= clamped_start:
        return 0.0

    business_start = business_day_start(clamped_start, cutoff_hour)
    open_range = open_range_for_day(business_start, opening_hours)
    if not open_range:
        return 0.0

    open_start = business_start + timedelta(minutes=open_range.start)
    open_end = business_start + timedelta(minutes=open_range.end)
    final_start = max(clamped_start, open_start)
    final_end = min(clamped_end, open_end)
    if final_end <= final_start:
        return 0.0
    return minutes_between(final_start, final_end)


def occupied_minutes(
    blocks: Iterable,
    opening_hours: List[OpeningHours],
    cutoff_hour: int,
    range_start: Instant,
    range_end: Instant,
    tz: Optional[tzinfo] = None
) -> float:
    """
    Занятые минуты в [range_start, range_end)
    Учитываются только блокирующие записи и только в рабочие часы
    """
    blocks = blocking_entries(blocks)
    tz = reference_timezone(tz, range_start, range_end, *[block.start_at for block in blocks])
    start = as_local_instant(range_start, tz)
    end = as_local_instant(range_end, tz)
    return sum(
        block_open_minutes(block, opening_hours, cutoff_hour, start, end, tz)
        for block in blocks
    )


def occupancy_percent(occupied: float, open_minutes: float) -> float:
    """
    Процент загрузки с одним знаком после запятой (округление half-up)
    0, если рабочего времени нет
    """
    if not open_minutes or open_minutes <= 0:
        return 0.0
    permille = (_to_decimal(occupied) / _to_decimal(open_minutes) * 1000).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return float(permille / 10)


# ==================== Revenue ====================

def block_revenue(
    block,
    templates: Iterable[HappyHourTemplate],
    rate: Decimal,
    happy_rate: Optional[Decimal] = None,
    cutoff_hour: int = 4,
    range_start: Optional[Instant] = None,
    range_end: Optional[Instant] = None,
    tz: Optional[tzinfo] = None
) -> Decimal:
    """
    Выручка блока: минуты happy hour по скидочной цене, остальное по обычной
    Блок обрезается по [range_start, range_end), если они заданы.
    Минуты happy hour не превышают длительность блока.
    """
    rate = _to_decimal(rate or 0)
    happy_rate = rate if happy_rate is None else _to_decimal(happy_rate)
    tz = reference_timezone(tz, block.start_at, block.end_at, range_start, range_end)

    start = to_local(block.start_at, tz)
    end = to_local(block.end_at, tz)
    if range_start is not None:
        start = max(start, as_local_instant(range_start, tz))
    if range_end is not None:
        end = min(end, as_local_instant(range_end, tz))
    if end <= start:
        return Decimal("0")

    business_start = business_day_start(start, cutoff_hour)
    start_minutes = minutes_since(business_start, start)
    end_minutes = minutes_since(business_start, end)
    total_minutes = max(0.0, end_minutes - start_minutes)

    happy_minutes = happy_minutes_for_interval(templates, business_start.weekday(), start_minutes, end_minutes)
    happy_minutes = min(happy_minutes, total_minutes)
    normal_minutes = max(0.0, total_minutes - happy_minutes)

    return (
        _to_decimal(happy_minutes) / 60 * happy_rate
        + _to_decimal(normal_minutes) / 60 * rate
    )


def range_revenue(
    blocks: Iterable,
    templates_by_room: Dict[RoomId, List[HappyHourTemplate]],
    pricing_by_room: Dict[RoomId, RoomPricing],
    cutoff_hour: int,
    range_start: Instant,
    range_end: Instant,
    tz: Optional[tzinfo] = None
) -> Decimal:
    """
    Выручка всех блокирующих записей в диапазоне
    """
    total = Decimal("0")
    for block in blocking_entries(blocks):
        pricing = pricing_by_room.get(block.room_id)
        total += block_revenue(
            block,
            templates_by_room.get(block.room_id, []),
            effective_rate(pricing),
            happy_hour_rate(pricing),
            cutoff_hour,
            range_start,
            range_end,
            tz
        )
    return total


# ==================== Studio statistics ====================

def studio_occupancy(
    context: StudioContext,
    blocks: Iterable,
    range_start: Instant,
    range_end: Instant,
    tz: Optional[tzinfo] = None
) -> float:
    """Загрузка всей студии за диапазон, %"""
    open_minutes = total_open_minutes(
        context.opening_hours, range_start, range_end, len(context.rooms), tz
    )
    occupied = occupied_minutes(blocks, context.opening_hours, context.cutoff_hour, range_start, range_end, tz)
    return occupancy_percent(occupied, open_minutes)


def room_stats(
    context: StudioContext,
    blocks: Iterable[CalendarBlock],
    templates_by_room: Dict[RoomId, List[HappyHourTemplate]],
    week: tuple,
    month: tuple,
    tz: Optional[tzinfo] = None
) -> List[RoomStats]:
    """Загрузка и выручка по каждой комнате"""
    blocks = list(blocks)
    pricing_by_room = {room.id: room.pricing for room in context.rooms}
    result = []
    for room in context.rooms:
        room_blocks = [block for block in blocks if block.room_id == room.id]
        result.append(RoomStats(
            room_id=room.id,
            name=room.name or "Oda",
            week_occupancy=studio_occupancy(context.model_copy(update={"rooms": [room]}), room_blocks, *week, tz),
            month_occupancy=studio_occupancy(context.model_copy(update={"rooms": [room]}), room_blocks, *month, tz),
            month_revenue=range_revenue(
                room_blocks, templates_by_room, pricing_by_room, context.cutoff_hour, *month, tz
            ),
            price=effective_rate(room.pricing),
        ))
    return result


def calendar_summary(
    context: StudioContext,
    blocks: Iterable[CalendarBlock],
    happy_hour_slots: Iterable[HappyHourSlot],
    now: Optional[datetime] = None
) -> CalendarSummary:
    """
    Сводка для панели: загрузка недели и месяца, выручка месяца
    """
    tz = resolve_timezone(context.timezone)
    local_now = current_time(tz, now)
    blocks = list(blocks)
    templates = build_templates(happy_hour_slots, context.opening_hours, context.cutoff_hour, tz)
    pricing_by_room = {room.id: room.pricing for room in context.rooms}
    week = week_range(local_now)
    month = month_range(local_now)

    return CalendarSummary(
        week_occupancy=studio_occupancy(context, blocks, *week, tz),
        month_occupancy=studio_occupancy(context, blocks, *month, tz),
        month_revenue=range_revenue(blocks, templates, pricing_by_room, context.cutoff_hour, *month, tz),
    )


def reservation_stats(
    context: StudioContext,
    blocks: Iterable[CalendarBlock],
    happy_hour_slots: Iterable[HappyHourSlot],
    now: Optional[datetime] = None,
    compare_a: Optional[str] = None,
    compare_b: Optional[str] = None
) -> ReservationStats:
    """
    Статистика бронирований студии
    Неделя и месяц от now, два произвольных месяца для сравнения ("YYYY-MM"),
    разбивка по комнатам. Некорректный ключ месяца - текущий месяц.
    """
    tz = resolve_timezone(context.timezone)
    local_now = current_time(tz, now)
    blocks = list(blocks)
    templates = build_templates(happy_hour_slots, context.opening_hours, context.cutoff_hour, tz)
    pricing_by_room = {room.id: room.pricing for room in context.rooms}

    week = week_range(local_now)
    month = month_range(local_now)

    def compare(key: Optional[str]) -> MonthComparison:
        start = parse_month_key(key, local_now)
        end = next_month(start)
        return MonthComparison(
            key=month_key(start),
            occupancy=studio_occupancy(context, blocks, start, end, tz),
            revenue=range_revenue(blocks, templates, pricing_by_room, context.cutoff_hour, start, end, tz),
        )

    stats = ReservationStats(
        week_occupancy=studio_occupancy(context, blocks, *week, tz),
        month_occupancy=studio_occupancy(context, blocks, *month, tz),
        month_revenue=range_revenue(blocks, templates, pricing_by_room, context.cutoff_hour, *month, tz),
        compare_a=compare(compare_a),
        compare_b=compare(compare_b),
        rooms=room_stats(context, blocks, templates, week, month, tz),
    )
    logger.debug(
        f"Статистика студии {context.id}: неделя {stats.week_occupancy}%, "
        f"месяц {stats.month_occupancy}%, выручка {stats.month_revenue}"
    )
    return stats
