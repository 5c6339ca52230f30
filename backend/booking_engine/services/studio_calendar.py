"""
Сервис загрузки данных календаря студии
Достаёт из БД часы работы, блоки, happy hour и цены и передаёт их в чистые расчёты
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..exceptions import RoomNotFound, StudioNotFound
from ..models.studio import Studio
from ..models.room import Room
from ..models.calendar_block import StudioCalendarBlock
from ..models.happy_hour_slot import StudioHappyHourSlot
from ..schemas import (
    CalendarBlock,
    CalendarSummary,
    HappyHourDay,
    HappyHourInstance,
    HappyHourSlot,
    ReservationStats,
    RoomContext,
    RoomPricing,
    StudioContext,
)
from . import occupancy
from .availability import find_available_studios, is_available
from .blocking import blocking_entries
from .business_day import normalize_cutoff_hour, resolve_timezone
from .happy_hour import build_happy_hour_days, build_templates, expand_templates
from .opening_hours import normalize_opening_hours
from .periods import current_time, month_options, month_range, next_month, parse_month_key, week_range

settings = get_settings()
logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite отдаёт naive datetime - в БД время хранится в UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StudioCalendarService:
    """Сервис расчётов по календарю студии"""

    def __init__(self, db: Session):
        self.db = db
        self.default_cutoff = normalize_cutoff_hour(settings.DEFAULT_DAY_CUTOFF_HOUR)
        self.default_timezone = settings.TIMEZONE

    # ==================== Загрузка ====================

    def get_studio(self, studio_id: int) -> Studio:
        """Студия по id или StudioNotFound"""
        studio = self.db.query(Studio).filter(Studio.id == studio_id).first()
        if not studio:
            raise StudioNotFound(studio_id)
        return studio

    def get_room(self, room_id: int, studio_id: Optional[int] = None) -> Room:
        """Комната по id (опционально - только в этой студии)"""
        query = self.db.query(Room).filter(Room.id == room_id)
        if studio_id is not None:
            query = query.filter(Room.studio_id == studio_id)
        room = query.first()
        if not room:
            raise RoomNotFound(room_id, studio_id)
        return room

    def build_context(self, studio: Studio) -> StudioContext:
        """
        Собрать контекст студии для расчётов
        Недельные часы из настроек календаря важнее часов студии
        """
        calendar_settings = studio.calendar_settings
        weekly_hours = calendar_settings.weekly_hours if calendar_settings else None
        opening_hours = normalize_opening_hours(
            weekly_hours if weekly_hours is not None else studio.opening_hours
        )

        cutoff = self.default_cutoff
        if calendar_settings and calendar_settings.day_cutoff_hour is not None:
            cutoff = normalize_cutoff_hour(calendar_settings.day_cutoff_hour)

        rooms = [
            RoomContext(
                id=room.id,
                name=room.name,
                pricing=RoomPricing(
                    model=room.pricing_model,
                    flat_rate=room.flat_rate,
                    daily_rate=room.daily_rate,
                    hourly_rate=room.hourly_rate,
                    min_rate=room.min_rate,
                    happy_hour_rate=room.happy_hour_rate
                )
            )
            for room in studio.rooms
        ]

        return StudioContext(
            id=studio.id,
            opening_hours=opening_hours,
            cutoff_hour=cutoff,
            timezone=studio.timezone or self.default_timezone,
            rooms=rooms
        )

    def load_context(self, studio_id: int) -> StudioContext:
        """Контекст студии по id"""
        return self.build_context(self.get_studio(studio_id))

    def get_blocks(
        self,
        window_start: datetime,
        window_end: datetime,
        studio_id: Optional[int] = None,
        room_ids: Optional[List[int]] = None
    ) -> List[CalendarBlock]:
        """
        Записи календаря, пересекающие окно [window_start, window_end)
        """
        window_start = _as_utc(window_start).astimezone(timezone.utc)
        window_end = _as_utc(window_end).astimezone(timezone.utc)
        query = self.db.query(StudioCalendarBlock).filter(
            StudioCalendarBlock.start_at < window_end,
            StudioCalendarBlock.end_at > window_start
        )
        if studio_id is not None:
            query = query.filter(StudioCalendarBlock.studio_id == studio_id)
        if room_ids is not None:
            if not room_ids:
                return []
            query = query.filter(StudioCalendarBlock.room_id.in_(room_ids))

        return [
            CalendarBlock(
                room_id=row.room_id,
                start_at=_as_utc(row.start_at),
                end_at=_as_utc(row.end_at),
                type=row.type,
                status=row.status
            )
            for row in query.all()
        ]

    def get_happy_hour_slots(self, studio_id: int, room_id: Optional[int] = None) -> List[HappyHourSlot]:
        """Сырые слоты happy hour студии (или одной комнаты)"""
        query = self.db.query(StudioHappyHourSlot).filter(StudioHappyHourSlot.studio_id == studio_id)
        if room_id is not None:
            query = query.filter(StudioHappyHourSlot.room_id == room_id)

        return [
            HappyHourSlot(room_id=row.room_id, start_at=_as_utc(row.start_at), end_at=_as_utc(row.end_at))
            for row in query.order_by(StudioHappyHourSlot.start_at).all()
        ]

    # ==================== Доступность ====================

    def check_room_availability(self, room_id: int, start_at: datetime, end_at: datetime) -> bool:
        """
        Проверить, свободна ли комната на интервал
        Naive datetime считаются UTC
        """
        room = self.get_room(room_id)
        context = self.build_context(room.studio)
        tz = resolve_timezone(context.timezone)

        start_utc = _as_utc(start_at)
        end_utc = _as_utc(end_at)
        blocks = blocking_entries(self.get_blocks(start_utc, end_utc, room_ids=[room.id]))

        return is_available(start_utc, end_utc, context.opening_hours, context.cutoff_hour, blocks, tz)

    def search_available_studios(
        self,
        start_at: datetime,
        duration_minutes: Optional[int] = None,
        city: Optional[str] = None,
        district: Optional[str] = None
    ) -> List[int]:
        """
        Поиск активных студий со свободной комнатой на [start_at, start_at + duration)
        """
        if not duration_minutes or duration_minutes <= 0:
            duration_minutes = settings.DEFAULT_SESSION_MINUTES

        start_utc = _as_utc(start_at)
        end_utc = start_utc + timedelta(minutes=duration_minutes)

        query = self.db.query(Studio).filter(Studio.is_active.is_(True))
        if city:
            query = query.filter(Studio.city == city)
        if district:
            query = query.filter(Studio.district == district)

        contexts = [self.build_context(studio) for studio in query.order_by(Studio.id).all()]
        room_ids = [room_id for context in contexts for room_id in context.room_ids]
        blocks = self.get_blocks(start_utc, end_utc, room_ids=room_ids)

        return find_available_studios(contexts, blocks, start_utc, end_utc)

    # ==================== Happy hour ====================

    def happy_hour_preview(self, room_id: int, range_start: datetime, range_end: datetime) -> List[HappyHourInstance]:
        """
        Окна happy hour комнаты в календаре на период (только чтение)
        """
        room = self.get_room(room_id)
        context = self.build_context(room.studio)
        tz = resolve_timezone(context.timezone)

        slots = self.get_happy_hour_slots(room.studio_id, room.id)
        templates = build_templates(slots, context.opening_hours, context.cutoff_hour, tz)
        expanded = expand_templates(templates, _as_utc(range_start), _as_utc(range_end), tz, clip=True)
        return expanded.get(room.id, [])

    def happy_hour_days(self, room_id: int) -> List[HappyHourDay]:
        """Недельная настройка happy hour комнаты"""
        room = self.get_room(room_id)
        context = self.build_context(room.studio)
        slots = self.get_happy_hour_slots(room.studio_id, room.id)
        return build_happy_hour_days(
            slots, context.opening_hours, context.cutoff_hour, resolve_timezone(context.timezone)
        )

    # ==================== Статистика ====================

    def calendar_summary(self, studio_id: int, now: Optional[datetime] = None) -> CalendarSummary:
        """Загрузка недели/месяца и выручка месяца"""
        context = self.load_context(studio_id)
        local_now = current_time(resolve_timezone(context.timezone), now)
        week_start, week_end = week_range(local_now)
        month_start, month_end = month_range(local_now)

        blocks = self.get_blocks(min(week_start, month_start), max(week_end, month_end), studio_id=studio_id)
        slots = self.get_happy_hour_slots(studio_id)
        return occupancy.calendar_summary(context, blocks, slots, local_now)

    def reservation_stats(
        self,
        studio_id: int,
        now: Optional[datetime] = None,
        compare_a: Optional[str] = None,
        compare_b: Optional[str] = None
    ) -> ReservationStats:
        """
        Статистика бронирований: неделя, месяц, сравнение двух месяцев, комнаты
        Блоки загружаются одним запросом на объединённое окно
        """
        context = self.load_context(studio_id)
        local_now = current_time(resolve_timezone(context.timezone), now)

        starts, ends = [], []
        for start, end in (week_range(local_now), month_range(local_now)):
            starts.append(start)
            ends.append(end)
        for key in (compare_a, compare_b):
            month_start = parse_month_key(key, local_now)
            starts.append(month_start)
            ends.append(next_month(month_start))

        blocks = self.get_blocks(min(starts), max(ends), studio_id=studio_id)
        slots = self.get_happy_hour_slots(studio_id)
        logger.info(f"Статистика студии {studio_id}: {len(blocks)} записей, {len(slots)} слотов happy hour")

        return occupancy.reservation_stats(context, blocks, slots, local_now, compare_a, compare_b)

    def compare_month_options(self, studio_id: int, now: Optional[datetime] = None) -> List[str]:
        """Месяцы, доступные для сравнения в статистике ("YYYY-MM")"""
        context = self.load_context(studio_id)
        local_now = current_time(resolve_timezone(context.timezone), now)
        return month_options(local_now, settings.COMPARE_MONTHS_SPAN)
