"""
Pydantic-схемы входных данных и результатов расчёта календаря
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Union

from pydantic import AliasChoices, BaseModel, Field

RoomId = Union[int, str]


# ==================== Opening hours ====================

class OpeningHours(BaseModel):
    """Часы работы на один день недели"""
    open: bool = True
    open_time: str = Field("09:00", alias="openTime")  # "HH:MM"
    close_time: str = Field("21:00", alias="closeTime")  # <= open_time = до следующего дня

    class Config:
        populate_by_name = True
        from_attributes = True
        frozen = True


class OpenRange(BaseModel):
    """Рабочий интервал дня в минутах от начала бизнес-дня"""
    start: int
    end: int  # может быть > 1440 (работа после полуночи)

    class Config:
        frozen = True

    @property
    def minutes(self) -> int:
        return max(0, self.end - self.start)


# ==================== Calendar ====================

class CalendarBlock(BaseModel):
    """Запись календаря: бронь или ручная блокировка"""
    room_id: Optional[RoomId] = Field(None, alias="roomId")
    start_at: datetime = Field(..., alias="startAt")
    end_at: datetime = Field(..., alias="endAt")
    type: Optional[str] = None  # manual, reservation, ...
    status: Optional[str] = None  # approved, pending, rejected ...

    class Config:
        populate_by_name = True
        from_attributes = True
        frozen = True


class HappyHourSlot(BaseModel):
    """Сырой слот скидки (один конкретный экземпляр)"""
    room_id: RoomId = Field(..., alias="roomId")
    start_at: datetime = Field(..., alias="startAt")
    end_at: datetime = Field(..., alias="endAt")

    class Config:
        populate_by_name = True
        from_attributes = True
        frozen = True


class HappyHourTemplate(BaseModel):
    """Еженедельный шаблон скидки"""
    weekday: int = Field(..., ge=0, le=6)  # 0=Пн, 6=Вс
    start_minutes: int = Field(..., alias="startMinutes")
    end_minutes: int = Field(..., alias="endMinutes")  # может быть > 1440

    class Config:
        populate_by_name = True
        frozen = True


class HappyHourInstance(BaseModel):
    """Конкретное окно скидки в календаре"""
    room_id: RoomId = Field(..., alias="roomId")
    start_at: datetime = Field(..., alias="startAt")
    end_at: datetime = Field(..., alias="endAt")

    class Config:
        populate_by_name = True
        frozen = True


class HappyHourDay(BaseModel):
    """Настройка скидки на день недели: от открытия до end_time"""
    weekday: int = Field(..., ge=0, le=6)
    enabled: bool
    end_time: str = Field(..., alias="endTime")  # "HH:MM"

    class Config:
        populate_by_name = True
        frozen = True


# ==================== Pricing ====================

class RoomPricing(BaseModel):
    """Цены комнаты (строки в формате, который ввёл владелец)"""
    # "model", "pricingModel" (как в БД платформы) и "pricing_model" (колонка Room)
    model: Optional[str] = Field(
        None, validation_alias=AliasChoices("model", "pricingModel", "pricing_model")
    )  # flat, daily, hourly, variable
    flat_rate: Optional[str] = Field(None, alias="flatRate")
    daily_rate: Optional[str] = Field(None, alias="dailyRate")
    hourly_rate: Optional[str] = Field(None, alias="hourlyRate")
    min_rate: Optional[str] = Field(None, alias="minRate")
    happy_hour_rate: Optional[str] = Field(None, alias="happyHourRate")

    class Config:
        populate_by_name = True
        from_attributes = True
        frozen = True


# ==================== Studio context ====================

class RoomContext(BaseModel):
    """Комната студии с ценами"""
    id: RoomId
    name: Optional[str] = None
    pricing: RoomPricing = Field(default_factory=RoomPricing)


class StudioContext(BaseModel):
    """Всё, что нужно для расчётов по одной студии"""
    id: RoomId
    opening_hours: List[OpeningHours]
    cutoff_hour: int = 4
    timezone: Optional[str] = None
    rooms: List[RoomContext] = Field(default_factory=list)

    @property
    def room_ids(self) -> List[RoomId]:
        return [room.id for room in self.rooms]


# ==================== Results ====================

class RoomStats(BaseModel):
    """Статистика по комнате"""
    room_id: RoomId
    name: str
    week_occupancy: float
    month_occupancy: float
    month_revenue: Decimal
    price: Decimal


class MonthComparison(BaseModel):
    """Показатели выбранного месяца"""
    key: str  # "YYYY-MM"
    occupancy: float
    revenue: Decimal


class CalendarSummary(BaseModel):
    """Краткая сводка для панели студии"""
    week_occupancy: float
    month_occupancy: float
    month_revenue: Decimal


class ReservationStats(BaseModel):
    """Полная статистика бронирований студии"""
    week_occupancy: float
    month_occupancy: float
    month_revenue: Decimal
    compare_a: MonthComparison
    compare_b: MonthComparison
    rooms: List[RoomStats]
