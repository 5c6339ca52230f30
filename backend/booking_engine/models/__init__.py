"""
SQLAlchemy модели входных данных календаря
"""
from .studio import Studio
from .calendar_settings import StudioCalendarSettings
from .room import Room
from .calendar_block import StudioCalendarBlock
from .happy_hour_slot import StudioHappyHourSlot

__all__ = [
    "Studio",
    "StudioCalendarSettings",
    "Room",
    "StudioCalendarBlock",
    "StudioHappyHourSlot"
]
