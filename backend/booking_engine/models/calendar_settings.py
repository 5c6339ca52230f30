"""
Модель настроек календаря студии
"""
from sqlalchemy import Column, Integer, ForeignKey, JSON, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class StudioCalendarSettings(Base):
    """
    Настройки календаря: час смены бизнес-дня и недельные часы.
    weekly_hours, если заданы, важнее opening_hours студии.
    """

    __tablename__ = "studio_calendar_settings"

    id = Column(Integer, primary_key=True, index=True)
    studio_id = Column(Integer, ForeignKey("studios.id", ondelete="CASCADE"), nullable=False, unique=True)
    day_cutoff_hour = Column(Integer, default=4)  # 0-23
    weekly_hours = Column(JSON, nullable=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    studio = relationship("Studio", back_populates="calendar_settings")

    def __repr__(self):
        return f"<StudioCalendarSettings studio={self.studio_id} cutoff={self.day_cutoff_hour}>"
