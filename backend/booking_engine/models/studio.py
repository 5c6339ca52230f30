"""
Модель студии
"""
from sqlalchemy import Column, Integer, String, Boolean, JSON, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Studio(Base):
    """Студия (площадка с комнатами)"""

    __tablename__ = "studios"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    opening_hours = Column(JSON, nullable=True)  # 7 дней: [{open, openTime, closeTime}]
    timezone = Column(String(64), nullable=True)  # Europe/Istanbul
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    rooms = relationship("Room", back_populates="studio", order_by="Room.id")
    calendar_settings = relationship("StudioCalendarSettings", back_populates="studio", uselist=False)

    def __repr__(self):
        return f"<Studio {self.name}>"
