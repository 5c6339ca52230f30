"""
Модель записи календаря (бронь или блокировка)
"""
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class StudioCalendarBlock(Base):
    """Интервал в календаре комнаты"""

    __tablename__ = "studio_calendar_blocks"

    id = Column(Integer, primary_key=True, index=True)
    studio_id = Column(Integer, ForeignKey("studios.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    start_at = Column(DateTime(timezone=True), nullable=False, index=True)
    end_at = Column(DateTime(timezone=True), nullable=False)
    type = Column(String(50), default="manual")  # manual, reservation
    status = Column(String(20), nullable=True)  # approved, pending, rejected
    created_at = Column(TIMESTAMP, server_default=func.now())

    def __repr__(self):
        return f"<StudioCalendarBlock room={self.room_id} {self.start_at}-{self.end_at} ({self.type}/{self.status})>"
