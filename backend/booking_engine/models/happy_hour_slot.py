"""
Модель слота happy hour
"""
from sqlalchemy import Column, Integer, ForeignKey, DateTime, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class StudioHappyHourSlot(Base):
    """Пример окна скидки; повторяется каждую неделю в тот же день"""

    __tablename__ = "studio_happy_hour_slots"

    id = Column(Integer, primary_key=True, index=True)
    studio_id = Column(Integer, ForeignKey("studios.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    def __repr__(self):
        return f"<StudioHappyHourSlot room={self.room_id} {self.start_at}-{self.end_at}>"
