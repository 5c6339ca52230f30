"""
Модель комнаты студии
"""
from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship
from ..database import Base


class Room(Base):
    """Комната (репетиционная, вокальная кабина, ...)"""

    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    studio_id = Column(Integer, ForeignKey("studios.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=True)
    type = Column(String(50), nullable=True)  # prova-odasi, vokal-kabini, ...
    pricing_model = Column(String(20), nullable=True)  # flat, daily, hourly, variable
    # Цены хранятся строками, как их ввёл владелец ("1.250", "350,50 TL")
    flat_rate = Column(String(50), nullable=True)
    daily_rate = Column(String(50), nullable=True)
    hourly_rate = Column(String(50), nullable=True)
    min_rate = Column(String(50), nullable=True)
    happy_hour_rate = Column(String(50), nullable=True)

    studio = relationship("Studio", back_populates="rooms")

    def __repr__(self):
        return f"<Room {self.name} (studio {self.studio_id})>"
