import pytest

from booking_engine import database
from booking_engine.database import Base, SessionLocal, build_engine, get_db, init_db
from booking_engine.schemas import OpeningHours


@pytest.fixture
def open_10_to_22():
    return [OpeningHours(open=True, open_time="10:00", close_time="22:00") for _ in range(7)]


@pytest.fixture
def club_hours():
    """Пн-Сб 22:00-04:00, воскресенье закрыто"""
    days = [OpeningHours(open=True, open_time="22:00", close_time="04:00") for _ in range(6)]
    days.append(OpeningHours(open=False, open_time="22:00", close_time="04:00"))
    return days


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    SessionLocal.configure(bind=engine)
    try:
        yield engine
    finally:
        SessionLocal.configure(bind=database.engine)
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    sessions = get_db()
    session = next(sessions)
    try:
        yield session
    finally:
        sessions.close()
