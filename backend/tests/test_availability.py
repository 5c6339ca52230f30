from datetime import datetime, timezone

from booking_engine.schemas import CalendarBlock, OpeningHours, RoomContext, StudioContext
from booking_engine.services.availability import (
    available_room_ids,
    find_available_studios,
    is_available,
    is_within_opening_hours,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def approved(room_id, start, end):
    return CalendarBlock(room_id=room_id, start_at=start, end_at=end, type="reservation", status="approved")


def test_booked_slot_is_unavailable(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    assert is_available(utc(2024, 3, 4, 14), utc(2024, 3, 4, 15), open_10_to_22, 4, blocks) is False


def test_before_opening_is_unavailable(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    assert is_available(utc(2024, 3, 4, 9), utc(2024, 3, 4, 10), open_10_to_22, 4, blocks) is False


def test_free_slot_inside_hours(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    assert is_available(utc(2024, 3, 4, 10), utc(2024, 3, 4, 12), open_10_to_22, 4, blocks) is True


def test_adjacent_block_does_not_conflict(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    assert is_available(utc(2024, 3, 4, 16), utc(2024, 3, 4, 17), open_10_to_22, 4, blocks) is True
    assert is_available(utc(2024, 3, 4, 13), utc(2024, 3, 4, 14), open_10_to_22, 4, blocks) is True


def test_closing_time_is_inclusive_end(open_10_to_22):
    assert is_available(utc(2024, 3, 4, 21), utc(2024, 3, 4, 22), open_10_to_22, 4, []) is True
    assert is_available(utc(2024, 3, 4, 21), utc(2024, 3, 4, 22, 30), open_10_to_22, 4, []) is False


def test_inverted_or_empty_range_is_unavailable(open_10_to_22):
    assert is_available(utc(2024, 3, 4, 15), utc(2024, 3, 4, 14), open_10_to_22, 4, []) is False
    assert is_available(utc(2024, 3, 4, 15), utc(2024, 3, 4, 15), open_10_to_22, 4, []) is False


def test_zero_width_block_is_ignored(open_10_to_22):
    blocks = [
        approved(1, utc(2024, 3, 4, 15), utc(2024, 3, 4, 15)),
        approved(1, utc(2024, 3, 4, 16), utc(2024, 3, 4, 14)),
    ]

    assert is_available(utc(2024, 3, 4, 13), utc(2024, 3, 4, 17), open_10_to_22, 4, blocks) is True


def test_repeated_calls_give_same_answer(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]
    args = (utc(2024, 3, 4, 15), utc(2024, 3, 4, 17), open_10_to_22, 4, blocks)

    assert is_available(*args) == is_available(*args)


def test_night_booking_uses_previous_business_day(club_hours):
    # вторник 01:00-03:00 относится к понедельнику (22:00-04:00)
    assert is_within_opening_hours(datetime(2024, 3, 5, 1), datetime(2024, 3, 5, 3), club_hours, 4) is True
    assert is_within_opening_hours(datetime(2024, 3, 5, 3), datetime(2024, 3, 5, 5), club_hours, 4) is False


def test_night_after_closed_day_is_unavailable(club_hours):
    # понедельник 01:00 - это ещё воскресенье, которое закрыто
    assert is_available(datetime(2024, 3, 11, 1), datetime(2024, 3, 11, 2), club_hours, 4, []) is False
    assert is_available(datetime(2024, 3, 9, 23), datetime(2024, 3, 10, 1), club_hours, 4, []) is True


def test_opening_hours_checked_in_studio_timezone():
    from zoneinfo import ZoneInfo

    hours = [OpeningHours(open=True, open_time="10:00", close_time="22:00") for _ in range(7)]
    istanbul = ZoneInfo("Europe/Istanbul")

    # 07:00Z = 10:00 в Стамбуле
    assert is_available(utc(2024, 3, 4, 7), utc(2024, 3, 4, 8), hours, 4, [], istanbul) is True
    assert is_available(utc(2024, 3, 4, 6), utc(2024, 3, 4, 7), hours, 4, [], istanbul) is False


def test_available_room_ids(open_10_to_22):
    blocks = [
        approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
        CalendarBlock(room_id=2, start_at=utc(2024, 3, 4, 14), end_at=utc(2024, 3, 4, 16), type="reservation", status="pending"),
        CalendarBlock(room_id=3, start_at=utc(2024, 3, 4, 12), end_at=utc(2024, 3, 4, 18), type="manual"),
    ]

    free = available_room_ids([1, 2, 3], blocks, utc(2024, 3, 4, 15), utc(2024, 3, 4, 16), open_10_to_22, 4)

    assert free == [2]


def test_available_room_ids_outside_hours(open_10_to_22):
    assert available_room_ids([1, 2], [], utc(2024, 3, 4, 8), utc(2024, 3, 4, 9), open_10_to_22, 4) == []


def test_find_available_studios(open_10_to_22, club_hours):
    studios = [
        StudioContext(id="a", opening_hours=open_10_to_22, cutoff_hour=4, rooms=[RoomContext(id="a1")]),
        StudioContext(
            id="b",
            opening_hours=open_10_to_22,
            cutoff_hour=4,
            rooms=[RoomContext(id="b1"), RoomContext(id="b2")],
        ),
        StudioContext(id="c", opening_hours=club_hours, cutoff_hour=4, rooms=[RoomContext(id="c1")]),
        StudioContext(id="d", opening_hours=open_10_to_22, cutoff_hour=4, rooms=[]),
    ]
    blocks = [
        approved("a1", utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
        approved("b1", utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
    ]

    result = find_available_studios(studios, blocks, utc(2024, 3, 4, 15), utc(2024, 3, 4, 16))

    assert result == ["b"]


def test_naive_query_against_aware_blocks(open_10_to_22):
    blocks = [approved(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    assert is_available(datetime(2024, 3, 4, 14), datetime(2024, 3, 4, 15), open_10_to_22, 4, blocks) is False
    assert is_available(datetime(2024, 3, 4, 16), datetime(2024, 3, 4, 17), open_10_to_22, 4, blocks) is True
    assert available_room_ids([1, 2], blocks, datetime(2024, 3, 4, 14), datetime(2024, 3, 4, 15), open_10_to_22, 4) == [2]
