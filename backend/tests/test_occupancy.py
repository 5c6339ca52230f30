from datetime import date, datetime, timezone
from decimal import Decimal

from booking_engine.schemas import (
    CalendarBlock,
    HappyHourSlot,
    HappyHourTemplate,
    OpeningHours,
    RoomContext,
    RoomPricing,
    StudioContext,
)
from booking_engine.services.occupancy import (
    block_revenue,
    calendar_summary,
    occupancy_percent,
    occupied_minutes,
    range_revenue,
    reservation_stats,
    studio_occupancy,
    total_open_minutes,
)

WEEK_START = datetime(2024, 3, 4, tzinfo=timezone.utc)
WEEK_END = datetime(2024, 3, 11, tzinfo=timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def block(room_id, start, end, type="reservation", status="approved"):
    return CalendarBlock(room_id=room_id, start_at=start, end_at=end, type=type, status=status)


def studio(opening_hours, rooms=None):
    return StudioContext(
        id=1,
        opening_hours=opening_hours,
        cutoff_hour=4,
        timezone="UTC",
        rooms=rooms or [RoomContext(id=1, name="Prova 1", pricing=RoomPricing(model="hourly", hourly_rate="300"))],
    )


# ==================== Open / occupied minutes ====================

def test_total_open_minutes_week(open_10_to_22):
    assert total_open_minutes(open_10_to_22, WEEK_START, WEEK_END) == 5040
    assert total_open_minutes(open_10_to_22, WEEK_START, WEEK_END, room_count=3) == 15120


def test_total_open_minutes_counts_overnight_width(club_hours):
    assert total_open_minutes(club_hours, WEEK_START, WEEK_END) == 6 * 360


def test_total_open_minutes_all_closed():
    closed = [OpeningHours(open=False) for _ in range(7)]

    assert total_open_minutes(closed, WEEK_START, WEEK_END) == 0


def test_occupied_minutes_counts_only_blocking(open_10_to_22):
    blocks = [
        block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
        block(1, utc(2024, 3, 5, 14), utc(2024, 3, 5, 16), status="pending"),
        block(1, utc(2024, 3, 6, 11), utc(2024, 3, 6, 12), type="manual", status=None),
    ]

    assert occupied_minutes(blocks, open_10_to_22, 4, WEEK_START, WEEK_END) == 180


def test_occupied_minutes_clips_to_opening_hours(open_10_to_22):
    blocks = [block(1, utc(2024, 3, 4, 9), utc(2024, 3, 4, 11))]

    assert occupied_minutes(blocks, open_10_to_22, 4, WEEK_START, WEEK_END) == 60


def test_occupied_minutes_clips_to_range(open_10_to_22):
    blocks = [block(1, utc(2024, 3, 10, 20), utc(2024, 3, 11, 2))]

    assert occupied_minutes(blocks, open_10_to_22, 4, WEEK_START, WEEK_END) == 120


def test_occupied_minutes_ignores_inverted_blocks(open_10_to_22):
    blocks = [block(1, utc(2024, 3, 4, 16), utc(2024, 3, 4, 14))]

    assert occupied_minutes(blocks, open_10_to_22, 4, WEEK_START, WEEK_END) == 0


def test_occupied_night_block_uses_business_day(club_hours):
    # вторник 01:00-05:00 -> понедельник, клуб открыт до 04:00
    blocks = [block(1, utc(2024, 3, 5, 1), utc(2024, 3, 5, 5), type="manual")]

    assert occupied_minutes(blocks, club_hours, 4, WEEK_START, WEEK_END) == 180


# ==================== Percent ====================

def test_occupancy_percent_boundaries():
    assert occupancy_percent(5040, 5040) == 100.0
    assert occupancy_percent(0, 5040) == 0.0
    assert occupancy_percent(120, 0) == 0


def test_occupancy_percent_rounds_half_up():
    assert occupancy_percent(120, 5040) == 2.4
    assert occupancy_percent(1, 2000) == 0.1
    assert occupancy_percent(1, 3) == 33.3


# ==================== Revenue ====================

def test_block_revenue_splits_happy_hour():
    templates = [HappyHourTemplate(weekday=0, start_minutes=600, end_minutes=660)]
    two_hours = block(1, utc(2024, 3, 4, 10), utc(2024, 3, 4, 12))

    revenue = block_revenue(two_hours, templates, Decimal("200"), Decimal("100"))

    assert revenue == Decimal("300")


def test_block_revenue_ignores_other_weekdays():
    templates = [HappyHourTemplate(weekday=3, start_minutes=600, end_minutes=660)]
    two_hours = block(1, utc(2024, 3, 4, 10), utc(2024, 3, 4, 12))

    assert block_revenue(two_hours, templates, Decimal("200"), Decimal("100")) == Decimal("400")


def test_block_revenue_happy_minutes_capped_at_duration():
    templates = [
        HappyHourTemplate(weekday=0, start_minutes=600, end_minutes=720),
        HappyHourTemplate(weekday=0, start_minutes=630, end_minutes=720),
    ]
    two_hours = block(1, utc(2024, 3, 4, 10), utc(2024, 3, 4, 12))

    assert block_revenue(two_hours, templates, Decimal("200"), Decimal("100")) == Decimal("200")


def test_block_revenue_clipped_to_range():
    long_block = block(1, utc(2024, 3, 3, 20), utc(2024, 3, 4, 12))

    revenue = block_revenue(long_block, [], Decimal("60"), range_start=utc(2024, 3, 4, 10))

    assert revenue == Decimal("120")


def test_block_revenue_zero_rate_or_empty_block():
    two_hours = block(1, utc(2024, 3, 4, 10), utc(2024, 3, 4, 12))
    empty = block(1, utc(2024, 3, 4, 12), utc(2024, 3, 4, 12))

    assert block_revenue(two_hours, [], Decimal("0")) == 0
    assert block_revenue(empty, [], Decimal("300")) == 0


def test_happy_rate_counts_when_regular_rate_is_zero():
    two_hours = block(1, utc(2024, 3, 4, 10), utc(2024, 3, 4, 12))
    templates = [HappyHourTemplate(weekday=0, start_minutes=600, end_minutes=660)]

    assert block_revenue(two_hours, templates, Decimal("0"), Decimal("100")) == Decimal("100")
    assert range_revenue(
        [two_hours], {1: templates}, {1: RoomPricing(happy_hour_rate="100")}, 4, WEEK_START, WEEK_END
    ) == Decimal("100")


def test_date_range_with_aware_blocks(open_10_to_22):
    blocks = [block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16), type="manual", status=None)]

    assert occupied_minutes(blocks, open_10_to_22, 4, date(2024, 3, 4), date(2024, 3, 11)) == 120
    assert total_open_minutes(open_10_to_22, date(2024, 3, 4), date(2024, 3, 11)) == 5040
    assert block_revenue(blocks[0], [], Decimal("300"), range_start=date(2024, 3, 4)) == Decimal("600")


def test_range_revenue_uses_room_pricing():
    blocks = [
        block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
        block(2, utc(2024, 3, 5, 18), utc(2024, 3, 5, 19)),
        block(2, utc(2024, 3, 6, 18), utc(2024, 3, 6, 19), status="rejected"),
    ]
    templates = {2: [HappyHourTemplate(weekday=1, start_minutes=1080, end_minutes=1110)]}
    pricing = {
        1: RoomPricing(hourly_rate="300"),
        2: RoomPricing(flat_rate="1.200", happy_hour_rate="600"),
    }

    revenue = range_revenue(blocks, templates, pricing, 4, WEEK_START, WEEK_END)

    assert revenue == Decimal("600") + Decimal("300") + Decimal("600")


# ==================== Scenario ====================

def test_week_scenario(open_10_to_22):
    context = studio(open_10_to_22)
    blocks = [block(1, "2024-03-04T14:00Z", "2024-03-04T16:00Z")]

    assert studio_occupancy(context, blocks, WEEK_START, WEEK_END) == 2.4
    assert range_revenue(blocks, {}, {1: context.rooms[0].pricing}, 4, WEEK_START, WEEK_END) == 600


def test_studio_without_rooms_has_zero_occupancy(open_10_to_22):
    context = StudioContext(id=1, opening_hours=open_10_to_22, rooms=[])

    assert studio_occupancy(context, [block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))], WEEK_START, WEEK_END) == 0


def test_calendar_summary(open_10_to_22):
    context = studio(open_10_to_22)
    blocks = [block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16))]

    summary = calendar_summary(context, blocks, [], now=utc(2024, 3, 6, 12))

    assert summary.week_occupancy == 2.4
    assert summary.month_occupancy == 0.5
    assert summary.month_revenue == 600


def test_reservation_stats(open_10_to_22):
    rooms = [
        RoomContext(id=1, name="Prova 1", pricing=RoomPricing(hourly_rate="300", happy_hour_rate="150")),
        RoomContext(id=2, pricing=RoomPricing(daily_rate="2000")),
    ]
    context = studio(open_10_to_22, rooms)
    blocks = [
        block(1, utc(2024, 3, 4, 14), utc(2024, 3, 4, 16)),
        block(1, utc(2024, 2, 12, 10), utc(2024, 2, 12, 11)),
    ]
    slots = [HappyHourSlot(room_id=1, start_at=utc(2024, 2, 26, 15), end_at=utc(2024, 2, 26, 16))]

    stats = reservation_stats(context, blocks, slots, now=utc(2024, 3, 6, 12), compare_a="2024-02", compare_b="bad")

    assert stats.week_occupancy == 1.2
    assert stats.month_revenue == Decimal("450")
    assert stats.compare_a.key == "2024-02"
    assert stats.compare_a.revenue == Decimal("300")
    assert stats.compare_b.key == "2024-03"
    assert stats.compare_b.revenue == stats.month_revenue

    first, second = stats.rooms
    assert first.week_occupancy == 2.4
    assert first.month_revenue == Decimal("450")
    assert first.price == Decimal("300")
    assert second.name == "Oda"
    assert second.week_occupancy == 0.0
    assert second.month_revenue == 0
