from decimal import Decimal

import pytest

from booking_engine.schemas import RoomPricing
from booking_engine.services.pricing import effective_rate, happy_hour_rate, parse_price


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("350", Decimal("350")),
        ("350,50", Decimal("350.50")),
        ("350.5", Decimal("350.5")),
        ("1.250", Decimal("1250")),
        ("12,500", Decimal("12500")),
        ("0.250", Decimal("0.250")),
        ("1.250,50", Decimal("1250.50")),
        ("1,250.50", Decimal("1250.50")),
        ("1.250.000", Decimal("1250000")),
        ("₺ 1 250 TL", Decimal("1250")),
        ("400 TL/saat", Decimal("400")),
        (",75", Decimal("0.75")),
        (450, Decimal("450")),
    ],
)
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "TL", "ücretsiz", ".,", True])
def test_parse_price_returns_none_for_garbage(raw):
    assert parse_price(raw) is None


def test_effective_rate_fallback_order():
    assert effective_rate(RoomPricing(hourly_rate="300", flat_rate="500")) == Decimal("300")
    assert effective_rate(RoomPricing(hourly_rate="yok", flat_rate="500", min_rate="200")) == Decimal("500")
    assert effective_rate(RoomPricing(min_rate="200", daily_rate="2000")) == Decimal("200")
    assert effective_rate(RoomPricing(daily_rate="2.000")) == Decimal("2000")


def test_effective_rate_without_prices_is_zero():
    assert effective_rate(RoomPricing()) == 0
    assert effective_rate(None) == 0


def test_happy_hour_rate_falls_back_to_effective_rate():
    assert happy_hour_rate(RoomPricing(hourly_rate="300", happy_hour_rate="200")) == Decimal("200")
    assert happy_hour_rate(RoomPricing(hourly_rate="300")) == Decimal("300")
    assert happy_hour_rate(RoomPricing(flat_rate="450", happy_hour_rate="-")) == Decimal("450")


def test_room_pricing_accepts_camel_case():
    pricing = RoomPricing.model_validate({"pricingModel": "hourly", "hourlyRate": "300", "happyHourRate": "250"})

    assert pricing.model == "hourly"
    assert happy_hour_rate(pricing) == Decimal("250")


@pytest.mark.parametrize("key", ["model", "pricingModel", "pricing_model"])
def test_room_pricing_model_key_variants(key):
    pricing = RoomPricing.model_validate({key: "hourly", "hourlyRate": "300"})

    assert pricing.model == "hourly"
    assert effective_rate(pricing) == Decimal("300")
