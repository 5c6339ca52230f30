"""
Разбор цен, введённых владельцем студии
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..schemas import RoomPricing

_NON_NUMERIC = re.compile(r"[^\d.,]")

# Порядок выбора почасовой цены для расчёта выручки
RATE_FALLBACK_ORDER = ("hourly_rate", "flat_rate", "min_rate", "daily_rate")


def _is_grouping(integer_part: str, fraction: str) -> bool:
    # "1.250" / "12,500" - разделитель тысяч, "0.250" / "1.5" - дробная часть
    return len(fraction) == 3 and 1 <= len(integer_part) <= 3 and integer_part != "0"


def parse_price(value) -> Optional[Decimal]:
    """
    Строка цены -> Decimal
    Понимает "," и "." как десятичный разделитель и разделители тысяч:
    "350", "350,50", "1.250", "1.250,50", "1,250.50", "₺ 1 250 TL".
    Возвращает None, если число не найдено.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    cleaned = _NON_NUMERIC.sub("", str(value)).rstrip(".,")
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return None

    separators = [ch for ch in cleaned if ch in ".,"]
    if not separators:
        normalized = cleaned
    elif len(set(separators)) == 2:
        # Последний разделитель - десятичный, остальные - тысячи
        decimal_sep = separators[-1]
        group_sep = "," if decimal_sep == "." else "."
        normalized = cleaned.replace(group_sep, "").replace(decimal_sep, ".")
    elif len(separators) > 1:
        # "1.250.000" - только разделители тысяч
        normalized = cleaned.replace(separators[0], "")
    else:
        sep = separators[0]
        integer_part, _, fraction = cleaned.partition(sep)
        if _is_grouping(integer_part, fraction):
            normalized = integer_part + fraction
        else:
            normalized = f"{integer_part or '0'}.{fraction}"

    try:
        return Decimal(normalized)
    except InvalidOperation:
        return None


def effective_rate(pricing: Optional[RoomPricing]) -> Decimal:
    """
    Почасовая цена комнаты для расчёта выручки
    hourly -> flat -> min -> daily, первое распознанное значение; иначе 0
    """
    if pricing is None:
        return Decimal("0")
    for field in RATE_FALLBACK_ORDER:
        price = parse_price(getattr(pricing, field))
        if price is not None:
            return price
    return Decimal("0")


def happy_hour_rate(pricing: Optional[RoomPricing]) -> Decimal:
    """Цена в happy hour, если не задана - обычная цена"""
    if pricing is None:
        return Decimal("0")
    happy = parse_price(pricing.happy_hour_rate)
    if happy is not None:
        return happy
    return effective_rate(pricing)
