"""
Какие записи календаря реально занимают комнату
"""
from typing import Iterable, List

BLOCK_TYPE_MARKERS = ("manual", "manuel", "blok", "block")
RESERVATION_TYPES = ("reservation", "rezervasyon")
APPROVED_STATUSES = ("approved", "onaylı", "onayli")


def _field(entry, name):
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def is_blocking(entry) -> bool:
    """
    Занимает ли запись время комнаты
    - ручная блокировка (manual/manuel/blok/block в типе) - всегда
    - бронь (reservation/rezervasyon) - только подтверждённая
    - всё остальное - нет
    """
    entry_type = (_field(entry, "type") or "").lower()
    if any(marker in entry_type for marker in BLOCK_TYPE_MARKERS):
        return True

    if entry_type not in RESERVATION_TYPES:
        return False

    status = (_field(entry, "status") or "").lower()
    return status in APPROVED_STATUSES


def blocking_entries(entries: Iterable) -> List:
    """Отфильтровать только блокирующие записи"""
    return [entry for entry in entries if is_blocking(entry)]
