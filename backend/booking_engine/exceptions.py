"""
Исключения слоя загрузки данных календаря
"""


class BookingEngineError(Exception):
    """Базовая ошибка движка бронирования"""


class StudioNotFound(BookingEngineError):
    """Студия не найдена"""

    def __init__(self, studio_id):
        self.studio_id = studio_id
        super().__init__(f"Studio not found: {studio_id}")


class RoomNotFound(BookingEngineError):
    """Комната не найдена (или принадлежит другой студии)"""

    def __init__(self, room_id, studio_id=None):
        self.room_id = room_id
        self.studio_id = studio_id
        super().__init__(f"Room not found: {room_id}")
