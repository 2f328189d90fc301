"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

# Идентификаторы комнат и бронирований передаются снаружи строками
EntityId = str


def generate_booking_id() -> str:
    """Генерирует новый идентификатор бронирования."""
    return uuid4().hex


def to_instant(value: datetime) -> datetime:
    """
    Приводит момент времени к виду, пригодному для сравнения.

    Наивное время считается локальным временем системы и получает его
    смещение, поэтому наивные и aware значения можно сравнивать между собой.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


class TimeSlot(BaseModel):
    """Полуоткрытый временной интервал [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("end")
    @classmethod
    def end_after_start(cls, v: datetime, info: ValidationInfo) -> datetime:
        start = info.data.get("start")
        if start is not None and to_instant(v) <= to_instant(start):
            raise ValueError("end time must be after start time")
        return v

    @property
    def duration(self) -> timedelta:
        """Длительность интервала."""
        return to_instant(self.end) - to_instant(self.start)

    def overlaps(self, other: "TimeSlot") -> bool:
        """
        Проверяет пересечение двух интервалов.

        Соприкасающиеся концы (end == other.start) пересечением не считаются.
        """
        start, end = to_instant(self.start), to_instant(self.end)
        return start < to_instant(other.end) and to_instant(other.start) < end


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class InvalidBookingRequestException(DomainException, ValueError):
    """Некорректные или противоречивые входные данные запроса."""

    pass


class BookingStateException(DomainException):
    """Операция недопустима в текущем состоянии бронирования."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class StorageException(Exception):
    """Ошибка хранилища при сохранении или загрузке данных."""

    pass


class NotificationException(Exception):
    """Ошибка отправки уведомления."""

    pass
