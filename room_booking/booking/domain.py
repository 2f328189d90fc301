"""
Доменная модель контекста бронирования.

Содержит агрегат "Комната" и сущность "Бронирование". Комната владеет
своими бронированиями и следит за тем, чтобы они не пересекались.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ..shared_kernel import (
    BusinessRuleValidationException,
    EntityId,
    TimeSlot,
    generate_booking_id,
    to_instant,
)


class Booking(BaseModel):
    """Бронирование комнаты на интервал [start, end)."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=generate_booking_id)
    room_id: EntityId
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
    def slot(self) -> TimeSlot:
        """Интервал бронирования как объект-значение."""
        return TimeSlot(start=self.start, end=self.end)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Проверяет, пересекается ли бронирование с интервалом [start, end)."""
        return self.slot.overlaps(TimeSlot(start=start, end=end))

    def has_started(self, now: datetime) -> bool:
        """Проверяет, началось (или уже закончилось) ли бронирование."""
        return to_instant(now) >= to_instant(self.start)


class Room(BaseModel):
    """Комната, доступная для бронирования."""

    id: EntityId
    name: str
    bookings: List[Booking] = Field(default_factory=list)

    @model_validator(mode="after")
    def bookings_do_not_overlap(self) -> "Room":
        """Проверяет инварианты комнаты при создании и загрузке из хранилища."""
        previous: Optional[Booking] = None
        for booking in sorted(self.bookings, key=lambda b: to_instant(b.start)):
            if booking.room_id != self.id:
                raise ValueError(f"Booking {booking.id} belongs to room {booking.room_id}")
            if previous is not None and previous.overlaps(booking.start, booking.end):
                raise ValueError(f"Bookings {previous.id} and {booking.id} overlap")
            previous = booking
        return self

    def is_available(self, start: datetime, end: datetime) -> bool:
        """Проверяет, свободна ли комната на интервал [start, end)."""
        return not any(booking.overlaps(start, end) for booking in self.bookings)

    def find_booking(self, booking_id: EntityId) -> Optional[Booking]:
        """Находит бронирование комнаты по идентификатору."""
        for booking in self.bookings:
            if booking.id == booking_id:
                return booking
        return None

    def add_booking(self, booking: Booking) -> None:
        """Добавляет бронирование в комнату."""
        if booking.room_id != self.id:
            raise BusinessRuleValidationException(
                f"Booking {booking.id} belongs to room {booking.room_id}, not {self.id}"
            )
        if not self.is_available(booking.start, booking.end):
            raise BusinessRuleValidationException(
                f"Room {self.id} is already booked for the requested time"
            )
        self.bookings.append(booking)

    def remove_booking(self, booking_id: EntityId) -> Optional[Booking]:
        """Удаляет бронирование из комнаты и возвращает его."""
        booking = self.find_booking(booking_id)
        if booking is not None:
            self.bookings.remove(booking)
        return booking
