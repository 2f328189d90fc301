"""
Прикладной слой контекста бронирования.

Содержит движок бронирования, который координирует проверку запросов,
поиск конфликтов, сохранение комнат и отправку подтверждений.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..shared_kernel import (
    BookingStateException,
    EntityId,
    InvalidBookingRequestException,
    generate_booking_id,
    to_instant,
)
from . import interfaces as ports
from .domain import Booking, Room
from .infrastructure import ConsoleLogger

# DTO для исходящих данных


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    room_id: EntityId
    start: str
    end: str

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            start=booking.start.isoformat(),
            end=booking.end.isoformat(),
        )


class RoomDTO(BaseModel):
    """DTO для представления комнаты."""

    id: EntityId
    name: str
    bookings: List[BookingDTO]

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=room.id,
            name=room.name,
            bookings=[BookingDTO.from_domain(b) for b in room.bookings],
        )


# Сервисы приложения


class BookingSystem:
    """Движок бронирования: создание, поиск свободных комнат и отмена."""

    def __init__(
        self,
        clock: ports.IClock,
        room_repository: ports.IRoomRepository,
        notification_service: ports.INotificationService,
        logger: Optional[ports.ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._clock = clock
        self._rooms = room_repository
        self._notifications = notification_service
        self._logger = logger or ConsoleLogger()

    def book_room(
        self,
        room_id: Optional[EntityId],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> bool:
        """
        Бронирует комнату на интервал [start, end).

        Returns:
            True, если бронирование создано и сохранено; False, если
            комната уже занята на этот интервал.

        Raises:
            InvalidBookingRequestException: некорректный запрос или
                несуществующая комната.
        """
        if room_id is None or start is None or end is None:
            raise InvalidBookingRequestException(
                "booking requires valid start/end times and a room id"
            )
        if to_instant(end) <= to_instant(start):
            raise InvalidBookingRequestException("end time must be after start time")
        if to_instant(start) < to_instant(self._clock.now()):
            raise InvalidBookingRequestException("cannot book a time in the past")

        room = self._rooms.find_by_id(room_id)
        if room is None:
            raise InvalidBookingRequestException("room does not exist")

        if not room.is_available(start, end):
            self._logger.info(
                "Комната уже занята на запрошенный интервал",
                room_id=room_id,
                start=start,
                end=end,
            )
            return False

        booking = Booking(
            id=generate_booking_id(), room_id=room.id, start=start, end=end
        )
        room.add_booking(booking)
        self._rooms.save(room)
        self._logger.info("Бронирование создано", booking_id=booking.id, room_id=room.id)

        try:
            self._notifications.send_booking_confirmation(booking)
        except Exception as e:
            # Бронирование уже сохранено, ошибка уведомления его не отменяет
            self._logger.error(
                "Не удалось отправить подтверждение бронирования",
                booking_id=booking.id,
                error=str(e),
            )

        return True

    def get_available_rooms(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> List[Room]:
        """Возвращает комнаты, свободные на интервал [start, end)."""
        if start is None or end is None:
            raise InvalidBookingRequestException("both start and end time are required")
        if to_instant(end) <= to_instant(start):
            raise InvalidBookingRequestException("end time must be after start time")

        return [room for room in self._rooms.find_all() if room.is_available(start, end)]

    def cancel_booking(self, booking_id: Optional[EntityId]) -> bool:
        """
        Отменяет бронирование, которое еще не началось.

        Returns:
            True, если бронирование отменено; False, если оно не найдено.

        Raises:
            InvalidBookingRequestException: не передан идентификатор.
            BookingStateException: бронирование уже началось или закончилось.
        """
        if booking_id is None:
            raise InvalidBookingRequestException("booking id cannot be null")

        for room in self._rooms.find_all():
            booking = room.find_booking(booking_id)
            if booking is None:
                continue

            if booking.has_started(self._clock.now()):
                raise BookingStateException(
                    "cannot cancel a booking already in progress or completed"
                )

            room.remove_booking(booking.id)
            self._rooms.save(room)
            self._logger.info("Бронирование отменено", booking_id=booking.id, room_id=room.id)

            try:
                self._notifications.send_cancellation_confirmation(booking)
            except Exception as e:
                self._logger.error(
                    "Не удалось отправить подтверждение отмены",
                    booking_id=booking.id,
                    error=str(e),
                )
            return True

        return False

    def list_room_bookings(self, room_id: Optional[EntityId]) -> List[Booking]:
        """Возвращает бронирования комнаты, упорядоченные по началу."""
        if room_id is None:
            raise InvalidBookingRequestException("room id cannot be null")

        room = self._rooms.find_by_id(room_id)
        if room is None:
            raise InvalidBookingRequestException("room does not exist")

        return sorted(room.bookings, key=lambda b: to_instant(b.start))
