"""
Тесты доменной модели контекста бронирования.

Проверяют:
- Полуоткрытые интервалы и их пересечение.
- Инварианты агрегата Room при добавлении и удалении бронирований.
"""
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from room_booking.booking.domain import Booking, Room
from room_booking.shared_kernel import (
    BusinessRuleValidationException,
    TimeSlot,
    generate_booking_id,
)

DAY = timedelta(days=1)
HOUR = timedelta(hours=1)


@pytest.fixture
def room() -> Room:
    return Room(id="room1", name="Presidential suite")


class TestTimeSlot:
    """Тесты для объекта-значения TimeSlot."""

    def test_end_must_be_after_start(self, now: datetime):
        with pytest.raises(ValidationError, match="end time must be after start time"):
            TimeSlot(start=now, end=now)

    def test_duration(self, now: datetime):
        assert TimeSlot(start=now, end=now + 2 * HOUR).duration == 2 * HOUR

    @pytest.mark.parametrize(
        "other_start, other_end, expected",
        [
            (2 * DAY, 3 * DAY, False),  # соприкасаются концом
            (0 * DAY, 1 * DAY, False),  # соприкасаются началом
            (DAY + HOUR, DAY + 2 * HOUR, True),  # внутри
            (DAY - HOUR, DAY + HOUR, True),  # перекрывает начало
            (0 * DAY, 3 * DAY, True),  # охватывает полностью
            (3 * DAY, 4 * DAY, False),  # после
        ],
    )
    def test_overlaps_is_half_open_and_symmetric(
        self, now: datetime, other_start, other_end, expected
    ):
        slot = TimeSlot(start=now + DAY, end=now + 2 * DAY)
        other = TimeSlot(start=now + other_start, end=now + other_end)

        assert slot.overlaps(other) is expected
        assert other.overlaps(slot) is expected

    @pytest.mark.parametrize(
        "other_start, other_end, expected",
        [
            (DAY + HOUR, DAY + 2 * HOUR, True),
            (2 * DAY, 3 * DAY, False),
        ],
    )
    def test_overlaps_with_naive_and_aware_bounds(
        self, now: datetime, other_start, other_end, expected
    ):
        # Наивное время считается локальным
        slot = TimeSlot(start=now + DAY, end=now + 2 * DAY)
        other = TimeSlot(
            start=(now + other_start).astimezone(), end=(now + other_end).astimezone()
        )

        assert slot.overlaps(other) is expected
        assert other.overlaps(slot) is expected

    def test_mixed_bounds_are_validated(self, now: datetime):
        with pytest.raises(ValidationError, match="end time must be after start time"):
            TimeSlot(start=now + DAY, end=now.astimezone())


class TestBooking:
    """Тесты для сущности Booking."""

    def test_generated_ids_are_unique(self):
        ids = {generate_booking_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_booking_is_immutable(self, now: datetime):
        booking = Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY)

        with pytest.raises(ValidationError):
            booking.start = now

    def test_booking_rejects_end_before_start(self, now: datetime):
        with pytest.raises(ValidationError):
            Booking(id="B1", room_id="room1", start=now + 2 * DAY, end=now + DAY)

    def test_slot(self, now: datetime):
        booking = Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY)
        assert booking.slot == TimeSlot(start=now + DAY, end=now + 2 * DAY)

    def test_has_started(self, now: datetime):
        booking = Booking(id="B1", room_id="room1", start=now, end=now + DAY)

        assert booking.has_started(now)
        assert booking.has_started(now + 2 * DAY)
        assert not booking.has_started(now - HOUR)


class TestRoom:
    """Тесты для агрегата Room."""

    def test_empty_room_is_available(self, room: Room, now: datetime):
        assert room.is_available(now, now + DAY)

    def test_adjacent_booking_does_not_block(self, room: Room, now: datetime):
        room.add_booking(
            Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY)
        )

        assert room.is_available(now + 2 * DAY, now + 3 * DAY)
        assert room.is_available(now, now + DAY)
        assert not room.is_available(now + DAY + HOUR, now + DAY + 2 * HOUR)

    def test_add_overlapping_booking_is_rejected(self, room: Room, now: datetime):
        room.add_booking(
            Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY)
        )

        with pytest.raises(BusinessRuleValidationException):
            room.add_booking(
                Booking(id="B2", room_id="room1", start=now + DAY, end=now + 3 * DAY)
            )
        assert [b.id for b in room.bookings] == ["B1"]

    def test_add_booking_of_other_room_is_rejected(self, room: Room, now: datetime):
        with pytest.raises(BusinessRuleValidationException):
            room.add_booking(
                Booking(id="B1", room_id="room2", start=now + DAY, end=now + 2 * DAY)
            )
        assert room.bookings == []

    def test_find_and_remove_booking(self, room: Room, now: datetime):
        booking = Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY)
        room.add_booking(booking)

        assert room.find_booking("B1") == booking
        assert room.remove_booking("B1") == booking
        assert room.find_booking("B1") is None
        assert room.bookings == []

    def test_remove_unknown_booking_returns_none(self, room: Room):
        assert room.remove_booking("missing") is None

    def test_loaded_room_with_overlapping_bookings_is_rejected(self, now: datetime):
        data = {
            "id": "room1",
            "name": "Ocean Suite",
            "bookings": [
                {"id": "B2", "room_id": "room1", "start": now + 3 * DAY, "end": now + 4 * DAY},
                {"id": "B1", "room_id": "room1", "start": now + DAY, "end": now + 2 * DAY},
                {"id": "B3", "room_id": "room1", "start": now + DAY + HOUR, "end": now + 5 * DAY},
            ],
        }

        with pytest.raises(ValidationError, match="overlap"):
            Room.model_validate(data)

    def test_loaded_room_with_foreign_booking_is_rejected(self, now: datetime):
        foreign = Booking(id="B1", room_id="room2", start=now + DAY, end=now + 2 * DAY)

        with pytest.raises(ValidationError, match="belongs to room room2"):
            Room(id="room1", name="Ocean Suite", bookings=[foreign])

    def test_loaded_room_with_adjacent_bookings_is_accepted(self, now: datetime):
        room = Room(
            id="room1",
            name="Ocean Suite",
            bookings=[
                Booking(id="B2", room_id="room1", start=now + 2 * DAY, end=now + 3 * DAY),
                Booking(id="B1", room_id="room1", start=now + DAY, end=now + 2 * DAY),
            ],
        )

        assert [b.id for b in room.bookings] == ["B2", "B1"]
