"""
Общее ядро (Shared Kernel) системы бронирования комнат.

Содержит общие типы данных, исключения и утилиты.
"""

from .domain import (
    BookingStateException,
    BusinessRuleValidationException,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    InvalidBookingRequestException,
    NotificationException,
    StorageException,
    # Основные классы
    TimeSlot,
    # Утилиты
    generate_booking_id,
    to_instant,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_booking_id",
    "to_instant",
    # Основные классы
    "TimeSlot",
    # Исключения
    "DomainException",
    "InvalidBookingRequestException",
    "BookingStateException",
    "BusinessRuleValidationException",
    "StorageException",
    "NotificationException",
]
