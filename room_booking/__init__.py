"""
Система бронирования комнат.

Позволяет забронировать комнату на интервал времени, найти свободные
комнаты и отменить бронирование.
"""

from .booking.application import BookingSystem
from .booking.domain import Booking, Room
from .bootstrap import bootstrap_app
from .config import Settings

__all__ = [
    "Booking",
    "BookingSystem",
    "Room",
    "Settings",
    "bootstrap_app",
]
