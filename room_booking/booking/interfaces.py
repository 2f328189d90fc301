"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Booking, Room


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IClock(Protocol):
    """Интерфейс источника текущего времени."""

    def now(self) -> datetime: ...


class IRoomRepository(Protocol):
    """
    Интерфейс репозитория для комнат.

    save() при ошибке записи выбрасывает StorageException.
    """

    def find_by_id(self, room_id: EntityId) -> Optional[Room]: ...
    def find_all(self) -> List[Room]: ...
    def save(self, room: Room) -> None: ...


class INotificationService(Protocol):
    """
    Интерфейс для отправки подтверждений.

    Оба метода при ошибке доставки выбрасывают NotificationException.
    """

    def send_booking_confirmation(self, booking: Booking) -> None: ...
    def send_cancellation_confirmation(self, booking: Booking) -> None: ...
