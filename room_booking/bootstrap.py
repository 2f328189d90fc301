from datetime import timezone
from typing import Any, Dict, Iterable, Optional

from .booking.application import BookingSystem
from .booking.domain import Room
from .booking.infrastructure import (
    ConsoleLogger,
    InMemoryRoomRepository,
    JsonFileRoomRepository,
    LoggingNotificationService,
    NullNotificationService,
    SystemClock,
)
from .config import Settings


def bootstrap_app(
    settings: Optional[Settings] = None, rooms: Optional[Iterable[Room]] = None
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or Settings.from_env()

    # 1. Логгер и часы
    logger = ConsoleLogger(level=settings.log_level)
    clock = SystemClock(timezone.utc if settings.use_utc else None)

    # 2. Хранилище комнат: файл, если он задан, иначе память
    if settings.data_file is not None:
        room_repository = JsonFileRoomRepository(settings.data_file)
        # Начальные комнаты добавляются, только если их еще нет в файле
        for room in rooms or ():
            if room_repository.find_by_id(room.id) is None:
                room_repository.save(room)
    else:
        room_repository = InMemoryRoomRepository(rooms or ())

    # 3. Уведомления
    if settings.notifications_enabled:
        notifier = LoggingNotificationService(logger)
    else:
        notifier = NullNotificationService()

    booking_system = BookingSystem(
        clock=clock,
        room_repository=room_repository,
        notification_service=notifier,
        logger=logger,
    )

    return {
        "settings": settings,
        "logger": logger,
        "clock": clock,
        "room_repository": room_repository,
        "notification_service": notifier,
        "booking_system": booking_system,
    }
