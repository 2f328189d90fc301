"""
Инфраструктурный слой контекста бронирования.

Содержит реализации репозиториев, часов, уведомлений и логгера,
зависимые от конкретных технологий (файлы, консоль и т.д.).
"""
import json
import logging
import os
import sys
import tempfile
import threading
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from ..shared_kernel import EntityId, StorageException
from . import interfaces as ports
from .domain import Booking, Room

LOG_FORMAT = "[%(levelname)s] %(message)s"


class ConsoleLogger(ports.ILogger):
    """
    Логгер поверх модуля logging.

    DEBUG и INFO пишутся в stdout, WARNING и выше - в stderr.
    """

    def __init__(self, name: str = "room_booking", level: Union[int, str] = logging.INFO):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Сообщения выводятся только собственными обработчиками
        self._logger.propagate = False

        # Не дублируем обработчики при повторном создании логгера
        if not self._logger.handlers:
            formatter = logging.Formatter(LOG_FORMAT)

            stdout_handler = logging.StreamHandler(sys.stdout)
            stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
            stdout_handler.setFormatter(formatter)

            stderr_handler = logging.StreamHandler(sys.stderr)
            stderr_handler.setLevel(logging.WARNING)
            stderr_handler.setFormatter(formatter)

            self._logger.addHandler(stdout_handler)
            self._logger.addHandler(stderr_handler)

    @staticmethod
    def _format(message: str, context: Dict[str, object]) -> str:
        if not context:
            return message
        return f"{message}  Context: {json.dumps(context, default=str, ensure_ascii=False)}"

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(self._format(message, kwargs))

    def error(self, message: str, **kwargs) -> None:
        self._logger.error(self._format(message, kwargs))

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(self._format(message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(self._format(message, kwargs))


class SystemClock(ports.IClock):
    """Системные часы."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock(ports.IClock):
    """Часы с управляемым временем для тестов и сценариев."""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, delta: timedelta) -> None:
        self._instant += delta


class InMemoryRoomRepository(ports.IRoomRepository):
    """
    Реализация репозитория комнат в памяти.

    Хранит копии комнат: изменения объекта, полученного из find_by_id()
    или find_all(), попадают в хранилище только после save().
    """

    def __init__(self, rooms: Iterable[Room] = ()):
        self._lock = threading.Lock()
        self._rooms: Dict[EntityId, Room] = {}
        for room in rooms:
            self._rooms[room.id] = room.model_copy(deep=True)

    def find_by_id(self, room_id: EntityId) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(room_id)
            return room.model_copy(deep=True) if room is not None else None

    def find_all(self) -> List[Room]:
        with self._lock:
            return [room.model_copy(deep=True) for room in self._rooms.values()]

    def save(self, room: Room) -> None:
        with self._lock:
            self._rooms[room.id] = room.model_copy(deep=True)


class JsonFileRoomRepository(InMemoryRoomRepository):
    """Репозиторий комнат, хранящий данные в JSON-файле."""

    def __init__(self, file_path: Union[str, Path]):
        """
        Инициализирует репозиторий.

        Args:
            file_path: Путь к JSON-файлу с данными. Если файла нет,
                репозиторий начинает с пустого набора комнат.
        """
        self._file_path = Path(file_path)
        super().__init__(self._load_data())

    def _load_data(self) -> List[Room]:
        """Загружает комнаты из JSON-файла."""
        if not self._file_path.exists():
            return []

        try:
            raw_data = self._file_path.read_text(encoding="utf-8")
            if not raw_data.strip():
                return []
            return [Room.model_validate(item) for item in json.loads(raw_data)]
        except (OSError, ValueError, ValidationError) as e:
            raise StorageException(
                f"Could not load rooms from {self._file_path}: {e}"
            ) from e

    def _save_data(self) -> None:
        """
        Сохраняет все комнаты в JSON-файл.

        Данные пишутся во временный файл рядом с основным и подменяют его
        целиком, поэтому сбой записи не портит уже сохраненный файл.
        """
        data = [room.model_dump(mode="json") for room in self._rooms.values()]
        tmp_path: Optional[str] = None
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._file_path.parent,
                prefix=f"{self._file_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._file_path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageException(
                f"Could not write rooms to {self._file_path}: {e}"
            ) from e

    def save(self, room: Room) -> None:
        with self._lock:
            previous = self._rooms.get(room.id)
            self._rooms[room.id] = room.model_copy(deep=True)
            try:
                self._save_data()
            except StorageException:
                # Несохраненное состояние не должно оставаться в кэше
                if previous is None:
                    del self._rooms[room.id]
                else:
                    self._rooms[room.id] = previous
                raise


class LoggingNotificationService(ports.INotificationService):
    """Сервис уведомлений, который записывает подтверждения в лог."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._logger = logger or ConsoleLogger()

    def send_booking_confirmation(self, booking: Booking) -> None:
        self._logger.info(
            f"Подтверждение бронирования {booking.id}",
            room_id=booking.room_id,
            start=booking.start,
            end=booking.end,
        )

    def send_cancellation_confirmation(self, booking: Booking) -> None:
        self._logger.info(
            f"Подтверждение отмены бронирования {booking.id}",
            room_id=booking.room_id,
            start=booking.start,
            end=booking.end,
        )


class NullNotificationService(ports.INotificationService):
    """Сервис уведомлений, который ничего не отправляет."""

    def send_booking_confirmation(self, booking: Booking) -> None:
        pass

    def send_cancellation_confirmation(self, booking: Booking) -> None:
        pass
