"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование комнат, включая:
- Создание бронирования на интервал времени
- Поиск свободных комнат
- Отмену бронирования до его начала
"""

from . import domain, interfaces, infrastructure, application

__all__ = [
    'domain',
    'application',
    'infrastructure',
    'interfaces',
]
