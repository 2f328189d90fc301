"""
Общие фикстуры для тестов системы бронирования.
"""
from datetime import datetime

import pytest


@pytest.fixture
def now() -> datetime:
    """Фиксированный момент "сейчас" для всех проверок времени."""
    return datetime(2026, 1, 20, 10, 0)
