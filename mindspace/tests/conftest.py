from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from mindspace.core.database.indexes import (
    THERAPISTS_COLLECTION, USER_THERAPISTS_COLLECTION, setup_indexes
)
from mindspace.core.database.memory import InMemoryDocumentStore
from mindspace.schemas.mood import MoodCategory, MoodEntry
from mindspace.services.appointment_service import AppointmentService
from mindspace.services.mood_service import MoodService

# Среда, 13 марта 2024 года, 10:00
FIXED_NOW = datetime(2024, 3, 13, 10, 0)
TODAY = FIXED_NOW.date()

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_entry(
    day: date,
    intensity: int,
    mood: MoodCategory = MoodCategory.CALM,
    user_id: str = "u1",
    timestamp: Optional[datetime] = None
) -> MoodEntry:
    """Запись настроения для тестов аналитики"""
    return MoodEntry(
        user_id=user_id,
        date=day,
        mood=mood,
        intensity=intensity,
        timestamp=timestamp or datetime.combine(day, datetime.min.time()) + timedelta(hours=20)
    )


async def build_store() -> InMemoryDocumentStore:
    """Встроенное хранилище с индексами, терапевтами и связями"""
    store = InMemoryDocumentStore()
    await setup_indexes(store)

    await store.insert(THERAPISTS_COLLECTION, {
        "id": "t1", "name": "Dr. Emily Chen", "availability": WEEKDAYS
    })
    await store.insert(THERAPISTS_COLLECTION, {
        "id": "t2", "name": "Dr. Michael Ross", "availability": ["Saturday"]
    })
    await store.insert(USER_THERAPISTS_COLLECTION, {
        "user_id": "u1", "therapist_id": "t1", "status": "active"
    })
    await store.insert(USER_THERAPISTS_COLLECTION, {
        "user_id": "u1", "therapist_id": "t2", "status": "active"
    })
    await store.insert(USER_THERAPISTS_COLLECTION, {
        "user_id": "u2", "therapist_id": "t1", "status": "pending"
    })
    await store.insert(USER_THERAPISTS_COLLECTION, {
        "user_id": "u3", "therapist_id": "t1", "status": "active"
    })
    return store


@pytest.fixture
async def store():
    return await build_store()


@pytest.fixture
def appointment_service(store):
    return AppointmentService(store, clock=fixed_clock)


@pytest.fixture
def mood_service(store):
    return MoodService(store, clock=fixed_clock)
