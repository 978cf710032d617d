"""
Модуль репозиториев для доступа к данным.

Содержит базовый и специфические репозитории для работы с коллекциями
хранилища документов.
"""

from mindspace.repositories.base_repository import BaseRepository
from mindspace.repositories.appointment_repository import AppointmentRepository
from mindspace.repositories.mood_entry_repository import MoodEntryRepository
from mindspace.repositories.therapist_repository import TherapistRepository

__all__ = [
    "BaseRepository",
    "AppointmentRepository",
    "MoodEntryRepository",
    "TherapistRepository"
]
