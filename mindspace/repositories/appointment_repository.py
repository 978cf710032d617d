"""
Репозиторий записей на прием.
"""
from datetime import date
from typing import List

from mindspace.core.database.indexes import APPOINTMENTS_COLLECTION
from mindspace.core.database.store import DocumentStore
from mindspace.repositories.base_repository import BaseRepository
from mindspace.schemas.appointment import Appointment


class AppointmentRepository(BaseRepository[Appointment]):
    """
    Записи хранятся с производным полем slot_active, поэтому любая смена
    статуса через update() сразу освобождает или занимает слот в индексе.
    """

    def __init__(self, store: DocumentStore):
        super().__init__(store, APPOINTMENTS_COLLECTION, Appointment)

    async def get_by_user(self, user_id: str) -> List[Appointment]:
        return await self.get_by_field("user_id", user_id)

    async def get_by_therapist(self, therapist_id: str) -> List[Appointment]:
        return await self.get_by_field("therapist_id", therapist_id)

    async def get_by_therapist_and_date(self, therapist_id: str, day: date) -> List[Appointment]:
        return [a for a in await self.get_by_therapist(therapist_id) if a.date == day]

    async def get_by_user_and_date(self, user_id: str, day: date) -> List[Appointment]:
        return [a for a in await self.get_by_user(user_id) if a.date == day]
