"""
Справочник терапевтов и связей пользователь-терапевт.

Ядро только читает эти коллекции; их наполнение выполняется внешним кодом.
"""
import logging
from typing import Optional

from mindspace.core.database.indexes import THERAPISTS_COLLECTION, USER_THERAPISTS_COLLECTION
from mindspace.core.database.store import DocumentStore
from mindspace.schemas.therapist import Therapist, TherapistConnection

logger = logging.getLogger(__name__)


class TherapistRepository:
    """
    Репозиторий терапевтов и связей с ними.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_therapist(self, therapist_id: str) -> Optional[Therapist]:
        record = await self.store.get_by_key(THERAPISTS_COLLECTION, therapist_id)
        if not record:
            logger.debug(f"Therapist {therapist_id} not found")
            return None
        return Therapist.model_validate(record)

    async def is_connected(self, user_id: str, therapist_id: str) -> bool:
        """
        Есть ли у пользователя активная связь с терапевтом.
        """
        records = await self.store.get_by_field(USER_THERAPISTS_COLLECTION, "user_id", user_id)
        for record in records:
            connection = TherapistConnection.model_validate(record)
            if connection.therapist_id == therapist_id and connection.is_active:
                return True
        return False
