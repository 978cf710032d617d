"""
Репозиторий записей настроения.
"""
from datetime import date
from typing import List, Optional

from mindspace.core.database.indexes import MOODS_COLLECTION
from mindspace.core.database.store import DocumentStore
from mindspace.repositories.base_repository import BaseRepository
from mindspace.schemas.mood import MoodEntry


class MoodEntryRepository(BaseRepository[MoodEntry]):

    def __init__(self, store: DocumentStore):
        super().__init__(store, MOODS_COLLECTION, MoodEntry)

    async def get_by_user(self, user_id: str) -> List[MoodEntry]:
        return await self.get_by_field("user_id", user_id)

    async def get_by_user_and_date(self, user_id: str, day: date) -> Optional[MoodEntry]:
        """
        Запись пользователя за день. Уникальный индекс (user_id, date)
        гарантирует не более одной такой записи.
        """
        for entry in await self.get_by_user(user_id):
            if entry.date == day:
                return entry
        return None
