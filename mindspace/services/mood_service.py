"""
Сервис дневника настроения.
Хранит не более одной записи настроения на пользователя в день и
предоставляет аналитику по истории записей.
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from mindspace.core.database.store import DocumentStore
from mindspace.core.exceptions.store import DuplicateError
from mindspace.repositories.appointment_repository import AppointmentRepository
from mindspace.repositories.mood_entry_repository import MoodEntryRepository
from mindspace.schemas.mood import (
    MAX_INTENSITY, MIN_INTENSITY, DailyIntensity, MonthlySummary, MoodCategory, MoodEntry,
    MoodInsights, MoodStatistics, MoodTrend, MostCommonMood, SessionCorrelation,
    WeekdayPattern, WeeklySummary
)
from mindspace.schemas.results import FailureReason, OperationResult
from mindspace.services import mood_analytics
from mindspace.services.insight_service import build_insights

logger = logging.getLogger(__name__)


def _valid_intensity(intensity: Any) -> bool:
    # bool является подклассом int, но интенсивностью не является
    return (
        isinstance(intensity, int)
        and not isinstance(intensity, bool)
        and MIN_INTENSITY <= intensity <= MAX_INTENSITY
    )


class MoodService:
    """Сервис для работы с записями настроения"""

    def __init__(
        self,
        store: DocumentStore,
        mood_repository: Optional[MoodEntryRepository] = None,
        appointment_repository: Optional[AppointmentRepository] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.mood_repository = mood_repository or MoodEntryRepository(store)
        self.appointment_repository = appointment_repository or AppointmentRepository(store)
        self.clock = clock or datetime.now

    def _today(self) -> date:
        return self.clock().date()

    async def log_mood(
        self,
        user_id: str,
        date: date,
        mood: Any,
        intensity: Any,
        notes: str = ""
    ) -> OperationResult:
        """
        Записывает настроение за день. Повторная запись за ту же дату
        заменяет категорию, интенсивность и заметки существующей записи.
        """
        category = MoodCategory.from_name(mood)
        if category is None:
            return OperationResult.fail(FailureReason.INVALID_MOOD, "Invalid mood selected")
        if not _valid_intensity(intensity):
            return OperationResult.fail(
                FailureReason.INVALID_INTENSITY,
                f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}"
            )

        try:
            existing = await self.mood_repository.get_by_user_and_date(user_id, date)
            if existing is not None:
                return await self._overwrite(existing, category, intensity, notes)

            entry = MoodEntry(
                user_id=user_id,
                date=date,
                mood=category,
                intensity=intensity,
                notes=notes,
                timestamp=self.clock()
            )
            try:
                created = await self.mood_repository.create(entry)
            except DuplicateError:
                # Запись за этот день появилась между чтением и вставкой
                logger.info(f"Mood entry for user {user_id} on {date} was created concurrently, updating it")
                existing = await self.mood_repository.get_by_user_and_date(user_id, date)
                if existing is None:
                    raise
                return await self._overwrite(existing, category, intensity, notes)

            logger.info(f"Mood {category.value} logged for user {user_id} on {date}")
            return OperationResult.ok("Mood logged successfully", data=created)
        except Exception:
            logger.exception(f"Error logging mood for user {user_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to log mood")

    async def _overwrite(
        self,
        existing: MoodEntry,
        category: MoodCategory,
        intensity: int,
        notes: str
    ) -> OperationResult:
        now = self.clock()
        updated = existing.model_copy(update={
            "mood": category,
            "intensity": intensity,
            "notes": notes,
            "timestamp": now,
            "updated_at": now
        })
        if not await self.mood_repository.update(updated):
            return OperationResult.fail(FailureReason.NOT_FOUND, "Mood entry not found")
        return OperationResult.ok("Mood entry updated", data=updated)

    async def update_mood(
        self,
        mood_id: str,
        mood: Any = None,
        intensity: Any = None,
        notes: Optional[str] = None
    ) -> OperationResult:
        """Частичное обновление записи настроения."""
        try:
            entry = await self.mood_repository.get_by_id(mood_id)
            if entry is None:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Mood entry not found")

            changes: Dict[str, Any] = {}
            if mood is not None:
                category = MoodCategory.from_name(mood)
                if category is None:
                    return OperationResult.fail(FailureReason.INVALID_MOOD, "Invalid mood")
                changes["mood"] = category
            if intensity is not None:
                if not _valid_intensity(intensity):
                    return OperationResult.fail(
                        FailureReason.INVALID_INTENSITY,
                        f"Intensity must be between {MIN_INTENSITY} and {MAX_INTENSITY}"
                    )
                changes["intensity"] = intensity
            if notes is not None:
                changes["notes"] = notes
            changes["updated_at"] = self.clock()

            updated = entry.model_copy(update=changes)
            if not await self.mood_repository.update(updated):
                return OperationResult.fail(FailureReason.NOT_FOUND, "Mood entry not found")

            return OperationResult.ok("Mood updated successfully", data=updated)
        except Exception:
            logger.exception(f"Error updating mood {mood_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to update mood")

    async def delete_mood(self, mood_id: str) -> OperationResult:
        try:
            if not await self.mood_repository.delete(mood_id):
                return OperationResult.fail(FailureReason.NOT_FOUND, "Mood entry not found")
            logger.info(f"Mood entry {mood_id} deleted")
            return OperationResult.ok("Mood entry deleted")
        except Exception:
            logger.exception(f"Error deleting mood {mood_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to delete mood")

    async def get_mood(self, mood_id: str) -> Optional[MoodEntry]:
        try:
            return await self.mood_repository.get_by_id(mood_id)
        except Exception:
            logger.exception(f"Error getting mood {mood_id}")
            return None

    async def get_history(self, user_id: str) -> List[MoodEntry]:
        """История настроения, самые свежие записи первыми."""
        try:
            entries = await self.mood_repository.get_by_user(user_id)
            return sorted(entries, key=lambda e: (e.date, e.timestamp), reverse=True)
        except Exception:
            logger.exception(f"Error getting mood history for user {user_id}")
            return []

    async def get_by_date(self, user_id: str, day: date) -> Optional[MoodEntry]:
        try:
            return await self.mood_repository.get_by_user_and_date(user_id, day)
        except Exception:
            logger.exception(f"Error getting mood by date for user {user_id}")
            return None

    # Аналитика по истории пользователя

    async def get_streak(self, user_id: str) -> int:
        return mood_analytics.calculate_streak(await self.get_history(user_id), self._today())

    async def get_trend(self, user_id: str) -> MoodTrend:
        return mood_analytics.calculate_trend(await self.get_history(user_id))

    async def get_distribution(self, user_id: str) -> Dict[str, int]:
        return mood_analytics.calculate_distribution(await self.get_history(user_id))

    async def get_most_common(self, user_id: str) -> Optional[MostCommonMood]:
        return mood_analytics.most_common_mood(await self.get_history(user_id))

    async def get_intensity_over_time(self, user_id: str, days: Optional[int] = None) -> List[DailyIntensity]:
        return mood_analytics.intensity_over_time(await self.get_history(user_id), days, self._today())

    async def get_weekly_summary(self, user_id: str) -> WeeklySummary:
        return mood_analytics.weekly_summary(await self.get_history(user_id), self._today())

    async def get_monthly_summary(self, user_id: str) -> MonthlySummary:
        return mood_analytics.monthly_summary(await self.get_history(user_id), self._today())

    async def get_statistics(self, user_id: str) -> MoodStatistics:
        return mood_analytics.mood_statistics(await self.get_history(user_id), self._today())

    async def get_weekday_patterns(self, user_id: str) -> Dict[str, WeekdayPattern]:
        return mood_analytics.weekday_patterns(await self.get_history(user_id))

    async def get_insights(self, user_id: str) -> Optional[MoodInsights]:
        return build_insights(await self.get_history(user_id), self._today())

    async def get_session_correlation(self, user_id: str) -> List[SessionCorrelation]:
        """Изменение настроения вокруг завершенных сессий пользователя."""
        try:
            appointments = await self.appointment_repository.get_by_user(user_id)
        except Exception:
            logger.exception(f"Error getting appointments for mood correlation of user {user_id}")
            return []
        return mood_analytics.correlate_with_sessions(await self.get_history(user_id), appointments)
