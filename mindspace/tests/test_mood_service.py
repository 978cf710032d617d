from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from conftest import FIXED_NOW, TODAY, make_entry
from mindspace.core.database.indexes import MOODS_COLLECTION
from mindspace.core.exceptions.store import ConnectionError
from mindspace.schemas.mood import MoodCategory, MoodTrend
from mindspace.schemas.results import FailureReason
from mindspace.services.insight_service import RECOMMENDATION_LOG_MORE


class TestLogMood:
    """Тесты записи настроения за день"""

    async def test_log_mood(self, mood_service, store):
        result = await mood_service.log_mood("u1", TODAY, "Happy", 8, "good day")

        assert result.success
        assert result.message == "Mood logged successfully"
        entry = result.data
        assert entry.mood == MoodCategory.HAPPY
        assert entry.timestamp == FIXED_NOW

        records = await store.get_all(MOODS_COLLECTION)
        assert len(records) == 1
        assert records[0]["date"] == TODAY.isoformat()

    async def test_second_log_on_same_date_overwrites(self, mood_service, store):
        await mood_service.log_mood("u1", TODAY, "Sad", 3, "morning")
        result = await mood_service.log_mood("u1", TODAY, "Calm", 6, "evening")

        assert result.success
        assert result.message == "Mood entry updated"
        records = await store.get_all(MOODS_COLLECTION)
        assert len(records) == 1
        assert records[0]["mood"] == "Calm"
        assert records[0]["intensity"] == 6
        assert records[0]["notes"] == "evening"
        assert records[0]["updated_at"] is not None

    async def test_different_users_same_date(self, mood_service, store):
        await mood_service.log_mood("u1", TODAY, "Sad", 3)
        await mood_service.log_mood("u2", TODAY, "Sad", 3)
        assert len(await store.get_all(MOODS_COLLECTION)) == 2

    async def test_accepts_category_enum(self, mood_service):
        result = await mood_service.log_mood("u1", TODAY, MoodCategory.TIRED, 2)
        assert result.success

    @pytest.mark.parametrize("mood", ["Ecstatic", "happy", "", None])
    async def test_invalid_mood(self, mood_service, store, mood):
        result = await mood_service.log_mood("u1", TODAY, mood, 5)

        assert result.reason == FailureReason.INVALID_MOOD
        assert await store.get_all(MOODS_COLLECTION) == []

    @pytest.mark.parametrize("intensity", [0, 11, -1, 5.5, "5", True, None])
    async def test_invalid_intensity(self, mood_service, store, intensity):
        result = await mood_service.log_mood("u1", TODAY, "Happy", intensity)

        assert result.reason == FailureReason.INVALID_INTENSITY
        assert await store.get_all(MOODS_COLLECTION) == []

    @pytest.mark.parametrize("intensity", [1, 10])
    async def test_intensity_bounds(self, mood_service, intensity):
        assert (await mood_service.log_mood("u1", TODAY, "Happy", intensity)).success

    async def test_lost_race_falls_back_to_update(self, mood_service, store):
        """Если запись за день появилась между чтением и вставкой, она обновляется"""
        existing = make_entry(TODAY, 2, MoodCategory.SAD)
        await store.insert(MOODS_COLLECTION, existing.to_record())
        real_lookup = mood_service.mood_repository.get_by_user_and_date
        mood_service.mood_repository.get_by_user_and_date = AsyncMock(
            side_effect=[None, await real_lookup("u1", TODAY)]
        )

        result = await mood_service.log_mood("u1", TODAY, "Hopeful", 7)

        assert result.success
        records = await store.get_all(MOODS_COLLECTION)
        assert len(records) == 1
        assert records[0]["mood"] == "Hopeful"

    async def test_store_error(self, mood_service):
        mood_service.mood_repository.get_by_user_and_date = AsyncMock(side_effect=ConnectionError("down"))

        result = await mood_service.log_mood("u1", TODAY, "Happy", 5)

        assert result.reason == FailureReason.STORE_ERROR
        assert result.message == "Failed to log mood"


class TestUpdateAndDelete:

    async def test_partial_update(self, mood_service):
        created = (await mood_service.log_mood("u1", TODAY, "Sad", 3, "note")).data

        result = await mood_service.update_mood(created.id, intensity=5)

        assert result.success
        stored = await mood_service.get_mood(created.id)
        assert stored.intensity == 5
        assert stored.mood == MoodCategory.SAD
        assert stored.notes == "note"
        assert stored.updated_at == FIXED_NOW

    async def test_update_invalid_values(self, mood_service):
        created = (await mood_service.log_mood("u1", TODAY, "Sad", 3)).data

        assert (await mood_service.update_mood(created.id, mood="Bored")).reason == FailureReason.INVALID_MOOD
        assert (await mood_service.update_mood(created.id, intensity=12)).reason == FailureReason.INVALID_INTENSITY
        assert (await mood_service.get_mood(created.id)).intensity == 3

    async def test_update_missing(self, mood_service):
        result = await mood_service.update_mood("missing", notes="x")
        assert result.reason == FailureReason.NOT_FOUND

    async def test_delete(self, mood_service):
        created = (await mood_service.log_mood("u1", TODAY, "Sad", 3)).data

        assert (await mood_service.delete_mood(created.id)).success
        assert await mood_service.get_mood(created.id) is None
        assert (await mood_service.delete_mood(created.id)).reason == FailureReason.NOT_FOUND

    async def test_date_is_free_after_delete(self, mood_service, store):
        created = (await mood_service.log_mood("u1", TODAY, "Sad", 3)).data
        await mood_service.delete_mood(created.id)

        result = await mood_service.log_mood("u1", TODAY, "Happy", 9)

        assert result.message == "Mood logged successfully"
        assert len(await store.get_all(MOODS_COLLECTION)) == 1


class TestHistoryAndAnalytics:
    """Тесты выборок и аналитики через сервис"""

    @pytest.fixture
    async def logged(self, mood_service):
        for offset, (mood, intensity) in enumerate([("Happy", 8), ("Happy", 7), ("Sad", 3)]):
            await mood_service.log_mood("u1", TODAY - timedelta(days=offset), mood, intensity)

    async def test_history_most_recent_first(self, mood_service, logged):
        history = await mood_service.get_history("u1")
        assert [e.date for e in history] == [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]

    async def test_by_date(self, mood_service, logged):
        entry = await mood_service.get_by_date("u1", TODAY - timedelta(days=2))
        assert entry.mood == MoodCategory.SAD
        assert await mood_service.get_by_date("u1", date(2020, 1, 1)) is None

    async def test_statistics(self, mood_service, logged):
        stats = await mood_service.get_statistics("u1")

        assert stats.total_entries == 3
        assert stats.current_streak == 3
        assert stats.avg_intensity == 6.0

    async def test_wrappers(self, mood_service, logged):
        assert await mood_service.get_streak("u1") == 3
        assert await mood_service.get_trend("u1") == MoodTrend.STABLE
        assert (await mood_service.get_distribution("u1"))["Happy"] == 2
        assert (await mood_service.get_most_common("u1")).name == MoodCategory.HAPPY
        assert len(await mood_service.get_intensity_over_time("u1", 7)) == 3
        assert (await mood_service.get_weekly_summary("u1")).entries == 3
        assert (await mood_service.get_monthly_summary("u1")).entries == 3
        assert sum(p.total for p in (await mood_service.get_weekday_patterns("u1")).values()) == 3

    async def test_insights(self, mood_service, logged):
        insights = await mood_service.get_insights("u1")

        assert insights.total_moods == 3
        assert insights.week_entries == 3
        assert insights.most_common.name == MoodCategory.HAPPY
        assert insights.recommendation

    async def test_insights_without_entries(self, mood_service):
        assert await mood_service.get_insights("u1") is None

    async def test_insights_for_sparse_logging(self, mood_service):
        await mood_service.log_mood("u1", TODAY, "Calm", 6)
        insights = await mood_service.get_insights("u1")
        assert insights.recommendation == RECOMMENDATION_LOG_MORE

    async def test_session_correlation(self, mood_service, appointment_service):
        session_day = TODAY - timedelta(days=3)
        booked = await appointment_service.book("u1", "t1", session_day, "09:00")
        await appointment_service.complete(booked.data.id)
        await mood_service.log_mood("u1", session_day - timedelta(days=1), "Sad", 3)
        await mood_service.log_mood("u1", session_day + timedelta(days=1), "Hopeful", 7)

        correlation = await mood_service.get_session_correlation("u1")

        assert len(correlation) == 1
        assert correlation[0].improvement == 4.0

    async def test_history_on_store_failure(self, mood_service):
        mood_service.mood_repository.get_by_user = AsyncMock(side_effect=RuntimeError("down"))
        assert await mood_service.get_history("u1") == []
        assert await mood_service.get_streak("u1") == 0
