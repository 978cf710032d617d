import pytest
from pydantic import ValidationError

from mindspace.config import MongoDBSettings, MoodSettings, SchedulingSettings, Settings


class TestSettings:
    """Тесты настроек приложения"""

    def test_scheduling_defaults(self, monkeypatch):
        for name in ("SCHEDULING_WORKDAY_START_HOUR", "SCHEDULING_WORKDAY_END_HOUR",
                     "SCHEDULING_DEFAULT_DURATION_MINUTES"):
            monkeypatch.delenv(name, raising=False)

        scheduling = SchedulingSettings()

        assert scheduling.WORKDAY_START_HOUR == 9
        assert scheduling.WORKDAY_END_HOUR == 17
        assert scheduling.DEFAULT_DURATION_MINUTES == 50

    def test_scheduling_from_environment(self, monkeypatch):
        monkeypatch.setenv("SCHEDULING_WORKDAY_START_HOUR", "8")
        monkeypatch.setenv("SCHEDULING_WORKDAY_END_HOUR", "12")

        scheduling = SchedulingSettings()

        assert scheduling.WORKDAY_START_HOUR == 8
        assert scheduling.WORKDAY_END_HOUR == 12

    def test_window_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            SchedulingSettings(WORKDAY_START_HOUR=17, WORKDAY_END_HOUR=9)

    def test_mood_defaults(self, monkeypatch):
        for name in ("MOOD_TREND_WINDOW", "MOOD_TREND_THRESHOLD", "MOOD_INTENSITY_WINDOW_DAYS"):
            monkeypatch.delenv(name, raising=False)

        mood = MoodSettings()

        assert mood.TREND_WINDOW == 7
        assert mood.TREND_THRESHOLD == 0.5
        assert mood.INTENSITY_WINDOW_DAYS == 30

    def test_unknown_store_backend(self):
        with pytest.raises(ValidationError):
            Settings(STORE_BACKEND="sqlite")

    def test_mongodb_from_environment(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URL", "mongodb://db.local:27017")
        monkeypatch.setenv("MONGODB_DB_NAME", "mindspace_test")

        mongodb = MongoDBSettings()

        assert mongodb.MONGODB_URL == "mongodb://db.local:27017"
        assert mongodb.MONGODB_DB_NAME == "mindspace_test"
