"""
Pydantic модели записей настроения и результатов аналитики.
"""
import datetime as dt
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class MoodCategory(str, Enum):
    """Фиксированный набор категорий настроения"""
    HAPPY = "Happy"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    ANGRY = "Angry"
    CALM = "Calm"
    STRESSED = "Stressed"
    ENERGETIC = "Energetic"
    TIRED = "Tired"
    HOPEFUL = "Hopeful"
    OVERWHELMED = "Overwhelmed"

    @property
    def emoji(self) -> str:
        return MOOD_METADATA[self]["emoji"]

    @property
    def color(self) -> str:
        return MOOD_METADATA[self]["color"]

    @classmethod
    def from_name(cls, name: Any) -> Optional["MoodCategory"]:
        """Категория по имени или None для неизвестного имени."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            return None


MOOD_METADATA: Dict[MoodCategory, Dict[str, str]] = {
    MoodCategory.HAPPY: {"emoji": "😊", "color": "#52B788"},
    MoodCategory.SAD: {"emoji": "😢", "color": "#6C757D"},
    MoodCategory.ANXIOUS: {"emoji": "😰", "color": "#FFC107"},
    MoodCategory.ANGRY: {"emoji": "😠", "color": "#DC3545"},
    MoodCategory.CALM: {"emoji": "😌", "color": "#B7E4C7"},
    MoodCategory.STRESSED: {"emoji": "😫", "color": "#FF6B6B"},
    MoodCategory.ENERGETIC: {"emoji": "⚡", "color": "#FFD93D"},
    MoodCategory.TIRED: {"emoji": "😴", "color": "#95A5A6"},
    MoodCategory.HOPEFUL: {"emoji": "🌟", "color": "#52B788"},
    MoodCategory.OVERWHELMED: {"emoji": "🌪️", "color": "#E67E22"},
}

MIN_INTENSITY = 1
MAX_INTENSITY = 10


class MoodTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class MoodEntry(BaseModel):
    """Запись настроения за один календарный день"""
    id: Optional[str] = None
    user_id: str
    date: dt.date
    mood: MoodCategory
    intensity: int = Field(..., ge=MIN_INTENSITY, le=MAX_INTENSITY)
    notes: str = ""
    timestamp: dt.datetime = Field(default_factory=dt.datetime.now)
    updated_at: Optional[dt.datetime] = None

    def to_record(self) -> Dict[str, Any]:
        record = self.model_dump(mode="json")
        if record.get("id") is None:
            record.pop("id", None)
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MoodEntry":
        return cls.model_validate(record)


class MostCommonMood(BaseModel):
    name: MoodCategory
    emoji: str
    count: int


class DailyIntensity(BaseModel):
    date: dt.date
    avg_intensity: float


class WeeklySummary(BaseModel):
    entries: int = 0
    avg_intensity: float = 0.0
    most_common: Optional[MostCommonMood] = None
    trend: MoodTrend = MoodTrend.STABLE


class MonthlySummary(BaseModel):
    entries: int = 0
    avg_intensity: float = 0.0
    most_common: Optional[MostCommonMood] = None
    distribution: Dict[str, int] = Field(default_factory=dict)


class MoodStatistics(BaseModel):
    total_entries: int = 0
    current_streak: int = 0
    avg_intensity: float = 0.0
    trend: MoodTrend = MoodTrend.STABLE


class WeekdayPattern(BaseModel):
    total: int
    avg_intensity: float
    moods: Dict[str, int]


class SessionCorrelation(BaseModel):
    """Средняя интенсивность за неделю до и после завершенной сессии"""
    session_date: dt.date
    before_avg: float
    after_avg: float
    improvement: float


class MoodInsights(BaseModel):
    most_common: MostCommonMood
    avg_intensity: float
    trend: MoodTrend
    week_entries: int
    total_moods: int
    recommendation: str
