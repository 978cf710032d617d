from mindspace.schemas.appointment import (
    Appointment, AppointmentStatus, AppointmentStats, normalize_time, parse_time
)
from mindspace.schemas.mood import (
    MoodCategory, MoodEntry, MoodTrend, MOOD_METADATA, MIN_INTENSITY, MAX_INTENSITY,
    MostCommonMood, DailyIntensity, WeeklySummary, MonthlySummary, MoodStatistics,
    WeekdayPattern, SessionCorrelation, MoodInsights
)
from mindspace.schemas.therapist import Therapist, TherapistConnection, WEEKDAY_NAMES
from mindspace.schemas.results import FailureReason, OperationResult

__all__ = [
    "Appointment", "AppointmentStatus", "AppointmentStats", "normalize_time", "parse_time",
    "MoodCategory", "MoodEntry", "MoodTrend", "MOOD_METADATA", "MIN_INTENSITY", "MAX_INTENSITY",
    "MostCommonMood", "DailyIntensity", "WeeklySummary", "MonthlySummary", "MoodStatistics",
    "WeekdayPattern", "SessionCorrelation", "MoodInsights",
    "Therapist", "TherapistConnection", "WEEKDAY_NAMES",
    "FailureReason", "OperationResult",
]
