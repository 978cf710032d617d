"""
Формирование инсайтов и рекомендаций по дневнику настроения.
"""
from datetime import date, timedelta
from typing import Optional, Sequence

from mindspace.schemas.mood import MoodEntry, MoodInsights, MoodTrend
from mindspace.services.mood_analytics import average_intensity, calculate_trend, most_common_mood

# Порог "низкого" и "высокого" среднего настроения
LOW_INTENSITY = 5
HIGH_INTENSITY = 7
# Минимум записей за неделю для содержательных выводов
MIN_WEEK_ENTRIES = 3

RECOMMENDATION_ESCALATE = "Your mood has been declining. Consider scheduling a session with your therapist."
RECOMMENDATION_LOG_MORE = "Try to log your mood more regularly for better insights."
RECOMMENDATION_IMPROVING = "Great! Your mood is improving. Keep up the good work!"
RECOMMENDATION_DOING_WELL = "You're doing well! Continue your current practices."
RECOMMENDATION_SELF_CARE = "Remember to practice self-care and reach out to your support system."


def synthesize_recommendation(trend: MoodTrend, avg_intensity: float, week_entries: int) -> str:
    """
    Выбирает рекомендацию по первому сработавшему правилу:
    ухудшение при низком среднем, редкие записи, улучшение, высокое
    среднее, общая рекомендация.
    """
    if trend == MoodTrend.DECLINING and avg_intensity < LOW_INTENSITY:
        return RECOMMENDATION_ESCALATE
    if week_entries < MIN_WEEK_ENTRIES:
        return RECOMMENDATION_LOG_MORE
    if trend == MoodTrend.IMPROVING:
        return RECOMMENDATION_IMPROVING
    if avg_intensity > HIGH_INTENSITY:
        return RECOMMENDATION_DOING_WELL
    return RECOMMENDATION_SELF_CARE


def build_insights(entries: Sequence[MoodEntry], today: date) -> Optional[MoodInsights]:
    """
    Сводные инсайты по всей истории пользователя; None, если записей нет.
    """
    if not entries:
        return None

    trend = calculate_trend(entries)
    avg = average_intensity(entries)
    week_entries = len([e for e in entries if e.date >= today - timedelta(days=7)])

    return MoodInsights(
        most_common=most_common_mood(entries),
        avg_intensity=avg,
        trend=trend,
        week_entries=week_entries,
        total_moods=len(entries),
        recommendation=synthesize_recommendation(trend, avg, week_entries)
    )
