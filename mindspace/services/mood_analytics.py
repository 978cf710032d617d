"""
Аналитика временного ряда настроения.

Чистые функции над снимками записей MoodEntry. Каждая функция, зависящая
от текущей даты, получает ее явным параметром today.
"""
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from mindspace.config import settings
from mindspace.schemas.appointment import Appointment, AppointmentStatus
from mindspace.schemas.mood import (
    DailyIntensity, MonthlySummary, MoodCategory, MoodEntry, MoodStatistics, MoodTrend,
    MostCommonMood, SessionCorrelation, WeekdayPattern, WeeklySummary
)

# Окно до и после сессии для сравнения настроения
SESSION_WINDOW_DAYS = 7


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def average_intensity(entries: Sequence[MoodEntry]) -> float:
    """Средняя интенсивность, округленная до одного знака; 0 для пустого списка."""
    return round(_mean([e.intensity for e in entries]), 1)


def chronological(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    return sorted(entries, key=lambda e: (e.date, e.timestamp))


def calculate_streak(entries: Iterable[MoodEntry], today: date) -> int:
    """
    Количество подряд идущих дней с записью, заканчивая сегодняшним.

    Если за сегодня записи нет, серия равна 0. Записи с датой позже today
    не учитываются.
    """
    dates = sorted({e.date for e in entries if e.date <= today}, reverse=True)

    streak = 0
    for day in dates:
        if (today - day).days == streak:
            streak += 1
        else:
            break
    return streak


def calculate_trend(
    entries: Iterable[MoodEntry],
    window: Optional[int] = None,
    threshold: Optional[float] = None
) -> MoodTrend:
    """
    Сравнивает среднюю интенсивность последних window записей со средней
    по предыдущим window записям.

    Окна считаются по количеству записей, а не по календарным дням.

    Raises:
        ValueError: window меньше 1
    """
    window = settings.mood.TREND_WINDOW if window is None else window
    if window < 1:
        raise ValueError("window must be at least 1")
    threshold = settings.mood.TREND_THRESHOLD if threshold is None else threshold

    ordered = chronological(entries)
    if len(ordered) < 2:
        return MoodTrend.STABLE

    recent = ordered[-window:]
    older = ordered[-2 * window:-window]
    if not older:
        return MoodTrend.STABLE

    diff = _mean([e.intensity for e in recent]) - _mean([e.intensity for e in older])
    if diff > threshold:
        return MoodTrend.IMPROVING
    if diff < -threshold:
        return MoodTrend.DECLINING
    return MoodTrend.STABLE


def calculate_distribution(entries: Iterable[MoodEntry]) -> Dict[str, int]:
    """Количество записей по каждой категории, включая нулевые."""
    distribution = {category.value: 0 for category in MoodCategory}
    for entry in entries:
        distribution[entry.mood.value] += 1
    return distribution


def most_common_mood(entries: Iterable[MoodEntry]) -> Optional[MostCommonMood]:
    """
    Самая частая категория. При равенстве выбирается категория, чье имя
    меньше лексикографически.
    """
    counts = Counter(entry.mood for entry in entries)
    if not counts:
        return None

    mood, count = min(counts.items(), key=lambda item: (-item[1], item[0].value))
    return MostCommonMood(name=mood, emoji=mood.emoji, count=count)


def intensity_over_time(
    entries: Iterable[MoodEntry],
    window_days: Optional[int],
    today: date
) -> List[DailyIntensity]:
    """
    Средняя интенсивность по датам начиная с today - window_days,
    по возрастанию даты.
    """
    window_days = settings.mood.INTENSITY_WINDOW_DAYS if window_days is None else window_days
    cutoff = today - timedelta(days=window_days)

    daily: Dict[date, List[int]] = defaultdict(list)
    for entry in entries:
        if entry.date >= cutoff:
            daily[entry.date].append(entry.intensity)

    return [
        DailyIntensity(date=day, avg_intensity=_mean(values))
        for day, values in sorted(daily.items())
    ]


def month_ago(today: date) -> date:
    """Та же дата месяцем раньше; день ограничивается длиной месяца."""
    year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
    next_month_first = date(year + (month // 12), month % 12 + 1, 1)
    last_day = (next_month_first - timedelta(days=1)).day
    return date(year, month, min(today.day, last_day))


def weekly_summary(entries: Sequence[MoodEntry], today: date) -> WeeklySummary:
    """
    Сводка за последние 7 дней. Тренд считается по всей истории.
    """
    cutoff = today - timedelta(days=7)
    week_entries = [e for e in entries if e.date >= cutoff]
    if not week_entries:
        return WeeklySummary()

    return WeeklySummary(
        entries=len(week_entries),
        avg_intensity=average_intensity(week_entries),
        most_common=most_common_mood(week_entries),
        trend=calculate_trend(entries)
    )


def monthly_summary(entries: Sequence[MoodEntry], today: date) -> MonthlySummary:
    cutoff = month_ago(today)
    month_entries = [e for e in entries if e.date >= cutoff]
    if not month_entries:
        return MonthlySummary()

    return MonthlySummary(
        entries=len(month_entries),
        avg_intensity=average_intensity(month_entries),
        most_common=most_common_mood(month_entries),
        distribution=calculate_distribution(month_entries)
    )


def mood_statistics(entries: Sequence[MoodEntry], today: date) -> MoodStatistics:
    if not entries:
        return MoodStatistics()

    return MoodStatistics(
        total_entries=len(entries),
        current_streak=calculate_streak(entries, today),
        avg_intensity=average_intensity(entries),
        trend=calculate_trend(entries)
    )


def weekday_patterns(entries: Iterable[MoodEntry]) -> Dict[str, WeekdayPattern]:
    """
    Статистика по дням недели: количество записей, средняя интенсивность
    и распределение категорий. Дни без записей не включаются.
    """
    grouped: Dict[str, List[MoodEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.date.strftime("%A")].append(entry)

    return {
        day: WeekdayPattern(
            total=len(day_entries),
            avg_intensity=average_intensity(day_entries),
            moods=dict(Counter(e.mood.value for e in day_entries))
        )
        for day, day_entries in grouped.items()
    }


def correlate_with_sessions(
    entries: Sequence[MoodEntry],
    appointments: Iterable[Appointment]
) -> List[SessionCorrelation]:
    """
    Сравнивает настроение за неделю до и неделю после каждой завершенной
    сессии. Сессии без записей с одной из сторон пропускаются.
    """
    window = timedelta(days=SESSION_WINDOW_DAYS)
    sessions = sorted(
        {a.date for a in appointments if a.status == AppointmentStatus.COMPLETED}
    )

    result = []
    for session_date in sessions:
        before = [e.intensity for e in entries if session_date - window <= e.date < session_date]
        after = [e.intensity for e in entries if session_date < e.date <= session_date + window]
        if not before or not after:
            continue

        before_avg = round(_mean(before), 1)
        after_avg = round(_mean(after), 1)
        result.append(SessionCorrelation(
            session_date=session_date,
            before_avg=before_avg,
            after_avg=after_avg,
            improvement=round(after_avg - before_avg, 1)
        ))
    return result
