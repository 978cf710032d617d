"""
Генерация временных слотов рабочего дня.

Слоты начинаются в start_hour:00 и идут с шагом duration_minutes; в список
попадает каждый слот, который заканчивается не позже end_hour:00.
"""
from datetime import datetime, timedelta
from typing import List, Optional

from mindspace.config import settings


def generate_slots(
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    duration_minutes: Optional[int] = None
) -> List[str]:
    """
    Генерирует стартовые времена слотов в формате "HH:MM".

    Args:
        start_hour: час начала рабочего окна (по умолчанию из настроек)
        end_hour: час окончания рабочего окна (по умолчанию из настроек)
        duration_minutes: длительность слота и шаг генерации

    Returns:
        List[str]: времена по возрастанию; пустой список, если слот не
        помещается в окно

    Raises:
        ValueError: длительность не положительна
    """
    scheduling = settings.scheduling
    start_hour = scheduling.WORKDAY_START_HOUR if start_hour is None else start_hour
    end_hour = scheduling.WORKDAY_END_HOUR if end_hour is None else end_hour
    duration_minutes = scheduling.DEFAULT_DURATION_MINUTES if duration_minutes is None else duration_minutes

    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")

    # Опорная дата нужна только для арифметики времени
    day = datetime(2000, 1, 1)
    current = day + timedelta(hours=start_hour)
    window_end = day + timedelta(hours=end_hour)
    step = timedelta(minutes=duration_minutes)

    slots = []
    while current + step <= window_end:
        slots.append(current.strftime("%H:%M"))
        current += step

    return slots
