"""
Обнаружение конфликтов записей.

Два вида проверки:
- точный слот: та же дата и то же время начала (проверка бронирования
  у терапевта);
- пересечение интервалов: полуоткрытые интервалы [start, end), касание
  границ конфликтом не считается (проверка со стороны пользователя).

Отмененные записи слот не занимают.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from mindspace.schemas.appointment import Appointment, normalize_time, parse_time


def active_on(appointments: Iterable[Appointment], day: date) -> List[Appointment]:
    """Неотмененные записи на указанную дату."""
    return [a for a in appointments if a.date == day and not a.is_cancelled]


def has_slot_conflict(
    appointments: Iterable[Appointment],
    day: date,
    time: str,
    exclude_id: Optional[str] = None
) -> bool:
    """
    Проверяет, занят ли точный слот (day, time).

    Args:
        appointments: записи терапевта
        exclude_id: запись, которую не учитывать (при переносе)
    """
    time = normalize_time(time)
    for appointment in active_on(appointments, day):
        if exclude_id is not None and appointment.id == exclude_id:
            continue
        if appointment.time == time:
            return True
    return False


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and end_a > start_b


def has_interval_overlap(
    appointments: Iterable[Appointment],
    day: date,
    time: str,
    duration: int,
    exclude_id: Optional[str] = None
) -> bool:
    """
    Проверяет пересечение интервала [time, time + duration) с
    неотмененными записями на ту же дату.
    """
    new_start = datetime.combine(day, parse_time(time))
    new_end = new_start + timedelta(minutes=duration)

    for appointment in active_on(appointments, day):
        if exclude_id is not None and appointment.id == exclude_id:
            continue
        if intervals_overlap(new_start, new_end, appointment.start, appointment.end):
            return True
    return False
