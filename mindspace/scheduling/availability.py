"""
Расчет свободных слотов терапевта на дату.
"""
from datetime import date
from typing import Iterable, List, Optional

from mindspace.scheduling.overlap import active_on
from mindspace.scheduling.slots import generate_slots
from mindspace.schemas.appointment import Appointment
from mindspace.schemas.therapist import Therapist


def weekday_name(day: date) -> str:
    """Английское имя дня недели ("Monday" ... "Sunday")."""
    return day.strftime("%A")


def available_slots(
    therapist: Optional[Therapist],
    day: date,
    duration_minutes: int,
    appointments: Iterable[Appointment]
) -> List[str]:
    """
    Свободные стартовые времена терапевта на дату.

    Неизвестный терапевт или нерабочий день дают пустой список. Из
    кандидатов вычитаются точные времена неотмененных записей терапевта;
    пересечения интервалов разной длительности здесь не учитываются.
    """
    if therapist is None or not therapist.works_on(weekday_name(day)):
        return []

    booked = {
        a.time for a in active_on(appointments, day)
        if a.therapist_id == therapist.id
    }
    return [slot for slot in generate_slots(duration_minutes=duration_minutes) if slot not in booked]
