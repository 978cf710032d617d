"""
Сервис записей на прием.
Реализует бронирование, перенос, отмену и завершение записей, а также
выборки по записям пользователя.

Переходы статусов: confirmed -> completed, confirmed -> cancelled,
confirmed -> confirmed (перенос). Статусы completed и cancelled конечные.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from mindspace.config import settings
from mindspace.core.database.store import DocumentStore
from mindspace.core.exceptions.store import DuplicateError
from mindspace.repositories.appointment_repository import AppointmentRepository
from mindspace.repositories.therapist_repository import TherapistRepository
from mindspace.scheduling.availability import available_slots
from mindspace.scheduling.overlap import has_interval_overlap, has_slot_conflict
from mindspace.schemas.appointment import (
    Appointment, AppointmentStats, AppointmentStatus, normalize_time
)
from mindspace.schemas.results import FailureReason, OperationResult

logger = logging.getLogger(__name__)


def week_range(today: date) -> tuple[date, date]:
    """Неделя воскресенье-суббота, содержащая today."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


class AppointmentService:
    """Сервис для работы с записями на прием"""

    def __init__(
        self,
        store: DocumentStore,
        appointment_repository: Optional[AppointmentRepository] = None,
        therapist_repository: Optional[TherapistRepository] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.appointment_repository = appointment_repository or AppointmentRepository(store)
        self.therapist_repository = therapist_repository or TherapistRepository(store)
        # Все времена локальные "настенные", без часового пояса
        self.clock = clock or datetime.now

    async def book(
        self,
        user_id: str,
        therapist_id: str,
        date: date,
        time: str,
        duration: Optional[int] = None,
        notes: str = "",
        type: Optional[str] = None
    ) -> OperationResult:
        """
        Бронирует слот у терапевта.

        Raises:
            ValueError: time не в формате "HH:MM" или duration меньше 1
        """
        time = normalize_time(time)
        if duration is None:
            duration = settings.scheduling.DEFAULT_DURATION_MINUTES
        elif duration < 1:
            raise ValueError("duration must be a positive number of minutes")

        try:
            if not await self.therapist_repository.is_connected(user_id, therapist_id):
                return OperationResult.fail(
                    FailureReason.NOT_CONNECTED,
                    "You must be connected with this therapist first"
                )

            existing = await self.appointment_repository.get_by_therapist_and_date(therapist_id, date)
            if has_slot_conflict(existing, date, time):
                return OperationResult.fail(
                    FailureReason.SLOT_TAKEN,
                    "This time slot is no longer available"
                )

            appointment = Appointment(
                user_id=user_id,
                therapist_id=therapist_id,
                date=date,
                time=time,
                duration=duration,
                type=type or settings.scheduling.DEFAULT_SESSION_TYPE,
                notes=notes,
                created_at=self.clock()
            )
            try:
                created = await self.appointment_repository.create(appointment)
            except DuplicateError:
                # Слот заняли между проверкой и вставкой
                logger.info(f"Slot {date} {time} of therapist {therapist_id} was taken concurrently")
                return OperationResult.fail(
                    FailureReason.SLOT_TAKEN,
                    "This time slot is no longer available"
                )

            logger.info(f"Appointment {created.id} booked for user {user_id} with therapist {therapist_id}")
            return OperationResult.ok("Appointment booked successfully", data=created)
        except Exception:
            logger.exception(f"Error booking appointment for user {user_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to book appointment")

    async def reschedule(self, appointment_id: str, new_date: date, new_time: str) -> OperationResult:
        """
        Переносит запись на новую дату и время у того же терапевта.

        Raises:
            ValueError: new_time не в формате "HH:MM"
        """
        new_time = normalize_time(new_time)

        try:
            appointment = await self.appointment_repository.get_by_id(appointment_id)
            if appointment is None:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")
            if appointment.status == AppointmentStatus.CANCELLED:
                return OperationResult.fail(
                    FailureReason.ALREADY_CANCELLED,
                    "Cannot reschedule a cancelled appointment"
                )
            if appointment.status == AppointmentStatus.COMPLETED:
                return OperationResult.fail(
                    FailureReason.INVALID_TRANSITION,
                    "Cannot reschedule a completed appointment"
                )

            existing = await self.appointment_repository.get_by_therapist_and_date(
                appointment.therapist_id, new_date
            )
            if has_slot_conflict(existing, new_date, new_time, exclude_id=appointment.id):
                return OperationResult.fail(
                    FailureReason.SLOT_TAKEN,
                    "The new time slot is not available"
                )

            rescheduled = appointment.model_copy(update={
                "date": new_date,
                "time": new_time,
                "rescheduled_at": self.clock()
            })
            try:
                updated = await self.appointment_repository.update(rescheduled)
            except DuplicateError:
                return OperationResult.fail(
                    FailureReason.SLOT_TAKEN,
                    "The new time slot is not available"
                )
            if not updated:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")

            logger.info(f"Appointment {appointment_id} rescheduled to {new_date} {new_time}")
            return OperationResult.ok("Appointment rescheduled successfully", data=rescheduled)
        except Exception:
            logger.exception(f"Error rescheduling appointment {appointment_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to reschedule appointment")

    async def cancel(self, appointment_id: str) -> OperationResult:
        try:
            appointment = await self.appointment_repository.get_by_id(appointment_id)
            if appointment is None:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")
            if appointment.status == AppointmentStatus.CANCELLED:
                return OperationResult.fail(
                    FailureReason.ALREADY_CANCELLED,
                    "Appointment is already cancelled"
                )
            if appointment.status == AppointmentStatus.COMPLETED:
                return OperationResult.fail(
                    FailureReason.INVALID_TRANSITION,
                    "Cannot cancel a completed appointment"
                )

            cancelled = appointment.model_copy(update={
                "status": AppointmentStatus.CANCELLED,
                "cancelled_at": self.clock()
            })
            if not await self.appointment_repository.update(cancelled):
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")

            logger.info(f"Appointment {appointment_id} cancelled")
            return OperationResult.ok("Appointment cancelled successfully", data=cancelled)
        except Exception:
            logger.exception(f"Error cancelling appointment {appointment_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to cancel appointment")

    async def complete(self, appointment_id: str) -> OperationResult:
        try:
            appointment = await self.appointment_repository.get_by_id(appointment_id)
            if appointment is None:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")
            if appointment.status == AppointmentStatus.CANCELLED:
                return OperationResult.fail(
                    FailureReason.INVALID_TRANSITION,
                    "Cannot complete a cancelled appointment"
                )
            if appointment.status == AppointmentStatus.COMPLETED:
                return OperationResult.fail(
                    FailureReason.ALREADY_COMPLETED,
                    "Appointment is already completed"
                )

            completed = appointment.model_copy(update={
                "status": AppointmentStatus.COMPLETED,
                "completed_at": self.clock()
            })
            if not await self.appointment_repository.update(completed):
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")

            logger.info(f"Appointment {appointment_id} marked as completed")
            return OperationResult.ok("Appointment marked as completed", data=completed)
        except Exception:
            logger.exception(f"Error completing appointment {appointment_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to complete appointment")

    async def update_notes(self, appointment_id: str, notes: str) -> OperationResult:
        try:
            appointment = await self.appointment_repository.get_by_id(appointment_id)
            if appointment is None:
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")

            updated = appointment.model_copy(update={"notes": notes})
            if not await self.appointment_repository.update(updated):
                return OperationResult.fail(FailureReason.NOT_FOUND, "Appointment not found")

            return OperationResult.ok("Notes updated successfully", data=updated)
        except Exception:
            logger.exception(f"Error updating notes of appointment {appointment_id}")
            return OperationResult.fail(FailureReason.STORE_ERROR, "Failed to update notes")

    # Выборки. При ошибке хранилища возвращают пустой результат.

    async def _user_appointments(self, user_id: str) -> List[Appointment]:
        return await self.appointment_repository.get_by_user(user_id)

    async def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        try:
            return await self.appointment_repository.get_by_id(appointment_id)
        except Exception:
            logger.exception(f"Error getting appointment {appointment_id}")
            return None

    async def get_upcoming(self, user_id: str) -> List[Appointment]:
        """Подтвержденные записи, которые начнутся позже текущего момента."""
        try:
            now = self.clock()
            upcoming = [
                a for a in await self._user_appointments(user_id)
                if a.start > now and a.status == AppointmentStatus.CONFIRMED
            ]
            return sorted(upcoming, key=lambda a: a.start)
        except Exception:
            logger.exception(f"Error getting upcoming appointments for user {user_id}")
            return []

    async def get_past(self, user_id: str) -> List[Appointment]:
        """Прошедшие или завершенные записи, без отмененных."""
        try:
            now = self.clock()
            past = [
                a for a in await self._user_appointments(user_id)
                if not a.is_cancelled and (a.start < now or a.status == AppointmentStatus.COMPLETED)
            ]
            return sorted(past, key=lambda a: a.start, reverse=True)
        except Exception:
            logger.exception(f"Error getting past appointments for user {user_id}")
            return []

    async def get_cancelled(self, user_id: str) -> List[Appointment]:
        try:
            cancelled = [a for a in await self._user_appointments(user_id) if a.is_cancelled]
            return sorted(cancelled, key=lambda a: a.start, reverse=True)
        except Exception:
            logger.exception(f"Error getting cancelled appointments for user {user_id}")
            return []

    async def get_all(self, user_id: str) -> List[Appointment]:
        try:
            return sorted(await self._user_appointments(user_id), key=lambda a: a.start, reverse=True)
        except Exception:
            logger.exception(f"Error getting appointments for user {user_id}")
            return []

    async def get_next(self, user_id: str) -> Optional[Appointment]:
        upcoming = await self.get_upcoming(user_id)
        return upcoming[0] if upcoming else None

    async def get_by_date(self, user_id: str, day: date) -> List[Appointment]:
        try:
            return await self.appointment_repository.get_by_user_and_date(user_id, day)
        except Exception:
            logger.exception(f"Error getting appointments by date for user {user_id}")
            return []

    async def get_with_therapist(self, user_id: str, therapist_id: str) -> List[Appointment]:
        try:
            return [a for a in await self._user_appointments(user_id) if a.therapist_id == therapist_id]
        except Exception:
            logger.exception(f"Error getting appointments with therapist {therapist_id} for user {user_id}")
            return []

    async def get_week(self, user_id: str) -> List[Appointment]:
        """Неотмененные записи текущей недели (воскресенье-суббота)."""
        try:
            start, end = week_range(self.clock().date())
            return [
                a for a in await self._user_appointments(user_id)
                if start <= a.date <= end and not a.is_cancelled
            ]
        except Exception:
            logger.exception(f"Error getting week appointments for user {user_id}")
            return []

    async def get_stats(self, user_id: str) -> AppointmentStats:
        try:
            appointments = await self._user_appointments(user_id)
            now = self.clock()
            completed = [a for a in appointments if a.status == AppointmentStatus.COMPLETED]
            total_minutes = sum(a.duration for a in completed)
            return AppointmentStats(
                total=len(appointments),
                upcoming=len([
                    a for a in appointments
                    if a.start > now and a.status == AppointmentStatus.CONFIRMED
                ]),
                completed=len(completed),
                cancelled=len([a for a in appointments if a.is_cancelled]),
                total_hours=round(total_minutes / 60, 1)
            )
        except Exception:
            logger.exception(f"Error getting appointment stats for user {user_id}")
            return AppointmentStats()

    async def get_available_slots(
        self,
        therapist_id: str,
        day: date,
        duration: Optional[int] = None
    ) -> List[str]:
        """
        Свободные слоты терапевта на дату; пусто для неизвестного терапевта
        или нерабочего дня.
        """
        if duration is None:
            duration = settings.scheduling.DEFAULT_DURATION_MINUTES
        elif duration < 1:
            raise ValueError("duration must be a positive number of minutes")
        try:
            therapist = await self.therapist_repository.get_therapist(therapist_id)
            if therapist is None:
                return []
            appointments = await self.appointment_repository.get_by_therapist_and_date(therapist_id, day)
            return available_slots(therapist, day, duration, appointments)
        except Exception:
            logger.exception(f"Error getting available slots for therapist {therapist_id}")
            return []

    async def has_conflict(self, user_id: str, day: date, time: str, duration: int) -> bool:
        """
        Пересекается ли интервал с записями пользователя на эту дату.
        При ошибке считается, что конфликт есть.
        """
        try:
            appointments = await self.appointment_repository.get_by_user_and_date(user_id, day)
            return has_interval_overlap(appointments, day, time, duration)
        except Exception:
            logger.exception(f"Error checking conflicts for user {user_id}")
            return True
