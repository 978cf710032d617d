"""
API маршруты для работы с записями на прием.
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from mindspace.config import settings
from mindspace.core.database.startup import get_store
from mindspace.core.database.store import DocumentStore
from mindspace.modules.appointments.schemas import (
    AppointmentCreate, AppointmentNotesUpdate, AppointmentReschedule,
    AvailableSlotsResponse, ConflictCheckResponse
)
from mindspace.modules.responses import raise_for_result
from mindspace.schemas.appointment import Appointment, AppointmentStats, normalize_time
from mindspace.services.appointment_service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])


async def get_appointment_service(store: DocumentStore = Depends(get_store)) -> AppointmentService:
    return AppointmentService(store)


@router.post("", response_model=Appointment, status_code=201)
async def book_appointment(
    request: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service)
):
    """
    Бронирует слот у терапевта, с которым у пользователя есть связь.
    """
    result = await service.book(
        user_id=request.user_id,
        therapist_id=request.therapist_id,
        date=request.date,
        time=request.time,
        duration=request.duration,
        notes=request.notes,
        type=request.type
    )
    raise_for_result(result)
    return result.data


@router.get("/slots/{therapist_id}", response_model=AvailableSlotsResponse)
async def get_available_slots(
    therapist_id: str = Path(..., title="ID терапевта"),
    day: date = Query(..., alias="date"),
    duration: Optional[int] = Query(None, gt=0),
    service: AppointmentService = Depends(get_appointment_service)
):
    duration = duration or settings.scheduling.DEFAULT_DURATION_MINUTES
    slots = await service.get_available_slots(therapist_id, day, duration)
    return AvailableSlotsResponse(therapist_id=therapist_id, date=day, duration=duration, slots=slots)


@router.get("/user/{user_id}", response_model=List[Appointment])
async def get_all_appointments(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_all(user_id)


@router.get("/user/{user_id}/upcoming", response_model=List[Appointment])
async def get_upcoming_appointments(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_upcoming(user_id)


@router.get("/user/{user_id}/past", response_model=List[Appointment])
async def get_past_appointments(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_past(user_id)


@router.get("/user/{user_id}/cancelled", response_model=List[Appointment])
async def get_cancelled_appointments(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_cancelled(user_id)


@router.get("/user/{user_id}/next", response_model=Optional[Appointment])
async def get_next_appointment(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_next(user_id)


@router.get("/user/{user_id}/week", response_model=List[Appointment])
async def get_week_appointments(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_week(user_id)


@router.get("/user/{user_id}/stats", response_model=AppointmentStats)
async def get_appointment_stats(user_id: str, service: AppointmentService = Depends(get_appointment_service)):
    return await service.get_stats(user_id)


@router.get("/user/{user_id}/date/{day}", response_model=List[Appointment])
async def get_appointments_by_date(
    user_id: str,
    day: date,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_by_date(user_id, day)


@router.get("/user/{user_id}/therapist/{therapist_id}", response_model=List[Appointment])
async def get_appointments_with_therapist(
    user_id: str,
    therapist_id: str,
    service: AppointmentService = Depends(get_appointment_service)
):
    return await service.get_with_therapist(user_id, therapist_id)


@router.get("/user/{user_id}/conflicts", response_model=ConflictCheckResponse)
async def check_conflict(
    user_id: str,
    day: date = Query(..., alias="date"),
    time: str = Query(..., description="Время начала в формате HH:MM"),
    duration: int = Query(50, gt=0),
    service: AppointmentService = Depends(get_appointment_service)
):
    """
    Проверяет, пересекается ли интервал с записями пользователя.
    """
    try:
        time = normalize_time(time)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ConflictCheckResponse(has_conflict=await service.has_conflict(user_id, day, time, duration))


@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str = Path(..., title="ID записи"),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.get_by_id(appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post("/{appointment_id}/reschedule", response_model=Appointment)
async def reschedule_appointment(
    request: AppointmentReschedule,
    appointment_id: str = Path(..., title="ID записи"),
    service: AppointmentService = Depends(get_appointment_service)
):
    result = await service.reschedule(appointment_id, request.date, request.time)
    raise_for_result(result)
    return result.data


@router.post("/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(
    appointment_id: str = Path(..., title="ID записи"),
    service: AppointmentService = Depends(get_appointment_service)
):
    result = await service.cancel(appointment_id)
    raise_for_result(result)
    return result.data


@router.post("/{appointment_id}/complete", response_model=Appointment)
async def complete_appointment(
    appointment_id: str = Path(..., title="ID записи"),
    service: AppointmentService = Depends(get_appointment_service)
):
    result = await service.complete(appointment_id)
    raise_for_result(result)
    return result.data


@router.patch("/{appointment_id}/notes", response_model=Appointment)
async def update_appointment_notes(
    request: AppointmentNotesUpdate,
    appointment_id: str = Path(..., title="ID записи"),
    service: AppointmentService = Depends(get_appointment_service)
):
    result = await service.update_notes(appointment_id, request.notes)
    raise_for_result(result)
    return result.data
