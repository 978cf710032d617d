"""
Pydantic модели для API записей на прием.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from mindspace.schemas.appointment import normalize_time


class AppointmentCreate(BaseModel):
    """Модель для бронирования записи"""
    user_id: str
    therapist_id: str
    date: dt.date
    time: str = Field(..., description="Время начала в формате HH:MM")
    duration: Optional[int] = Field(None, gt=0, description="Длительность в минутах")
    notes: str = ""
    type: Optional[str] = None

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)


class AppointmentReschedule(BaseModel):
    """Модель для переноса записи"""
    date: dt.date
    time: str

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)


class AppointmentNotesUpdate(BaseModel):
    notes: str


class ConflictCheckResponse(BaseModel):
    has_conflict: bool


class AvailableSlotsResponse(BaseModel):
    therapist_id: str
    date: dt.date
    duration: int
    slots: list[str]
