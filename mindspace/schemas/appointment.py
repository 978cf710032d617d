"""
Pydantic модели записей на прием.
"""
import datetime as dt
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator

from mindspace.config import settings


class AppointmentStatus(str, Enum):
    """Статусы записи на прием"""
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def normalize_time(value: Union[str, dt.time]) -> str:
    """
    Приводит время к виду "HH:MM".

    Raises:
        ValueError: строка не является временем суток
    """
    if isinstance(value, dt.time):
        return value.strftime("%H:%M")
    try:
        parsed = dt.datetime.strptime(str(value).strip(), "%H:%M")
    except ValueError:
        raise ValueError(f"time must be in HH:MM format, got {value!r}")
    return parsed.strftime("%H:%M")


def parse_time(value: str) -> dt.time:
    return dt.datetime.strptime(normalize_time(value), "%H:%M").time()


class Appointment(BaseModel):
    """Запись на прием к терапевту"""
    id: Optional[str] = None
    user_id: str
    therapist_id: str
    date: dt.date
    time: str
    duration: int = Field(default=50, gt=0)
    type: str = Field(default_factory=lambda: settings.scheduling.DEFAULT_SESSION_TYPE)
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    notes: str = ""
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    cancelled_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    rescheduled_at: Optional[dt.datetime] = None

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)

    @property
    def start(self) -> dt.datetime:
        return dt.datetime.combine(self.date, parse_time(self.time))

    @property
    def end(self) -> dt.datetime:
        return self.start + dt.timedelta(minutes=self.duration)

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def to_record(self) -> Dict[str, Any]:
        """
        Документ для хранилища. Поле slot_active участвует в частичном
        уникальном индексе слотов терапевта.
        """
        record = self.model_dump(mode="json")
        if record.get("id") is None:
            record.pop("id", None)
        record["slot_active"] = not self.is_cancelled
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Appointment":
        return cls.model_validate(record)


class AppointmentStats(BaseModel):
    """Статистика записей пользователя"""
    total: int = 0
    upcoming: int = 0
    completed: int = 0
    cancelled: int = 0
    total_hours: float = 0.0
