"""
Результаты операций ядра.

Ожидаемые отказы (занятый слот, нет связи с терапевтом, неверная
интенсивность и т.п.) возвращаются вызывающему коду как данные, а не
исключения.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class FailureReason(str, Enum):
    """Типизированные причины отказа операций"""
    NOT_CONNECTED = "not_connected"
    SLOT_TAKEN = "slot_taken"
    NOT_FOUND = "not_found"
    ALREADY_CANCELLED = "already_cancelled"
    ALREADY_COMPLETED = "already_completed"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_MOOD = "invalid_mood"
    INVALID_INTENSITY = "invalid_intensity"
    STORE_ERROR = "store_error"


class OperationResult(BaseModel):
    """Результат изменяющей операции"""
    success: bool
    message: str
    reason: Optional[FailureReason] = None
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "OperationResult":
        return cls(success=False, message=message, reason=reason)
