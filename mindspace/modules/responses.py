"""
Преобразование результатов операций в HTTP ответы.
"""
from fastapi import HTTPException

from mindspace.schemas.results import FailureReason, OperationResult

FAILURE_STATUS_CODES = {
    FailureReason.NOT_CONNECTED: 403,
    FailureReason.NOT_FOUND: 404,
    FailureReason.SLOT_TAKEN: 409,
    FailureReason.ALREADY_CANCELLED: 409,
    FailureReason.ALREADY_COMPLETED: 409,
    FailureReason.INVALID_TRANSITION: 409,
    FailureReason.INVALID_MOOD: 422,
    FailureReason.INVALID_INTENSITY: 422,
    FailureReason.STORE_ERROR: 500,
}


def raise_for_result(result: OperationResult) -> None:
    """
    Поднимает HTTPException для неуспешного результата.
    """
    if result.success:
        return
    status_code = FAILURE_STATUS_CODES.get(result.reason, 500)
    raise HTTPException(
        status_code=status_code,
        detail={"reason": result.reason.value if result.reason else None, "message": result.message}
    )
