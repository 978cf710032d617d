"""
Pydantic модели справочника терапевтов (только чтение для ядра).
"""
from typing import List, Optional

from pydantic import BaseModel, Field

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class Therapist(BaseModel):
    """Терапевт и дни недели, в которые он принимает"""
    id: str
    name: str = ""
    specialization: Optional[str] = None
    availability: List[str] = Field(default_factory=list)

    def works_on(self, weekday_name: str) -> bool:
        return weekday_name in self.availability


class TherapistConnection(BaseModel):
    """Связь пользователя с терапевтом"""
    id: Optional[str] = None
    user_id: str
    therapist_id: str
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"
