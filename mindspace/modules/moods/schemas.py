"""
Pydantic модели для API дневника настроения.

Категория и интенсивность принимаются без ограничений схемы и
проверяются сервисом, который возвращает типизированную причину отказа.
"""
import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field


class MoodLogRequest(BaseModel):
    """Модель для записи настроения за день"""
    user_id: str
    date: dt.date
    mood: str = Field(..., description="Категория настроения, например Happy")
    intensity: Any = Field(..., description="Интенсивность от 1 до 10")
    notes: str = ""


class MoodUpdateRequest(BaseModel):
    """Модель для частичного обновления записи настроения"""
    mood: Optional[str] = None
    intensity: Optional[Any] = None
    notes: Optional[str] = None


class MoodCategoryInfo(BaseModel):
    name: str
    emoji: str
    color: str


class StreakResponse(BaseModel):
    current_streak: int


class TrendResponse(BaseModel):
    trend: str
