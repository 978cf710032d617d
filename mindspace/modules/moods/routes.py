"""
API маршруты для работы с дневником настроения.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from mindspace.core.database.startup import get_store
from mindspace.core.database.store import DocumentStore
from mindspace.modules.moods.schemas import (
    MoodCategoryInfo, MoodLogRequest, MoodUpdateRequest, StreakResponse, TrendResponse
)
from mindspace.modules.responses import raise_for_result
from mindspace.schemas.mood import (
    DailyIntensity, MonthlySummary, MoodCategory, MoodEntry, MoodInsights, MoodStatistics,
    SessionCorrelation, WeekdayPattern, WeeklySummary
)
from mindspace.services.mood_service import MoodService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moods", tags=["moods"])


async def get_mood_service(store: DocumentStore = Depends(get_store)) -> MoodService:
    return MoodService(store)


@router.get("/categories", response_model=List[MoodCategoryInfo])
async def get_mood_categories():
    """
    Справочник категорий настроения с эмодзи и цветом.
    """
    return [
        MoodCategoryInfo(name=category.value, emoji=category.emoji, color=category.color)
        for category in MoodCategory
    ]


@router.post("", response_model=MoodEntry)
async def log_mood(request: MoodLogRequest, service: MoodService = Depends(get_mood_service)):
    """
    Записывает настроение за день; повторная запись за ту же дату
    обновляет существующую.
    """
    result = await service.log_mood(
        user_id=request.user_id,
        date=request.date,
        mood=request.mood,
        intensity=request.intensity,
        notes=request.notes
    )
    raise_for_result(result)
    return result.data


@router.get("/user/{user_id}", response_model=List[MoodEntry])
async def get_mood_history(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_history(user_id)


@router.get("/user/{user_id}/date/{day}", response_model=MoodEntry)
async def get_mood_by_date(user_id: str, day: date, service: MoodService = Depends(get_mood_service)):
    entry = await service.get_by_date(user_id, day)
    if not entry:
        raise HTTPException(status_code=404, detail="Mood entry not found")
    return entry


@router.get("/user/{user_id}/stats", response_model=MoodStatistics)
async def get_mood_statistics(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_statistics(user_id)


@router.get("/user/{user_id}/streak", response_model=StreakResponse)
async def get_mood_streak(user_id: str, service: MoodService = Depends(get_mood_service)):
    return StreakResponse(current_streak=await service.get_streak(user_id))


@router.get("/user/{user_id}/trend", response_model=TrendResponse)
async def get_mood_trend(user_id: str, service: MoodService = Depends(get_mood_service)):
    trend = await service.get_trend(user_id)
    return TrendResponse(trend=trend.value)


@router.get("/user/{user_id}/distribution", response_model=Dict[str, int])
async def get_mood_distribution(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_distribution(user_id)


@router.get("/user/{user_id}/intensity", response_model=List[DailyIntensity])
async def get_intensity_over_time(
    user_id: str,
    days: Optional[int] = Query(None, ge=0, description="Окно в днях"),
    service: MoodService = Depends(get_mood_service)
):
    return await service.get_intensity_over_time(user_id, days)


@router.get("/user/{user_id}/weekly", response_model=WeeklySummary)
async def get_weekly_summary(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_weekly_summary(user_id)


@router.get("/user/{user_id}/monthly", response_model=MonthlySummary)
async def get_monthly_summary(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_monthly_summary(user_id)


@router.get("/user/{user_id}/patterns", response_model=Dict[str, WeekdayPattern])
async def get_weekday_patterns(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_weekday_patterns(user_id)


@router.get("/user/{user_id}/insights", response_model=Optional[MoodInsights])
async def get_mood_insights(user_id: str, service: MoodService = Depends(get_mood_service)):
    return await service.get_insights(user_id)


@router.get("/user/{user_id}/sessions", response_model=List[SessionCorrelation])
async def get_session_correlation(user_id: str, service: MoodService = Depends(get_mood_service)):
    """
    Настроение за неделю до и после каждой завершенной сессии.
    """
    return await service.get_session_correlation(user_id)


@router.get("/{mood_id}", response_model=MoodEntry)
async def get_mood(
    mood_id: str = Path(..., title="ID записи настроения"),
    service: MoodService = Depends(get_mood_service)
):
    entry = await service.get_mood(mood_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Mood entry not found")
    return entry


@router.patch("/{mood_id}", response_model=MoodEntry)
async def update_mood(
    request: MoodUpdateRequest,
    mood_id: str = Path(..., title="ID записи настроения"),
    service: MoodService = Depends(get_mood_service)
):
    result = await service.update_mood(
        mood_id,
        mood=request.mood,
        intensity=request.intensity,
        notes=request.notes
    )
    raise_for_result(result)
    return result.data


@router.delete("/{mood_id}", status_code=204)
async def delete_mood(
    mood_id: str = Path(..., title="ID записи настроения"),
    service: MoodService = Depends(get_mood_service)
):
    result = await service.delete_mood(mood_id)
    raise_for_result(result)
    logger.info(f"Mood entry {mood_id} removed via API")
