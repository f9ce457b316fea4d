import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_gamification_service
from api.metrics import XP_AWARDED_TOTAL
from gamification.service import GamificationService
from study_planner.models import (
    AchievementProgress,
    GamificationResult,
    UserStats,
)

router = APIRouter(prefix="/gamification")
logger = logging.getLogger(__name__)


class AwardXPIn(BaseModel):
    amount: int = Field(..., gt=0)
    reason: Optional[str] = None


class AssignmentCompletedIn(BaseModel):
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None


class StudyTimeIn(BaseModel):
    minutes: int = Field(..., ge=0)


class StreakIn(BaseModel):
    streak: int = Field(..., ge=0)


def _count_xp(result: GamificationResult) -> GamificationResult:
    try:
        XP_AWARDED_TOTAL.inc(sum(e.xp for e in result.events if e.kind != "level_up"))
    except Exception:
        pass
    return result


@router.get("/{user_id}")
async def get_stats(
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
) -> UserStats:
    return service.stats(user_id)


@router.get("/{user_id}/achievements")
async def get_achievements(
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
) -> List[AchievementProgress]:
    """Every achievement with the user's progress towards it."""
    return service.progress(user_id)


@router.post("/{user_id}/xp")
async def award_xp(
    user_id: str,
    payload: AwardXPIn,
    service: GamificationService = Depends(get_gamification_service),
) -> GamificationResult:
    try:
        return _count_xp(service.award_xp(user_id, payload.amount, payload.reason))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{user_id}/habits/complete")
async def complete_habit(
    user_id: str,
    service: GamificationService = Depends(get_gamification_service),
) -> GamificationResult:
    return _count_xp(service.complete_habit(user_id))


@router.post("/{user_id}/assignments/complete")
async def complete_assignment(
    user_id: str,
    payload: AssignmentCompletedIn,
    service: GamificationService = Depends(get_gamification_service),
) -> GamificationResult:
    return _count_xp(
        service.complete_assignment(user_id, payload.completed_at, payload.due_date)
    )


@router.post("/{user_id}/study-time")
async def add_study_time(
    user_id: str,
    payload: StudyTimeIn,
    service: GamificationService = Depends(get_gamification_service),
) -> GamificationResult:
    return _count_xp(service.add_study_time(user_id, payload.minutes))


@router.post("/{user_id}/streak")
async def update_streak(
    user_id: str,
    payload: StreakIn,
    service: GamificationService = Depends(get_gamification_service),
) -> GamificationResult:
    return _count_xp(service.update_streak(user_id, payload.streak))
