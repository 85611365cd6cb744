"""Achievement routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from scratch_alerts.api.dependencies import get_achievement_service
from scratch_alerts.database import get_db
from scratch_alerts.schemas.notification import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    AchievementOut,
)
from scratch_alerts.services.achievement_service import AchievementService
from scratch_alerts.services.phone import normalize_phone

router = APIRouter()


@router.post("/check", response_model=AchievementCheckResponse)
async def check_achievements(
    request: AchievementCheckRequest,
    db: Session = Depends(get_db),
    achievements: AchievementService = Depends(get_achievement_service),
) -> AchievementCheckResponse:
    """Unlock the achievements a customer now qualifies for."""
    phone = normalize_phone(request.customer_phone, strict=False)
    unlocked = await achievements.check_and_unlock(db, phone)
    return AchievementCheckResponse(
        new_achievements=[AchievementOut.model_validate(a) for a in unlocked],
        count=len(unlocked),
    )
