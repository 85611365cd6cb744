"""Reminder sweep route."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from scratch_alerts.api.dependencies import get_reminder_service
from scratch_alerts.database import get_db
from scratch_alerts.schemas.notification import ReminderStatsResponse, ReminderSweepResponse
from scratch_alerts.services.reminder_service import ReminderService

router = APIRouter()


@router.post("/run", response_model=ReminderSweepResponse)
async def run_reminders(
    db: Session = Depends(get_db),
    reminders: ReminderService = Depends(get_reminder_service),
) -> ReminderSweepResponse:
    """Expire old scratch cards and send 3/7-day reminders."""
    stats = await reminders.run(db)
    return ReminderSweepResponse(stats=ReminderStatsResponse(**stats.to_dict()))
