"""WhatsApp notification routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from scratch_alerts.api.dependencies import get_notification_service, get_queue_processor
from scratch_alerts.database import get_db
from scratch_alerts.schemas.notification import (
    ErrorResponse,
    QueueEntry,
    QueueEntryCreate,
    QueueSweepResponse,
    WhatsAppNotificationRequest,
    WhatsAppNotificationResponse,
)
from scratch_alerts.services.notification_service import WhatsAppNotificationService, enqueue_notification
from scratch_alerts.services.queue_service import QueueProcessor

router = APIRouter()


@router.post(
    "/whatsapp",
    response_model=WhatsAppNotificationResponse,
    responses={500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def send_whatsapp_notification(
    request: WhatsAppNotificationRequest,
    notifier: WhatsAppNotificationService = Depends(get_notification_service),
) -> WhatsAppNotificationResponse:
    """Send a prize notification right away."""
    result = await notifier.send_prize_notification(
        customer_name=request.customer_name,
        customer_phone=request.customer_phone,
        prize_name=request.prize_name,
        serial_code=request.serial_code,
        message=request.message,
    )
    return WhatsAppNotificationResponse(status=result.status_code, phone=result.phone, attempts=result.attempts)


@router.post("/queue", response_model=QueueEntry, status_code=status.HTTP_201_CREATED)
async def queue_notification(request: QueueEntryCreate, db: Session = Depends(get_db)) -> QueueEntry:
    """Store a notification for the next queue sweep."""
    entry = enqueue_notification(
        db,
        request.customer_name,
        request.customer_phone,
        notification_type=request.notification_type,
        prize_name=request.prize_name,
        serial_code=request.serial_code,
        registration_id=request.registration_id,
        scheduled_for=request.scheduled_for,
    )
    return QueueEntry.model_validate(entry)


@router.post("/process", response_model=QueueSweepResponse)
async def process_notifications(
    db: Session = Depends(get_db),
    processor: QueueProcessor = Depends(get_queue_processor),
) -> QueueSweepResponse:
    """Run one notification queue sweep."""
    summary = await processor.process_pending(db)
    return QueueSweepResponse(**summary.to_dict())
