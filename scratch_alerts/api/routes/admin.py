"""Admin routes for inspecting notification delivery."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from scratch_alerts.api.dependencies import get_gateway
from scratch_alerts.core.config import settings
from scratch_alerts.database import get_db
from scratch_alerts.models import DeliveryStatus, NotificationQueueEntry, QueueStatus, WhatsAppLog
from scratch_alerts.schemas.notification import QueueEntry
from scratch_alerts.services.evolution_service import EvolutionService

router = APIRouter()


@router.get("/stats")
async def get_stats(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Get queue and delivery statistics."""
    queue_counts = dict(
        db.query(NotificationQueueEntry.status, func.count(NotificationQueueEntry.id))
        .group_by(NotificationQueueEntry.status)
        .all()
    )
    log_counts = dict(
        db.query(WhatsAppLog.status, func.count(WhatsAppLog.id)).group_by(WhatsAppLog.status).all()
    )

    return {
        "queue": {status.value: queue_counts.get(status, 0) for status in QueueStatus},
        "deliveries": {status.value: log_counts.get(status, 0) for status in DeliveryStatus},
    }


@router.get("/queue")
async def get_queue(
    status: QueueStatus | None = None,
    limit: int = 50,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """List queue entries, newest schedule first."""
    query = db.query(NotificationQueueEntry)
    if status:
        query = query.filter(NotificationQueueEntry.status == status)

    entries = query.order_by(NotificationQueueEntry.scheduled_for.desc()).limit(limit).all()
    return {
        "count": len(entries),
        "entries": [QueueEntry.model_validate(entry).model_dump(mode="json") for entry in entries],
    }


@router.get("/logs")
async def get_logs(limit: int = 50, db: Session = Depends(get_db)) -> dict[str, Any]:
    """List the latest WhatsApp delivery log rows."""
    logs = db.query(WhatsAppLog).order_by(WhatsAppLog.id.desc()).limit(limit).all()
    return {
        "count": len(logs),
        "logs": [
            {
                "id": log.id,
                "customer_phone": log.customer_phone,
                "customer_name": log.customer_name,
                "prize_name": log.prize_name,
                "serial_code": log.serial_code,
                "status": log.status.value,
                "attempts": log.attempts,
                "error_message": log.error_message,
                "response_status": log.response_status,
                "created_at": log.created_at.isoformat() if log.created_at else None,
            }
            for log in logs
        ],
    }


@router.get("/whatsapp-status")
async def whatsapp_status(gateway: EvolutionService = Depends(get_gateway)) -> dict[str, Any]:
    """Check the Evolution API instance connection."""
    if not gateway.is_configured:
        return {"status": "error", "message": "Evolution API not configured"}

    result = await gateway.connection_state()
    if "error" in result:
        return {"status": "error", "error": result["error"]}
    return {"status": "success", "instance": result}


@router.get("/env-check")
async def check_environment() -> dict[str, Any]:
    """Check gateway configuration without exposing secrets."""
    key = settings.EVOLUTION_API_KEY
    return {
        "evolution_api_url": settings.EVOLUTION_API_URL or "NOT_FOUND",
        "evolution_api_key_preview": f"{key[:4]}..." if len(key) > 8 else "EMPTY OR TOO SHORT",
        "evolution_instance_name": settings.EVOLUTION_INSTANCE_NAME or "NOT_FOUND",
        "scheduler_enabled": settings.SCHEDULER_ENABLED,
        "queue_batch_size": settings.QUEUE_BATCH_SIZE,
    }
