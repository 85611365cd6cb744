"""Direct WhatsApp notifications and queue producers."""

from datetime import datetime

from sqlalchemy.orm import Session

from scratch_alerts.models import NotificationQueueEntry, NotificationType, QueueStatus
from scratch_alerts.services.delivery_log import DeliveryMetadata
from scratch_alerts.services.evolution_service import DeliveryResult, EvolutionService
from scratch_alerts.services.messages import compose_prize_message
from scratch_alerts.services.phone import normalize_phone
from scratch_alerts.utils.datetime import ensure_naive_utc, utcnow


class WhatsAppNotificationService:
    """Normalize, compose and deliver customer notifications."""

    def __init__(self, gateway: EvolutionService | None = None) -> None:
        """Initialize notification service."""
        self.gateway = gateway or EvolutionService()

    async def send_message(
        self,
        customer_name: str,
        customer_phone: str,
        text: str,
        prize_name: str | None = None,
        serial_code: str | None = None,
    ) -> DeliveryResult:
        """
        Send an already composed message.

        Raises:
            ConfigurationError, PhoneValidationError, GatewayError
        """
        self.gateway.ensure_configured()
        phone = normalize_phone(customer_phone)
        metadata = DeliveryMetadata(
            customer_name=customer_name,
            prize_name=prize_name,
            serial_code=serial_code,
        )
        return await self.gateway.send_text(phone, text, metadata=metadata)

    async def send_prize_notification(
        self,
        customer_name: str,
        customer_phone: str,
        prize_name: str,
        serial_code: str,
        message: str | None = None,
    ) -> DeliveryResult:
        """
        Tell a customer their prize was validated.

        Args:
            customer_name: Customer name
            customer_phone: Phone as registered
            prize_name: Prize name
            serial_code: Scratch card serial code
            message: Explicit text replacing the prize template

        Returns:
            DeliveryResult with the normalized phone
        """
        print(f"🚀 Iniciando envio de notificação WhatsApp para {customer_name}")
        text = message or compose_prize_message(customer_name, prize_name, serial_code)
        return await self.send_message(
            customer_name,
            customer_phone,
            text,
            prize_name=prize_name,
            serial_code=serial_code,
        )


def enqueue_notification(
    db: Session,
    customer_name: str,
    customer_phone: str,
    *,
    notification_type: NotificationType = NotificationType.STANDARD,
    prize_name: str | None = None,
    serial_code: str | None = None,
    registration_id: int | None = None,
    scheduled_for: datetime | None = None,
    commit: bool = True,
) -> NotificationQueueEntry:
    """
    Record a notification intent for the queue sweep.

    Pass ``commit=False`` to add the entry to the caller's transaction, so the
    intent is stored together with the business change that produced it.
    """
    entry = NotificationQueueEntry(
        notification_type=notification_type,
        customer_name=customer_name,
        customer_phone=customer_phone,
        prize_name=prize_name,
        serial_code=serial_code,
        registration_id=registration_id,
        scheduled_for=ensure_naive_utc(scheduled_for) or utcnow(),
        status=QueueStatus.PENDING,
        attempts=0,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry
