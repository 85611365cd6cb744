"""Notification queue and WhatsApp delivery log models."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from scratch_alerts.database import Base
from scratch_alerts.models.enums import (
    DeliveryStatus,
    MessageDirection,
    NotificationType,
    QueueStatus,
    enum_column,
)
from scratch_alerts.utils.datetime import utcnow


class NotificationQueueEntry(Base):
    """A pending intent to notify a customer, drained by the queue sweep."""

    __tablename__ = "notification_queue"
    __table_args__ = (Index("ix_notification_queue_due", "status", "scheduled_for"),)

    id = Column(Integer, primary_key=True, index=True)
    notification_type = Column(
        enum_column(NotificationType), nullable=False, default=NotificationType.STANDARD
    )

    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30), nullable=False, index=True)
    prize_name = Column(String(200), nullable=True)
    serial_code = Column(String(100), nullable=True)
    registration_id = Column(Integer, ForeignKey("registrations.id"), nullable=True)

    scheduled_for = Column(DateTime, nullable=False, default=utcnow)
    status = Column(enum_column(QueueStatus), nullable=False, default=QueueStatus.PENDING)
    attempts = Column(Integer, nullable=False, default=0)
    last_attempt_at = Column(DateTime, nullable=True)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<NotificationQueueEntry {self.id} {self.notification_type.value} {self.status.value}>"


class WhatsAppLog(Base):
    """One row per terminal outcome of a gateway send."""

    __tablename__ = "whatsapp_logs"

    id = Column(Integer, primary_key=True, index=True)
    customer_phone = Column(String(30), nullable=False, index=True)
    customer_name = Column(String(200), nullable=True)
    prize_name = Column(String(200), nullable=True)
    serial_code = Column(Text, nullable=True)

    status = Column(enum_column(DeliveryStatus), nullable=False)
    attempts = Column(Integer, nullable=False, default=1)
    error_message = Column(Text, nullable=True)
    response_status = Column(Integer, nullable=True)
    response_body = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<WhatsAppLog {self.id} {self.customer_phone} {self.status.value}>"


class WhatsAppMessage(Base):
    """Chatbot conversation line, inbound or outbound."""

    __tablename__ = "whatsapp_messages"

    id = Column(Integer, primary_key=True, index=True)
    customer_phone = Column(String(60), nullable=False, index=True)
    message_text = Column(Text, nullable=False)
    direction = Column(enum_column(MessageDirection), nullable=False)
    bot_response = Column(Text, nullable=True)
    processed = Column(Boolean, default=False)

    created_at = Column(DateTime, default=utcnow)
