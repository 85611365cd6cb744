"""Notification schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scratch_alerts.models import NotificationType, QueueStatus
from scratch_alerts.utils.datetime import ensure_naive_utc


class WhatsAppNotificationRequest(BaseModel):
    """Direct prize notification."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., min_length=1, alias="customerName")
    customer_phone: str = Field(..., min_length=1, alias="customerPhone")
    prize_name: str = Field(..., min_length=1, alias="prizeName")
    serial_code: str = Field(..., min_length=1, alias="serialCode")
    message: str | None = Field(None, description="Explicit text replacing the prize template")


class WhatsAppNotificationResponse(BaseModel):
    success: bool = True
    message: str = "WhatsApp enviado com sucesso"
    status: int
    phone: str
    attempts: int


class QueueEntryCreate(BaseModel):
    """Notification intent to be delivered by the queue sweep."""

    model_config = ConfigDict(populate_by_name=True)

    notification_type: NotificationType = Field(NotificationType.STANDARD, alias="notificationType")
    customer_name: str = Field(..., min_length=1, alias="customerName")
    customer_phone: str = Field(..., min_length=1, alias="customerPhone")
    prize_name: str | None = Field(None, alias="prizeName")
    serial_code: str | None = Field(None, alias="serialCode")
    registration_id: int | None = Field(None, alias="registrationId")
    scheduled_for: datetime | None = Field(None, alias="scheduledFor")

    @field_validator("scheduled_for")
    @classmethod
    def scheduled_for_as_utc(cls, v: datetime | None) -> datetime | None:
        """Store schedule times as naive UTC, like every other timestamp."""
        return ensure_naive_utc(v)


class QueueEntry(BaseModel):
    """Stored queue entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    notification_type: NotificationType
    customer_name: str
    customer_phone: str
    prize_name: str | None = None
    serial_code: str | None = None
    registration_id: int | None = None
    scheduled_for: datetime
    status: QueueStatus
    attempts: int
    last_attempt_at: datetime | None = None
    error_message: str | None = None


class QueueSweepResponse(BaseModel):
    success: bool = True
    message: str = "Notificações processadas"
    processed: int
    success_count: int
    failure_count: int
    skipped: int
    released: int


class ReminderStatsResponse(BaseModel):
    expired: int
    three_day_reminders: int
    seven_day_reminders: int


class ReminderSweepResponse(BaseModel):
    success: bool = True
    message: str = "Lembretes processados com sucesso"
    stats: ReminderStatsResponse


class AchievementCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_phone: str = Field(..., min_length=1, alias="customerPhone")


class AchievementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    icon: str | None = None


class AchievementCheckResponse(BaseModel):
    success: bool = True
    new_achievements: list[AchievementOut]
    count: int


class WebhookResponse(BaseModel):
    success: bool = True
    answered: int = 0


class ErrorResponse(BaseModel):
    """Body of every error response."""

    success: bool = False
    error: str
    response_status: int | None = Field(None, description="Gateway HTTP status, when the gateway answered")
