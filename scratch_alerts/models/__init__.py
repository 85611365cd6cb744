"""Database models package."""

from scratch_alerts.models.enums import (
    DeliveryStatus,
    LoyaltyTier,
    MessageDirection,
    NotificationType,
    QueueStatus,
    RequirementType,
    ScratchCardStatus,
)
from scratch_alerts.models.loyalty import Achievement, CustomerAchievement, CustomerLoyalty
from scratch_alerts.models.notification import NotificationQueueEntry, WhatsAppLog, WhatsAppMessage
from scratch_alerts.models.scratch_card import Prize, Redemption, Registration, ScratchCard

__all__ = [
    "Achievement",
    "CustomerAchievement",
    "CustomerLoyalty",
    "DeliveryStatus",
    "LoyaltyTier",
    "MessageDirection",
    "NotificationQueueEntry",
    "NotificationType",
    "Prize",
    "QueueStatus",
    "Redemption",
    "Registration",
    "RequirementType",
    "ScratchCard",
    "ScratchCardStatus",
    "WhatsAppLog",
    "WhatsAppMessage",
]
