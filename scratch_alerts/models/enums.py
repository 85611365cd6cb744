"""Closed value sets for status and type columns."""

import enum

from sqlalchemy import Enum


class NotificationType(str, enum.Enum):
    STANDARD = "standard"
    ACHIEVEMENT_CHECK = "achievement_check"


class QueueStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"  # claimed by a running sweep
    SENT = "sent"
    FAILED = "failed"


class DeliveryStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


class ScratchCardStatus(str, enum.Enum):
    AVAILABLE = "available"
    REGISTERED = "registered"
    REDEEMED = "redeemed"
    EXPIRED = "expired"


class LoyaltyTier(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class RequirementType(str, enum.Enum):
    POINTS = "points"
    PRIZES = "prizes"
    SPECIAL = "special"


class MessageDirection(str, enum.Enum):
    RECEIVED = "received"
    SENT = "sent"


def enum_column(enum_cls: type[enum.Enum]) -> Enum:
    """SQLAlchemy ``Enum`` type storing member values as plain strings."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )
