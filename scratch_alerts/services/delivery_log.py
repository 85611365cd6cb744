"""Structured audit trail of WhatsApp send outcomes."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from scratch_alerts.database import SessionLocal
from scratch_alerts.models import DeliveryStatus, WhatsAppLog


@dataclass
class DeliveryMetadata:
    """Business context of a message, copied into the log row."""

    customer_name: str | None = None
    prize_name: str | None = None
    serial_code: str | None = None


@dataclass
class DeliveryOutcome:
    """Terminal result of one gateway invocation."""

    phone: str
    status: DeliveryStatus
    attempts: int
    metadata: DeliveryMetadata = field(default_factory=DeliveryMetadata)
    error_message: str | None = None
    response_status: int | None = None
    response_body: Any = None


class DeliveryLogger:
    """Persist one ``WhatsAppLog`` row per outcome.

    Writes go through a dedicated session so a logging failure can never roll
    back the caller's work, and are never raised to the caller.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self.session_factory = session_factory

    def __call__(self, outcome: DeliveryOutcome) -> None:
        self.record(outcome)

    def record(self, outcome: DeliveryOutcome) -> bool:
        """
        Insert the log row.

        Returns:
            True if the row was stored, False otherwise
        """
        db = self.session_factory()
        try:
            db.add(
                WhatsAppLog(
                    customer_phone=outcome.phone,
                    customer_name=outcome.metadata.customer_name,
                    prize_name=outcome.metadata.prize_name,
                    serial_code=outcome.metadata.serial_code,
                    status=outcome.status,
                    attempts=outcome.attempts,
                    error_message=outcome.error_message,
                    response_status=outcome.response_status,
                    response_body=outcome.response_body,
                )
            )
            db.commit()
        except Exception as e:
            db.rollback()
            print(f"⚠️  Erro ao salvar log WhatsApp ({outcome.status.value}, {outcome.phone}): {e}")
            return False
        finally:
            db.close()

        print(f"✅ Log salvo: {outcome.status.value} (tentativa {outcome.attempts})")
        return True
