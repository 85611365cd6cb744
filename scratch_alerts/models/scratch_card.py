"""Prize, scratch card, registration and redemption models."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from scratch_alerts.database import Base
from scratch_alerts.models.enums import ScratchCardStatus, enum_column
from scratch_alerts.utils.datetime import utcnow


class Prize(Base):
    """Prize database model."""

    __tablename__ = "prizes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    prize_value = Column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<Prize {self.name}>"


class ScratchCard(Base):
    """Serialized card handed out to customers."""

    __tablename__ = "scratch_cards"

    id = Column(Integer, primary_key=True, index=True)
    serial_code = Column(String(100), unique=True, index=True, nullable=False)
    status = Column(
        enum_column(ScratchCardStatus), nullable=False, default=ScratchCardStatus.AVAILABLE, index=True
    )
    prize_id = Column(Integer, ForeignKey("prizes.id"), nullable=True)

    prize = relationship("Prize")

    def __repr__(self) -> str:
        return f"<ScratchCard {self.serial_code} ({self.status.value})>"


class Registration(Base):
    """A customer's claim on a scratch card."""

    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    scratch_card_id = Column(Integer, ForeignKey("scratch_cards.id"), nullable=False)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30), nullable=False, index=True)

    registered_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    reminded_at = Column(DateTime, nullable=True)
    second_reminded_at = Column(DateTime, nullable=True)

    scratch_card = relationship("ScratchCard")
    redemptions = relationship("Redemption", back_populates="registration")

    def __repr__(self) -> str:
        return f"<Registration {self.id} {self.customer_name}>"


class Redemption(Base):
    """In-store prize hand-over."""

    __tablename__ = "redemptions"

    id = Column(Integer, primary_key=True, index=True)
    registration_id = Column(Integer, ForeignKey("registrations.id"), nullable=False)
    redeemed_at = Column(DateTime, nullable=False, default=utcnow)

    registration = relationship("Registration", back_populates="redemptions")
