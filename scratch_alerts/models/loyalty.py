"""Loyalty points and achievement models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from scratch_alerts.database import Base
from scratch_alerts.models.enums import LoyaltyTier, RequirementType, enum_column
from scratch_alerts.utils.datetime import utcnow


class CustomerLoyalty(Base):
    """Points balance of a customer, keyed by normalized phone."""

    __tablename__ = "customer_loyalty"

    id = Column(Integer, primary_key=True, index=True)
    customer_phone = Column(String(30), unique=True, index=True, nullable=False)
    customer_name = Column(String(200), nullable=False)
    points = Column(Integer, nullable=False, default=0)
    tier = Column(enum_column(LoyaltyTier), nullable=False, default=LoyaltyTier.BRONZE)
    total_prizes_won = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<CustomerLoyalty {self.customer_phone} {self.points}pts>"


class Achievement(Base):
    """Badge a customer can unlock."""

    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(20), nullable=True)
    requirement_type = Column(enum_column(RequirementType), nullable=False)
    requirement_value = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Achievement {self.name}>"


class CustomerAchievement(Base):
    """Achievement unlocked by a customer."""

    __tablename__ = "customer_achievements"
    __table_args__ = (UniqueConstraint("customer_phone", "achievement_id"),)

    id = Column(Integer, primary_key=True, index=True)
    customer_phone = Column(String(30), nullable=False, index=True)
    achievement_id = Column(Integer, ForeignKey("achievements.id"), nullable=False)
    unlocked_at = Column(DateTime, nullable=False, default=utcnow)

    achievement = relationship("Achievement")
