"""Achievement evaluation for loyalty customers."""

from sqlalchemy.orm import Session

from scratch_alerts.core.exceptions import NotificationError
from scratch_alerts.models import (
    Achievement,
    CustomerAchievement,
    CustomerLoyalty,
    LoyaltyTier,
    RequirementType,
)
from scratch_alerts.services.messages import compose_achievement_message
from scratch_alerts.services.notification_service import WhatsAppNotificationService


def meets_requirement(achievement: Achievement, loyalty: CustomerLoyalty) -> bool:
    """Check whether a loyalty record satisfies an achievement's requirement."""
    if achievement.requirement_type == RequirementType.POINTS:
        return loyalty.points >= achievement.requirement_value
    if achievement.requirement_type == RequirementType.PRIZES:
        return loyalty.total_prizes_won >= achievement.requirement_value
    if achievement.requirement_type == RequirementType.SPECIAL:
        # Tier badges are named after the tier they celebrate
        tier = LoyaltyTier(loyalty.tier)
        return tier.value.capitalize() in achievement.name
    return False


class AchievementService:
    """Unlock achievements and tell the customer about them."""

    def __init__(self, notifier: WhatsAppNotificationService | None = None) -> None:
        self.notifier = notifier or WhatsAppNotificationService()

    async def check_and_unlock(self, db: Session, customer_phone: str) -> list[Achievement]:
        """
        Unlock every achievement the customer now qualifies for.

        Args:
            db: Database session
            customer_phone: Normalized customer phone

        Returns:
            Achievements unlocked by this call
        """
        print(f"🏆 Verificando conquistas para: {customer_phone}")

        loyalty = db.query(CustomerLoyalty).filter(CustomerLoyalty.customer_phone == customer_phone).first()
        if not loyalty:
            print("❌ Cliente não encontrado no programa de fidelidade")
            return []

        unlocked_ids = {
            row.achievement_id
            for row in db.query(CustomerAchievement.achievement_id)
            .filter(CustomerAchievement.customer_phone == customer_phone)
            .all()
        }

        new_unlocks: list[Achievement] = []
        for achievement in db.query(Achievement).order_by(Achievement.id).all():
            if achievement.id in unlocked_ids or not meets_requirement(achievement, loyalty):
                continue

            db.add(CustomerAchievement(customer_phone=customer_phone, achievement_id=achievement.id))
            print(f"✅ Conquista desbloqueada: {achievement.name}")
            new_unlocks.append(achievement)

        db.commit()

        if new_unlocks:
            try:
                await self.notifier.send_message(
                    loyalty.customer_name,
                    customer_phone,
                    compose_achievement_message(new_unlocks),
                    prize_name="Conquistas Desbloqueadas",
                )
            except NotificationError as e:
                print(f"⚠️  Conquistas salvas, mas a notificação falhou: {e}")

        return new_unlocks
