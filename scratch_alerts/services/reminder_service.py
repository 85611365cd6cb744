"""Reminder and expiry sweep over registrations."""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Query, Session, contains_eager

from scratch_alerts.core.config import settings
from scratch_alerts.core.exceptions import NotificationError
from scratch_alerts.models import Registration, ScratchCard, ScratchCardStatus
from scratch_alerts.services.messages import compose_reminder_message
from scratch_alerts.services.notification_service import WhatsAppNotificationService
from scratch_alerts.utils.datetime import utcnow

DEFAULT_PRIZE_NAME = "Prêmio"


@dataclass
class ReminderStats:
    """Counts produced by one reminder sweep."""

    expired: int = 0
    three_day_reminders: int = 0
    seven_day_reminders: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class ReminderService:
    """Expire stale scratch cards and remind customers of uncollected prizes."""

    def __init__(
        self,
        notifier: WhatsAppNotificationService | None = None,
        *,
        first_reminder_days: int | None = None,
        second_reminder_days: int | None = None,
        expiry_days: int | None = None,
    ) -> None:
        self.notifier = notifier or WhatsAppNotificationService()
        self.first_reminder_days = first_reminder_days or settings.REMINDER_FIRST_DAYS
        self.second_reminder_days = second_reminder_days or settings.REMINDER_SECOND_DAYS
        self.expiry_days = expiry_days or settings.REGISTRATION_EXPIRY_DAYS

    def _registrations(self, db: Session) -> Query:
        return (
            db.query(Registration)
            .join(Registration.scratch_card)
            .options(contains_eager(Registration.scratch_card).joinedload(ScratchCard.prize))
            .filter(ScratchCard.status == ScratchCardStatus.REGISTERED)
        )

    def first_reminder_candidates(self, db: Session, now: datetime) -> list[Registration]:
        """Registered between the first and second thresholds and never reminded."""
        first_cutoff = now - timedelta(days=self.first_reminder_days)
        second_cutoff = now - timedelta(days=self.second_reminder_days)
        return (
            self._registrations(db)
            .filter(
                Registration.registered_at <= first_cutoff,
                Registration.registered_at >= second_cutoff,
                Registration.reminded_at.is_(None),
            )
            .order_by(Registration.registered_at)
            .all()
        )

    def second_reminder_candidates(self, db: Session, now: datetime) -> list[Registration]:
        """Past the second threshold and first-reminded long enough ago."""
        second_cutoff = now - timedelta(days=self.second_reminder_days)
        reminded_cutoff = now - timedelta(days=self.second_reminder_days - self.first_reminder_days)
        return (
            self._registrations(db)
            .filter(
                Registration.registered_at <= second_cutoff,
                Registration.reminded_at.is_not(None),
                Registration.reminded_at <= reminded_cutoff,
                Registration.second_reminded_at.is_(None),
            )
            .order_by(Registration.registered_at)
            .all()
        )

    def expire_registrations(self, db: Session, now: datetime) -> int:
        """
        Mark cards of old, still unredeemed registrations as expired.

        Returns:
            Number of scratch cards expired
        """
        cutoff = now - timedelta(days=self.expiry_days)
        card_ids = [
            card_id
            for (card_id,) in db.query(Registration.scratch_card_id)
            .join(Registration.scratch_card)
            .filter(
                Registration.registered_at <= cutoff,
                ScratchCard.status == ScratchCardStatus.REGISTERED,
            )
            .all()
        ]
        if not card_ids:
            return 0

        expired = (
            db.query(ScratchCard)
            .filter(ScratchCard.id.in_(card_ids), ScratchCard.status == ScratchCardStatus.REGISTERED)
            .update({ScratchCard.status: ScratchCardStatus.EXPIRED}, synchronize_session=False)
        )
        db.commit()
        print(f"✅ {expired} raspadinhas marcadas como expiradas")
        return expired

    async def _remind(self, registration: Registration, days: int) -> bool:
        card = registration.scratch_card
        prize_name = card.prize.name if card.prize else DEFAULT_PRIZE_NAME
        try:
            await self.notifier.send_message(
                registration.customer_name,
                registration.customer_phone,
                compose_reminder_message(registration.customer_name, prize_name, card.serial_code, days),
                prize_name=prize_name,
                serial_code=card.serial_code,
            )
        except NotificationError as e:
            print(f"❌ Erro ao enviar lembrete para {registration.customer_name}: {e}")
            return False
        print(f"✅ Lembrete de {days} dias enviado para {registration.customer_name}")
        return True

    async def send_first_reminders(self, db: Session, now: datetime) -> int:
        """
        Send the first reminder; ``reminded_at`` is stamped even when delivery fails.

        Returns:
            Number of registrations reminded
        """
        candidates = self.first_reminder_candidates(db, now)
        print(f"📱 Enviando {len(candidates)} lembretes de {self.first_reminder_days} dias...")
        for registration in candidates:
            await self._remind(registration, self.first_reminder_days)
            registration.reminded_at = now
            db.commit()
        return len(candidates)

    async def send_second_reminders(self, db: Session, now: datetime) -> int:
        """
        Send the second reminder; ``reminded_at`` is left untouched.

        Returns:
            Number of registrations reminded
        """
        candidates = self.second_reminder_candidates(db, now)
        print(f"📱 Enviando {len(candidates)} lembretes de {self.second_reminder_days} dias...")
        for registration in candidates:
            await self._remind(registration, self.second_reminder_days)
            registration.second_reminded_at = now
            db.commit()
        return len(candidates)

    async def run(self, db: Session, now: datetime | None = None) -> ReminderStats:
        """
        Run the expiry, first-reminder and second-reminder passes in that order.

        A pass that fails is reported and the following passes still run.
        """
        now = now or utcnow()
        print("🚀 Iniciando processamento de lembretes automáticos")
        stats = ReminderStats()

        try:
            stats.expired = self.expire_registrations(db, now)
        except Exception as e:
            db.rollback()
            print(f"❌ Erro ao marcar raspadinhas expiradas: {e}")

        try:
            stats.three_day_reminders = await self.send_first_reminders(db, now)
        except Exception as e:
            db.rollback()
            print(f"❌ Erro nos lembretes de {self.first_reminder_days} dias: {e}")

        try:
            stats.seven_day_reminders = await self.send_second_reminders(db, now)
        except Exception as e:
            db.rollback()
            print(f"❌ Erro nos lembretes de {self.second_reminder_days} dias: {e}")

        print("✅ Processamento de lembretes concluído!")
        return stats
