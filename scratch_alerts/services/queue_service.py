"""Notification queue sweep."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from scratch_alerts.core.config import settings
from scratch_alerts.models import NotificationQueueEntry, NotificationType, QueueStatus
from scratch_alerts.services.achievement_service import AchievementService
from scratch_alerts.services.notification_service import WhatsAppNotificationService
from scratch_alerts.services.phone import normalize_phone
from scratch_alerts.utils.datetime import utcnow

DEFAULT_PRIZE_NAME = "Seu prêmio"


@dataclass
class QueueSummary:
    """Outcome of one sweep."""

    processed: int = 0
    success_count: int = 0
    failure_count: int = 0
    skipped: int = 0
    released: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class QueueProcessor:
    """Drain due notification queue entries one at a time."""

    def __init__(
        self,
        notifier: WhatsAppNotificationService | None = None,
        achievements: AchievementService | None = None,
        *,
        batch_size: int | None = None,
        max_attempts: int | None = None,
        pause_seconds: float | None = None,
        claim_timeout: timedelta | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize queue processor.

        Args:
            notifier: Sends ``standard`` entries
            achievements: Handles ``achievement_check`` entries
            batch_size: Entries selected per sweep
            max_attempts: Attempt ceiling per entry
            pause_seconds: Pause between entries, keeps the gateway under its rate limit
            claim_timeout: Age after which a ``processing`` claim is considered abandoned
            sleep: Coroutine used for the pause
        """
        self.notifier = notifier or WhatsAppNotificationService()
        self.achievements = achievements or AchievementService(self.notifier)
        self.batch_size = batch_size or settings.QUEUE_BATCH_SIZE
        self.max_attempts = max_attempts or settings.QUEUE_MAX_ATTEMPTS
        self.pause_seconds = settings.QUEUE_PAUSE_SECONDS if pause_seconds is None else pause_seconds
        self.claim_timeout = claim_timeout or timedelta(minutes=settings.QUEUE_CLAIM_TIMEOUT_MINUTES)
        self.sleep = sleep

    def select_due(self, db: Session) -> list[NotificationQueueEntry]:
        """Pending entries whose time has come, oldest first, capped at the batch size."""
        now = utcnow()
        return (
            db.query(NotificationQueueEntry)
            .filter(
                NotificationQueueEntry.status == QueueStatus.PENDING,
                NotificationQueueEntry.scheduled_for <= now,
                NotificationQueueEntry.attempts < self.max_attempts,
            )
            .order_by(NotificationQueueEntry.scheduled_for.asc(), NotificationQueueEntry.id.asc())
            .limit(self.batch_size)
            .all()
        )

    def claim(self, db: Session, entry: NotificationQueueEntry) -> bool:
        """
        Atomically move an entry from pending to processing and count the attempt.

        Returns:
            False if another sweep claimed the entry first
        """
        claimed = (
            db.query(NotificationQueueEntry)
            .filter(
                NotificationQueueEntry.id == entry.id,
                NotificationQueueEntry.status == QueueStatus.PENDING,
                NotificationQueueEntry.attempts < self.max_attempts,
            )
            .update(
                {
                    NotificationQueueEntry.status: QueueStatus.PROCESSING,
                    NotificationQueueEntry.attempts: NotificationQueueEntry.attempts + 1,
                    NotificationQueueEntry.last_attempt_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        if claimed != 1:
            return False
        db.refresh(entry)
        return True

    def release_stale_claims(self, db: Session) -> int:
        """Return abandoned ``processing`` entries to the queue, or fail them at the ceiling."""
        cutoff = utcnow() - self.claim_timeout
        stale = (
            db.query(NotificationQueueEntry)
            .filter(
                NotificationQueueEntry.status == QueueStatus.PROCESSING,
                NotificationQueueEntry.last_attempt_at <= cutoff,
            )
            .all()
        )
        for entry in stale:
            if entry.attempts >= self.max_attempts:
                entry.status = QueueStatus.FAILED
                entry.error_message = "Processing claim expired"
            else:
                entry.status = QueueStatus.PENDING
        if stale:
            db.commit()
            print(f"♻️  {len(stale)} notificações presas em processamento foram liberadas")
        return len(stale)

    async def dispatch(self, db: Session, entry: NotificationQueueEntry) -> None:
        """Deliver one claimed entry; raises on failure."""
        if entry.notification_type == NotificationType.ACHIEVEMENT_CHECK:
            # Loyalty rows are keyed by the country-coded phone
            await self.achievements.check_and_unlock(db, normalize_phone(entry.customer_phone, strict=False))
            return

        await self.notifier.send_prize_notification(
            customer_name=entry.customer_name,
            customer_phone=entry.customer_phone,
            prize_name=entry.prize_name or DEFAULT_PRIZE_NAME,
            serial_code=entry.serial_code or "",
        )

    async def process_entry(self, db: Session, entry: NotificationQueueEntry) -> bool:
        """
        Process a claimed entry and store its new status.

        Returns:
            True if the notification went out
        """
        print(f"📤 Processando notificação {entry.id} ({entry.notification_type.value})")
        try:
            await self.dispatch(db, entry)
        except Exception as e:
            db.rollback()
            db.refresh(entry)
            error = str(e) or type(e).__name__
            print(f"❌ Erro ao processar notificação {entry.id}: {error}")
            # Below the ceiling the entry goes back to pending for a later sweep
            entry.status = QueueStatus.FAILED if entry.attempts >= self.max_attempts else QueueStatus.PENDING
            entry.error_message = error
            db.commit()
            return False

        entry.status = QueueStatus.SENT
        entry.error_message = None
        db.commit()
        print(f"✅ Notificação {entry.id} enviada com sucesso")
        return True

    async def process_pending(self, db: Session) -> QueueSummary:
        """
        Run one sweep over the queue.

        Args:
            db: Database session

        Returns:
            Counts of processed, sent and failed entries
        """
        print("🚀 Iniciando processamento de notificações automáticas")
        summary = QueueSummary(released=self.release_stale_claims(db))

        entries = self.select_due(db)
        print(f"📋 Encontradas {len(entries)} notificações para processar")

        for index, entry in enumerate(entries):
            if not self.claim(db, entry):
                print(f"⏭️  Notificação {entry.id} já está sendo processada")
                summary.skipped += 1
                continue

            summary.processed += 1
            if await self.process_entry(db, entry):
                summary.success_count += 1
            else:
                summary.failure_count += 1

            if index < len(entries) - 1 and self.pause_seconds > 0:
                await self.sleep(self.pause_seconds)

        print(
            f"✅ Processamento concluído: {summary.success_count} enviadas, "
            f"{summary.failure_count} falharam"
        )
        return summary
