"""Scheduled jobs for the notification queue and reminders."""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from scratch_alerts.api.dependencies import get_queue_processor, get_reminder_service
from scratch_alerts.core.config import settings
from scratch_alerts.database import SessionLocal

scheduler = AsyncIOScheduler()


async def process_notifications_job() -> None:
    """Job to drain the notification queue."""
    print("🔄 Running: Process notifications job...")
    db = SessionLocal()
    try:
        summary = await get_queue_processor().process_pending(db)
        if summary.processed:
            print(f"📤 Processed {summary.processed} notifications ({summary.failure_count} failed)")
    except Exception as e:
        print(f"❌ Error in process_notifications_job: {e}")
    finally:
        db.close()


async def reminders_job() -> None:
    """Job to expire cards and send reminders."""
    print("🔄 Running: Reminders job...")
    db = SessionLocal()
    try:
        stats = await get_reminder_service().run(db)
        print(
            f"✅ Expired {stats.expired}, reminded {stats.three_day_reminders} (3d) "
            f"and {stats.seven_day_reminders} (7d)"
        )
    except Exception as e:
        print(f"❌ Error in reminders_job: {e}")
    finally:
        db.close()


def start_scheduler() -> None:
    """Start the scheduler with all jobs."""
    print("🚀 Starting scheduler...")

    # Job 1: Drain the notification queue
    scheduler.add_job(
        process_notifications_job,
        trigger=IntervalTrigger(seconds=settings.QUEUE_INTERVAL_SECONDS),
        id="process_notifications",
        name="Process notification queue",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    print(f"📤 Scheduled: Process notifications every {settings.QUEUE_INTERVAL_SECONDS} seconds")

    # Job 2: Expiry and reminders once a day
    scheduler.add_job(
        reminders_job,
        trigger=CronTrigger(hour=settings.REMINDER_HOUR, minute=0),
        id="reminders",
        name="Expire cards and send reminders",
        replace_existing=True,
    )
    print(f"📅 Scheduled: Reminders daily at {settings.REMINDER_HOUR}:00")

    scheduler.start()
    print("✅ Scheduler started successfully!")


def shutdown_scheduler() -> None:
    """Shutdown the scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        print("🛑 Scheduler stopped")
