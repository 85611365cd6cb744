"""Scheduler package for automated tasks."""

from scratch_alerts.scheduler.jobs import start_scheduler, shutdown_scheduler

__all__ = ["start_scheduler", "shutdown_scheduler"]

