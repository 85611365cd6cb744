"""API routes package."""

from fastapi import APIRouter

from scratch_alerts.api.routes import achievements, admin, notifications, reminders, webhook

api_router = APIRouter()

# Incluir routers de diferentes módulos
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["Reminders"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["Achievements"])
api_router.include_router(webhook.router, prefix="/webhook", tags=["Webhook"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
