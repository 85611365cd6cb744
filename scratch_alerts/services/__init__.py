"""Services package."""

from scratch_alerts.services.achievement_service import AchievementService
from scratch_alerts.services.chatbot_service import ChatbotService
from scratch_alerts.services.delivery_log import DeliveryLogger
from scratch_alerts.services.evolution_service import EvolutionService
from scratch_alerts.services.notification_service import WhatsAppNotificationService
from scratch_alerts.services.queue_service import QueueProcessor
from scratch_alerts.services.reminder_service import ReminderService

__all__ = [
    "AchievementService",
    "ChatbotService",
    "DeliveryLogger",
    "EvolutionService",
    "QueueProcessor",
    "ReminderService",
    "WhatsAppNotificationService",
]
