"""Service providers for route handlers, overridable in tests."""

from scratch_alerts.services.achievement_service import AchievementService
from scratch_alerts.services.chatbot_service import ChatbotService
from scratch_alerts.services.evolution_service import EvolutionService
from scratch_alerts.services.notification_service import WhatsAppNotificationService
from scratch_alerts.services.queue_service import QueueProcessor
from scratch_alerts.services.reminder_service import ReminderService


def get_gateway() -> EvolutionService:
    return EvolutionService()


def get_notification_service() -> WhatsAppNotificationService:
    return WhatsAppNotificationService(get_gateway())


def get_achievement_service() -> AchievementService:
    return AchievementService(get_notification_service())


def get_queue_processor() -> QueueProcessor:
    notifier = get_notification_service()
    return QueueProcessor(notifier, AchievementService(notifier))


def get_reminder_service() -> ReminderService:
    return ReminderService(get_notification_service())


def get_chatbot_service() -> ChatbotService:
    return ChatbotService(get_gateway())
