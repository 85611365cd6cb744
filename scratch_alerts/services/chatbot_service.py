"""Loyalty chatbot answering WhatsApp commands."""

from typing import Any

from sqlalchemy.orm import Session, joinedload

from scratch_alerts.core.exceptions import NotificationError
from scratch_alerts.models import (
    CustomerAchievement,
    CustomerLoyalty,
    MessageDirection,
    Registration,
    ScratchCard,
    WhatsAppMessage,
)
from scratch_alerts.services import messages
from scratch_alerts.services.evolution_service import EvolutionService
from scratch_alerts.services.phone import normalize_phone

UPSERT_EVENT = "messages.upsert"
PRIZE_HISTORY_LIMIT = 5

POINTS_KEYWORDS = ("pontos", "saldo")
PRIZES_KEYWORDS = ("premios", "prêmios", "historico", "histórico")
ACHIEVEMENTS_KEYWORDS = ("conquistas", "badges", "badge")
HELP_KEYWORDS = ("ajuda", "help", "menu")


def extract_text(message: dict[str, Any]) -> str:
    """Text of a plain or extended WhatsApp message, empty for media."""
    content = message.get("message") or {}
    return content.get("conversation") or (content.get("extendedTextMessage") or {}).get("text") or ""


class ChatbotService:
    """Turn inbound WhatsApp messages into loyalty answers."""

    def __init__(self, gateway: EvolutionService | None = None) -> None:
        self.gateway = gateway or EvolutionService()

    def points_reply(self, db: Session, phone: str) -> str:
        loyalty = db.query(CustomerLoyalty).filter(CustomerLoyalty.customer_phone == phone).first()
        if not loyalty:
            return messages.NOT_IN_LOYALTY_TEXT
        return messages.compose_points_message(loyalty.points, loyalty.tier.value, loyalty.total_prizes_won)

    def prizes_reply(self, db: Session, phone: str) -> str:
        registrations = (
            db.query(Registration)
            .options(
                joinedload(Registration.scratch_card).joinedload(ScratchCard.prize),
                joinedload(Registration.redemptions),
            )
            .filter(Registration.customer_phone == phone)
            .order_by(Registration.registered_at.desc())
            .limit(PRIZE_HISTORY_LIMIT)
            .all()
        )
        if not registrations:
            return messages.NO_PRIZES_TEXT
        return messages.compose_prize_history_message(
            (
                reg.scratch_card.prize.name if reg.scratch_card.prize else "Prêmio",
                reg.scratch_card.serial_code,
                bool(reg.redemptions),
            )
            for reg in registrations
        )

    def achievements_reply(self, db: Session, phone: str) -> str:
        unlocked = (
            db.query(CustomerAchievement)
            .options(joinedload(CustomerAchievement.achievement))
            .filter(CustomerAchievement.customer_phone == phone)
            .order_by(CustomerAchievement.unlocked_at.desc())
            .all()
        )
        if not unlocked:
            return messages.NO_ACHIEVEMENTS_TEXT
        return messages.compose_achievement_list_message((row.achievement, row.unlocked_at) for row in unlocked)

    def process_command(self, db: Session, phone: str, text: str) -> str:
        """
        Answer one command.

        Args:
            db: Database session
            phone: Sender phone or WhatsApp JID
            text: Message text

        Returns:
            Reply text
        """
        formatted_phone = normalize_phone(phone, strict=False)
        command = text.lower().strip()

        if any(keyword in command for keyword in POINTS_KEYWORDS):
            return self.points_reply(db, formatted_phone)
        if any(keyword in command for keyword in PRIZES_KEYWORDS):
            return self.prizes_reply(db, formatted_phone)
        if any(keyword in command for keyword in ACHIEVEMENTS_KEYWORDS):
            return self.achievements_reply(db, formatted_phone)
        if any(keyword in command for keyword in HELP_KEYWORDS):
            return messages.HELP_TEXT
        return messages.GREETING_TEXT

    async def handle_webhook(self, db: Session, payload: dict[str, Any]) -> int:
        """
        Process an Evolution API webhook payload.

        Returns:
            Number of messages answered
        """
        if payload.get("event") != UPSERT_EVENT:
            return 0

        answered = 0
        for message in (payload.get("data") or {}).get("messages") or []:
            key = message.get("key") or {}
            if key.get("fromMe"):
                continue

            phone = key.get("remoteJid") or ""
            text = extract_text(message)
            if not phone or not text:
                continue

            print(f"💬 Processando mensagem de {phone}: {text}")
            db.add(
                WhatsAppMessage(
                    customer_phone=phone,
                    message_text=text,
                    direction=MessageDirection.RECEIVED,
                    processed=False,
                )
            )

            reply = self.process_command(db, phone, text)
            db.add(
                WhatsAppMessage(
                    customer_phone=phone,
                    message_text=reply,
                    direction=MessageDirection.SENT,
                    bot_response=reply,
                    processed=True,
                )
            )
            db.commit()

            if not self.gateway.is_configured:
                print("⚠️  Evolution API não configurada. Resposta não enviada.")
                continue

            try:
                await self.gateway.send_text(phone, reply)
            except NotificationError as e:
                print(f"❌ Erro ao enviar resposta para {phone}: {e}")
                continue

            print("✅ Resposta enviada")
            answered += 1

        return answered
