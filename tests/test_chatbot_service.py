"""Tests for the WhatsApp loyalty chatbot."""

import asyncio
from datetime import timedelta

import pytest

from scratch_alerts.models import (
    Achievement,
    CustomerAchievement,
    CustomerLoyalty,
    LoyaltyTier,
    MessageDirection,
    Redemption,
    RequirementType,
    WhatsAppMessage,
)
from scratch_alerts.services import messages
from scratch_alerts.services.chatbot_service import ChatbotService, extract_text
from scratch_alerts.utils.datetime import utcnow

JID = "5511987654321@s.whatsapp.net"


def upsert(*messages_: dict) -> dict:
    return {"event": "messages.upsert", "data": {"messages": list(messages_)}}


def inbound(text: str, *, from_me: bool = False, extended: bool = False) -> dict:
    content = {"extendedTextMessage": {"text": text}} if extended else {"conversation": text}
    return {"key": {"remoteJid": JID, "fromMe": from_me}, "message": content}


def test_extract_text() -> None:
    assert extract_text(inbound("oi")) == "oi"
    assert extract_text(inbound("oi", extended=True)) == "oi"
    assert extract_text({"key": {}, "message": {"imageMessage": {}}}) == ""


@pytest.mark.parametrize("text", ["AJUDA", "help", "Menu por favor"])
def test_help_command(make_gateway, db, text: str) -> None:
    gateway, _ = make_gateway()
    assert ChatbotService(gateway).process_command(db, JID, text) == messages.HELP_TEXT


def test_unknown_command_greets(make_gateway, db) -> None:
    gateway, _ = make_gateway()
    assert ChatbotService(gateway).process_command(db, JID, "bom dia") == messages.GREETING_TEXT


def test_points_command(make_gateway, db) -> None:
    gateway, _ = make_gateway()
    chatbot = ChatbotService(gateway)
    assert chatbot.process_command(db, JID, "pontos") == messages.NOT_IN_LOYALTY_TEXT

    db.add(CustomerLoyalty(customer_phone="5511987654321", customer_name="Ana", points=80,
                           tier=LoyaltyTier.SILVER, total_prizes_won=2))
    db.commit()

    reply = chatbot.process_command(db, JID, "Qual meu SALDO?")
    assert "⭐ Pontos: 80" in reply
    assert "SILVER" in reply


def test_prizes_command(make_gateway, make_registration, db) -> None:
    gateway, _ = make_gateway()
    chatbot = ChatbotService(gateway)
    assert chatbot.process_command(db, JID, "premios") == messages.NO_PRIZES_TEXT

    old = make_registration(10, customer_phone="5511987654321", prize_name="Caneca")
    make_registration(1, customer_phone="5511987654321", prize_name="Fone")
    db.add(Redemption(registration_id=old.id))
    db.commit()

    reply = chatbot.process_command(db, JID, "histórico")
    assert reply.index("Fone") < reply.index("Caneca")
    assert "✅ Retirado" in reply
    assert "⏳ Pendente" in reply


def test_achievements_command(make_gateway, db) -> None:
    gateway, _ = make_gateway()
    chatbot = ChatbotService(gateway)
    assert chatbot.process_command(db, JID, "conquistas") == messages.NO_ACHIEVEMENTS_TEXT

    achievement = Achievement(name="Cem Pontos", description="100 pontos", icon="💯",
                              requirement_type=RequirementType.POINTS, requirement_value=100)
    db.add(achievement)
    db.flush()
    db.add(CustomerAchievement(customer_phone="5511987654321", achievement_id=achievement.id,
                               unlocked_at=utcnow() - timedelta(days=1)))
    db.commit()

    reply = chatbot.process_command(db, JID, "badges")
    assert "💯 Cem Pontos" in reply


def test_webhook_answers_and_records_conversation(make_gateway, db) -> None:
    gateway, fake = make_gateway()

    answered = asyncio.run(ChatbotService(gateway).handle_webhook(db, upsert(inbound("ajuda"))))

    assert answered == 1
    assert fake.payloads[0]["number"] == JID
    assert fake.payloads[0]["text"] == messages.HELP_TEXT
    rows = db.query(WhatsAppMessage).order_by(WhatsAppMessage.id).all()
    assert [row.direction for row in rows] == [MessageDirection.RECEIVED, MessageDirection.SENT]
    assert rows[1].processed is True


def test_webhook_ignores_own_and_empty_messages(make_gateway, db) -> None:
    gateway, fake = make_gateway()
    payload = upsert(
        inbound("ajuda", from_me=True),
        {"key": {"remoteJid": JID, "fromMe": False}, "message": {"imageMessage": {}}},
    )

    answered = asyncio.run(ChatbotService(gateway).handle_webhook(db, payload))

    assert answered == 0
    assert fake.requests == []
    assert db.query(WhatsAppMessage).count() == 0


def test_webhook_ignores_other_events(make_gateway, db) -> None:
    gateway, fake = make_gateway()

    answered = asyncio.run(ChatbotService(gateway).handle_webhook(db, {"event": "connection.update", "data": {}}))

    assert answered == 0
    assert fake.requests == []


def test_webhook_without_gateway_config_still_records(make_gateway, db) -> None:
    gateway, fake = make_gateway(api_key="")

    answered = asyncio.run(ChatbotService(gateway).handle_webhook(db, upsert(inbound("oi"))))

    assert answered == 0
    assert fake.requests == []
    assert db.query(WhatsAppMessage).count() == 2
