"""Evolution API webhook."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from scratch_alerts.api.dependencies import get_chatbot_service
from scratch_alerts.database import get_db
from scratch_alerts.schemas.notification import WebhookResponse
from scratch_alerts.services.chatbot_service import ChatbotService

router = APIRouter()


@router.post("/whatsapp", response_model=WebhookResponse)
async def whatsapp_webhook(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    chatbot: ChatbotService = Depends(get_chatbot_service),
) -> WebhookResponse:
    """Answer customer commands received over WhatsApp."""
    print(f"📥 Webhook recebido: {payload.get('event')}")
    answered = await chatbot.handle_webhook(db, payload)
    return WebhookResponse(answered=answered)
