"""WhatsApp message templates."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

PRIZE_TEMPLATE = """🎉 Parabéns, {customer_name}!

Seu prêmio foi validado com sucesso! ✅

📦 Prêmio: {prize_name}
🎫 Código: {serial_code}

Você já pode retirar seu prêmio na loja!

Obrigado por participar! 🎁"""

REMINDER_TEMPLATE = """⏰ Olá, {customer_name}!

Seu prêmio ainda está esperando por você.

📦 Prêmio: {prize_name}
🎫 Código: {serial_code}

Registrado há {days} dias. Retire na loja antes que expire!"""

HELP_TEXT = """🤖 Comandos disponíveis:

📊 *PONTOS* - Ver seu saldo de pontos
🎁 *PREMIOS* - Ver histórico de prêmios
🏆 *CONQUISTAS* - Ver suas conquistas
❓ *AJUDA* - Ver esta mensagem

Digite qualquer comando para começar!"""

GREETING_TEXT = """Olá! 👋

Sou o assistente do programa de fidelidade.

Digite *AJUDA* para ver os comandos disponíveis."""

NOT_IN_LOYALTY_TEXT = "❌ Você ainda não está no programa de fidelidade. Ganhe seu primeiro prêmio para participar!"
NO_PRIZES_TEXT = "❌ Você ainda não ganhou nenhum prêmio. Participe para começar a ganhar!"
NO_ACHIEVEMENTS_TEXT = "🏆 Você ainda não possui conquistas. Continue participando para desbloquear badges!"


def compose_prize_message(customer_name: str, prize_name: str, serial_code: str) -> str:
    """Congratulate the customer on a validated prize."""
    return PRIZE_TEMPLATE.format(
        customer_name=customer_name,
        prize_name=prize_name,
        serial_code=serial_code,
    )


def compose_reminder_message(customer_name: str, prize_name: str, serial_code: str, days: int) -> str:
    """Remind the customer of a prize registered ``days`` ago and not yet collected."""
    return REMINDER_TEMPLATE.format(
        customer_name=customer_name,
        prize_name=prize_name,
        serial_code=serial_code,
        days=days,
    )


def compose_achievement_message(achievements: Iterable[Any]) -> str:
    """List newly unlocked achievements (anything with name/description/icon)."""
    lines = [f"{a.icon or '🏅'} {a.name}\n{a.description or ''}".rstrip() for a in achievements]
    return "🎉 Nova(s) conquista(s) desbloqueada(s)!\n\n" + "\n\n".join(lines)


def compose_points_message(points: int, tier: str, total_prizes_won: int) -> str:
    return f"""📊 Seu saldo de pontos:

⭐ Pontos: {points}
🏆 Tier: {tier.upper()}
🎁 Prêmios ganhos: {total_prizes_won}

Continue participando para ganhar mais pontos!"""


def compose_prize_history_message(entries: Iterable[tuple[str, str, bool]]) -> str:
    """Render (prize name, serial code, redeemed) triples, newest first."""
    response = "🎁 Seus últimos prêmios:\n\n"
    for index, (prize_name, serial_code, redeemed) in enumerate(entries, start=1):
        status = "✅ Retirado" if redeemed else "⏳ Pendente"
        response += f"{index}. {prize_name}\n"
        response += f"   Código: {serial_code}\n"
        response += f"   Status: {status}\n\n"
    return response


def compose_achievement_list_message(entries: Iterable[tuple[Any, datetime]]) -> str:
    """Render (achievement, unlocked_at) pairs."""
    response = "🏆 Suas conquistas:\n\n"
    for achievement, unlocked_at in entries:
        response += f"{achievement.icon or '🏅'} {achievement.name}\n"
        response += f"   {achievement.description or ''}\n"
        response += f"   Desbloqueado: {unlocked_at.strftime('%d/%m/%Y')}\n\n"
    return response
