"""Tests for the expiry and reminder passes."""

import asyncio

import pytest

from scratch_alerts.models import Registration, ScratchCard, ScratchCardStatus
from scratch_alerts.services.reminder_service import ReminderService
from scratch_alerts.utils.datetime import utcnow


def selected_by(service: ReminderService, db, registration: Registration) -> tuple[bool, bool]:
    now = utcnow()
    first = {r.id for r in service.first_reminder_candidates(db, now)}
    second = {r.id for r in service.second_reminder_candidates(db, now)}
    return registration.id in first, registration.id in second


@pytest.mark.parametrize(
    ("days_ago", "reminded_days_ago", "expected"),
    [
        (2, None, (False, False)),
        (5, None, (True, False)),
        (8, 5, (False, True)),
        (8, 2, (False, False)),
        (5, 2, (False, False)),
    ],
)
def test_reminder_passes_do_not_overlap(
    make_notifier, make_registration, db, days_ago, reminded_days_ago, expected
) -> None:
    notifier, _ = make_notifier()
    registration = make_registration(days_ago, reminded_days_ago=reminded_days_ago)

    assert selected_by(ReminderService(notifier), db, registration) == expected


def test_only_registered_cards_are_reminded(make_notifier, make_registration, db) -> None:
    notifier, _ = make_notifier()
    registration = make_registration(5, card_status=ScratchCardStatus.REDEEMED)

    assert selected_by(ReminderService(notifier), db, registration) == (False, False)


def test_expiry_pass_expires_only_registered_cards(make_notifier, make_registration, db) -> None:
    notifier, _ = make_notifier()
    stale = make_registration(31)
    redeemed = make_registration(45, card_status=ScratchCardStatus.REDEEMED)
    recent = make_registration(10)

    expired = ReminderService(notifier).expire_registrations(db, utcnow())

    assert expired == 1
    statuses = {
        card.serial_code: card.status
        for card in db.query(ScratchCard).all()
    }
    assert statuses[stale.scratch_card.serial_code] == ScratchCardStatus.EXPIRED
    assert statuses[redeemed.scratch_card.serial_code] == ScratchCardStatus.REDEEMED
    assert statuses[recent.scratch_card.serial_code] == ScratchCardStatus.REGISTERED


def test_run_sends_reminders_and_reports_stats(make_notifier, make_registration, db) -> None:
    notifier, fake = make_notifier()
    make_registration(40)
    first = make_registration(4, customer_name="Bruno")
    second = make_registration(9, reminded_days_ago=5, customer_name="Carla")

    stats = asyncio.run(ReminderService(notifier).run(db))

    assert stats.to_dict() == {"expired": 1, "three_day_reminders": 1, "seven_day_reminders": 1}
    assert len(fake.requests) == 2
    assert "Bruno" in fake.payloads[0]["text"]
    assert "3 dias" in fake.payloads[0]["text"]
    assert "Carla" in fake.payloads[1]["text"]
    assert "7 dias" in fake.payloads[1]["text"]

    db.refresh(first)
    db.refresh(second)
    assert first.reminded_at is not None
    assert second.second_reminded_at is not None


def test_first_reminder_is_stamped_even_if_delivery_fails(make_notifier, make_registration, db) -> None:
    notifier, fake = make_notifier(400)
    registration = make_registration(4)

    stats = asyncio.run(ReminderService(notifier).run(db))

    db.refresh(registration)
    assert stats.three_day_reminders == 1
    assert len(fake.requests) == 1
    assert registration.reminded_at is not None


def test_second_reminder_is_sent_once(make_notifier, make_registration, db) -> None:
    notifier, fake = make_notifier()
    registration = make_registration(9, reminded_days_ago=5)
    service = ReminderService(notifier)

    asyncio.run(service.run(db))
    asyncio.run(service.run(db))

    db.refresh(registration)
    assert len(fake.requests) == 1
    assert registration.reminded_at is not None
    assert registration.second_reminded_at is not None


def test_missing_prize_uses_default_name(make_notifier, make_registration, db) -> None:
    notifier, fake = make_notifier()
    make_registration(4, prize_name=None)

    asyncio.run(ReminderService(notifier).run(db))

    assert "📦 Prêmio: Prêmio\n" in fake.payloads[0]["text"]


def test_malformed_gateway_url_does_not_abort_the_pass(make_notifier, make_registration, db) -> None:
    notifier, fake = make_notifier(base_url="https://evolution.example.com:porta")
    first = make_registration(4, customer_name="Bruno")
    second = make_registration(5, customer_name="Carla")

    stats = asyncio.run(ReminderService(notifier).run(db))

    db.refresh(first)
    db.refresh(second)
    assert stats.three_day_reminders == 2
    assert fake.requests == []
    assert first.reminded_at is not None
    assert second.reminded_at is not None
