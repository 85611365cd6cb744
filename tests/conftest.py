"""Shared fixtures: in-memory database and a mocked Evolution API."""

import json
from collections.abc import Callable
from datetime import timedelta

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import scratch_alerts.models  # noqa: F401
from scratch_alerts.database import Base
from scratch_alerts.models import Prize, Registration, ScratchCard, ScratchCardStatus
from scratch_alerts.services.delivery_log import DeliveryLogger
from scratch_alerts.services.evolution_service import EvolutionService
from scratch_alerts.services.notification_service import WhatsAppNotificationService
from scratch_alerts.utils.datetime import utcnow

GATEWAY_URL = "https://evolution.example.com"
GATEWAY_KEY = "test-api-key-1234567890"
GATEWAY_INSTANCE = "raspadinha"


class FakeGateway:
    """Records the requests sent to the Evolution API and replays canned responses.

    Each response is a status code, a ``(status, body)`` pair or an exception to
    raise; the last one repeats once the list runs out.
    """

    def __init__(self, responses: list | None = None) -> None:
        self.responses = list(responses or [(200, {"key": {"id": "MSG1"}})])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        canned = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(canned, Exception):
            raise canned
        if isinstance(canned, int):
            return httpx.Response(canned, json={"status": canned})
        status, body = canned
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_gateway(session_factory, sleeper) -> Callable[..., tuple[EvolutionService, FakeGateway]]:
    """Build an EvolutionService wired to a FakeGateway and the test database."""

    def factory(*responses, **kwargs) -> tuple[EvolutionService, FakeGateway]:
        fake = FakeGateway(list(responses) or None)
        options = {
            "base_url": GATEWAY_URL,
            "api_key": GATEWAY_KEY,
            "instance_name": GATEWAY_INSTANCE,
            "transport": httpx.MockTransport(fake),
            "sleep": sleeper,
            "delivery_logger": DeliveryLogger(session_factory),
        }
        options.update(kwargs)
        return EvolutionService(**options), fake

    return factory


@pytest.fixture
def make_notifier(make_gateway) -> Callable[..., tuple[WhatsAppNotificationService, FakeGateway]]:
    def factory(*responses, **kwargs) -> tuple[WhatsAppNotificationService, FakeGateway]:
        gateway, fake = make_gateway(*responses, **kwargs)
        return WhatsAppNotificationService(gateway), fake

    return factory


@pytest.fixture
def make_registration(db) -> Callable[..., Registration]:
    """Create a registration ``days_ago`` days old, with card and prize."""
    counter = {"serial": 0}

    def factory(
        days_ago: float,
        *,
        reminded_days_ago: float | None = None,
        card_status: ScratchCardStatus = ScratchCardStatus.REGISTERED,
        customer_name: str = "Ana",
        customer_phone: str = "11987654321",
        prize_name: str | None = "Fone",
    ) -> Registration:
        counter["serial"] += 1
        now = utcnow()
        prize = Prize(name=prize_name) if prize_name else None
        card = ScratchCard(serial_code=f"RSP-{counter['serial']:04d}", status=card_status, prize=prize)
        registration = Registration(
            scratch_card=card,
            customer_name=customer_name,
            customer_phone=customer_phone,
            registered_at=now - timedelta(days=days_ago),
            reminded_at=now - timedelta(days=reminded_days_ago) if reminded_days_ago is not None else None,
        )
        db.add(registration)
        db.commit()
        return registration

    return factory
