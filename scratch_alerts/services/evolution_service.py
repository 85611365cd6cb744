"""Evolution API (WhatsApp gateway) client with retry."""

import asyncio
import random
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from scratch_alerts.core.config import settings
from scratch_alerts.core.exceptions import (
    ConfigurationError,
    NonRetryableGatewayError,
    RetryableGatewayError,
)
from scratch_alerts.models import DeliveryStatus
from scratch_alerts.services.delivery_log import DeliveryLogger, DeliveryMetadata, DeliveryOutcome

SEND_PATH = "/message/sendText"
_STALE_SEND_PATH = re.compile(r"/message/sendText.*$")


@dataclass
class DeliveryResult:
    """Accepted gateway send."""

    phone: str
    status_code: int
    response_body: Any
    attempts: int


def build_send_url(base_url: str, instance_name: str) -> str:
    """Join the configured base URL and the sendText path without duplicating it."""
    clean_url = base_url.strip().rstrip("/")
    clean_url = _STALE_SEND_PATH.sub("", clean_url)
    return f"{clean_url}{SEND_PATH}/{instance_name}"


def is_retryable_status(status_code: int) -> bool:
    """429 and 5xx may succeed later; any other 4xx will not."""
    return status_code == 429 or status_code >= 500


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after ``attempt`` fails: 2^attempt plus up to 1s of jitter."""
    return 2**attempt + random.uniform(0, 1)


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class EvolutionService:
    """Service to send WhatsApp messages through the Evolution API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        instance_name: str | None = None,
        *,
        max_attempts: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        delivery_logger: Callable[[DeliveryOutcome], Any] | None = None,
    ) -> None:
        """
        Initialize Evolution API client.

        Args:
            base_url: Gateway base URL (defaults to EVOLUTION_API_URL)
            api_key: Gateway API key (defaults to EVOLUTION_API_KEY)
            instance_name: WhatsApp instance (defaults to EVOLUTION_INSTANCE_NAME)
            max_attempts: Gateway calls per send (defaults to WHATSAPP_MAX_ATTEMPTS)
            timeout: HTTP timeout in seconds
            transport: httpx transport override, used by tests
            sleep: Coroutine used to wait between attempts
            delivery_logger: Receives every terminal outcome
        """
        self.base_url = settings.EVOLUTION_API_URL if base_url is None else base_url
        self.api_key = settings.EVOLUTION_API_KEY if api_key is None else api_key
        self.instance_name = settings.EVOLUTION_INSTANCE_NAME if instance_name is None else instance_name
        self.max_attempts = max_attempts or settings.WHATSAPP_MAX_ATTEMPTS
        self.timeout = timeout or settings.WHATSAPP_TIMEOUT_SECONDS
        self.transport = transport
        self.sleep = sleep
        self.delivery_logger = delivery_logger if delivery_logger is not None else DeliveryLogger()

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key and self.instance_name)

    @property
    def send_url(self) -> str:
        return build_send_url(self.base_url, self.instance_name)

    def ensure_configured(self) -> None:
        """Raise ConfigurationError unless credentials are set and the URL is usable."""
        if not self.is_configured:
            print("❌ Variáveis de ambiente não configuradas")
            print(f"   EVOLUTION_API_URL: {'✅' if self.base_url else '❌'}")
            print(f"   EVOLUTION_API_KEY: {'✅' if self.api_key else '❌'}")
            print(f"   EVOLUTION_INSTANCE_NAME: {'✅' if self.instance_name else '❌'}")
            raise ConfigurationError("Evolution API credentials not configured")

        try:
            url = httpx.URL(self.send_url)
        except httpx.InvalidURL as e:
            print(f"❌ EVOLUTION_API_URL inválida: {self.base_url}")
            raise ConfigurationError(f"Invalid EVOLUTION_API_URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            print(f"❌ EVOLUTION_API_URL inválida: {self.base_url}")
            raise ConfigurationError(f"Invalid EVOLUTION_API_URL: {self.base_url}")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _record(self, outcome: DeliveryOutcome) -> None:
        try:
            self.delivery_logger(outcome)
        except Exception as e:
            print(f"⚠️  Delivery logger failed: {e}")

    async def send_text(
        self,
        number: str,
        text: str,
        metadata: DeliveryMetadata | None = None,
    ) -> DeliveryResult:
        """
        Send a text message, retrying transient failures.

        Args:
            number: Normalized phone (digits with country code) or WhatsApp JID
            text: Message body
            metadata: Customer/prize context stored in the delivery log

        Returns:
            DeliveryResult of the accepted call

        Raises:
            ConfigurationError: credentials missing, nothing was sent
            NonRetryableGatewayError: 4xx other than 429, after one call
            RetryableGatewayError: 429/5xx/network errors on every attempt
        """
        self.ensure_configured()
        metadata = metadata or DeliveryMetadata()

        url = self.send_url
        payload = {
            "number": number,
            "text": text,
            "options": {
                "delay": settings.WHATSAPP_SEND_DELAY_MS,
                "presence": settings.WHATSAPP_PRESENCE,
            },
        }
        headers = {"Content-Type": "application/json", "apikey": self.api_key}

        print(f"🔄 Enviando para Evolution API: {url}")
        print(f"🔑 API Key (primeiros 10 chars): {self.api_key[:10]}...")

        last_status: int | None = None
        last_body: Any = None
        last_error = ""

        async with self._client() as client:
            for attempt in range(1, self.max_attempts + 1):
                print(f"🔄 Tentativa {attempt}/{self.max_attempts}")
                try:
                    response = await client.post(url, json=payload, headers=headers)
                except httpx.HTTPError as e:
                    print(f"❌ Erro na tentativa {attempt}: {e}")
                    last_status, last_body, last_error = None, None, str(e) or type(e).__name__
                else:
                    body = _parse_body(response)

                    if response.is_success:
                        print(f"✅ Mensagem WhatsApp enviada (status {response.status_code})")
                        self._record(
                            DeliveryOutcome(
                                phone=number,
                                status=DeliveryStatus.SUCCESS,
                                attempts=attempt,
                                metadata=metadata,
                                response_status=response.status_code,
                                response_body=body,
                            )
                        )
                        return DeliveryResult(
                            phone=number,
                            status_code=response.status_code,
                            response_body=body,
                            attempts=attempt,
                        )

                    last_status, last_body, last_error = response.status_code, body, response.text
                    print(f"❌ Erro na Evolution API: {response.status_code} {response.text}")

                    if not is_retryable_status(response.status_code):
                        if response.status_code in (401, 403):
                            print("🔐 Erro de autenticação - verificar EVOLUTION_API_KEY")
                        elif response.status_code == 404:
                            print(f"📡 Instância não encontrada: {self.instance_name}")
                        self._record_failure(number, metadata, attempt, last_status, last_body, last_error)
                        raise NonRetryableGatewayError(
                            f"Evolution API error: {response.status_code} - {response.text}",
                            status_code=response.status_code,
                            response_body=body,
                            attempts=attempt,
                        )

                if attempt < self.max_attempts:
                    delay = backoff_delay(attempt)
                    print(f"⏳ Aguardando {round(delay * 1000)}ms antes de tentar novamente...")
                    await self.sleep(delay)

        self._record_failure(number, metadata, self.max_attempts, last_status, last_body, last_error)
        raise RetryableGatewayError(
            f"Máximo de tentativas excedido: {last_status or last_error}",
            status_code=last_status,
            response_body=last_body,
            attempts=self.max_attempts,
        )

    def _record_failure(
        self,
        number: str,
        metadata: DeliveryMetadata,
        attempts: int,
        status_code: int | None,
        body: Any,
        error: str,
    ) -> None:
        self._record(
            DeliveryOutcome(
                phone=number,
                status=DeliveryStatus.FAILED,
                attempts=attempts,
                metadata=metadata,
                error_message=error,
                response_status=status_code,
                response_body=body,
            )
        )

    async def connection_state(self) -> dict[str, Any]:
        """
        Query the instance connection state.

        Returns:
            Gateway response or error
        """
        self.ensure_configured()
        base = _STALE_SEND_PATH.sub("", self.base_url.strip().rstrip("/"))
        url = f"{base}/instance/connectionState/{self.instance_name}"

        try:
            async with self._client() as client:
                response = await client.get(url, headers={"apikey": self.api_key})
                response.raise_for_status()
                return response.json()
        except Exception as e:
            return {"error": str(e)}
