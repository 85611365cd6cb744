"""Notification error taxonomy."""

from typing import Any


class NotificationError(Exception):
    """Base class for errors raised while delivering a notification."""

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(NotificationError):
    """Evolution API credentials are missing."""

    http_status = 500


class PhoneValidationError(NotificationError):
    """Phone number cannot be turned into a valid WhatsApp number."""

    http_status = 422

    def __init__(self, phone: str, message: str | None = None) -> None:
        super().__init__(message or f"Número inválido: {phone} (deve ter 10 ou 11 dígitos após remover 55)")
        self.phone = phone


class GatewayError(NotificationError):
    """Evolution API did not accept the message."""

    http_status = 502

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: Any = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.attempts = attempts


class NonRetryableGatewayError(GatewayError):
    """4xx response (other than 429); retrying would not help."""


class RetryableGatewayError(GatewayError):
    """429, 5xx or transport failure that persisted through every attempt."""
