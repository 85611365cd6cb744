"""Phone number normalization for the WhatsApp gateway."""

import re

from scratch_alerts.core.config import settings
from scratch_alerts.core.exceptions import PhoneValidationError

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str, *, strict: bool = True, country_code: str | None = None) -> str:
    """
    Turn a free-form phone into the digits-only number the gateway expects.

    Args:
        raw: Phone as typed by the customer, e.g. "(11) 98765-4321"
        strict: Require 10 or 11 national digits after removing the country code
        country_code: Country prefix (defaults to PHONE_COUNTRY_CODE)

    Returns:
        Country-coded digits, e.g. "5511987654321"

    Raises:
        PhoneValidationError: strict mode and the national part has the wrong length
    """
    code = country_code or settings.PHONE_COUNTRY_CODE
    cleaned = _NON_DIGITS.sub("", raw or "")

    if not strict:
        return cleaned if cleaned.startswith(code) else code + cleaned

    national = cleaned[len(code):] if cleaned.startswith(code) else cleaned
    if len(national) not in (10, 11):
        raise PhoneValidationError(raw)

    formatted = code + national
    print(f"📱 Telefone formatado: {raw} → {formatted}")
    return formatted
