"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Scratch Alerts API"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Notificações WhatsApp para o programa de raspadinhas"
    API_V1_PREFIX: str = "/api/v1"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Database
    DATABASE_URL: str = "sqlite:///./scratch_alerts.db"

    # Evolution API (WhatsApp gateway)
    EVOLUTION_API_URL: str = ""
    EVOLUTION_API_KEY: str = ""
    EVOLUTION_INSTANCE_NAME: str = ""

    # Delivery
    WHATSAPP_MAX_ATTEMPTS: int = 3
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0
    WHATSAPP_SEND_DELAY_MS: int = 1200
    WHATSAPP_PRESENCE: str = "composing"
    PHONE_COUNTRY_CODE: str = "55"

    # Notification queue
    QUEUE_BATCH_SIZE: int = 50
    QUEUE_MAX_ATTEMPTS: int = 3
    QUEUE_PAUSE_SECONDS: float = 1.0
    QUEUE_CLAIM_TIMEOUT_MINUTES: int = 15
    QUEUE_INTERVAL_SECONDS: int = 60

    # Reminders (days since registration)
    REMINDER_FIRST_DAYS: int = 3
    REMINDER_SECOND_DAYS: int = 7
    REGISTRATION_EXPIRY_DAYS: int = 30
    REMINDER_HOUR: int = 10

    # Scheduler
    SCHEDULER_ENABLED: bool = True

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get ALLOWED_ORIGINS as a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def evolution_configured(self) -> bool:
        """True when every Evolution API credential is present."""
        return bool(self.EVOLUTION_API_URL and self.EVOLUTION_API_KEY and self.EVOLUTION_INSTANCE_NAME)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
