from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


# ================== SETTINGS ==================
class Settings(BaseSettings):
    PROJECT_NAME: str = "Luxury Nail Studio"
    PORT: int = 8080
    ENVIRONMENT: str = "development"

    # Storage
    LEDGER_BACKEND: str = "json"  # "json" or "sql"
    BOOKINGS_FILE: str = "bookings.json"
    DATABASE_URL: str = "sqlite:///./bookings.db"

    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/errors.log"

    # Mail (empty username disables email)
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = "noreply@example.com"
    MAIL_SERVER: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    ADMIN_EMAIL: str = ""

    # Twilio WhatsApp (empty sid disables it)
    TWILIO_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_WHATSAPP_FROM: str = ""
    ADMIN_WHATSAPP_TO: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )

    @property
    def mail_enabled(self) -> bool:
        return bool(self.MAIL_USERNAME and self.MAIL_PASSWORD)

    @property
    def whatsapp_enabled(self) -> bool:
        return bool(self.TWILIO_SID and self.TWILIO_AUTH_TOKEN and self.ADMIN_WHATSAPP_TO)


@lru_cache
def get_settings() -> Settings:
    return Settings()
