# amritacare/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import SettingsConfigDict
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    # Blank env vars count as unset, so the next alias is used
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra='ignore', env_ignore_empty=True)

    # Application Settings
    APP_NAME: str = "AmritaCare API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 3000))

    # OTP secret (never sent to clients, never logged)
    OTP_SECRET: Optional[SecretStr] = Field(
        default=None, validation_alias=AliasChoices("OTP_SECRET", "ADMIN_MANAGE_TOKEN")
    )

    # SendGrid Settings
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM: str = Field(default="", validation_alias=AliasChoices("SENDGRID_FROM", "VITE_FORMSUBMIT_EMAIL"))
    SENDGRID_API_URL: str = "https://api.sendgrid.com/v3/mail/send"

    # SMTP fallback (Gmail app password by default)
    SMTP_USER: str = Field(default="", validation_alias=AliasChoices("SMTP_USER", "GMAIL_USER", "GMAIL_EMAIL"))
    SMTP_PASSWORD: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("SMTP_PASSWORD", "GMAIL_APP_PASSWORD")
    )
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True

    # Delivery budget
    DELIVERY_ATTEMPT_TIMEOUT_SECONDS: float = 5.0
    DELIVERY_DEADLINE_SECONDS: float = 12.0

    # Replay / attempt guard: none | memory | redis
    OTP_GUARD_BACKEND: str = "none"
    OTP_MAX_ATTEMPTS: int = 5
    REDIS_URL: Optional[str] = None

    # Contact form inbox
    CONTACT_NOTIFY_EMAIL: str = ""

    # CORS Settings
    ALLOWED_ORIGINS: str = "*"

    # Request limits
    MAX_REQUEST_SIZE: int = 64 * 1024  # 64KB

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def otp_secret(self) -> Optional[str]:
        """The server secret exactly as configured, or None when unset or blank."""
        if self.OTP_SECRET is None:
            return None
        value = self.OTP_SECRET.get_secret_value()
        return value if value.strip() else None

    @property
    def sendgrid_configured(self) -> bool:
        return bool(self.SENDGRID_API_KEY.strip() and self.SENDGRID_FROM.strip())

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_USER.strip() and self.SMTP_PASSWORD.get_secret_value().strip())

    @property
    def contact_inbox(self) -> str:
        return (self.CONTACT_NOTIFY_EMAIL or self.SENDGRID_FROM).strip()

@lru_cache()
def get_settings() -> Settings:
    return Settings()
