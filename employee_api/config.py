# employee_api/config.py - Pydantic settings (env vars)

from functools import lru_cache
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEV_ACCESS_SECRET = "dev-access-secret"
DEV_REFRESH_SECRET = "dev-refresh-secret"


class Settings(BaseSettings):
    # Supabase (Postgres behind PostgREST)
    supabase_url: str
    supabase_service_key: str

    # Auth
    jwt_access_secret: str = DEV_ACCESS_SECRET
    jwt_refresh_secret: str = DEV_REFRESH_SECRET
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7
    bcrypt_rounds: int = 10

    # Accepts email + new password with no emailed token. Demo deployments only.
    insecure_password_reset: bool = False

    # HTTP
    frontend_url: str = "http://localhost:5173"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("supabase_url", "supabase_service_key")
    @classmethod
    def _validate_supabase(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set and non-empty")
        return cleaned

    @field_validator("bcrypt_rounds")
    @classmethod
    def _validate_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value

    @property
    def uses_dev_secrets(self) -> bool:
        return (
            self.jwt_access_secret == DEV_ACCESS_SECRET
            or self.jwt_refresh_secret == DEV_REFRESH_SECRET
        )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    if settings.uses_dev_secrets:
        logger.warning("JWT secrets not configured; using development defaults")
    return settings
