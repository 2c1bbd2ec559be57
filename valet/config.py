"""
Parque Valet - Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # FastAPI
    fastapi_env: str = "development"
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000
    cors_allowed_origins: str = "*"  # Comma-separated origins

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: str = ""

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    payment_currency: str = "usd"
    intent_idempotency_window_seconds: int = 300

    # Twilio
    twilio_mode: str = "mock"  # mock | test | live
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.fastapi_env.lower() == "production"

    @property
    def SUPABASE_WRITE_KEY(self) -> str:
        """Service role key when available, anon key otherwise"""
        return self.supabase_service_role_key or self.supabase_key

    @property
    def CORS_ORIGINS(self) -> list[str]:
        """Parse comma-separated CORS origins"""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
