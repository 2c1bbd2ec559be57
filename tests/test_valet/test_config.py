"""
Test configuration management
"""
from valet.config import Settings, get_settings


def test_settings_singleton():
    """Test settings returns same instance"""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2


def test_settings_defaults():
    """Test default values"""
    settings = get_settings()
    assert settings.fastapi_env in ["development", "production"]
    assert settings.fastapi_port == 8000
    assert settings.payment_currency == "usd"
    assert settings.twilio_mode in ["mock", "test", "live"]


def test_environment_overrides(monkeypatch):
    """Environment variables override defaults"""
    monkeypatch.setenv("FASTAPI_ENV", "production")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_abc")
    monkeypatch.setenv("INTENT_IDEMPOTENCY_WINDOW_SECONDS", "60")

    settings = Settings(_env_file=None)

    assert settings.is_production is True
    assert settings.stripe_webhook_secret == "whsec_abc"
    assert settings.intent_idempotency_window_seconds == 60


def test_write_key_prefers_service_role():
    settings = Settings(_env_file=None, supabase_key="anon", supabase_service_role_key="service")
    assert settings.SUPABASE_WRITE_KEY == "service"

    settings = Settings(_env_file=None, supabase_key="anon", supabase_service_role_key="")
    assert settings.SUPABASE_WRITE_KEY == "anon"


def test_cors_origins_parsing():
    settings = Settings(_env_file=None, cors_allowed_origins="https://a.example, https://b.example,")
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_stripe_settings_hold_only_server_keys(monkeypatch):
    """A leftover publishable key in the environment is ignored"""
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_abc")
    monkeypatch.setenv("STRIPE_PUBLISHABLE_KEY", "pk_test_abc")

    settings = Settings(_env_file=None)

    assert settings.stripe_secret_key == "sk_test_abc"
    assert "stripe_publishable_key" not in Settings.model_fields
    assert not hasattr(settings, "stripe_publishable_key")
