import pytest
from pydantic import ValidationError

from infrastructure.configuration import RetrySettings, Settings
from infrastructure.configuration.infrastructure import ServerSettings
from infrastructure.configuration.integrations import EmailSettings


@pytest.mark.unit
class TestEmailSettings:
    def test_default_provider_is_console(self, monkeypatch):
        monkeypatch.delenv("EMAIL_PROVIDER", raising=False)
        assert EmailSettings().EMAIL_PROVIDER == "console"

    def test_nodemailer_alias_maps_to_relay(self, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", "nodemailer")
        assert EmailSettings().EMAIL_PROVIDER == "relay"

    def test_provider_name_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", " Resend ")
        assert EmailSettings().EMAIL_PROVIDER == "resend"

    def test_unknown_provider_falls_back_to_console(self, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", "carrier-pigeon")
        assert EmailSettings().EMAIL_PROVIDER == "console"

    def test_sender_combines_name_and_address(self, monkeypatch):
        monkeypatch.setenv("EMAIL_FROM_NAME", "Rehab Center")
        monkeypatch.setenv("EMAIL_FROM_ADDRESS", "alerts@rehab-center.org")
        assert EmailSettings().sender == "Rehab Center <alerts@rehab-center.org>"


@pytest.mark.unit
class TestRetrySettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RETRY_MAX_ATTEMPTS", raising=False)
        monkeypatch.delenv("RETRY_BASE_DELAY_MS", raising=False)
        settings = RetrySettings()
        assert settings.max_attempts == 3
        assert settings.base_delay_ms == 1000

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("RETRY_BASE_DELAY_MS", "250")
        settings = RetrySettings()
        assert settings.max_attempts == 5
        assert settings.base_delay_ms == 250

    def test_rejects_zero_attempts(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "0")
        with pytest.raises(ValidationError):
            RetrySettings()


@pytest.mark.unit
class TestServerSettings:
    def test_cors_origins_are_split_and_trimmed(self, monkeypatch):
        monkeypatch.setenv(
            "CORS_ORIGINS", "https://care.example.org, https://admin.example.org ,"
        )
        assert ServerSettings().cors_origins == [
            "https://care.example.org",
            "https://admin.example.org",
        ]

    def test_no_cors_origins_by_default(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        assert ServerSettings().cors_origins == []


@pytest.mark.unit
class TestSettings:
    def test_builds_every_section(self):
        settings = Settings()
        assert settings.email is not None
        assert settings.firestore is not None
        assert settings.alerts is not None
        assert settings.server is not None
        assert settings.retry is not None
        assert settings.notifications is not None

    def test_section_override(self):
        retry = RetrySettings(RETRY_MAX_ATTEMPTS=7)
        assert Settings(retry=retry).retry.max_attempts == 7

    def test_production_when_prefix_empty(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "")
        assert Settings().is_production is True

    def test_not_production_with_prefix(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False
