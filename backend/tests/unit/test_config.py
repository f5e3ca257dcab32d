"""
Tests for settings, configuration validation and secret masking.
"""
import pytest

from xerus_bridge.config import Settings, mask_database_url, mask_secret, settings, validate_config


@pytest.fixture
def strict_validation(monkeypatch):
    monkeypatch.delenv("SKIP_CONFIG_VALIDATION", raising=False)


@pytest.mark.unit
class TestSettings:
    def test_backend_api_url_appends_version(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://api.example.com/api/")
        assert Settings().backend_api_url == "https://api.example.com/api/v1"

    def test_empty_deepgram_key_is_none(self, monkeypatch):
        monkeypatch.setenv("DEEPGRAM_API_KEY", "")
        assert Settings().deepgram_api_key is None

    def test_environment_flags(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        production = Settings()
        assert production.is_production is True
        assert production.is_development is False

    def test_boolean_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("PERF_LOGS", "1")
        loaded = Settings()
        assert loaded.debug is True
        assert loaded.perf_logs is True


@pytest.mark.unit
class TestValidateConfig:
    def test_valid_configuration(self, strict_validation, monkeypatch):
        monkeypatch.setattr(settings, "database_url", "postgresql://u:p@localhost:5432/xerus")
        validate_config()

    def test_missing_token(self, strict_validation, monkeypatch):
        monkeypatch.setattr(settings, "backend_token", "")
        with pytest.raises(ValueError, match="BACKEND_TOKEN"):
            validate_config()

    def test_unsupported_database(self, strict_validation, monkeypatch):
        monkeypatch.setattr(settings, "database_url", "mysql://localhost/xerus")
        with pytest.raises(ValueError, match="DATABASE_URL"):
            validate_config()

    def test_skip_flag(self, monkeypatch):
        monkeypatch.setenv("SKIP_CONFIG_VALIDATION", "true")
        monkeypatch.setattr(settings, "backend_token", "")
        validate_config()


@pytest.mark.unit
class TestMasking:
    def test_mask_secret(self):
        assert mask_secret("abcdefgh") == "abcd****"
        assert mask_secret("abc") == "****"
        assert mask_secret(None) == "<not set>"

    def test_mask_database_url(self):
        assert mask_database_url("postgresql://admin:hunter2@db:5432/xerus") == "postgresql://admin:****@db:5432/xerus"
        assert mask_database_url("sqlite:///./test.db") == "sqlite:///./test.db"
