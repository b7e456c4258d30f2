"""Unit tests for Settings."""

import pytest

from traindesk.config import ConfigError, Settings


@pytest.mark.unit
class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})

        assert settings.database_url == "sqlite:///traindesk.db"
        assert settings.cors_origins == ("http://localhost:3000",)
        assert settings.store_retries == 2
        assert settings.port == 8000

    def test_reads_values(self) -> None:
        settings = Settings.from_env(
            {
                "TRAINDESK_DATABASE_URL": "mysql+pymysql://root@localhost/training",
                "TRAINDESK_CORS_ORIGINS": "http://a.test, http://b.test",
                "TRAINDESK_STORE_RETRIES": "5",
                "TRAINDESK_PORT": "9000",
            }
        )

        assert settings.database_url == "mysql+pymysql://root@localhost/training"
        assert settings.cors_origins == ("http://a.test", "http://b.test")
        assert settings.store_retries == 5
        assert settings.port == 9000

    def test_blank_origins_fall_back_to_default(self) -> None:
        settings = Settings.from_env({"TRAINDESK_CORS_ORIGINS": " , "})
        assert settings.cors_origins == ("http://localhost:3000",)

    def test_non_integer_raises(self) -> None:
        with pytest.raises(ConfigError, match="TRAINDESK_STORE_RETRIES"):
            Settings.from_env({"TRAINDESK_STORE_RETRIES": "many"})

    def test_negative_retries_raise(self) -> None:
        with pytest.raises(ConfigError):
            Settings.from_env({"TRAINDESK_STORE_RETRIES": "-1"})
