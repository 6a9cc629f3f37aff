"""
Tests for settings loading and required-setting checks.

Dependencies: pytest, backend.configs
System role: Configuration validation
"""

import pytest

from backend.configs import Settings, get_settings
from backend.core.exceptions import ConfigurationError


class TestSettings:
    """Test environment mapping."""

    def test_reads_function_environment(self) -> None:
        """Should map function environment variables onto settings groups."""
        settings = get_settings()

        assert settings.environment == "test"
        assert settings.storage.table_name == "EnergyUsage"
        assert settings.storage.user_data_table == "UserData"
        assert settings.messaging.sns_topic_arn.endswith(":energy-alerts")
        assert settings.cognito.issuer == "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_TestPool"
        assert settings.cognito.jwks_url.endswith("/.well-known/jwks.json")

    def test_usage_table_alias(self, monkeypatch) -> None:
        """Should accept the usage table under the email function's variable name."""
        monkeypatch.delenv("TABLE_NAME")
        monkeypatch.setenv("USAGE_TABLE_NAME", "UsageAlias")

        assert Settings().storage.table_name == "UsageAlias"

    def test_logging_settings(self, monkeypatch) -> None:
        """Should read the stage-wide logging options."""
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("DEBUG", "true")

        settings = Settings()

        assert settings.log_level == "warning"
        assert settings.debug is True

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.storage.connections_user_index == "UserIdIndex"
        assert settings.prediction.instance_type == "ml.t2.medium"
        assert settings.prediction.upload_url_expiry == 300
        assert settings.messaging.dashboard_url == "https://pge.dmitrygrinko.com"

    def test_settings_are_cached(self) -> None:
        assert get_settings() is get_settings()


class TestRequire:
    """Test required-setting checks."""

    def test_passes_when_set(self) -> None:
        Settings().require("storage.table_name", "cognito.user_pool_id")

    def test_names_missing_settings(self, monkeypatch) -> None:
        monkeypatch.delenv("BUCKET_NAME")
        monkeypatch.delenv("FROM_EMAIL")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings().require("storage.bucket_name", "messaging.from_email", "storage.table_name")

        assert exc_info.value.details["missing"] == ["storage.bucket_name", "messaging.from_email"]
        assert exc_info.value.status_code == 500
