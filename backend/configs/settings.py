"""
Unified application settings.

Stage and logging level, plus one nested group per managed-service concern.
Each Lambda reads only the groups it needs and checks them with `require`.

Dependencies: All config modules
System role: Central configuration aggregator for the functions
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.configs.aws import AWSSettings, CognitoSettings, MessagingSettings, StorageSettings
from backend.configs.prediction import PredictionSettings
from backend.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="dev", description="Deployment stage; prefixes the SSM endpoint parameter")
    debug: bool = Field(default=False, description="Log at DEBUG regardless of log_level")
    log_level: str = Field(default="INFO")

    aws: AWSSettings = Field(default_factory=AWSSettings)
    cognito: CognitoSettings = Field(default_factory=CognitoSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)
    prediction: PredictionSettings = Field(default_factory=PredictionSettings)

    def require(self, *names: str) -> None:
        """
        Check that the named settings are non-empty.

        Names are dotted paths into the settings tree, e.g. "storage.table_name".

        Args:
            *names: Dotted setting paths

        Raises:
            ConfigurationError: One or more settings are empty
        """
        missing = []
        for name in names:
            value = self
            for part in name.split("."):
                value = getattr(value, part)
            if not value:
                missing.append(name)

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                details={"missing": missing},
            )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once per Lambda cold start.

    Returns:
        Settings: Application settings instance

    Usage:
        from backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
