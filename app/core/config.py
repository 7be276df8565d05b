"""Security Hub findings service configuration settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsSettings(BaseSettings):
    """AWS configuration settings."""

    AWS_REGION: str = Field(default="ca-central-1", alias="AWS_REGION")
    SECURITY_HUB_ROLE_ARN: str = Field(default="", alias="AWS_SECURITY_HUB_ROLE_ARN")
    ENDPOINT_URL: str | None = Field(default=None, alias="AWS_ENDPOINT_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class SecurityHubSettings(BaseSettings):
    """Security Hub findings table settings."""

    MAX_PAGE_SIZE: int = Field(default=100, alias="SECURITY_HUB_MAX_PAGE_SIZE")
    NOT_SUBSCRIBED_ERRS: list[str] = ["not subscribed"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class ServerSettings(BaseSettings):
    """Server configuration settings."""

    ALLOW_ORIGINS: list[str] = Field(
        default=["http://localhost:8000", "http://127.0.0.1:8000"],
        alias="ALLOW_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Security Hub findings service configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Server settings
    server: ServerSettings

    # Integration settings
    aws: AwsSettings

    # Functionality settings
    security_hub: SecurityHubSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "server": ServerSettings,
            "aws": AwsSettings,
            "security_hub": SecurityHubSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
