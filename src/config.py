"""Application configuration using Pydantic BaseSettings.

All settings are loaded from environment variables injected by the
deployment stack. No .env files.

Usage:
    from src.config import get_settings

    settings = get_settings()
    print(settings.table_name)
    print(settings.queue_url)
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions.server_errors import ConfigurationError


class Environment(StrEnum):
    """Valid deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        service_name: Name of this service for logging.
        environment: Deployment environment.
        aws_region: AWS region for service calls.
        table_name: DynamoDB table probed by the harness.
        bucket_name: S3 bucket the harness writes to.
        queue_url: URL of the FIFO queue the harness writes to.
        cache_size_mb: Upper bound of the parameter cache, in megabytes.
        warmup_parameter_name: Parameter read at cold start.
        log_level: Logging level.
    """

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    service_name: str = Field(default="sdk-smoke-harness", min_length=1)
    environment: Environment = Field(default=Environment.DEVELOPMENT)

    # AWS resources
    aws_region: str = Field(
        default="us-east-1",
        min_length=1,
        validation_alias=AliasChoices("REGION", "AWS_REGION"),
    )
    table_name: str = Field(default="sdk-smoke-development", min_length=1)
    bucket_name: str = Field(default="sdk-smoke-development", min_length=1)
    queue_url: str = Field(default="")

    # Parameter store
    cache_size_mb: int = Field(default=64, ge=1, le=1024)
    warmup_parameter_name: str = Field(default="someparam", min_length=1)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed:
            error_message = f"log_level must be one of {allowed}, got '{value}'"
            raise ValueError(error_message)
        return upper_value

    @property
    def cache_size_bytes(self) -> int:
        """Parameter cache bound in bytes."""
        return self.cache_size_mb * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def validate_startup_config() -> Settings:
    """Validate configuration on application startup.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value.
    """
    try:
        return get_settings()
    except ValidationError as error:
        invalid_fields = sorted({".".join(str(part) for part in detail["loc"]) for detail in error.errors()})
        raise ConfigurationError(
            f"Invalid configuration: {', '.join(invalid_fields)}",
            context={"invalid_fields": invalid_fields},
        ) from error
