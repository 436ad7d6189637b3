"""Logging settings read from the function's environment."""

import logging
from enum import StrEnum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import SERVICE_NAME


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(StrEnum):
    """JSON for CloudWatch, human for a local terminal."""

    JSON = "json"
    HUMAN = "human"


class LoggingConfig(BaseSettings):
    """Logging configuration loaded from environment variables.

    Attributes:
        log_level: Minimum level emitted by the harness's own loggers.
        log_format: Output format.
        service_name: Value of the ``service`` field on every JSON line.
        include_timestamp: Whether JSON lines carry a timestamp.
        include_location: Whether JSON lines carry file, function and line.
        log_sdk_calls: Let boto3 and botocore log at ``log_level`` instead of
            WARNING, which shows each SDK request the probes make.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: LogFormat = Field(default=LogFormat.JSON)
    service_name: str = Field(default=SERVICE_NAME)
    include_timestamp: bool = Field(default=True)
    include_location: bool = Field(default=True)
    log_sdk_calls: bool = Field(default=False)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept level names in any case, as the application settings do."""
        return value.upper() if isinstance(value, str) else value

    @property
    def sdk_log_level(self) -> int:
        """Level for the AWS SDK loggers; NOTSET defers to the root logger."""
        return logging.NOTSET if self.log_sdk_calls else logging.WARNING


@lru_cache
def get_logging_config() -> LoggingConfig:
    """Get cached logging configuration instance."""
    return LoggingConfig()
