"""mockstore - Configuration Management.

Environment-based configuration using Pydantic settings. Every value can be
overridden through an environment variable or a ``.env`` file.
"""

from enum import StrEnum
from functools import lru_cache
import logging
from typing import Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# Configure logger
logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


class RollbackPolicy(StrEnum):
    """What a transaction does to storage when its commit fails."""

    NOOP = "noop"
    RESTORE = "restore"


class Settings(BaseSettings):
    """Emulator settings with defaults suitable for unit tests."""

    # Environment settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Transaction settings
    rollback_policy: RollbackPolicy = Field(
        default=RollbackPolicy.NOOP,
        alias="MOCKSTORE_ROLLBACK_POLICY",
        description="noop keeps already applied writes, restore puts back pre-commit data",
    )

    # Listener settings
    isolate_listener_errors: bool = Field(
        default=True,
        alias="MOCKSTORE_ISOLATE_LISTENER_ERRORS",
        description="Keep notifying remaining listeners when one of them raises",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise the log level and reject unknown names."""
        level = value.upper()
        if level not in _LOG_LEVELS:
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @model_validator(mode="after")
    def validate_debug_logging(self) -> Self:
        """Debug mode always logs at DEBUG level."""
        if self.debug and self.log_level != "DEBUG":
            logger.debug("Debug mode enabled, raising log level to DEBUG")
            self.log_level = "DEBUG"
        return self

    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment.lower() == "testing"

    def restores_on_rollback(self) -> bool:
        """Check if a failed commit should put back pre-commit data."""
        return self.rollback_policy is RollbackPolicy.RESTORE


@lru_cache
def get_settings() -> Settings:
    """Get cached emulator settings."""
    return Settings()
