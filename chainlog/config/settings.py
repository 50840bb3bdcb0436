"""
Process-wide logging defaults for chainlog.

Built once at process start from the environment (prefix ``CHAINLOG_``) and
an optional ``.env`` file, then read at each logger construction. Loggers
accept an explicit ``settings`` argument, so nothing here needs to be
mutated at runtime.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from chainlog.core.levels import Severity
from chainlog.exceptions import ChainlogException


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class LoggingSettings(BaseSettings):
    """Defaults applied when a logger configuration leaves a value out"""
    level: Severity = Field(default=Severity.INFO)
    dump_threshold: Severity = Field(default=Severity.ERROR)
    end_level: Severity = Field(default=Severity.INFO)

    # Entries kept per request context for dumps
    buffer_size: int = Field(default=100)

    # Rendering of the default stdout sink
    format: LogFormat = Field(default=LogFormat.JSON)
    include_trace_id: bool = Field(default=True)

    model_config = {"env_prefix": "CHAINLOG_", "env_file": ".env", "extra": "ignore"}

    @field_validator('buffer_size')
    @classmethod
    def validate_buffer_size(cls, v):
        """A request context must be able to hold at least one entry"""
        if v < 1:
            raise ValueError("CHAINLOG_BUFFER_SIZE must be >= 1")
        return v


class ConfigurationError(ChainlogException):
    """Raised when the environment holds invalid logging defaults."""
    pass


_settings_instance: Optional[LoggingSettings] = None


def get_settings() -> LoggingSettings:
    """
    Get the process-wide settings instance.

    Raises:
        ConfigurationError: If settings validation fails
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            _settings_instance = LoggingSettings()
        except Exception as e:
            raise ConfigurationError(
                f"Settings initialization failed: {e}",
                details={"original_error": str(e), "error_type": type(e).__name__},
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).

    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None
